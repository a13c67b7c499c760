"""Provider contract and response parsing for resume analysis."""

import json
import os
import re
from abc import ABC, abstractmethod

from hiddenjobs.profile.schema import ResumeAnalysis

ANALYSIS_PROMPT = (
    "You are an expert resume analyzer. Read the resume text provided and "
    "return ONLY a JSON object (no markdown, no explanation) with these fields:\n"
    "- skills (list[str]): technical skills, languages, frameworks and tools\n"
    "- suggested_job_titles (list[str]): 3-5 job titles the candidate should search for\n"
    '- experience_level (string): one of "entry-level", "mid-level", "senior", "executive"\n\n'
    "Use empty lists when information is missing."
)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


def parse_analysis(raw_text: str) -> ResumeAnalysis:
    """Parse an LLM reply (plain or ```json fenced) into a ResumeAnalysis.

    Raises:
        ValueError: If the reply is not a JSON object.
    """
    cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", raw_text.strip()))
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Failed to parse LLM response as JSON: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict):
        msg = "LLM response is not a JSON object"
        raise ValueError(msg)
    # Accept the camelCase keys some models insist on.
    if "suggestedJobTitles" in data:
        data.setdefault("suggested_job_titles", data.pop("suggestedJobTitles"))
    if "experienceLevel" in data:
        data.setdefault("experience_level", data.pop("experienceLevel"))
    return ResumeAnalysis.model_validate(data)


class LLMProvider(ABC):
    """Async chat-completion backend for document analysis."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Registry name, e.g. 'anthropic'."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when the caller passes none."""

    @property
    @abstractmethod
    def env_var(self) -> str:
        """Environment variable holding the API key."""

    def api_key(self) -> str:
        key = os.environ.get(self.env_var)
        if not key:
            msg = f"{self.env_var} environment variable is required"
            raise ValueError(msg)
        return key

    @abstractmethod
    async def complete(self, document_text: str, model: str | None = None) -> str:
        """Send the document under ANALYSIS_PROMPT and return the raw reply text."""
