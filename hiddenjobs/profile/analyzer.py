"""Resume document analyzers.

Two implementations of the DocumentAnalyzer contract: one backed by an LLM
provider from the registry, and a keyword heuristic that needs no network.
"""

import logging
import re
from typing import Protocol

from hiddenjobs.core.config import AnalyzerConfig
from hiddenjobs.profile.llm import LLMProvider, get_provider, parse_analysis
from hiddenjobs.profile.schema import ResumeAnalysis

logger = logging.getLogger(__name__)


class DocumentAnalyzer(Protocol):
    async def analyze(self, document_text: str) -> ResumeAnalysis | None: ...


class LLMDocumentAnalyzer:
    """Analyze resume text through a chat-completion provider."""

    def __init__(self, provider: LLMProvider | str = "anthropic", model: str | None = None) -> None:
        self.provider = get_provider(provider) if isinstance(provider, str) else provider
        self.model = model

    async def analyze(self, document_text: str) -> ResumeAnalysis | None:
        if not document_text.strip():
            return None
        raw = await self.provider.complete(document_text, self.model)
        return parse_analysis(raw)


_KNOWN_SKILLS = (
    "javascript", "typescript", "python", "java", "c++", "c#", "php", "ruby", "go", "rust",
    "swift", "kotlin", "react", "vue", "angular", "html", "css", "tailwind", "redux",
    "node.js", "express", "django", "flask", "spring", "rails", "fastapi",
    "mysql", "postgresql", "mongodb", "redis", "elasticsearch",
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "git",
)

_TITLE_PATTERNS = (
    re.compile(r"(?:software|web|frontend|backend|full[- ]?stack|mobile)\s+(?:\w+\s+){0,2}?(?:engineer|developer)", re.I),
    re.compile(r"(?:data|machine learning|ai)\s+(?:scientist|engineer|analyst)", re.I),
    re.compile(r"(?:product|project)\s+manager", re.I),
    re.compile(r"(?:devops|site reliability)\s+engineer", re.I),
    re.compile(r"(?:ui|ux)\s+designer", re.I),
)

# (skills any of which implies the title, title)
_SKILL_TITLES = (
    ({"react", "vue", "angular", "html", "css"}, "Frontend Developer"),
    ({"node.js", "express", "django", "spring"}, "Backend Developer"),
    ({"python"}, "Data Scientist"),
    ({"aws", "docker", "kubernetes"}, "DevOps Engineer"),
)

_LEVEL_WORDS = (
    ("senior", ("senior", "lead", "principal", "architect")),
    ("entry-level", ("junior", "intern", "entry", "graduate")),
    ("executive", ("director", "vp", "cto", "ceo")),
)


def _has_word(text: str, word: str) -> bool:
    return re.search(rf"(?<![\w+#.]){re.escape(word)}(?![\w+#])", text) is not None


class KeywordDocumentAnalyzer:
    """Vocabulary-based resume analysis used when no LLM is configured."""

    async def analyze(self, document_text: str) -> ResumeAnalysis | None:
        text = document_text.lower()
        if not text.strip():
            return None

        skills = [s for s in _KNOWN_SKILLS if _has_word(text, s)]

        titles: dict[str, None] = {}
        for pattern in _TITLE_PATTERNS:
            for match in pattern.finditer(document_text):
                titles.setdefault(" ".join(match.group(0).split()).title(), None)
        if not titles:
            found = set(skills)
            for implying, title in _SKILL_TITLES:
                if found & implying:
                    titles.setdefault(title, None)
        if not titles:
            titles["Software Engineer"] = None

        level = "mid-level"
        for candidate, words in _LEVEL_WORDS:
            if any(_has_word(text, w) for w in words):
                level = candidate
                break

        return ResumeAnalysis(
            skills=[s[:1].upper() + s[1:] for s in skills],
            suggested_job_titles=list(titles)[:5],
            experience_level=level,
        )


def build_analyzer(config: AnalyzerConfig) -> DocumentAnalyzer:
    """Return the configured analyzer, falling back to keywords when the LLM is disabled."""
    if not config.enabled:
        return KeywordDocumentAnalyzer()
    logger.info("Resume analysis via %s", config.provider)
    return LLMDocumentAnalyzer(config.provider, config.model)
