"""Google Gemini provider (google-genai SDK)."""

import logging

from hiddenjobs.profile.llm.base import ANALYSIS_PROMPT, LLMProvider

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    provider_id = "gemini"
    default_model = "gemini-2.5-flash"
    env_var = "GOOGLE_API_KEY"

    async def complete(self, document_text: str, model: str | None = None) -> str:
        api_key = self.api_key()
        try:
            from google import genai
            from google.genai import types as genai_types
        except ImportError:
            msg = "google-genai is required for resume analysis. Install with: pip install 'hiddenjobs[gemini]'"
            raise ImportError(msg) from None

        use_model = model or self.default_model
        logger.info("Analyzing resume with Gemini (%s)", use_model)
        client = genai.Client(api_key=api_key)
        response = await client.aio.models.generate_content(
            model=use_model,
            contents=document_text,
            config=genai_types.GenerateContentConfig(system_instruction=ANALYSIS_PROMPT),
        )
        return response.text or ""
