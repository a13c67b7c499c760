"""OpenAI provider."""

import logging

from hiddenjobs.profile.llm.base import ANALYSIS_PROMPT, LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    provider_id = "openai"
    default_model = "gpt-4o-mini"
    env_var = "OPENAI_API_KEY"

    async def complete(self, document_text: str, model: str | None = None) -> str:
        api_key = self.api_key()
        try:
            import openai
        except ImportError:
            msg = "openai is required for resume analysis. Install with: pip install 'hiddenjobs[openai]'"
            raise ImportError(msg) from None

        use_model = model or self.default_model
        logger.info("Analyzing resume with OpenAI (%s)", use_model)
        client = openai.AsyncOpenAI(api_key=api_key)
        response = await client.chat.completions.create(
            model=use_model,
            max_tokens=1500,
            temperature=0.3,
            messages=[
                {"role": "system", "content": ANALYSIS_PROMPT},
                {"role": "user", "content": document_text},
            ],
        )
        return response.choices[0].message.content or ""
