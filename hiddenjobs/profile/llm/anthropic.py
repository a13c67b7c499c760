"""Anthropic Claude provider."""

import logging

from hiddenjobs.profile.llm.base import ANALYSIS_PROMPT, LLMProvider

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    provider_id = "anthropic"
    default_model = "claude-sonnet-4-20250514"
    env_var = "ANTHROPIC_API_KEY"

    async def complete(self, document_text: str, model: str | None = None) -> str:
        api_key = self.api_key()
        try:
            import anthropic
        except ImportError:
            msg = "anthropic is required for resume analysis. Install with: pip install 'hiddenjobs[anthropic]'"
            raise ImportError(msg) from None

        use_model = model or self.default_model
        logger.info("Analyzing resume with Anthropic (%s)", use_model)
        client = anthropic.AsyncAnthropic(api_key=api_key)
        message = await client.messages.create(
            model=use_model,
            max_tokens=1500,
            system=ANALYSIS_PROMPT,
            messages=[{"role": "user", "content": document_text}],
        )
        return message.content[0].text  # type: ignore[union-attr]
