"""Lazy registry of LLM providers used for resume analysis.

Usage:
    from hiddenjobs.profile.llm import get_provider, parse_analysis

    provider = get_provider("openai")
    raw = await provider.complete(resume_text)
    analysis = parse_analysis(raw)
"""

import importlib

from hiddenjobs.profile.llm.base import LLMProvider, parse_analysis

__all__ = ["LLMProvider", "available_providers", "get_provider", "parse_analysis"]

# name -> (module_path, class_name); SDKs are only imported on first use.
_REGISTRY: dict[str, tuple[str, str]] = {
    "anthropic": ("hiddenjobs.profile.llm.anthropic", "AnthropicProvider"),
    "openai": ("hiddenjobs.profile.llm.openai", "OpenAIProvider"),
    "gemini": ("hiddenjobs.profile.llm.gemini", "GeminiProvider"),
}


def get_provider(name: str) -> LLMProvider:
    """Instantiate a registered provider.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    return getattr(module, class_name)()  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    return sorted(_REGISTRY)
