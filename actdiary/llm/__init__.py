"""LLM adapter layer: OpenAI and Anthropic behind a common protocol."""

from actdiary.config import Settings
from actdiary.errors import ConfigurationError
from actdiary.llm.anthropic_provider import AnthropicProvider
from actdiary.llm.base import LLMProvider, parse_json_reply, strip_code_fence
from actdiary.llm.openai_provider import OpenAIProvider


def get_provider(settings: Settings) -> LLMProvider:
    """Return the configured LLM provider. Raises ConfigurationError without an API key."""
    provider_name = "anthropic" if settings.llm_provider.lower() == "anthropic" else "openai"
    api_key = settings.api_key_for(provider_name)
    if not api_key:
        raise ConfigurationError(f"missing_{provider_name}_key")
    if provider_name == "anthropic":
        return AnthropicProvider(
            api_key=api_key,
            model=settings.anthropic_model,
            timeout=settings.llm_timeout_seconds,
        )
    return OpenAIProvider(
        api_key=api_key,
        model=settings.classify_model,
        timeout=settings.llm_timeout_seconds,
    )


__all__ = [
    "LLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "get_provider",
    "parse_json_reply",
    "strip_code_fence",
]
