"""Speech-synthesis adapters: Gemini, OpenAI, or disabled."""

import logging

from actdiary.config import Settings
from actdiary.errors import ConfigurationError
from actdiary.speech.base import NullSpeechProvider, SpeechProvider
from actdiary.speech.fanout import synthesize_all
from actdiary.speech.gemini_provider import GeminiSpeechProvider, extract_inline_audio
from actdiary.speech.openai_provider import OpenAISpeechProvider

logger = logging.getLogger(__name__)


def get_speech_provider(settings: Settings) -> SpeechProvider:
    """Return the configured speech provider. tts_provider: 'gemini' | 'openai' | 'none'."""
    name = settings.tts_provider.lower()
    if name == "gemini":
        if not settings.gemini_api_key:
            raise ConfigurationError("missing_gemini_key")
        return GeminiSpeechProvider(
            api_key=settings.gemini_api_key,
            model=settings.gemini_tts_model,
            voice=settings.gemini_tts_voice,
            timeout=settings.tts_timeout_seconds,
        )
    if name == "openai":
        if not settings.openai_api_key:
            raise ConfigurationError("missing_openai_key")
        return OpenAISpeechProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_tts_model,
            voice=settings.openai_tts_voice,
            timeout=settings.tts_timeout_seconds,
        )
    if name not in ("", "none"):
        logger.warning("Unknown TTS provider '%s'; speech disabled.", settings.tts_provider)
    return NullSpeechProvider()


__all__ = [
    "SpeechProvider",
    "NullSpeechProvider",
    "GeminiSpeechProvider",
    "OpenAISpeechProvider",
    "extract_inline_audio",
    "get_speech_provider",
    "synthesize_all",
]
