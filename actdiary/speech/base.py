"""Speech-synthesis provider protocol."""

from typing import Protocol


class SpeechProvider(Protocol):
    """Turn one sentence into base64-encoded audio.

    Returns ``None`` when the provider has nothing to offer (speech disabled).
    May raise ``CollaboratorTransportError`` / ``CollaboratorFormatError``.
    """

    def synthesize(self, sentence: str) -> str | None:
        ...


class NullSpeechProvider:
    """Speech disabled: every sentence is unavailable."""

    def synthesize(self, sentence: str) -> str | None:
        return None
