"""OpenAI text-to-speech (audio.speech), returned as base64."""

import base64
from typing import Any

from openai import APIConnectionError, APIError, APIStatusError, OpenAI

from actdiary.errors import CollaboratorFormatError, CollaboratorTransportError
from actdiary.llm.base import snippet


class OpenAISpeechProvider:
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini-tts",
        voice: str = "alloy",
        timeout: float = 30.0,
        client: Any = None,
    ):
        self._client = client or OpenAI(api_key=api_key, timeout=timeout)
        self._model = model
        self._voice = voice

    def synthesize(self, sentence: str) -> str | None:
        try:
            response = self._client.audio.speech.create(
                model=self._model,
                voice=self._voice,
                input=sentence,
                response_format="mp3",
            )
        except APIStatusError as e:
            raise CollaboratorTransportError(
                f"openai_tts_http_{e.status_code}: {snippet(e.message)}",
                status=e.status_code,
            ) from e
        except APIConnectionError as e:
            raise CollaboratorTransportError(f"openai_tts_unreachable: {e}") from e
        except APIError as e:
            raise CollaboratorTransportError(f"openai_tts_error: {snippet(e.message)}") from e

        audio = response.content
        if not audio:
            raise CollaboratorFormatError("openai_tts_empty_audio", code="openai_tts_empty_audio")
        return base64.b64encode(audio).decode("ascii")
