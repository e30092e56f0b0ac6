"""Gemini text-to-speech over the REST generateContent endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from actdiary.errors import CollaboratorFormatError, CollaboratorTransportError
from actdiary.llm.base import snippet

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def extract_inline_audio(data: Any) -> str | None:
    """Find the base64 audio in a generateContent reply.

    Providers disagree on casing, so both ``inlineData`` and ``inline_data``
    are accepted.
    """
    if not isinstance(data, dict):
        return None
    for candidate in data.get("candidates") or []:
        content = (candidate or {}).get("content") or {}
        for part in content.get("parts") or []:
            if not isinstance(part, dict):
                continue
            inline = part.get("inlineData") or part.get("inline_data")
            if isinstance(inline, dict) and inline.get("data"):
                return inline["data"]
    return None


class GeminiSpeechProvider:
    """One sentence per request; audio comes back inline as base64."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash-preview-tts",
        voice: str = "Kore",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self._api_key = api_key
        self._model = model
        self._voice = voice
        self._client = client or httpx.Client(base_url=GEMINI_BASE_URL, timeout=timeout)

    def synthesize(self, sentence: str) -> str | None:
        body = {
            "contents": [{"parts": [{"text": sentence}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": self._voice}},
                },
            },
        }
        try:
            response = self._client.post(
                f"/models/{self._model}:generateContent",
                json=body,
                headers={"x-goog-api-key": self._api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise CollaboratorTransportError(
                f"gemini_http_{status}: {snippet(e.response.text)}", status=status
            ) from e
        except httpx.HTTPError as e:
            raise CollaboratorTransportError(f"gemini_unreachable: {e}", code="gemini_unreachable") from e

        try:
            data = response.json()
        except ValueError as e:
            raise CollaboratorFormatError(f"gemini_invalid_json: {snippet(response.text)}") from e

        audio = extract_inline_audio(data)
        if audio is None:
            raise CollaboratorFormatError("gemini_no_audio", code="gemini_no_audio")
        return audio

    def close(self) -> None:
        self._client.close()
