"""Abstract LLM provider protocol and reply parsing."""

import json
import re
from typing import Any, Protocol

from actdiary.errors import CollaboratorFormatError

_FENCE_OPEN_RE = re.compile(r"^```\w*\s*")
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


class LLMProvider(Protocol):
    """Protocol for LLM backends (OpenAI, Anthropic)."""

    def complete_json(
        self,
        system: str,
        user: dict[str, Any],
        *,
        model: str | None = None,
        temperature: float | None = None,
    ) -> dict[str, Any]:
        """Send a system prompt plus a JSON user message; return the JSON reply."""
        ...


def strip_code_fence(text: str) -> str:
    """Remove a Markdown code fence (```json ... ```) wrapped around a reply."""
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN_RE.sub("", text)
        text = _FENCE_CLOSE_RE.sub("", text)
    return text.strip()


def parse_json_reply(raw: str | None) -> dict[str, Any]:
    """Parse a model reply into a JSON object. An empty reply yields ``{}``."""
    text = strip_code_fence(raw or "")
    if not text:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CollaboratorFormatError(f"invalid_json_reply: {text[:200]}", code="invalid_json_reply") from e
    if not isinstance(data, dict):
        raise CollaboratorFormatError(
            f"invalid_json_reply: expected object, got {type(data).__name__}",
            code="invalid_json_reply",
        )
    return data


def snippet(text: object, limit: int = 200) -> str:
    s = str(text or "")
    return s if len(s) <= limit else s[:limit] + "…"
