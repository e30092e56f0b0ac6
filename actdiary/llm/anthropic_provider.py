"""Anthropic messages API with JSON replies parsed from text."""

import json
import logging
import time
from typing import Any

from anthropic import Anthropic, APIConnectionError, APIError, APIStatusError

from actdiary.errors import CollaboratorTransportError
from actdiary.llm.base import parse_json_reply, snippet

logger = logging.getLogger(__name__)

_JSON_ONLY = "Respond with a single JSON object only. No markdown, no code fence, no explanation."


class AnthropicProvider:
    """Anthropic chat completion returning a parsed JSON object."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-3-5-sonnet-20241022",
        timeout: float = 60.0,
        client: Any = None,
    ):
        self._client = client or Anthropic(api_key=api_key, timeout=timeout)
        self._model = model

    def complete_json(
        self,
        system: str,
        user: dict[str, Any],
        *,
        model: str | None = None,
        temperature: float | None = None,
    ) -> dict[str, Any]:
        model = model or self._model
        params: dict[str, Any] = {
            "model": model,
            "max_tokens": 2048,
            "system": f"{system}\n\n{_JSON_ONLY}",
            "messages": [{"role": "user", "content": json.dumps(user, ensure_ascii=False)}],
        }
        if temperature is not None:
            params["temperature"] = temperature

        t0 = time.perf_counter()
        try:
            response = self._client.messages.create(**params)
        except APIStatusError as e:
            raise CollaboratorTransportError(
                f"anthropic_http_{e.status_code}: {snippet(e.message)}",
                status=e.status_code,
            ) from e
        except APIConnectionError as e:
            raise CollaboratorTransportError(f"anthropic_unreachable: {e}", code="anthropic_unreachable") from e
        except APIError as e:
            raise CollaboratorTransportError(f"anthropic_error: {snippet(e.message)}") from e
        finally:
            logger.info("[ANTHROPIC] model=%s elapsed=%dms", model, (time.perf_counter() - t0) * 1000)

        text = response.content[0].text if response.content else ""
        return parse_json_reply(text)
