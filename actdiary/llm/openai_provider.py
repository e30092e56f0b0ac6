"""OpenAI chat completions with JSON-object replies."""

import json
import logging
import re
import time
from typing import Any

from openai import APIConnectionError, APIError, APIStatusError, OpenAI

from actdiary.errors import CollaboratorTransportError
from actdiary.llm.base import parse_json_reply, snippet

logger = logging.getLogger(__name__)

# gpt-5 family models only accept their default temperature
_FIXED_TEMPERATURE_RE = re.compile(r"^gpt-5(?:-|$)")


class OpenAIProvider:
    """OpenAI chat completion returning a parsed JSON object."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4.1-turbo",
        timeout: float = 60.0,
        client: Any = None,
    ):
        self._client = client or OpenAI(api_key=api_key, timeout=timeout)
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
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": json.dumps(user, ensure_ascii=False)},
            ],
            "response_format": {"type": "json_object"},
        }
        if temperature is not None and not _FIXED_TEMPERATURE_RE.match(model):
            params["temperature"] = temperature

        t0 = time.perf_counter()
        try:
            response = self._client.chat.completions.create(**params)
        except APIStatusError as e:
            raise CollaboratorTransportError(
                f"openai_http_{e.status_code}: {snippet(e.message)}",
                status=e.status_code,
            ) from e
        except APIConnectionError as e:
            raise CollaboratorTransportError(f"openai_unreachable: {e}", code="openai_unreachable") from e
        except APIError as e:
            raise CollaboratorTransportError(f"openai_error: {snippet(e.message)}") from e
        finally:
            logger.info("[OPENAI] model=%s elapsed=%dms", model, (time.perf_counter() - t0) * 1000)

        content = response.choices[0].message.content if response.choices else None
        return parse_json_reply(content)
