"""Tests for payload validation, post-processing, text cleanup and the LLM adapters."""

from types import SimpleNamespace

import httpx
import pytest
from openai import APIStatusError, APITimeoutError

from actdiary.config import Settings
from actdiary.errors import (
    CollaboratorFormatError,
    CollaboratorTransportError,
    ConfigurationError,
    ValidationError,
)
from actdiary.jobs import JobRunner, JobStatus
from actdiary.llm import OpenAIProvider, get_provider, parse_json_reply, strip_code_fence
from actdiary.text import normalize_da
from actdiary.work import (
    PRACTICE_FALLBACK,
    TextGenerator,
    clean_payload,
    postprocess_classify,
    postprocess_practice,
)


# --- text cleanup ---


def test_normalize_da_strips_quotes_emoji_and_trailing_marks():
    assert normalize_da('"오늘은 좋았다!!"') == "오늘은 좋았다"
    assert normalize_da("행복했다😊") == "행복했다"
    assert normalize_da("정말 그랬을까?…") == "정말 그랬을까"
    assert normalize_da("  비가 왔다.  ") == "비가 왔다."


def test_normalize_da_empty_inputs():
    assert normalize_da(None) == ""
    assert normalize_da("") == ""
    assert normalize_da("🙂") == ""


# --- payload validation ---


def test_clean_payload_defaults_and_clipping():
    cleaned = clean_payload({"text": "가" * 5000}, max_chars=3000)
    assert len(cleaned["text"]) == 3000
    assert cleaned["lang"] == "ko"
    assert cleaned["speak"] is False


@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}, {"text": None}])
def test_clean_payload_rejects_empty_text(payload):
    with pytest.raises(ValidationError) as exc:
        clean_payload(payload)
    assert exc.value.code == "empty_text"


def test_clean_payload_rejects_non_object():
    with pytest.raises(ValidationError):
        clean_payload(["text"])


# --- post-processing ---


def test_postprocess_classify_clips_and_cleans():
    reply = {
        "situation": {"cards": [{"text": "비가 왔다!"}, {"text": "집에 있었다."}, {"text": "세 번째"}]},
        "feeling": {"cards": [{"text": ""}, {"text": "우울했다."}]},
        "thought": {"cards": "not a list"},
    }
    result = postprocess_classify(reply)
    assert result["situation"]["cards"] == [{"text": "비가 왔다"}, {"text": "집에 있었다."}]
    assert result["feeling"]["cards"] == [{"text": "우울했다."}]
    assert result["thought"]["cards"] == []
    assert result["behavior"]["cards"] == []


def test_postprocess_classify_without_any_card_is_format_error():
    with pytest.raises(CollaboratorFormatError):
        postprocess_classify({"situation": {"cards": []}})


def test_postprocess_practice_pads_to_seven():
    result = postprocess_practice({"practice_sets_json": [{"text": "나는 숨을 고른다."}]})
    items = result["practice_sets_json"]
    assert len(items) == 7
    assert items[0] == {"text": "나는 숨을 고른다."}
    assert all(item["text"] == PRACTICE_FALLBACK for item in items[1:])


def test_postprocess_practice_accepts_sentences_and_clips():
    result = postprocess_practice({"sentences": [f"문장 {i}다." for i in range(10)]})
    items = result["practice_sets_json"]
    assert len(items) == 7
    assert items[6] == {"text": "문장 6다."}


# --- reply parsing ---


def test_strip_code_fence():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('{"a": 1}') == '{"a": 1}'


def test_parse_json_reply():
    assert parse_json_reply('```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_json_reply("") == {}
    assert parse_json_reply(None) == {}
    with pytest.raises(CollaboratorFormatError):
        parse_json_reply("not json {")
    with pytest.raises(CollaboratorFormatError):
        parse_json_reply("[1, 2]")


# --- OpenAI adapter ---


class MockCompletions:
    def __init__(self, content=None, error=None):
        self.kwargs = None
        self.content = content
        self.error = error

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_openai_provider_sends_json_request():
    completions = MockCompletions(content='```json\n{"situation": {}}\n```')
    provider = OpenAIProvider(client=_client(completions))
    reply = provider.complete_json("system prompt", {"text": "오늘"}, model="gpt-4.1-turbo", temperature=0.2)

    assert reply == {"situation": {}}
    sent = completions.kwargs
    assert sent["response_format"] == {"type": "json_object"}
    assert sent["temperature"] == 0.2
    assert [m["role"] for m in sent["messages"]] == ["system", "user"]
    assert sent["messages"][1]["content"] == '{"text": "오늘"}'


def test_openai_provider_omits_temperature_for_gpt5():
    completions = MockCompletions(content="{}")
    provider = OpenAIProvider(client=_client(completions))
    provider.complete_json("s", {}, model="gpt-5", temperature=0.2)
    assert "temperature" not in completions.kwargs


def test_openai_provider_maps_status_error():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = APIStatusError("overloaded", response=httpx.Response(503, request=request), body=None)
    provider = OpenAIProvider(client=_client(MockCompletions(error=error)))
    with pytest.raises(CollaboratorTransportError) as exc:
        provider.complete_json("s", {}, model="gpt-4.1-turbo")
    assert exc.value.status == 503
    assert str(exc.value).startswith("openai_http_503")


def test_openai_timeout_fails_job(settings):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    provider = OpenAIProvider(client=_client(MockCompletions(error=APITimeoutError(request=request))))
    with pytest.raises(CollaboratorTransportError) as exc:
        provider.complete_json("s", {}, model="gpt-4.1-turbo")
    assert exc.value.code == "openai_unreachable"

    job_runner = JobRunner(TextGenerator(settings, provider=provider))
    try:
        handle = job_runner.submit("classify", {"text": "오늘"})
        view = job_runner.wait(handle.job_id, timeout=5)
    finally:
        job_runner.shutdown()
    assert view.status is JobStatus.ERROR
    assert view.error.startswith("openai_unreachable")


# --- provider selection ---


def test_get_provider_requires_key():
    with pytest.raises(ConfigurationError) as exc:
        get_provider(Settings(_env_file=None, openai_api_key=None, llm_provider="openai"))
    assert exc.value.code == "missing_openai_key"

    with pytest.raises(ConfigurationError) as exc:
        get_provider(Settings(_env_file=None, anthropic_api_key=None, llm_provider="anthropic"))
    assert exc.value.code == "missing_anthropic_key"


def test_model_per_work_type(settings, provider):
    generator = TextGenerator(settings, provider=provider)
    generator.generate("practice", {"text": "오늘", "lang": "ko", "speak": False})
    assert provider.calls[-1]["model"] == "gpt-5"

    anthropic_settings = Settings(_env_file=None, llm_provider="anthropic", anthropic_api_key="k")
    generator = TextGenerator(anthropic_settings, provider=provider)
    generator.generate("classify", {"text": "오늘", "lang": "ko", "speak": False})
    assert provider.calls[-1]["model"] == anthropic_settings.anthropic_model


def test_speak_without_configured_key_degrades_to_null(provider):
    settings = Settings(_env_file=None, openai_api_key="sk", tts_provider="gemini", gemini_api_key=None)
    generator = TextGenerator(settings, provider=provider)
    result = generator.generate("practice", {"text": "오늘", "lang": "ko", "speak": True})
    assert [item["audio"] for item in result["practice_sets_json"]] == [None] * 7
