"""Tests for the job runner: non-blocking submit, dedupe, error capture."""

import time

import pytest

from actdiary.errors import (
    CollaboratorFormatError,
    CollaboratorTransportError,
    NotFoundError,
    ValidationError,
)
from actdiary.jobs import DedupeKey, JobRunner, JobStatus
from actdiary.work import TextGenerator
from fakes import DIARY_TEXT, MockSpeech


def test_submit_returns_before_collaborator_finishes(runner, provider):
    gate = provider.hold()
    t0 = time.perf_counter()
    handle = runner.submit("classify", {"text": DIARY_TEXT})
    assert time.perf_counter() - t0 < 1.0
    assert handle.reused is False

    assert runner.poll(handle.job_id).status is JobStatus.RUNNING

    gate.set()
    view = runner.wait(handle.job_id, timeout=5)
    assert view.status is JobStatus.DONE
    for category in ("situation", "feeling", "thought", "behavior"):
        cards = view.result[category]["cards"]
        assert 1 <= len(cards) <= 2
        assert all(card["text"] for card in cards)
    assert view.result["used_model"] == "gpt-4.1-turbo"


def test_request_sent_to_collaborator(runner, provider):
    handle = runner.submit("classify", {"text": DIARY_TEXT, "lang": "ko"})
    runner.wait(handle.job_id, timeout=5)
    call = provider.calls[0]
    assert call["user"] == {"text": DIARY_TEXT, "lang": "ko", "top_k": 2}
    assert call["model"] == "gpt-4.1-turbo"
    assert call["temperature"] == 0.2


def test_duplicate_submission_reuses_running_job(runner, provider):
    gate = provider.hold()
    key = DedupeKey(caller="user-1", unit="entry-9")
    first = runner.submit("classify", {"text": DIARY_TEXT}, key)
    second = runner.submit("classify", {"text": DIARY_TEXT}, key)

    assert second.reused is True
    assert second.job_id == first.job_id

    gate.set()
    runner.wait(first.job_id, timeout=5)
    assert len(provider.calls) == 1
    assert len(runner.store) == 1


def test_submissions_without_key_are_independent(runner):
    a = runner.submit("classify", {"text": DIARY_TEXT})
    b = runner.submit("classify", {"text": DIARY_TEXT})
    assert a.job_id != b.job_id


def test_empty_text_rejected_before_job_creation(runner, provider):
    with pytest.raises(ValidationError) as exc:
        runner.submit("classify", {"text": "   "})
    assert exc.value.code == "empty_text"
    assert len(runner.store) == 0
    assert provider.calls == []


def test_unknown_work_type_rejected(runner):
    with pytest.raises(ValidationError) as exc:
        runner.submit("summarize", {"text": DIARY_TEXT})
    assert exc.value.code == "unknown_work_type"
    assert len(runner.store) == 0


def test_transport_error_becomes_error_state(runner, provider):
    provider.error = CollaboratorTransportError("openai_http_503: overloaded", status=503)
    handle = runner.submit("classify", {"text": DIARY_TEXT})
    view = runner.wait(handle.job_id, timeout=5)
    assert view.status is JobStatus.ERROR
    assert view.error == "openai_http_503: overloaded"
    assert view.result is None


def test_unexpected_exception_is_captured(runner, provider):
    provider.error = RuntimeError("boom")
    handle = runner.submit("practice", {"text": DIARY_TEXT})
    view = runner.wait(handle.job_id, timeout=5)
    assert view.status is JobStatus.ERROR
    assert view.error == "server_error: boom"


def test_empty_classification_reply_fails_job(runner, provider):
    provider.reply = {}
    handle = runner.submit("classify", {"text": DIARY_TEXT})
    view = runner.wait(handle.job_id, timeout=5)
    assert view.status is JobStatus.ERROR
    assert "no cards" in view.error


def test_polling_terminal_job_is_idempotent(runner, provider):
    handle = runner.submit("classify", {"text": DIARY_TEXT})
    first = runner.wait(handle.job_id, timeout=5)
    for _ in range(3):
        assert runner.poll(handle.job_id) == first
    assert len(provider.calls) == 1


def test_poll_unknown_job(runner):
    with pytest.raises(NotFoundError):
        runner.poll("job_0000000000000000")


def test_practice_with_speech_tolerates_one_failure(settings, provider):
    speech = MockSpeech(fail_on={"나는 4번째 마음을 알아차린다."})
    generator = TextGenerator(settings, provider=provider, speech=speech)
    job_runner = JobRunner(generator)
    try:
        handle = job_runner.submit("practice", {"text": DIARY_TEXT, "speak": True})
        view = job_runner.wait(handle.job_id, timeout=5)
    finally:
        job_runner.shutdown()

    assert view.status is JobStatus.DONE
    items = view.result["practice_sets_json"]
    assert len(items) == 7
    audios = [item["audio"] for item in items]
    assert audios[3] is None
    assert sum(1 for a in audios if a is not None) == 6
    assert audios[0] == "audio:나는 1번째 마음을 알아차린다."


def test_missing_api_key_fails_job_not_process():
    from actdiary.config import Settings

    settings = Settings(_env_file=None, openai_api_key=None, llm_provider="openai")
    job_runner = JobRunner(TextGenerator(settings))
    try:
        handle = job_runner.submit("classify", {"text": DIARY_TEXT})
        view = job_runner.wait(handle.job_id, timeout=5)
    finally:
        job_runner.shutdown()
    assert view.status is JobStatus.ERROR
    assert view.error == "missing_openai_key"


def test_shutdown_clears_state(generator):
    job_runner = JobRunner(generator)
    job_runner.submit("classify", {"text": DIARY_TEXT}, DedupeKey(caller="u"))
    job_runner.shutdown()
    assert len(job_runner.store) == 0
    assert len(job_runner.index) == 0


def test_format_error_is_reported_like_transport_error(runner, provider):
    provider.error = CollaboratorFormatError("invalid_json_reply: {", code="invalid_json_reply")
    handle = runner.submit("classify", {"text": DIARY_TEXT})
    assert runner.wait(handle.job_id, timeout=5).status is JobStatus.ERROR
