"""Pytest configuration and shared fixtures."""

import pytest

from actdiary.config import Settings
from actdiary.jobs import DedupeIndex, JobRunner, JobStore
from actdiary.speech import NullSpeechProvider
from actdiary.work import TextGenerator
from fakes import FakeClock, MockProvider


@pytest.fixture
def settings():
    return Settings(_env_file=None, openai_api_key="sk-test", llm_provider="openai", tts_provider="none")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    mock = MockProvider()
    yield mock
    if mock.gate is not None:
        mock.gate.set()


@pytest.fixture
def generator(settings, provider):
    return TextGenerator(settings, provider=provider, speech=NullSpeechProvider())


@pytest.fixture
def runner(generator):
    store = JobStore(ttl_seconds=3600, max_jobs=100)
    job_runner = JobRunner(generator, store=store, index=DedupeIndex(store, ttl_seconds=600), max_workers=4)
    yield job_runner
    job_runner.shutdown()
