"""Work types and the text-generation collaborator that runs them.

Two kinds of work are supported:

* ``classify``: split a diary into the four ACT categories
  (situation / feeling / thought / behavior), two short cards each.
* ``practice``: reframe a diary into exactly seven self-statements,
  optionally voiced sentence by sentence.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

from actdiary.config import Settings
from actdiary.errors import CollaboratorFormatError, ConfigurationError, ValidationError
from actdiary.llm import LLMProvider, get_provider
from actdiary.prompts import CLASSIFY_SYSTEM, PRACTICE_SYSTEM
from actdiary.speech import SpeechProvider, get_speech_provider, synthesize_all
from actdiary.text import card_text, normalize_da

logger = logging.getLogger(__name__)

CLASSIFY_TOP_K = 2
CLASSIFY_CATEGORIES = ("situation", "feeling", "thought", "behavior")
PRACTICE_COUNT = 7
PRACTICE_FALLBACK = "나는 지금의 나를 있는 그대로 둔다"


# ---------------------------------------------------------------------------
# Payload validation
# ---------------------------------------------------------------------------

def clean_payload(payload: Any, max_chars: int = 3000) -> dict[str, Any]:
    """Normalise a submitted payload. Raises ValidationError on empty text."""
    if not isinstance(payload, dict):
        raise ValidationError("invalid_payload")
    text = payload.get("text")
    text = "" if text is None else str(text)
    text = text[:max_chars]
    if not text.strip():
        raise ValidationError("empty_text")
    lang = str(payload.get("lang") or "ko")
    return {"text": text, "lang": lang, "speak": bool(payload.get("speak", False))}


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------

def _cards(raw: Any, limit: int) -> list[dict[str, str]]:
    items = raw if isinstance(raw, list) else []
    cards = [{"text": card_text(item)} for item in items[:limit]]
    return [c for c in cards if c["text"]]


def postprocess_classify(reply: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for category in CLASSIFY_CATEGORIES:
        section = reply.get(category)
        raw = section.get("cards") if isinstance(section, dict) else None
        result[category] = {"cards": _cards(raw, CLASSIFY_TOP_K)}
    if not any(result[c]["cards"] for c in CLASSIFY_CATEGORIES):
        raise CollaboratorFormatError("classification reply contained no cards", code="empty_classification")
    return result


def postprocess_practice(reply: dict[str, Any]) -> dict[str, Any]:
    raw = reply.get("practice_sets_json")
    if not isinstance(raw, list):
        raw = reply.get("sentences")
    sentences = _cards(raw, PRACTICE_COUNT)
    while len(sentences) < PRACTICE_COUNT:
        sentences.append({"text": normalize_da(PRACTICE_FALLBACK)})
    return {"practice_sets_json": sentences}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WorkType:
    name: str
    system_prompt: str
    model_setting: str
    build_request: Callable[[dict[str, Any]], dict[str, Any]]
    postprocess: Callable[[dict[str, Any]], dict[str, Any]]
    speakable: bool = False


WORK_TYPES: dict[str, WorkType] = {
    "classify": WorkType(
        name="classify",
        system_prompt=CLASSIFY_SYSTEM,
        model_setting="classify_model",
        build_request=lambda p: {"text": p["text"], "lang": p["lang"], "top_k": CLASSIFY_TOP_K},
        postprocess=postprocess_classify,
    ),
    "practice": WorkType(
        name="practice",
        system_prompt=PRACTICE_SYSTEM,
        model_setting="practice_model",
        build_request=lambda p: {"text": p["text"], "lang": p["lang"]},
        postprocess=postprocess_practice,
        speakable=True,
    ),
}


def get_work_type(name: str) -> WorkType:
    work = WORK_TYPES.get(name)
    if work is None:
        raise ValidationError(f"unknown_work_type: {name}", code="unknown_work_type")
    return work


# ---------------------------------------------------------------------------
# Collaborator
# ---------------------------------------------------------------------------

class TextGenerator:
    """Runs one work type against the configured LLM (and speech) providers.

    Providers are resolved on first use so a missing key only fails the
    requests that need it.
    """

    def __init__(
        self,
        settings: Settings,
        provider: LLMProvider | None = None,
        speech: SpeechProvider | None = None,
    ):
        self._settings = settings
        self._provider = provider
        self._speech = speech
        self._lock = threading.Lock()

    def model_for(self, work: WorkType) -> str:
        if self._settings.llm_provider.lower() == "anthropic":
            return self._settings.anthropic_model
        return getattr(self._settings, work.model_setting)

    def provider(self) -> LLMProvider:
        with self._lock:
            if self._provider is None:
                self._provider = get_provider(self._settings)
            return self._provider

    def speech(self) -> SpeechProvider:
        with self._lock:
            if self._speech is None:
                self._speech = get_speech_provider(self._settings)
            return self._speech

    def generate(self, work_type: str, payload: dict[str, Any]) -> dict[str, Any]:
        work = get_work_type(work_type)
        model = self.model_for(work)
        reply = self.provider().complete_json(
            work.system_prompt,
            work.build_request(payload),
            model=model,
            temperature=self._settings.llm_temperature,
        )
        result = work.postprocess(reply)
        if work.speakable and payload.get("speak"):
            self._attach_audio(result["practice_sets_json"])
        result["used_model"] = model
        return result

    def speak(self, sentences: list[str]) -> list[str | None]:
        """Synthesize each sentence; failures and disabled speech become None."""
        return synthesize_all(self.speech(), sentences, max_workers=self._settings.tts_max_workers)

    def _attach_audio(self, items: list[dict[str, Any]]) -> None:
        try:
            audios = self.speak([item["text"] for item in items])
        except ConfigurationError as e:
            logger.warning("Speech requested but unavailable: %s", e)
            audios = [None] * len(items)
        for item, audio in zip(items, audios):
            item["audio"] = audio
