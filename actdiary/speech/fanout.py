"""Concurrent per-sentence synthesis."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from actdiary.speech.base import SpeechProvider

logger = logging.getLogger(__name__)


def synthesize_all(
    provider: SpeechProvider,
    sentences: Sequence[str],
    max_workers: int = 7,
) -> list[str | None]:
    """Synthesize every sentence concurrently.

    The result is index-aligned with ``sentences``. A sentence whose call
    fails comes back as ``None``; the call as a whole never raises.
    """
    if not sentences:
        return []

    def _one(index_sentence: tuple[int, str]) -> str | None:
        index, sentence = index_sentence
        try:
            return provider.synthesize(sentence)
        except Exception as e:
            logger.warning("Speech synthesis failed for sentence %d: %s", index, e)
            return None

    workers = max(1, min(max_workers, len(sentences)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="actdiary-tts") as pool:
        return list(pool.map(_one, enumerate(sentences)))
