"""Fire-and-forget execution of slow LLM work, tracked as jobs.

``submit`` returns a job id at once; the work runs on a bounded thread pool
and its outcome is written to the JobStore. Callers poll by job id.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from typing import Any, Protocol

from actdiary.config import Settings
from actdiary.errors import ActDiaryError
from actdiary.jobs.dedupe import DedupeIndex, DedupeKey
from actdiary.jobs.models import JobHandle, JobStatusView
from actdiary.jobs.store import JobStore
from actdiary.work import clean_payload, get_work_type

logger = logging.getLogger(__name__)


class Generator(Protocol):
    def generate(self, work_type: str, payload: dict[str, Any]) -> dict[str, Any]:
        ...


class JobRunner:
    def __init__(
        self,
        generator: Generator,
        store: JobStore | None = None,
        index: DedupeIndex | None = None,
        max_workers: int = 4,
        max_text_chars: int = 3000,
    ):
        self._generator = generator
        self.store = store or JobStore()
        self.index = index or DedupeIndex(self.store)
        self._max_text_chars = max_text_chars
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="actdiary-job")
        self._futures: dict[str, Future] = {}
        self._futures_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, generator: Generator) -> "JobRunner":
        store = JobStore(ttl_seconds=settings.job_ttl_seconds, max_jobs=settings.max_jobs)
        return cls(
            generator,
            store=store,
            index=DedupeIndex(store, ttl_seconds=settings.dedupe_ttl_seconds),
            max_workers=settings.max_workers,
            max_text_chars=settings.max_text_chars,
        )

    def submit(
        self,
        work_type: str,
        payload: Any,
        dedupe_key: DedupeKey | None = None,
    ) -> JobHandle:
        """Create (or reuse) a job for this work and schedule it without blocking."""
        get_work_type(work_type)
        cleaned = clean_payload(payload, self._max_text_chars)

        if dedupe_key is not None:
            job_id, reused = self.index.lookup_or_reserve(
                dedupe_key.digest(work_type, cleaned), work_type
            )
            if reused:
                logger.info("Reusing job %s for %s (dedupe hit)", job_id, work_type)
                return JobHandle(job_id=job_id, reused=True)
        else:
            job_id = self.store.create(work_type).job_id

        logger.info("Created job %s (%s)", job_id, work_type)
        future = self._executor.submit(self._execute, job_id, work_type, cleaned)
        with self._futures_lock:
            self._futures[job_id] = future
        future.add_done_callback(lambda f, jid=job_id: self._forget(jid, f))
        return JobHandle(job_id=job_id, reused=False)

    def poll(self, job_id: str) -> JobStatusView:
        """Current view of a job. Raises NotFoundError for unknown ids."""
        return JobStatusView.from_job(self.store.get(job_id))

    def wait(self, job_id: str, timeout: float | None = None) -> JobStatusView:
        """Block until the job finishes or ``timeout`` elapses, then poll."""
        with self._futures_lock:
            future = self._futures.get(job_id)
        if future is not None:
            wait_futures([future], timeout=timeout)
        return self.poll(job_id)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        with self._futures_lock:
            self._futures.clear()
        self.index.clear()
        self.store.clear()

    def _execute(self, job_id: str, work_type: str, payload: dict[str, Any]) -> None:
        try:
            result = self._generator.generate(work_type, payload)
        except ActDiaryError as e:
            logger.warning("Job %s (%s) failed: %s", job_id, work_type, e)
            self.store.fail(job_id, str(e))
            return
        except Exception as e:
            logger.exception("Job %s (%s) crashed", job_id, work_type)
            self.store.fail(job_id, f"server_error: {e}")
            return
        self.store.complete(job_id, result)
        logger.info("Job %s (%s) done", job_id, work_type)

    def _forget(self, job_id: str, future: Future) -> None:
        with self._futures_lock:
            if self._futures.get(job_id) is future:
                del self._futures[job_id]
