"""In-memory job storage with TTL and size-bound eviction."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable

from actdiary.errors import NotFoundError
from actdiary.jobs.models import Job, JobStatus, utcnow

logger = logging.getLogger(__name__)


class JobStore:
    """Thread-safe map from job id to Job.

    Terminal jobs older than ``ttl_seconds`` (counted from ``created_at``) are
    evicted lazily. When more than ``max_jobs`` records are held, the oldest
    terminal ones go first. Running jobs are never evicted.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        max_jobs: int = 1000,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._jobs: dict[str, Job] = {}
        self._lock = threading.Lock()
        self._ttl = timedelta(seconds=ttl_seconds)
        self._max_jobs = max_jobs
        self._clock = clock

    @property
    def max_jobs(self) -> int:
        return self._max_jobs

    def now(self) -> datetime:
        return self._clock()

    def create(self, work_type: str = "") -> Job:
        job = Job(work_type=work_type, created_at=self._clock())
        with self._lock:
            while job.job_id in self._jobs:
                job = Job(work_type=work_type, created_at=job.created_at)
            self._jobs[job.job_id] = job
            self._evict_locked()
            return job.model_copy()

    def get(self, job_id: str) -> Job:
        with self._lock:
            self._evict_locked()
            job = self._jobs.get(job_id)
            if job is None:
                raise NotFoundError(job_id)
            return job.model_copy()

    def complete(self, job_id: str, result: dict[str, Any]) -> bool:
        return self._finish(job_id, JobStatus.DONE, result=result)

    def fail(self, job_id: str, error: str) -> bool:
        return self._finish(job_id, JobStatus.ERROR, error=error)

    def clear(self) -> None:
        with self._lock:
            self._jobs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        with self._lock:
            return job_id in self._jobs

    def _finish(
        self,
        job_id: str,
        status: JobStatus,
        *,
        result: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> bool:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                logger.warning("Dropping %s outcome for unknown job %s", status.value, job_id)
                return False
            if job.status.is_terminal:
                logger.debug("Job %s already %s; ignoring %s", job_id, job.status.value, status.value)
                return False
            self._jobs[job_id] = job.model_copy(
                update={
                    "status": status,
                    "result": result,
                    "error": error,
                    "finished_at": self._clock(),
                }
            )
            return True

    def _evict_locked(self) -> None:
        cutoff = self._clock() - self._ttl
        expired = [
            job_id
            for job_id, job in self._jobs.items()
            if job.status.is_terminal and job.created_at <= cutoff
        ]
        for job_id in expired:
            del self._jobs[job_id]

        overflow = len(self._jobs) - self._max_jobs
        if overflow > 0:
            terminal = sorted(
                (job for job in self._jobs.values() if job.status.is_terminal),
                key=lambda j: j.created_at,
            )
            for job in terminal[:overflow]:
                del self._jobs[job.job_id]
            expired.extend(j.job_id for j in terminal[:overflow])

        if expired:
            logger.info("Evicted %d finished job(s); %d remain", len(expired), len(self._jobs))
