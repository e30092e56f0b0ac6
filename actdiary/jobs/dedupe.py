"""Idempotency keys: collapse duplicate submissions onto one job."""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from datetime import timedelta
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict

from actdiary.errors import NotFoundError
from actdiary.jobs.models import Job, JobStatus
from actdiary.jobs.store import JobStore

logger = logging.getLogger(__name__)


def content_fingerprint(payload: dict[str, Any]) -> str:
    """Stable hash of a payload, independent of key order."""
    canonical = json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class DedupeKey(BaseModel):
    """Caller-supplied identity of a logical unit of work.

    Any extra fields (``userId``, ``entryId``, ...) are kept and hashed
    along with ``caller`` and ``unit``.
    """

    model_config = ConfigDict(extra="allow")

    caller: str = ""  # e.g. user id
    unit: str = ""  # e.g. diary entry id

    def digest(self, work_type: str, payload: dict[str, Any]) -> str:
        identity = content_fingerprint(self.model_dump())
        raw = f"{work_type}|{identity}|{content_fingerprint(payload)}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:32]


class Reservation(NamedTuple):
    job_id: str
    reused: bool


class DedupeIndex:
    """Map dedupe keys to the job currently associated with them.

    A key stays pinned to a running job, to a finished job for
    ``ttl_seconds`` after it finished, and never to a failed one.
    """

    def __init__(self, store: JobStore, ttl_seconds: float = 600.0):
        self._store = store
        self._ttl = timedelta(seconds=ttl_seconds)
        self._keys: dict[str, str] = {}
        self._lock = threading.Lock()

    def lookup_or_reserve(self, key: str, work_type: str = "") -> Reservation:
        with self._lock:
            job_id = self._keys.get(key)
            if job_id is not None:
                try:
                    job = self._store.get(job_id)
                except NotFoundError:
                    job = None
                if job is not None and self._is_live(job):
                    return Reservation(job_id, True)
                logger.debug("Dedupe key %s released (job %s no longer live)", key, job_id)

            job = self._store.create(work_type)
            self._keys[key] = job.job_id
            if len(self._keys) > self._store.max_jobs:
                self._prune_locked()
            return Reservation(job.job_id, False)

    def release(self, key: str) -> None:
        with self._lock:
            self._keys.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._keys.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def _is_live(self, job: Job) -> bool:
        if job.status is JobStatus.RUNNING:
            return True
        if job.status is JobStatus.ERROR or job.finished_at is None:
            return False
        return self._store.now() - job.finished_at < self._ttl

    def _prune_locked(self) -> None:
        stale = [key for key, job_id in self._keys.items() if job_id not in self._store]
        for key in stale:
            del self._keys[key]
