"""Deduplicated async job runner."""

from actdiary.jobs.dedupe import DedupeIndex, DedupeKey, Reservation, content_fingerprint
from actdiary.jobs.models import Job, JobHandle, JobStatus, JobStatusView, new_job_id
from actdiary.jobs.runner import JobRunner
from actdiary.jobs.store import JobStore

__all__ = [
    "DedupeIndex",
    "DedupeKey",
    "Job",
    "JobHandle",
    "JobRunner",
    "JobStatus",
    "JobStatusView",
    "JobStore",
    "Reservation",
    "content_fingerprint",
    "new_job_id",
]
