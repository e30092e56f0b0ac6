"""Job schema and status."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_job_id() -> str:
    return f"job_{uuid.uuid4().hex[:16]}"


class JobStatus(str, Enum):
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.RUNNING


class Job(BaseModel):
    """One tracked unit of asynchronous work."""

    job_id: str = Field(default_factory=new_job_id)
    work_type: str = ""
    status: JobStatus = JobStatus.RUNNING
    result: dict[str, Any] | None = None
    error: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    finished_at: datetime | None = None


class JobHandle(BaseModel):
    """What ``JobRunner.submit`` hands back to the caller."""

    job_id: str
    reused: bool = False


class JobStatusView(BaseModel):
    """Poll result: running, done with a result, or error with a message."""

    status: JobStatus
    result: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def from_job(cls, job: Job) -> "JobStatusView":
        if job.status is JobStatus.DONE:
            return cls(status=job.status, result=job.result)
        if job.status is JobStatus.ERROR:
            return cls(status=job.status, error=job.error)
        return cls(status=job.status)

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
