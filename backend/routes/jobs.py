"""Job API: submit work, then poll for the result.

POST /jobs
  → Creates (or reuses, by dedupeKey) a job and returns { jobId } immediately.
  → The work runs on the runner's thread pool.

GET /jobs/{job_id}
  → 202 while running, 200 once done or failed, 404 when unknown.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from actdiary.jobs import DedupeKey, JobRunner, JobStatus
from backend.deps import get_runner

logger = logging.getLogger(__name__)
router = APIRouter()


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

class JobRequest(BaseModel):
    """Body for POST /jobs."""

    model_config = ConfigDict(populate_by_name=True)

    work_type: str = Field(alias="workType")
    payload: dict[str, Any] = Field(default_factory=dict)
    dedupe_key: DedupeKey | None = Field(default=None, alias="dedupeKey")


class JobStartResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    job_id: str = Field(alias="jobId")
    reused: bool = False


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/jobs",
    response_model=JobStartResponse,
    summary="Start a job (async)",
    description=(
        "Creates a job and returns immediately. Poll GET /jobs/{jobId} for the result. "
        "Submissions sharing a dedupeKey reuse the live job instead of starting another."
    ),
)
async def start_job(request: JobRequest, runner: JobRunner = Depends(get_runner)):
    handle = runner.submit(request.work_type, request.payload, request.dedupe_key)
    return JobStartResponse(job_id=handle.job_id, reused=handle.reused)


@router.get(
    "/jobs/{job_id}",
    summary="Get job status",
    responses={
        202: {"description": "Job still running"},
        404: {"description": "Unknown job id"},
    },
)
async def get_job(job_id: str, runner: JobRunner = Depends(get_runner)):
    view = runner.poll(job_id)
    code = status.HTTP_202_ACCEPTED if view.status is JobStatus.RUNNING else status.HTTP_200_OK
    return JSONResponse(status_code=code, content={"ok": True, **view.as_dict()})
