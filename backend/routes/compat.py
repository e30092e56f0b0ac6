"""Blocking diary endpoints kept for older clients.

Both submit a job and wait for it in the request; new clients should use
POST /jobs + GET /jobs/{job_id} instead.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from actdiary.config import Settings
from actdiary.jobs import JobRunner, JobStatus, JobStatusView
from backend.deps import get_app_settings, get_runner

logger = logging.getLogger(__name__)
router = APIRouter()


class DiaryRequest(BaseModel):
    text: str | None = ""
    lang: str = "ko"
    speak: bool = False


def _run_blocking(
    work_type: str,
    body: DiaryRequest,
    runner: JobRunner,
    settings: Settings,
) -> JobStatusView:
    handle = runner.submit(work_type, body.model_dump())
    return runner.wait(handle.job_id, timeout=settings.sync_wait_seconds)


def _respond(path: str, view: JobStatusView, result_key: str | None) -> Any:
    if view.status is JobStatus.RUNNING:
        logger.warning("[%s] timed out waiting for job", path)
        return JSONResponse(status_code=504, content={"ok": False, "error": "timeout"})
    if view.status is JobStatus.ERROR:
        logger.error("[%s] error %s", path, view.error)
        return JSONResponse(status_code=500, content={"ok": False, "error": view.error or "server_error"})

    result = dict(view.result or {})
    used_model = result.pop("used_model", None)
    if result_key is None:
        return {"ok": True, "result": result, "used_model": used_model}
    return {"ok": True, result_key: result.get(result_key, []), "used_model": used_model}


@router.post("/classifysuggest", summary="Classify a diary into ACT categories (blocking)")
def classify_suggest(
    body: DiaryRequest,
    runner: JobRunner = Depends(get_runner),
    settings: Settings = Depends(get_app_settings),
):
    view = _run_blocking("classify", body, runner, settings)
    return _respond("/classifysuggest", view, None)


@router.post("/practice", summary="Seven practice sentences for a diary (blocking)")
def practice(
    body: DiaryRequest,
    runner: JobRunner = Depends(get_runner),
    settings: Settings = Depends(get_app_settings),
):
    view = _run_blocking("practice", body, runner, settings)
    return _respond("/practice", view, "practice_sets_json")
