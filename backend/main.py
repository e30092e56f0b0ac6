"""FastAPI backend for the ACT diary coach."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from actdiary import __version__
from actdiary.config import Settings, get_settings
from actdiary.errors import ActDiaryError
from actdiary.jobs import JobRunner
from actdiary.work import TextGenerator

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def _log_configuration(settings: Settings) -> None:
    provider = settings.llm_provider.lower()
    if not settings.api_key_for(provider):
        logger.warning(
            "LLM provider '%s' has no API key configured; diary requests will fail until it is set.",
            provider,
        )
    tts = settings.tts_provider.lower()
    if tts == "gemini" and not settings.gemini_api_key:
        logger.warning("TTS provider 'gemini' has no GEMINI_API_KEY, audio will be null.")
    elif tts == "openai" and not settings.openai_api_key:
        logger.warning("TTS provider 'openai' has no OPENAI_API_KEY, audio will be null.")
    logger.info(
        "Job runner: max_workers=%d max_jobs=%d job_ttl=%ss dedupe_ttl=%ss",
        settings.max_workers,
        settings.max_jobs,
        settings.job_ttl_seconds,
        settings.dedupe_ttl_seconds,
    )


class HealthResponse(BaseModel):
    status: str
    version: str


def create_app(
    runner: JobRunner | None = None,
    generator: TextGenerator | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the app. Tests inject a runner/generator; production builds both at startup."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _log_configuration(settings)
        if app.state.generator is None:
            app.state.generator = TextGenerator(settings)
        if app.state.runner is None:
            app.state.runner = JobRunner.from_settings(settings, app.state.generator)
        yield
        app.state.runner.shutdown()

    app = FastAPI(
        title="ACT Diary API",
        description="Diary classification and practice sentences backed by async LLM jobs.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.generator = generator
    app.state.runner = runner

    # -----------------------------------------------------------------------
    # Errors: JSON envelope only
    # -----------------------------------------------------------------------
    @app.exception_handler(ActDiaryError)
    async def actdiary_error_handler(request: Request, exc: ActDiaryError):
        if exc.status_code >= 500:
            logger.error("[%s] error %s", request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.code})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("[%s] rejected body: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"ok": False, "error": "invalid_request"})

    # -----------------------------------------------------------------------
    # CORS
    # -----------------------------------------------------------------------
    origins = settings.cors_origin_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Health & root
    # -----------------------------------------------------------------------
    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "ON backend is running"

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint (Render probes /health)."""
        return HealthResponse(status="ok", version=__version__)

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    from backend.routes import compat, jobs, speech

    app.include_router(jobs.router, tags=["jobs"])
    app.include_router(compat.router, tags=["diary"])
    app.include_router(speech.router, tags=["speech"])
    return app


app = create_app()
