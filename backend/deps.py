"""FastAPI dependencies: per-app runner, generator and settings."""

from fastapi import Request

from actdiary.config import Settings
from actdiary.jobs import JobRunner
from actdiary.work import TextGenerator


def get_runner(request: Request) -> JobRunner:
    return request.app.state.runner


def get_generator(request: Request) -> TextGenerator:
    return request.app.state.generator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
