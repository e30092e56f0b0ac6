"""CLI entry-point: run diary work through the job runner, or serve the API."""

import json
import typer
from rich.console import Console

from actdiary.config import get_settings
from actdiary.errors import ActDiaryError
from actdiary.jobs import JobRunner, JobStatus
from actdiary.work import TextGenerator

app = typer.Typer(help="ACT diary coach")

WAIT_HELP = (
    "Seconds to wait for the job (default SYNC_WAIT_SECONDS). After a timeout the "
    "process only exits once the in-flight LLM call returns or reaches LLM_TIMEOUT_SECONDS."
)


def _run(work_type: str, payload: dict, wait: float | None = None) -> None:
    console = Console()
    settings = get_settings()
    runner = JobRunner.from_settings(settings, TextGenerator(settings))
    timeout = settings.sync_wait_seconds if wait is None else wait
    try:
        handle = runner.submit(work_type, payload)
        with console.status(f"Running {work_type} job {handle.job_id}..."):
            view = runner.wait(handle.job_id, timeout=timeout)
    except ActDiaryError as e:
        console.print(f"[red]Error: {e.code}[/red]")
        raise typer.Exit(1)
    finally:
        runner.shutdown()

    if view.status is JobStatus.ERROR:
        console.print(f"[red]Job failed: {view.error}[/red]")
        raise typer.Exit(1)
    if view.status is JobStatus.RUNNING:
        console.print(
            f"[yellow]Timed out after {timeout:g}s. Waiting up to {settings.llm_timeout_seconds:g}s "
            "for the in-flight call before exiting.[/yellow]"
        )
        raise typer.Exit(2)
    console.print_json(json.dumps(view.result, ensure_ascii=False))


@app.command()
def classify(
    text: str = typer.Argument(..., help="Diary text"),
    lang: str = typer.Option("ko", help="Diary language"),
    wait: float | None = typer.Option(None, help=WAIT_HELP),
):
    """Split a diary into situation / feeling / thought / behavior cards."""
    _run("classify", {"text": text, "lang": lang}, wait)


@app.command()
def practice(
    text: str = typer.Argument(..., help="Diary text"),
    lang: str = typer.Option("ko", help="Diary language"),
    speak: bool = typer.Option(False, "--speak", help="Attach synthesized audio per sentence"),
    wait: float | None = typer.Option(None, help=WAIT_HELP),
):
    """Reframe a diary into seven practice sentences."""
    _run("practice", {"text": text, "lang": lang, "speak": speak}, wait)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(None, help="Port (default from PORT)"),
):
    """Start the HTTP API."""
    import uvicorn

    uvicorn.run("backend.main:app", host=host, port=port or get_settings().port)


if __name__ == "__main__":
    app()
