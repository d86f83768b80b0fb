from __future__ import annotations

# ruff: noqa: B008
from importlib import metadata
from pathlib import Path

import typer

from agent_readiness.config import get_settings
from agent_readiness.monitoring.logger import StructuredLogger
from agent_readiness.probing.resolver import CtypesLibraryProbe, LibraryProbe
from agent_readiness.probing.suite import check_names, run_suite
from agent_readiness.reporting.run import Run
from agent_readiness.utils.io import dump_json

app = typer.Typer(
    help="Check that the agent's shared library dependencies are usable on this host",
    invoke_without_command=True,
)

PACKAGE_NAME = "agent-readiness-probe"


def execute(
    probe: LibraryProbe | None = None,
    event_log: Path | None = None,
    summary_path: Path | None = None,
) -> Run:
    """Run the full suite once and return the finished run."""
    logger = StructuredLogger(event_log)
    run = Run(logger=logger)
    logger.log_event({"event": "run_started"})
    groups = run_suite(probe or CtypesLibraryProbe(), run)
    logger.log_event(
        {
            "event": "run_finished",
            "total_checks": run.total_checks,
            "failed_checks": run.failed_checks,
            "groups": groups,
        },
    )
    if summary_path is not None:
        dump_json(run.summary(groups).model_dump(), summary_path)
    return run


@app.callback()
def main(ctx: typer.Context) -> None:
    """Run all probes when no command is given."""
    if ctx.invoked_subcommand is not None:
        return
    settings = get_settings()
    finished = execute(event_log=settings.event_log, summary_path=settings.summary_path)
    raise typer.Exit(code=finished.exit_code)


@app.command("run")
def run_command(
    event_log: Path | None = typer.Option(None, help="Append JSONL probe events to this file"),
    summary: Path | None = typer.Option(None, help="Write a JSON run summary to this file"),
) -> None:
    """Run all probes. The exit code is the number of failed checks."""
    settings = get_settings()
    finished = execute(
        event_log=event_log or settings.event_log,
        summary_path=summary or settings.summary_path,
    )
    raise typer.Exit(code=finished.exit_code)


@app.command("checks")
def checks() -> None:
    """List check names in execution order."""
    for number, name in enumerate(check_names(), start=1):
        typer.echo(f"{number} {name}")


@app.command("version")
def version() -> None:
    try:
        installed = metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:  # pragma: no cover - local dev
        installed = "0.0.0"
    typer.echo(f"agent-readiness {installed}")


if __name__ == "__main__":
    app()
