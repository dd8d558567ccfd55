"""CLI entrypoint for pahcer-desk: typer app driving runs of the pahcer scoring tool."""

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.table import Table

from pahcer_desk.bootstrap import Services, build_services
from pahcer_desk.core.errors import PahcerDeskError
from pahcer_desk.execution.application.orchestrator import RunOrchestrator
from pahcer_desk.execution.domain.observer import RunObserver
from pahcer_desk.execution.domain.request import RunRequest
from pahcer_desk.execution.domain.status import RunStatus
from pahcer_desk.execution.infrastructure.console_observer import ConsoleRunObserver
from pahcer_desk.settings.infrastructure.observer import StructlogSettingsObserver
from pahcer_desk.settings.infrastructure.yaml_loader import YamlSettingsLoader

app = typer.Typer(add_completion=False)


@dataclass(frozen=True)
class _CliOptions:
    project_root: Path
    settings_path: Path | None
    log_format: str


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format.

    Logs go to stderr so that command output on stdout stays machine readable.
    """
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@app.callback()
def main(
    ctx: typer.Context,
    project_root: Path = typer.Option(
        Path("."),
        "--project-root",
        help="Directory containing pahcer_config.toml",
    ),
    settings_path: Path | None = typer.Option(
        None,
        "--settings",
        envvar="PAHCER_DESK_SETTINGS",
        help="Optional settings YAML",
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Run pahcer and keep a browsable history of its results."""
    _configure_structlog(log_format=log_format)
    ctx.obj = _CliOptions(
        project_root=project_root,
        settings_path=settings_path,
        log_format=log_format,
    )


def _services(ctx: typer.Context, observers: list[RunObserver] | None = None) -> Services:
    options: _CliOptions = ctx.obj
    loader = YamlSettingsLoader(observer=StructlogSettingsObserver())
    try:
        settings = loader.load(
            path=options.settings_path, project_root=options.project_root
        )
    except PahcerDeskError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    return build_services(settings=settings, observers=observers)


def _fail(message: str) -> typer.Exit:
    typer.echo(message)
    return typer.Exit(code=1)


def _fmt(value: float | None, digits: int) -> str:
    return "-" if value is None else f"{value:.{digits}f}"


async def _run_to_completion(
    orchestrator: RunOrchestrator, request: RunRequest, console: ConsoleRunObserver
) -> RunStatus | None:
    run_id = await orchestrator.start(request)
    console.follow(run_id)
    try:
        await orchestrator.wait(run_id)
    except asyncio.CancelledError:
        # Ctrl-C: asyncio.run cancels this task; stop the tool before leaving.
        await orchestrator.stop(run_id)
        await orchestrator.wait(run_id)
        raise
    return orchestrator.status(run_id)


@app.command()
def run(
    ctx: typer.Context,
    comment: str | None = typer.Option(
        None, "--comment", "-c", help="Comment stored with the run"
    ),
    shuffle: bool = typer.Option(False, "--shuffle", help="Shuffle case order"),
    freeze_best_scores: bool = typer.Option(
        False, "--freeze-best-scores", help="Do not update best_scores.json"
    ),
    count: int = typer.Option(100, "--count", "-n", min=1, help="Number of seeds"),
    start_seed: int = typer.Option(0, "--start-seed", min=0, help="First seed"),
) -> None:
    """Run pahcer once and wait for the result."""
    options: _CliOptions = ctx.obj
    console_observer = ConsoleRunObserver(disabled=options.log_format == "json")
    services = _services(ctx, observers=[console_observer])
    request = RunRequest(
        comment=comment,
        shuffle=shuffle,
        freeze_best_scores=freeze_best_scores,
        test_case_count=count,
        start_seed=start_seed,
    )

    try:
        status = asyncio.run(
            _run_to_completion(
                orchestrator=services.orchestrator,
                request=request,
                console=console_observer,
            )
        )
    except KeyboardInterrupt:
        typer.echo("Run cancelled.")
        sys.exit(1)
    except PahcerDeskError as exc:
        typer.echo(str(exc))
        sys.exit(1)

    if status is not RunStatus.COMPLETED:
        raise typer.Exit(code=1)


@app.command("list")
def list_runs(ctx: typer.Context) -> None:
    """List every stored run, newest first."""
    records = _services(ctx).orchestrator.list_runs()
    if not records:
        typer.echo("No runs found.")
        return

    table = Table(title="pahcer runs")
    table.add_column("ID", style="dim")
    table.add_column("Started")
    table.add_column("Status")
    table.add_column("Comment")
    table.add_column("Accepted", justify="right")
    table.add_column("Avg score", justify="right")
    table.add_column("Avg relative", justify="right")
    table.add_column("Max time (ms)", justify="right")
    for record in records:
        accepted = (
            f"{record.accepted_count}/{record.total_count}"
            if record.accepted_count is not None
            else "-"
        )
        table.add_row(
            record.id,
            record.start_time or "-",
            record.status.value,
            record.comment or "",
            accepted,
            _fmt(record.average_score, 2),
            _fmt(record.average_relative_score, 4),
            _fmt(record.max_execution_time, 0),
        )
    Console().print(table)


@app.command()
def show(
    ctx: typer.Context,
    run_id: str = typer.Argument(..., help="Run id"),
) -> None:
    """Print one run record as JSON."""
    try:
        record = _services(ctx).orchestrator.get(run_id)
    except PahcerDeskError as exc:
        raise _fail(str(exc)) from exc
    if record is None:
        raise _fail(f"Run '{run_id}' has no readable metadata or summary.")
    typer.echo(record.model_dump_json(by_alias=True, indent=2))


@app.command()
def cases(
    ctx: typer.Context,
    run_id: str = typer.Argument(..., help="Run id"),
) -> None:
    """List the per-case results of one run."""
    try:
        results = _services(ctx).orchestrator.test_cases(run_id)
    except PahcerDeskError as exc:
        raise _fail(str(exc)) from exc
    if not results:
        typer.echo(f"No case results for run '{run_id}'.")
        return

    table = Table(title=f"Cases of {run_id}")
    table.add_column("Seed", justify="right")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Relative", justify="right")
    table.add_column("Time (ms)", justify="right")
    for case in results:
        style = "red" if case.status == "failed" else ""
        table.add_row(
            f"{case.seed:04d}",
            case.status,
            _fmt(case.score, 0),
            _fmt(case.relative_score, 4),
            _fmt(case.execution_time, 0),
            style=style,
        )
    Console().print(table)


@app.command()
def output(
    ctx: typer.Context,
    run_id: str = typer.Argument(..., help="Run id"),
    seed: int = typer.Argument(..., help="Seed of the case"),
) -> None:
    """Print the raw tool output of one case."""
    try:
        text = _services(ctx).orchestrator.test_case_output(run_id, seed)
    except PahcerDeskError as exc:
        raise _fail(str(exc)) from exc
    if text is None:
        raise _fail(f"No output stored for seed {seed} of run '{run_id}'.")
    typer.echo(text, nl=not text.endswith("\n"))


@app.command()
def delete(
    ctx: typer.Context,
    run_id: str = typer.Argument(..., help="Run id"),
) -> None:
    """Delete a run and everything stored for it."""
    orchestrator = _services(ctx).orchestrator
    try:
        asyncio.run(orchestrator.delete(run_id))
    except PahcerDeskError as exc:
        raise _fail(str(exc)) from exc
    typer.echo(f"Deleted run {run_id}.")


@app.command()
def recompute(ctx: typer.Context) -> None:
    """Recompute the relative scores of every stored run."""
    updated = _services(ctx).orchestrator.recompute_relative_scores()
    typer.echo(f"{updated} run(s) updated.")


if __name__ == "__main__":
    app()
