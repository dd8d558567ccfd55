"""ConsoleRunObserver: prints run logs and status changes with Rich."""

from rich.console import Console
from rich.markup import escape

from pahcer_desk.execution.domain.observer import LogLevel
from pahcer_desk.execution.domain.record import RunRecord
from pahcer_desk.execution.domain.status import RunStatus

_STATUS_STYLES: dict[RunStatus, str] = {
    RunStatus.IDLE: "dim",
    RunStatus.RUNNING: "cyan",
    RunStatus.COMPLETED: "bright_green",
    RunStatus.FAILED: "red",
    RunStatus.CANCELLED: "yellow",
}

_LEVEL_STYLES: dict[str, str] = {
    "warn": "yellow",
    "error": "red",
}


class ConsoleRunObserver:
    """Renders the log stream of one or more runs to a terminal.

    Only the run ids passed to ``follow()`` are printed, so a console attached to
    a long-lived orchestrator shows just the run the operator started. With no
    followed ids every run is printed.

    Pass ``disabled=True`` to suppress all terminal output (useful in tests).

    Does NOT inherit from RunObserver (structural typing via Protocol).
    """

    def __init__(self, console: Console | None = None, disabled: bool = False) -> None:
        self._console = console or Console()
        self._disabled = disabled
        self._followed: set[str] = set()

    def follow(self, run_id: str) -> None:
        self._followed.add(run_id)

    def _wants(self, run_id: str) -> bool:
        return not self._disabled and (not self._followed or run_id in self._followed)

    def run_status_changed(
        self, run_id: str, status: RunStatus, record: RunRecord
    ) -> None:
        if not self._wants(run_id):
            return
        style = _STATUS_STYLES[status]
        line = f"[{style}]● {status.value}[/{style}] [dim]{run_id[:8]}[/dim]"
        if status is RunStatus.COMPLETED:
            line += (
                f"  accepted {record.accepted_count}/{record.total_count}"
                f"  avg {record.average_score or 0:.2f}"
                f"  rel {record.average_relative_score or 0:.4f}"
            )
        self._console.print(line)

    def run_log(
        self, run_id: str, timestamp: str, level: LogLevel, message: str
    ) -> None:
        if not self._wants(run_id):
            return
        clock = timestamp[11:19] if len(timestamp) >= 19 else timestamp
        style = _LEVEL_STYLES.get(level)
        text = escape(message)
        if style:
            text = f"[{style}]{text}[/{style}]"
        self._console.print(f"[dim]{clock}[/dim] {text}", highlight=False)

    def run_progress(self, run_id: str, record: RunRecord) -> None:
        pass
