"""Observer port for run lifecycle events: what UIs and loggers subscribe to."""

from typing import Literal, Protocol

from pahcer_desk.execution.domain.record import RunRecord
from pahcer_desk.execution.domain.status import RunStatus

type LogLevel = Literal["debug", "info", "warn", "error"]


class RunObserver(Protocol):
    """Fire-and-forget receiver of run events.

    Implementations must return quickly; the orchestrator never waits on them.
    """

    def run_status_changed(
        self, run_id: str, status: RunStatus, record: RunRecord
    ) -> None: ...

    def run_log(
        self, run_id: str, timestamp: str, level: LogLevel, message: str
    ) -> None: ...

    def run_progress(self, run_id: str, record: RunRecord) -> None: ...
