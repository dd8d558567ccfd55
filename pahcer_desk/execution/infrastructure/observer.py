"""StructlogRunObserver: production observer that delegates run events to structlog."""

import structlog

from pahcer_desk.execution.domain.observer import LogLevel
from pahcer_desk.execution.domain.record import RunRecord
from pahcer_desk.execution.domain.status import RunStatus


class StructlogRunObserver:
    """Logs run lifecycle events to structlog.

    Does NOT inherit from RunObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_status_changed(
        self, run_id: str, status: RunStatus, record: RunRecord
    ) -> None:
        log = self._log.error if status is RunStatus.FAILED else self._log.info
        log(
            "run.status_changed",
            run_id=run_id,
            status=status.value,
            accepted_count=record.accepted_count,
            total_count=record.total_count,
            average_relative_score=record.average_relative_score,
        )

    def run_log(
        self, run_id: str, timestamp: str, level: LogLevel, message: str
    ) -> None:
        if level == "error":
            self._log.error("run.log", run_id=run_id, message=message)
        elif level == "warn":
            self._log.warning("run.log", run_id=run_id, message=message)
        elif level == "debug":
            self._log.debug("run.log", run_id=run_id, message=message)
        else:
            self._log.info("run.log", run_id=run_id, message=message)

    def run_progress(self, run_id: str, record: RunRecord) -> None:
        self._log.debug(
            "run.progress",
            run_id=run_id,
            status=record.status.value,
            accepted_count=record.accepted_count,
            total_count=record.total_count,
        )
