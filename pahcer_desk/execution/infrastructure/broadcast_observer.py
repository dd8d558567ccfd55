"""BroadcastRunObserver: fans run events out to any number of subscribers."""

import structlog

from pahcer_desk.execution.domain.observer import LogLevel, RunObserver
from pahcer_desk.execution.domain.record import RunRecord
from pahcer_desk.execution.domain.status import RunStatus


class BroadcastRunObserver:
    """Delegates every event to each subscriber in subscription order.

    A subscriber that raises is logged and skipped; the exception never reaches
    the orchestrator and the remaining subscribers still receive the event.

    Does NOT inherit from RunObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[RunObserver] | None = None) -> None:
        self._observers: list[RunObserver] = list(observers or [])
        self._log = structlog.get_logger()

    def subscribe(self, observer: RunObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: RunObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def run_status_changed(
        self, run_id: str, status: RunStatus, record: RunRecord
    ) -> None:
        for obs in list(self._observers):
            try:
                obs.run_status_changed(run_id=run_id, status=status, record=record)
            except Exception as exc:
                self._subscriber_failed(obs, "run_status_changed", exc)

    def run_log(
        self, run_id: str, timestamp: str, level: LogLevel, message: str
    ) -> None:
        for obs in list(self._observers):
            try:
                obs.run_log(
                    run_id=run_id, timestamp=timestamp, level=level, message=message
                )
            except Exception as exc:
                self._subscriber_failed(obs, "run_log", exc)

    def run_progress(self, run_id: str, record: RunRecord) -> None:
        for obs in list(self._observers):
            try:
                obs.run_progress(run_id=run_id, record=record)
            except Exception as exc:
                self._subscriber_failed(obs, "run_progress", exc)

    def _subscriber_failed(self, obs: RunObserver, event: str, exc: Exception) -> None:
        self._log.warning(
            "run.subscriber_failed",
            subscriber=type(obs).__name__,
            event=event,
            reason=str(exc),
        )
