"""Structlog implementation of the ResultStoreObserver port."""

import structlog


class StructlogResultStoreObserver:
    """Delegates result store events to structlog.

    Satisfies the ResultStoreObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_saved(self, run_id: str, status: str) -> None:
        self._log.debug("results.run_saved", run_id=run_id, status=status)

    def run_deleted(self, run_id: str) -> None:
        self._log.info("results.run_deleted", run_id=run_id)

    def metadata_invalid(self, run_id: str, reason: str) -> None:
        self._log.warning(
            "results.metadata_invalid",
            run_id=run_id,
            reason=reason,
            message="execution_info.json ignored",
        )

    def summary_invalid(self, run_id: str, reason: str) -> None:
        self._log.warning("results.summary_invalid", run_id=run_id, reason=reason)

    def run_load_failed(self, run_id: str, reason: str) -> None:
        self._log.warning("results.run_load_failed", run_id=run_id, reason=reason)

    def status_update_skipped(self, run_id: str, status: str) -> None:
        self._log.warning(
            "results.status_update_skipped",
            run_id=run_id,
            status=status,
            message="run not found, it may have been deleted",
        )
