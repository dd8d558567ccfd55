"""Structlog implementation of the ProcessObserver port."""

import structlog


class StructlogProcessObserver:
    """Delegates process events to structlog.

    Satisfies the ProcessObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def process_spawned(self, run_id: str, command: list[str], pid: int) -> None:
        self._log.info("process.spawned", run_id=run_id, command=command, pid=pid)

    def process_spawn_failed(self, run_id: str, reason: str) -> None:
        self._log.error("process.spawn_failed", run_id=run_id, reason=reason)

    def process_exited(
        self, run_id: str, exit_code: int, elapsed_seconds: float
    ) -> None:
        log = self._log.info if exit_code == 0 else self._log.error
        log(
            "process.exited",
            run_id=run_id,
            exit_code=exit_code,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def process_killed(self, run_id: str) -> None:
        self._log.warning("process.killed", run_id=run_id)

    def artifact_copy_failed(self, run_id: str, reason: str) -> None:
        self._log.warning("process.artifact_copy_failed", run_id=run_id, reason=reason)

    def scratch_backed_up(self, run_id: str, path: str, backup_path: str) -> None:
        self._log.debug(
            "process.scratch_backed_up",
            run_id=run_id,
            path=path,
            backup_path=backup_path,
        )

    def scratch_backup_skipped(self, run_id: str, path: str) -> None:
        self._log.debug("process.scratch_backup_skipped", run_id=run_id, path=path)

    def scratch_restored(self, run_id: str, path: str) -> None:
        self._log.debug("process.scratch_restored", run_id=run_id, path=path)

    def scratch_restore_failed(self, run_id: str, path: str, reason: str) -> None:
        self._log.error(
            "process.scratch_restore_failed", run_id=run_id, path=path, reason=reason
        )
