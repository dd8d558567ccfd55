"""Observer port for the process domain."""

from typing import Protocol


class ProcessObserver(Protocol):
    def process_spawned(self, run_id: str, command: list[str], pid: int) -> None: ...

    def process_spawn_failed(self, run_id: str, reason: str) -> None: ...

    def process_exited(
        self, run_id: str, exit_code: int, elapsed_seconds: float
    ) -> None: ...

    def process_killed(self, run_id: str) -> None: ...

    def artifact_copy_failed(self, run_id: str, reason: str) -> None: ...

    def scratch_backed_up(self, run_id: str, path: str, backup_path: str) -> None: ...

    def scratch_backup_skipped(self, run_id: str, path: str) -> None: ...

    def scratch_restored(self, run_id: str, path: str) -> None: ...

    def scratch_restore_failed(self, run_id: str, path: str, reason: str) -> None: ...
