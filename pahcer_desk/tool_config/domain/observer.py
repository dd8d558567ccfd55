"""Observer port for the tool configuration domain."""

from typing import Protocol


class ToolConfigObserver(Protocol):
    def config_backed_up(self, path: str, backup_path: str) -> None: ...

    def config_backup_failed(self, path: str, reason: str) -> None: ...

    def config_test_window_applied(self, start_seed: int, end_seed: int) -> None: ...

    def config_update_failed(self, path: str, reason: str) -> None: ...

    def config_restored(self, path: str) -> None: ...

    def config_restore_failed(self, path: str, reason: str) -> None: ...

    def config_read_failed(self, path: str, reason: str) -> None: ...

    def best_scores_missing(self, path: str) -> None: ...

    def best_scores_invalid(self, path: str, reason: str) -> None: ...
