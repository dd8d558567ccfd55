"""Structlog implementation of the ToolConfigObserver port."""

import structlog


class StructlogToolConfigObserver:
    """Delegates tool configuration events to structlog.

    Satisfies the ToolConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_backed_up(self, path: str, backup_path: str) -> None:
        self._log.debug("config.backed_up", path=path, backup_path=backup_path)

    def config_backup_failed(self, path: str, reason: str) -> None:
        self._log.warning("config.backup_failed", path=path, reason=reason)

    def config_test_window_applied(self, start_seed: int, end_seed: int) -> None:
        self._log.info(
            "config.test_window_applied", start_seed=start_seed, end_seed=end_seed
        )

    def config_update_failed(self, path: str, reason: str) -> None:
        self._log.warning("config.update_failed", path=path, reason=reason)

    def config_restored(self, path: str) -> None:
        self._log.debug("config.restored", path=path)

    def config_restore_failed(self, path: str, reason: str) -> None:
        self._log.warning("config.restore_failed", path=path, reason=reason)

    def config_read_failed(self, path: str, reason: str) -> None:
        self._log.warning("config.read_failed", path=path, reason=reason)

    def best_scores_missing(self, path: str) -> None:
        self._log.info(
            "config.best_scores_missing",
            path=path,
            message="No best scores recorded yet; relative scores will be empty",
        )

    def best_scores_invalid(self, path: str, reason: str) -> None:
        self._log.warning("config.best_scores_invalid", path=path, reason=reason)
