"""FakeToolConfigObserver: records tool config events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConfigBackedUpEvent:
    path: str
    backup_path: str


@dataclass(frozen=True)
class ConfigFailureEvent:
    operation: str
    path: str
    reason: str


@dataclass(frozen=True)
class WindowAppliedEvent:
    start_seed: int
    end_seed: int


@dataclass(frozen=True)
class BestScoresProblemEvent:
    path: str
    reason: str | None


class FakeToolConfigObserver:
    """Records every ToolConfigObserver event.

    Failures of backup, update, restore and read share one list, tagged with
    the operation name.
    """

    def __init__(self) -> None:
        self._backed_up: list[ConfigBackedUpEvent] = []
        self._failures: list[ConfigFailureEvent] = []
        self._windows: list[WindowAppliedEvent] = []
        self._restored: list[str] = []
        self._best_scores_problems: list[BestScoresProblemEvent] = []

    @property
    def backed_up(self) -> list[ConfigBackedUpEvent]:
        return self._backed_up

    @property
    def failures(self) -> list[ConfigFailureEvent]:
        return self._failures

    @property
    def windows(self) -> list[WindowAppliedEvent]:
        return self._windows

    @property
    def restored(self) -> list[str]:
        return self._restored

    @property
    def best_scores_problems(self) -> list[BestScoresProblemEvent]:
        return self._best_scores_problems

    def config_backed_up(self, path: str, backup_path: str) -> None:
        self._backed_up.append(ConfigBackedUpEvent(path=path, backup_path=backup_path))

    def config_backup_failed(self, path: str, reason: str) -> None:
        self._failures.append(ConfigFailureEvent("backup", path, reason))

    def config_test_window_applied(self, start_seed: int, end_seed: int) -> None:
        self._windows.append(
            WindowAppliedEvent(start_seed=start_seed, end_seed=end_seed)
        )

    def config_update_failed(self, path: str, reason: str) -> None:
        self._failures.append(ConfigFailureEvent("update", path, reason))

    def config_restored(self, path: str) -> None:
        self._restored.append(path)

    def config_restore_failed(self, path: str, reason: str) -> None:
        self._failures.append(ConfigFailureEvent("restore", path, reason))

    def config_read_failed(self, path: str, reason: str) -> None:
        self._failures.append(ConfigFailureEvent("read", path, reason))

    def best_scores_missing(self, path: str) -> None:
        self._best_scores_problems.append(BestScoresProblemEvent(path=path, reason=None))

    def best_scores_invalid(self, path: str, reason: str) -> None:
        self._best_scores_problems.append(
            BestScoresProblemEvent(path=path, reason=reason)
        )
