"""FakeResultStoreObserver: records result store events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RunSavedEvent:
    run_id: str
    status: str


@dataclass(frozen=True)
class RunProblemEvent:
    kind: str
    run_id: str
    reason: str


class FakeResultStoreObserver:
    """Records every ResultStoreObserver event as a frozen dataclass."""

    def __init__(self) -> None:
        self._saved: list[RunSavedEvent] = []
        self._deleted: list[str] = []
        self._problems: list[RunProblemEvent] = []
        self._skipped: list[RunSavedEvent] = []

    @property
    def saved(self) -> list[RunSavedEvent]:
        return self._saved

    @property
    def deleted(self) -> list[str]:
        return self._deleted

    @property
    def problems(self) -> list[RunProblemEvent]:
        return self._problems

    @property
    def skipped(self) -> list[RunSavedEvent]:
        return self._skipped

    def run_saved(self, run_id: str, status: str) -> None:
        self._saved.append(RunSavedEvent(run_id=run_id, status=status))

    def run_deleted(self, run_id: str) -> None:
        self._deleted.append(run_id)

    def metadata_invalid(self, run_id: str, reason: str) -> None:
        self._problems.append(RunProblemEvent("metadata", run_id, reason))

    def summary_invalid(self, run_id: str, reason: str) -> None:
        self._problems.append(RunProblemEvent("summary", run_id, reason))

    def run_load_failed(self, run_id: str, reason: str) -> None:
        self._problems.append(RunProblemEvent("load", run_id, reason))

    def status_update_skipped(self, run_id: str, status: str) -> None:
        self._skipped.append(RunSavedEvent(run_id=run_id, status=status))
