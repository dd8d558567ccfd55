"""RunRepository Protocol: structural interface over persisted runs."""

from pathlib import Path
from typing import Any, Protocol

from pahcer_desk.execution.domain.record import RunRecord
from pahcer_desk.execution.domain.status import RunStatus
from pahcer_desk.results.domain.case_result import CaseResult
from pahcer_desk.results.domain.summary import SummaryArtifact


class RunRepository(Protocol):
    """Persists run metadata and merges it with the tool's summary artifact."""

    def run_dir(self, run_id: str) -> Path: ...

    def save(self, record: RunRecord) -> None: ...

    def find_by_id(self, run_id: str) -> RunRecord | None: ...

    def find_all(self) -> list[RunRecord]: ...

    def update_status(self, run_id: str, status: RunStatus) -> None: ...

    def update_progress(self, run_id: str, **fields: Any) -> None: ...

    def delete(self, run_id: str) -> None: ...

    def load_metadata(self, run_id: str) -> RunRecord | None: ...

    def load_summary(self, run_id: str) -> SummaryArtifact | None: ...

    def find_test_cases_by_run_id(self, run_id: str) -> list[CaseResult]: ...

    def find_test_case_result(self, run_id: str, seed: int) -> str | None: ...
