"""FileResultStore: RunRepository backed by one directory per run."""

import shutil
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pahcer_desk.execution.domain.record import RunRecord
from pahcer_desk.execution.domain.status import RunStatus
from pahcer_desk.results.domain.case_result import CaseResult
from pahcer_desk.results.domain.observer import ResultStoreObserver
from pahcer_desk.results.domain.summary import SummaryArtifact
from pahcer_desk.results.infrastructure import layout
from pahcer_desk.results.infrastructure.errors import (
    RunNotFoundError,
    RunRecordValidationError,
)
from pahcer_desk.scoring.application.reconciler import ScoreReconciler


class FileResultStore:
    """Sole writer of execution_info.json; merges it with the tool's summary.json.

    Satisfies the RunRepository protocol structurally. Aggregate statistics are
    never trusted from metadata once a summary exists: they are recomputed
    through the ScoreReconciler on every read.
    """

    def __init__(
        self,
        results_dir: Path,
        reconciler: ScoreReconciler,
        observer: ResultStoreObserver,
        case_output_width: int = 4,
    ) -> None:
        self._results_dir = results_dir
        self._reconciler = reconciler
        self._observer = observer
        self._case_output_width = case_output_width

    @property
    def results_dir(self) -> Path:
        return self._results_dir

    def run_dir(self, run_id: str) -> Path:
        """Result directory of ``run_id``.

        Raises:
            RunNotFoundError: if ``run_id`` is not a plain directory name.
        """
        if not run_id or run_id in {".", ".."} or "/" in run_id or "\\" in run_id:
            raise RunNotFoundError(run_id=run_id)
        return layout.run_dir(self._results_dir, run_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, record: RunRecord) -> None:
        """Validate ``record`` and write it to the run's execution_info.json.

        Raises:
            RunRecordValidationError: if the record does not round-trip the schema.
        """
        try:
            validated = RunRecord.model_validate(record.model_dump())
        except ValidationError as exc:
            raise RunRecordValidationError(run_id=record.id, reason=str(exc)) from exc

        run_dir = self.run_dir(validated.id)
        run_dir.mkdir(parents=True, exist_ok=True)
        layout.metadata_path(self._results_dir, validated.id).write_text(
            validated.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        self._observer.run_saved(run_id=validated.id, status=validated.status.value)

    def update_status(self, run_id: str, status: RunStatus) -> None:
        """Persist a new status. A run that vanished in the meantime is skipped."""
        try:
            record = self.find_by_id(run_id)
        except RunNotFoundError:
            record = None
        if record is None:
            self._observer.status_update_skipped(run_id=run_id, status=status.value)
            return
        self.save(record.model_copy(update={"status": status}))

    def update_progress(self, run_id: str, **fields: Any) -> None:
        """Merge ``fields`` into the stored record, creating a RUNNING record if absent."""
        try:
            record = self.find_by_id(run_id)
        except RunNotFoundError:
            record = None
        if record is None:
            record = RunRecord(
                id=run_id,
                status=RunStatus.RUNNING,
                start_time=datetime.now().astimezone().isoformat(),
            )
        self.save(record.model_copy(update=fields))

    def delete(self, run_id: str) -> None:
        """Remove the run's directory tree; a missing directory is not an error."""
        run_dir = self.run_dir(run_id)
        if run_dir.exists():
            shutil.rmtree(run_dir)
        self._observer.run_deleted(run_id=run_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_id(self, run_id: str) -> RunRecord | None:
        """Load metadata and summary for ``run_id`` and merge them.

        Returns None when the directory exists but holds neither readable
        metadata nor a summary.

        Raises:
            RunNotFoundError: if the run directory does not exist.
        """
        if not self.run_dir(run_id).is_dir():
            raise RunNotFoundError(run_id=run_id)

        record = self.load_metadata(run_id)
        summary = self.load_summary(run_id)
        if summary is None:
            return record

        if record is None:
            record = RunRecord(
                id=run_id,
                status=RunStatus.COMPLETED,
                start_time=summary.start_time,
            )
        stats = self._reconciler.compute_stats(summary)
        return record.model_copy(
            update={
                "comment": record.comment or summary.comment or "",
                "total_count": stats.total_count,
                "accepted_count": stats.accepted_count,
                "average_score": stats.average_score,
                "average_relative_score": stats.average_relative_score,
                "max_execution_time": stats.max_execution_time,
            }
        )

    def find_all(self) -> list[RunRecord]:
        """Every readable run, newest first. Unreadable directories are skipped."""
        if not self._results_dir.is_dir():
            return []

        records: list[RunRecord] = []
        for entry in sorted(self._results_dir.iterdir()):
            if not entry.is_dir():
                continue
            try:
                record = self.find_by_id(entry.name)
            except (OSError, ValidationError, RunNotFoundError) as exc:
                self._observer.run_load_failed(run_id=entry.name, reason=str(exc))
                continue
            if record is not None:
                records.append(record)

        records.sort(key=lambda r: r.started_at(), reverse=True)
        return records

    def load_metadata(self, run_id: str) -> RunRecord | None:
        """The persisted record as written, or None if absent or invalid."""
        path = layout.metadata_path(self._results_dir, run_id)
        try:
            return RunRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (ValidationError, UnicodeDecodeError) as exc:
            self._observer.metadata_invalid(run_id=run_id, reason=str(exc))
            return None

    def load_summary(self, run_id: str) -> SummaryArtifact | None:
        """The run's summary.json, or None if absent or malformed."""
        path = layout.summary_path(self._results_dir, run_id)
        try:
            return SummaryArtifact.model_validate_json(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (ValidationError, UnicodeDecodeError) as exc:
            self._observer.summary_invalid(run_id=run_id, reason=str(exc))
            return None

    def find_test_cases_by_run_id(self, run_id: str) -> list[CaseResult]:
        summary = self.load_summary(run_id)
        if summary is None:
            return []
        return self._reconciler.enrich_cases(summary.cases)

    def find_test_case_result(self, run_id: str, seed: int) -> str | None:
        """Raw tool output for one seed, or None if the case or its file is missing."""
        summary = self.load_summary(run_id)
        if summary is None or not any(case.seed == seed for case in summary.cases):
            return None

        path = layout.case_outputs_dir(self._results_dir, run_id) / (
            layout.case_output_name(seed, self._case_output_width)
        )
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
