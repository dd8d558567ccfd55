"""Tests for FileResultStore: persistence, merging and projections."""

import json
from pathlib import Path

import pytest

from pahcer_desk.execution.domain.record import RunRecord
from pahcer_desk.execution.domain.status import RunStatus
from pahcer_desk.results.infrastructure.errors import RunNotFoundError
from pahcer_desk.results.infrastructure.file_store import FileResultStore
from pahcer_desk.scoring.application.reconciler import ScoreReconciler
from pahcer_desk.tool_config.domain.objective import Objective
from tests.results.fake_observer import FakeResultStoreObserver
from tests.results.summary_factory import make_case, make_summary, write_summary
from tests.scoring.fake_observer import FakeScoringObserver
from tests.scoring.fake_reference import FakeScoreReference


def _make_store(
    tmp_path: Path,
    best_scores: dict[int, float] | None = None,
    objective: Objective = Objective.MAXIMIZE,
) -> tuple[FileResultStore, FakeResultStoreObserver]:
    reconciler = ScoreReconciler(
        reference=FakeScoreReference(best_scores=best_scores, objective=objective),
        observer=FakeScoringObserver(),
    )
    observer = FakeResultStoreObserver()
    store = FileResultStore(
        results_dir=tmp_path / "results", reconciler=reconciler, observer=observer
    )
    return store, observer


def _record(run_id: str, **fields: object) -> RunRecord:
    values: dict[str, object] = {
        "id": run_id,
        "status": RunStatus.COMPLETED,
        "start_time": "2026-10-18T10:00:00+09:00",
    }
    values.update(fields)
    return RunRecord.model_validate(values)


class TestSave:
    def test_writes_camel_case_metadata(self, tmp_path: Path) -> None:
        store, observer = _make_store(tmp_path)

        store.save(_record("run-1", comment="first", total_count=10))

        path = tmp_path / "results" / "run-1" / "execution_info.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["id"] == "run-1"
        assert data["totalCount"] == 10
        assert data["comment"] == "first"
        assert observer.saved[0].status == "COMPLETED"

    def test_save_then_find_round_trips_without_summary(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        record = _record("run-1", comment="first", average_score=12.5)

        store.save(record)

        assert store.find_by_id("run-1") == record

    def test_rejects_path_like_ids(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        with pytest.raises(RunNotFoundError):
            store.save(_record("../escape"))


class TestFindById:
    def test_missing_directory_raises_not_found(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        with pytest.raises(RunNotFoundError):
            store.find_by_id("nope")

    def test_empty_directory_is_found_but_empty(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        (tmp_path / "results" / "hollow").mkdir(parents=True)

        assert store.find_by_id("hollow") is None

    def test_invalid_metadata_is_treated_as_absent(self, tmp_path: Path) -> None:
        store, observer = _make_store(tmp_path)
        run_dir = tmp_path / "results" / "broken"
        run_dir.mkdir(parents=True)
        (run_dir / "execution_info.json").write_text(
            '{"id": "broken", "status": "SLEEPING"}', encoding="utf-8"
        )

        assert store.find_by_id("broken") is None
        assert observer.problems[0].kind == "metadata"

    def test_summary_statistics_override_metadata(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        store.save(_record("run-1", accepted_count=0, total_count=99, average_score=0.0))
        write_summary(
            tmp_path / "results" / "run-1",
            make_summary(
                [
                    make_case(0, 100, execution_time=0.25),
                    make_case(1, 300, execution_time=1.5),
                    make_case(2, 0, error_message="TLE"),
                ],
                wa_seeds=[2],
            ),
        )

        record = store.find_by_id("run-1")

        assert record is not None
        assert record.total_count == 3
        assert record.accepted_count == 2
        assert record.average_score == pytest.approx(400 / 3)
        assert record.max_execution_time == pytest.approx(1500.0)
        assert record.status is RunStatus.COMPLETED

    def test_summary_only_run_is_completed(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        write_summary(
            tmp_path / "results" / "imported",
            make_summary([make_case(0, 10)], comment="from pahcer"),
        )

        record = store.find_by_id("imported")

        assert record is not None
        assert record.status is RunStatus.COMPLETED
        assert record.comment == "from pahcer"
        assert record.start_time == "2026-10-18T10:00:00+09:00"

    def test_metadata_comment_wins_over_summary_comment(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        store.save(_record("run-1", comment="mine"))
        write_summary(
            tmp_path / "results" / "run-1",
            make_summary([make_case(0, 10)], comment="theirs"),
        )

        record = store.find_by_id("run-1")

        assert record is not None
        assert record.comment == "mine"

    def test_malformed_summary_falls_back_to_metadata(self, tmp_path: Path) -> None:
        store, observer = _make_store(tmp_path)
        store.save(_record("run-1", total_count=7))
        (tmp_path / "results" / "run-1" / "summary.json").write_text(
            "{not json", encoding="utf-8"
        )

        record = store.find_by_id("run-1")

        assert record is not None
        assert record.total_count == 7
        assert observer.problems[0].kind == "summary"


class TestFindAll:
    def test_missing_results_dir_is_empty(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        assert store.find_all() == []

    def test_sorted_newest_first(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        store.save(_record("old", start_time="2026-01-01T00:00:00+00:00"))
        store.save(_record("new", start_time="2026-03-01T00:00:00+00:00"))
        store.save(_record("mid", start_time="2026-02-01T00:00:00+00:00"))

        assert [r.id for r in store.find_all()] == ["new", "mid", "old"]

    def test_skips_empty_and_stray_entries(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        store.save(_record("real"))
        (tmp_path / "results" / "hollow").mkdir()
        (tmp_path / "results" / "notes.txt").write_text("x", encoding="utf-8")

        assert [r.id for r in store.find_all()] == ["real"]


class TestUpdates:
    def test_update_status_persists(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        store.save(_record("run-1", status=RunStatus.RUNNING))

        store.update_status("run-1", RunStatus.CANCELLED)

        record = store.load_metadata("run-1")
        assert record is not None
        assert record.status is RunStatus.CANCELLED

    def test_update_status_of_missing_run_is_skipped(self, tmp_path: Path) -> None:
        store, observer = _make_store(tmp_path)

        store.update_status("gone", RunStatus.FAILED)

        assert observer.skipped[0].run_id == "gone"
        assert not (tmp_path / "results" / "gone").exists()

    def test_update_progress_creates_running_record(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)

        store.update_progress("fresh", comment="warmup", total_count=5)

        record = store.load_metadata("fresh")
        assert record is not None
        assert record.status is RunStatus.RUNNING
        assert record.comment == "warmup"
        assert record.total_count == 5
        assert record.start_time is not None

    def test_update_progress_merges_into_existing(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        store.save(_record("run-1", status=RunStatus.IDLE, comment="keep"))

        store.update_progress("run-1", total_count=42)

        record = store.load_metadata("run-1")
        assert record is not None
        assert record.comment == "keep"
        assert record.total_count == 42
        assert record.status is RunStatus.IDLE


class TestDelete:
    def test_removes_directory(self, tmp_path: Path) -> None:
        store, observer = _make_store(tmp_path)
        store.save(_record("run-1"))

        store.delete("run-1")

        assert not (tmp_path / "results" / "run-1").exists()
        with pytest.raises(RunNotFoundError):
            store.find_by_id("run-1")
        assert observer.deleted == ["run-1"]

    def test_missing_run_is_not_an_error(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        store.delete("never-existed")


class TestCaseProjections:
    def test_cases_carry_relative_scores(self, tmp_path: Path) -> None:
        store, _ = _make_store(
            tmp_path, best_scores={0: 200, 1: 100}, objective=Objective.MAXIMIZE
        )
        write_summary(
            tmp_path / "results" / "run-1",
            make_summary(
                [
                    make_case(0, 100, execution_time=0.2),
                    make_case(1, 0, error_message="WA"),
                    make_case(2, 50),
                ]
            ),
        )

        cases = store.find_test_cases_by_run_id("run-1")

        assert [c.seed for c in cases] == [0, 1, 2]
        assert cases[0].relative_score == pytest.approx(0.5)
        assert cases[0].execution_time == pytest.approx(200.0)
        assert cases[0].status == "completed"
        assert cases[1].status == "failed"
        assert cases[1].relative_score is None
        assert cases[2].relative_score is None

    def test_cases_of_run_without_summary_is_empty(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        store.save(_record("run-1"))

        assert store.find_test_cases_by_run_id("run-1") == []

    def test_case_output_is_read_from_padded_file(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        run_dir = tmp_path / "results" / "run-1"
        write_summary(run_dir, make_summary([make_case(7, 10)]))
        (run_dir / "case_outputs").mkdir()
        (run_dir / "case_outputs" / "0007.txt").write_text("3\n1 2 3\n", encoding="utf-8")

        assert store.find_test_case_result("run-1", 7) == "3\n1 2 3\n"

    def test_case_output_for_unknown_seed_is_none(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        write_summary(tmp_path / "results" / "run-1", make_summary([make_case(7, 10)]))

        assert store.find_test_case_result("run-1", 8) is None

    def test_case_output_with_missing_file_is_none(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path)
        write_summary(tmp_path / "results" / "run-1", make_summary([make_case(7, 10)]))

        assert store.find_test_case_result("run-1", 7) is None
