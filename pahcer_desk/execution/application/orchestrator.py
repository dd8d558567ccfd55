"""RunOrchestrator: drives runs of the scoring tool from request to terminal status."""

import asyncio
import uuid
from datetime import datetime
from functools import partial

from pahcer_desk.core.errors import PahcerDeskError
from pahcer_desk.execution.domain.config_guard import ConfigBracket
from pahcer_desk.execution.domain.observer import LogLevel, RunObserver
from pahcer_desk.execution.domain.record import RunRecord
from pahcer_desk.execution.domain.request import RunRequest
from pahcer_desk.execution.domain.runner import ProcessRunner
from pahcer_desk.execution.domain.status import RunStatus
from pahcer_desk.execution.infrastructure.broadcast_observer import (
    BroadcastRunObserver,
)
from pahcer_desk.process.domain.result import ProcessResult
from pahcer_desk.results.domain.case_result import CaseResult
from pahcer_desk.results.domain.repository import RunRepository
from pahcer_desk.scoring.application.reconciler import ScoreReconciler


def _now() -> str:
    return datetime.now().astimezone().isoformat()


class RunOrchestrator:
    """Accepts run requests and owns every status transition of a run.

    Runs are serialised: a single asyncio.Lock is held across the whole
    config backup -> mutate -> spawn -> restore bracket, because the config file
    and the tool's scratch directory are shared by every run. Further start()
    calls are accepted immediately and wait their turn in IDLE.
    """

    def __init__(
        self,
        config: ConfigBracket,
        runner: ProcessRunner,
        store: RunRepository,
        reconciler: ScoreReconciler,
        observer: BroadcastRunObserver,
    ) -> None:
        self._config = config
        self._runner = runner
        self._store = store
        self._reconciler = reconciler
        self._observer = observer
        self._statuses: dict[str, RunStatus] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._deleted: set[str] = set()
        # Set by shutdown(); runs still queued behind the lock never spawn.
        self._closing = False
        self._bracket_lock = asyncio.Lock()
        # Whether the bracket currently open took a fresh config backup.
        self._bracket_backed_up = False

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def subscribe(self, observer: RunObserver) -> None:
        self._observer.subscribe(observer)

    def unsubscribe(self, observer: RunObserver) -> None:
        self._observer.unsubscribe(observer)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start(self, request: RunRequest) -> str:
        """Accept ``request`` and return its run id without waiting for the run."""
        run_id = str(uuid.uuid4())
        record = RunRecord(
            id=run_id,
            status=RunStatus.IDLE,
            start_time=_now(),
            comment=request.comment,
            average_score=0.0,
            average_relative_score=0.0,
            total_count=request.test_case_count,
        )
        self._store.save(record)
        self._statuses[run_id] = RunStatus.IDLE
        self._observer.run_status_changed(
            run_id=run_id, status=RunStatus.IDLE, record=record
        )

        task = asyncio.create_task(self._run(run_id, request), name=f"run-{run_id}")
        self._tasks[run_id] = task
        task.add_done_callback(lambda _task: self._tasks.pop(run_id, None))
        return run_id

    async def stop(self, run_id: str) -> bool:
        """Kill the live process of ``run_id`` and mark it CANCELLED.

        Returns False, changing nothing, when no live process is tracked for it.
        """
        if not self._runner.kill(run_id):
            return False
        self._emit_log(run_id, "info", "pahcer process killed by user.")
        self._restore_config(run_id, when=" after stop")
        self._transition(run_id, RunStatus.CANCELLED)
        return True

    async def delete(self, run_id: str) -> None:
        """Kill any live process of ``run_id`` and remove everything stored for it."""
        self._runner.kill(run_id)
        self._deleted.add(run_id)
        self._statuses.pop(run_id, None)
        self._store.delete(run_id)
        self._emit_log(run_id, "info", "Run data deleted.")

    async def wait(self, run_id: str) -> None:
        """Wait until the background task of ``run_id`` (if any) has finished."""
        task = self._tasks.get(run_id)
        if task is not None:
            await asyncio.wait({task})

    async def shutdown(self) -> None:
        """Stop every live run, fail every queued one, and wait for all run tasks.

        Runs still waiting for their turn are moved to FAILED without their
        process ever being spawned.
        """
        self._closing = True
        for run_id in self._runner.active_run_ids():
            await self.stop(run_id)
        if self._tasks:
            await asyncio.wait(set(self._tasks.values()))

    def recompute_relative_scores(self) -> int:
        return self._reconciler.recompute_all(self._store)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def status(self, run_id: str) -> RunStatus | None:
        """In-memory status of a run started by this orchestrator."""
        return self._statuses.get(run_id)

    def get(self, run_id: str) -> RunRecord | None:
        """Raises RunNotFoundError if the run has no result directory."""
        return self._store.find_by_id(run_id)

    def list_runs(self) -> list[RunRecord]:
        return self._store.find_all()

    def test_cases(self, run_id: str) -> list[CaseResult]:
        return self._store.find_test_cases_by_run_id(run_id)

    def test_case_output(self, run_id: str, seed: int) -> str | None:
        return self._store.find_test_case_result(run_id, seed)

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    async def _run(self, run_id: str, request: RunRequest) -> None:
        """Background task of one run. Nothing raised in here escapes the task."""
        try:
            async with self._bracket_lock:
                if run_id in self._deleted:
                    return
                if self._closing:
                    self._emit_log(run_id, "warn", "Run not started: shutting down.")
                    self._transition(run_id, RunStatus.FAILED)
                    return
                result = await self._run_bracketed(run_id, request)
            self._finalize(run_id, result)
        except Exception as exc:
            self._emit_log(run_id, "error", f"pahcer execution error: {exc}")
            self._restore_config(run_id, when=" after error")
            self._transition(run_id, RunStatus.FAILED)

    async def _run_bracketed(self, run_id: str, request: RunRequest) -> ProcessResult:
        try:
            self._prepare_config(run_id, request)
            self._transition(run_id, RunStatus.RUNNING)
            self._emit_log(run_id, "info", f"pahcer test execution started: {run_id}")
            return await self._runner.execute(
                request, run_id, on_log_line=partial(self._emit_log, run_id, "info")
            )
        finally:
            self._restore_config(run_id)
            self._bracket_backed_up = False

    def _prepare_config(self, run_id: str, request: RunRequest) -> None:
        self._emit_log(run_id, "info", "Updating pahcer_config.toml for test execution...")
        backup = self._config.backup()
        self._bracket_backed_up = backup.succeeded
        if not backup.succeeded:
            self._emit_log(run_id, "warn", backup.message)

        applied = self._config.apply_test_window(
            start_seed=request.start_seed, count=request.test_case_count
        )
        if applied.succeeded:
            self._emit_log(run_id, "info", applied.message)
        else:
            self._emit_log(
                run_id, "warn", f"{applied.message}, but continuing execution..."
            )

    def _restore_config(self, run_id: str, when: str = "") -> None:
        if not self._bracket_backed_up:
            return
        self._emit_log(run_id, "info", f"Restoring pahcer_config.toml from backup{when}...")
        outcome = self._config.restore()
        if outcome.succeeded:
            self._emit_log(run_id, "info", "Config restored from backup successfully")
        else:
            self._emit_log(run_id, "warn", outcome.message)

    def _finalize(self, run_id: str, result: ProcessResult) -> None:
        if self._statuses.get(run_id) is not RunStatus.RUNNING:
            # Cancelled or deleted while the process was winding down.
            return

        if not result.success:
            self._emit_log(
                run_id, "error", f"pahcer execution failed: {result.error_message}"
            )
            if self._transition(run_id, RunStatus.FAILED) is not None:
                self._emit_log(run_id, "info", "Final result: Execution failed.")
            return

        for warning in result.artifact_warnings:
            self._emit_log(run_id, "warn", warning)
        self._emit_log(run_id, "info", "pahcer execution completed.")
        record = self._transition(run_id, RunStatus.COMPLETED, reconcile=True)
        if record is not None:
            self._emit_log(
                run_id,
                "info",
                f"Final result: {record.accepted_count}/{record.total_count} cases passed.",
            )

    def _transition(
        self, run_id: str, status: RunStatus, reconcile: bool = False
    ) -> RunRecord | None:
        """Move ``run_id`` to ``status``, persist it, and notify observers.

        Refused (returns None) when the run is unknown, deleted, or the move
        would leave a terminal state. With ``reconcile`` the relative scores of
        the whole history are recomputed before observers hear about the change.

        The status is written to disk before it is taken in memory. If that
        write fails, a move to RUNNING or COMPLETED raises and leaves the
        status where it was; a move to FAILED or CANCELLED is logged and still
        taken and reported.
        """
        current = self._statuses.get(run_id)
        if current is None or not current.can_transition_to(status):
            return None
        try:
            self._store.update_status(run_id, status)
        except (OSError, PahcerDeskError) as exc:
            if status not in (RunStatus.FAILED, RunStatus.CANCELLED):
                raise
            self._emit_log(run_id, "error", f"Failed to save run status {status}: {exc}")
        self._statuses[run_id] = status

        if reconcile:
            self._emit_log(run_id, "info", "Recalculating relative scores for all runs...")
            try:
                updated = self._reconciler.recompute_all(self._store)
            except (OSError, PahcerDeskError) as exc:
                self._emit_log(
                    run_id, "error", f"Relative score recalculation failed: {exc}"
                )
            else:
                self._emit_log(
                    run_id,
                    "info",
                    f"Relative score recalculation completed: {updated} run(s) updated",
                )

        try:
            record = self._store.find_by_id(run_id)
        except (OSError, PahcerDeskError):
            record = None
        if record is None:
            record = RunRecord(id=run_id, status=status)
        elif record.status is not status:
            record = record.model_copy(update={"status": status})

        self._observer.run_status_changed(run_id=run_id, status=status, record=record)
        self._observer.run_progress(run_id=run_id, record=record)
        return record

    def _emit_log(self, run_id: str, level: LogLevel, message: str) -> None:
        self._observer.run_log(
            run_id=run_id, timestamp=_now(), level=level, message=message
        )
