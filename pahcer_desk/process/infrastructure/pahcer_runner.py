"""PahcerProcessRunner: spawns the scoring tool for one run and collects its artifacts."""

import asyncio
import os
import shutil
import signal
import time
from collections.abc import AsyncIterator, Callable
from pathlib import Path

from pahcer_desk.execution.domain.request import RunRequest
from pahcer_desk.process.domain.observer import ProcessObserver
from pahcer_desk.process.domain.result import ProcessResult
from pahcer_desk.process.infrastructure.errors import ScratchBackupError
from pahcer_desk.process.infrastructure.scratch import ScratchDirectory
from pahcer_desk.results.domain.repository import RunRepository
from pahcer_desk.results.infrastructure import layout
from pahcer_desk.results.infrastructure.errors import RunRecordValidationError

type LogSink = Callable[[str], None]

# Output is read in fixed-size chunks and split on newlines here, so a line of
# any length is accepted.
_READ_CHUNK = 64 * 1024
# Lines of trailing output quoted in the error message of a failed run.
_ERROR_TAIL_LINES = 20
# pahcer runs the solution in child processes; on POSIX the whole group is
# killed so none of them outlives a stop.
_HAS_PROCESS_GROUPS = hasattr(os, "killpg")


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").rstrip("\r")


async def _read_lines(stream: asyncio.StreamReader) -> AsyncIterator[str]:
    """Yield every line of ``stream``, including an unterminated last one."""
    pending = bytearray()
    while chunk := await stream.read(_READ_CHUNK):
        pending.extend(chunk)
        *complete, rest = pending.split(b"\n")
        for raw in complete:
            yield _decode(raw)
        pending = bytearray(rest)
    if pending:
        yield _decode(bytes(pending))


def _signal_group(process: asyncio.subprocess.Process) -> bool:
    """SIGKILL the process (and its group on POSIX); False if it had already gone."""
    try:
        if _HAS_PROCESS_GROUPS:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        return False
    return True


class PahcerProcessRunner:
    """Runs ``pahcer run`` as a subprocess, streaming its output line by line.

    Seed range and case count travel through the config file (see ConfigGuard);
    only comment, shuffle and freeze-best-scores become command-line flags.

    The active-process table maps run ids to live subprocesses. It is only
    touched from the event loop thread and never across an ``await``, so the
    lookup-then-kill in kill() cannot interleave with execute() removing an
    exited process.

    execute() never returns while the process it spawned is still alive: if
    reading its output fails or the calling task is cancelled, the process
    group is killed and reaped before the exception propagates.
    """

    def __init__(
        self,
        tool_command: list[str],
        working_dir: Path,
        summary_dir: Path,
        scratch: ScratchDirectory,
        store: RunRepository,
        observer: ProcessObserver,
        case_output_width: int = 4,
    ) -> None:
        self._tool_command = tool_command
        self._working_dir = working_dir
        self._summary_dir = summary_dir
        self._scratch = scratch
        self._store = store
        self._observer = observer
        self._case_output_width = case_output_width
        self._active: dict[str, asyncio.subprocess.Process] = {}

    def build_command(self, request: RunRequest) -> list[str]:
        cmd = list(self._tool_command)
        if request.comment:
            cmd.extend(["-c", request.comment])
        if request.shuffle:
            cmd.append("--shuffle")
        if request.freeze_best_scores:
            cmd.append("--freeze-best-scores")
        return cmd

    def is_running(self, run_id: str) -> bool:
        return run_id in self._active

    def active_run_ids(self) -> list[str]:
        return list(self._active)

    async def execute(
        self, request: RunRequest, run_id: str, on_log_line: LogSink
    ) -> ProcessResult:
        """Run the tool once for ``run_id`` and copy its artifacts into the run directory.

        Spawn failures, non-zero exits and artifact problems are all reported in
        the returned ProcessResult; this method does not raise for them.
        """
        started = time.monotonic()
        try:
            self._store.update_progress(
                run_id,
                comment=request.comment,
                total_count=request.test_case_count,
            )
        except (OSError, RunRecordValidationError) as exc:
            return self._setup_failure(
                started, f"Failed to create run directory or initial info: {exc}"
            )

        try:
            with self._scratch.preserved(run_id):
                return await self._run_tool(request, run_id, on_log_line, started)
        except ScratchBackupError as exc:
            return self._setup_failure(started, str(exc))

    def kill(self, run_id: str) -> bool:
        """Terminate the live process of ``run_id``; False if there is none."""
        process = self._active.pop(run_id, None)
        if process is None:
            return False
        if not _signal_group(process):
            # Exited between its last read and now; nothing left to kill.
            return False
        self._observer.process_killed(run_id=run_id)
        return True

    async def _run_tool(
        self,
        request: RunRequest,
        run_id: str,
        on_log_line: LogSink,
        started: float,
    ) -> ProcessResult:
        cmd = self.build_command(request)
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=self._working_dir,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                start_new_session=_HAS_PROCESS_GROUPS,
            )
        except OSError as exc:
            self._observer.process_spawn_failed(run_id=run_id, reason=str(exc))
            return ProcessResult(
                success=False,
                exit_code=None,
                output="",
                elapsed_seconds=time.monotonic() - started,
                error_message=f"Failed to start {cmd[0]}: {exc}",
            )

        self._active[run_id] = process
        self._observer.process_spawned(run_id=run_id, command=cmd, pid=process.pid)

        output: list[str] = []
        try:
            assert process.stdout is not None  # guaranteed by stdout=PIPE
            async for line in _read_lines(process.stdout):
                output.append(line)
                if line.strip():
                    on_log_line(line)
            exit_code = await process.wait()
        finally:
            if self._active.get(run_id) is process:
                del self._active[run_id]
            if process.returncode is None:
                if _signal_group(process):
                    self._observer.process_killed(run_id=run_id)
                await process.wait()

        elapsed = time.monotonic() - started
        self._observer.process_exited(
            run_id=run_id, exit_code=exit_code, elapsed_seconds=elapsed
        )

        if exit_code != 0:
            tail = "\n".join(line for line in output[-_ERROR_TAIL_LINES:] if line.strip())
            return ProcessResult(
                success=False,
                exit_code=exit_code,
                output="\n".join(output),
                elapsed_seconds=elapsed,
                error_message=tail or f"Process exited with code {exit_code}",
            )

        return ProcessResult(
            success=True,
            exit_code=exit_code,
            output="\n".join(output),
            elapsed_seconds=elapsed,
            artifact_warnings=self._collect_artifacts(run_id),
        )

    def _collect_artifacts(self, run_id: str) -> list[str]:
        """Copy the newest summary and every per-case output into the run directory.

        Nothing is copied once the run directory is gone (deleted while the
        tool was running); it is never recreated here.
        """
        warnings: list[str] = []
        run_dir = self._store.run_dir(run_id)
        if not run_dir.is_dir():
            warnings.append(f"Run directory {run_dir} no longer exists")
            self._observer.artifact_copy_failed(run_id=run_id, reason=warnings[0])
            return warnings

        try:
            summaries = sorted(
                self._summary_dir.glob("*.json"),
                key=lambda p: p.stat().st_mtime,
                reverse=True,
            )
            if summaries:
                shutil.copyfile(summaries[0], run_dir / layout.SUMMARY_FILENAME)
            else:
                warnings.append(f"No summary found in {self._summary_dir}")
        except OSError as exc:
            warnings.append(f"Could not save summary.json: {exc}")

        scratch_dir = self._scratch.path
        if scratch_dir.is_dir():
            case_dir = run_dir / layout.CASE_OUTPUTS_DIRNAME
            try:
                case_dir.mkdir(exist_ok=True)
                for source in scratch_dir.glob("*.txt"):
                    try:
                        seed = int(source.stem)
                    except ValueError:
                        continue
                    shutil.copyfile(
                        source,
                        case_dir / layout.case_output_name(seed, self._case_output_width),
                    )
            except OSError as exc:
                warnings.append(f"Could not save case outputs: {exc}")

        for warning in warnings:
            self._observer.artifact_copy_failed(run_id=run_id, reason=warning)
        return warnings

    def _setup_failure(self, started: float, message: str) -> ProcessResult:
        return ProcessResult(
            success=False,
            exit_code=None,
            output="",
            elapsed_seconds=time.monotonic() - started,
            error_message=message,
        )
