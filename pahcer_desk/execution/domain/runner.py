"""ProcessRunner Protocol: what the orchestrator needs from a tool runner."""

from collections.abc import Callable
from typing import Protocol

from pahcer_desk.execution.domain.request import RunRequest
from pahcer_desk.process.domain.result import ProcessResult


class ProcessRunner(Protocol):
    async def execute(
        self, request: RunRequest, run_id: str, on_log_line: Callable[[str], None]
    ) -> ProcessResult: ...

    def kill(self, run_id: str) -> bool: ...

    def active_run_ids(self) -> list[str]: ...
