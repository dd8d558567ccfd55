"""RunStatus: the lifecycle state machine of a single run."""

from enum import StrEnum


class RunStatus(StrEnum):
    """Idle -> Running -> {Completed, Failed, Cancelled}.

    Values are the upper-case strings stored in execution_info.json.
    """

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def can_transition_to(self, target: "RunStatus") -> bool:
        return target in _ALLOWED_TRANSITIONS[self]


TERMINAL_STATUSES: frozenset[RunStatus] = frozenset(
    {RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED}
)

# IDLE -> FAILED covers a run that dies before its process is spawned.
_ALLOWED_TRANSITIONS: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.IDLE: frozenset({RunStatus.RUNNING, RunStatus.FAILED}),
    RunStatus.RUNNING: TERMINAL_STATUSES,
    RunStatus.COMPLETED: frozenset(),
    RunStatus.FAILED: frozenset(),
    RunStatus.CANCELLED: frozenset(),
}
