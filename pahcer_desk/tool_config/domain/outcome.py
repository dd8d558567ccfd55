"""GuardOutcome: the result of a best-effort config file operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GuardOutcome:
    """Success flag plus a human-readable diagnostic.

    Config backup, mutation and restore never raise; callers inspect
    ``succeeded`` and log ``message`` as a warning when it is False.
    """

    succeeded: bool
    message: str

    @classmethod
    def ok(cls, message: str) -> "GuardOutcome":
        return cls(succeeded=True, message=message)

    @classmethod
    def failed(cls, message: str) -> "GuardOutcome":
        return cls(succeeded=False, message=message)
