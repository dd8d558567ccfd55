"""Error types raised by results infrastructure."""

from pahcer_desk.core.errors import PahcerDeskError


class RunNotFoundError(PahcerDeskError):
    """Raised when a run id has no result directory."""

    def __init__(self, run_id: str) -> None:
        self.run_id = run_id
        super().__init__(f"Failed to find run: no result directory for '{run_id}'")


class RunRecordValidationError(PahcerDeskError):
    """Raised when a record handed to save() does not pass schema validation."""

    def __init__(self, run_id: str, reason: str) -> None:
        super().__init__(f"Failed to save run '{run_id}': invalid record: {reason}")
