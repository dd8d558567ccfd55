"""Error types raised by process infrastructure."""

from pathlib import Path

from pahcer_desk.core.errors import PahcerDeskError


class ScratchBackupError(PahcerDeskError):
    """Raised when the tool's scratch directory cannot be moved aside before a run."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to back up scratch directory {path}: {reason}")
