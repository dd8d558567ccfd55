"""Base exception class for all pahcer-desk-specific errors."""


class PahcerDeskError(Exception):
    """Base class for all pahcer-desk errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
