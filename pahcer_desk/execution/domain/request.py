"""RunRequest: what the operator asked for when starting a run."""

from pydantic import BaseModel, Field


class RunRequest(BaseModel, frozen=True):
    """Immutable once accepted.

    test_case_count and start_seed reach the tool through the config file;
    the remaining fields become command-line flags.
    """

    comment: str | None = None
    shuffle: bool = False
    freeze_best_scores: bool = False
    test_case_count: int = Field(default=100, ge=1)
    start_seed: int = Field(default=0, ge=0)

    @property
    def end_seed(self) -> int:
        return self.start_seed + self.test_case_count
