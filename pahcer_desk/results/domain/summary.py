"""SummaryArtifact: pahcer's own report of a run; every field is optional."""

from pydantic import BaseModel, ConfigDict, Field


class SummaryCase(BaseModel, frozen=True):
    """One test case as pahcer wrote it. execution_time is in seconds."""

    model_config = ConfigDict(extra="ignore")

    seed: int
    score: float | None = None
    relative_score: float | None = None
    execution_time: float = 0.0
    error_message: str | None = None

    @property
    def failed(self) -> bool:
        return bool(self.error_message)


class SummaryArtifact(BaseModel, frozen=True):
    """summary.json: run-level aggregates (all optional) plus the per-case list."""

    model_config = ConfigDict(extra="ignore")

    start_time: str | None = None
    case_count: int | None = None
    total_score: float | None = None
    total_relative_score: float | None = None
    max_execution_time: float | None = None
    comment: str | None = None
    wa_seeds: list[int] = Field(default_factory=list)
    cases: list[SummaryCase] = Field(default_factory=list)
