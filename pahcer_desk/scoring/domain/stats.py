"""RunStats: aggregates derived from a summary artifact."""

from pydantic import BaseModel


class RunStats(BaseModel, frozen=True):
    """All values are finite; NaN is normalised to 0. max_execution_time is in ms."""

    total_count: int
    accepted_count: int
    average_score: float
    average_relative_score: float
    max_execution_time: float
