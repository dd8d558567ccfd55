"""RunRecord: the persisted, observable state of one run."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pahcer_desk.execution.domain.status import RunStatus

type RunId = str


class RunRecord(BaseModel, frozen=True):
    """Immutable snapshot of a run; updates produce a new instance via model_copy.

    Serialised with camelCase keys (``startTime``, ``averageRelativeScore``)
    so execution_info.json stays readable by the other tools that share the
    results directory. max_execution_time is in milliseconds.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: RunId = Field(min_length=1)
    status: RunStatus
    start_time: str | None = None
    comment: str | None = None
    average_score: float | None = 0.0
    average_relative_score: float | None = 0.0
    accepted_count: int | None = None
    total_count: int | None = None
    max_execution_time: float | None = None

    def started_at(self) -> float:
        """Start time as a POSIX timestamp; missing or unparseable sorts as epoch 0."""
        if not self.start_time:
            return 0.0
        try:
            return datetime.fromisoformat(self.start_time).timestamp()
        except ValueError:
            return 0.0
