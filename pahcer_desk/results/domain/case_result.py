"""CaseResult: one test case as shown to the operator, with its relative score."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

type CaseStatus = Literal["waiting", "running", "completed", "failed"]


class CaseResult(BaseModel, frozen=True):
    """relative_score is None when the case has no positive score or no best score."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    seed: int
    score: float | None
    relative_score: float | None
    status: CaseStatus
    execution_time: float | None
