"""ScoreReference Protocol: where best scores and the objective come from."""

from typing import Protocol

from pahcer_desk.tool_config.domain.objective import Objective


class ScoreReference(Protocol):
    def best_scores(self) -> dict[int, float]: ...

    def objective(self) -> Objective: ...
