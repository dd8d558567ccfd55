"""Observer port for the scoring domain."""

from typing import Protocol


class ScoringObserver(Protocol):
    def relative_scores_recomputed(self, updated: int, total: int) -> None: ...

    def run_relative_score_updated(
        self, run_id: str, previous: float, current: float
    ) -> None: ...
