"""Structlog implementation of the ScoringObserver port."""

import structlog


class StructlogScoringObserver:
    """Delegates scoring events to structlog.

    Satisfies the ScoringObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def relative_scores_recomputed(self, updated: int, total: int) -> None:
        self._log.info("scoring.relative_scores_recomputed", updated=updated, total=total)

    def run_relative_score_updated(
        self, run_id: str, previous: float, current: float
    ) -> None:
        self._log.debug(
            "scoring.run_relative_score_updated",
            run_id=run_id,
            previous=round(previous, 6),
            current=round(current, 6),
        )
