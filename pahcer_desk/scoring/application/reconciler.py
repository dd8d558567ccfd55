"""ScoreReconciler: derives run statistics and keeps relative scores current."""

import math

from pahcer_desk.results.domain.case_result import CaseResult
from pahcer_desk.results.domain.repository import RunRepository
from pahcer_desk.results.domain.summary import SummaryArtifact, SummaryCase
from pahcer_desk.scoring.domain.observer import ScoringObserver
from pahcer_desk.scoring.domain.reference import ScoreReference
from pahcer_desk.scoring.domain.stats import RunStats
from pahcer_desk.tool_config.domain.objective import Objective, relative_score

# Stored averages closer than this to the recomputed value are left untouched.
RELATIVE_SCORE_EPSILON = 0.001


def _finite(value: float) -> float:
    return 0.0 if math.isnan(value) else value


def _case_relative_score(
    case: SummaryCase, best_scores: dict[int, float], objective: Objective
) -> float | None:
    """Relative score of one case, or None unless it has a positive score and a best."""
    best = best_scores.get(case.seed)
    if case.score is None or case.score <= 0 or best is None:
        return None
    return relative_score(case.score, best, objective)


def average_relative_score(
    cases: list[SummaryCase],
    best_scores: dict[int, float],
    objective: Objective,
) -> float:
    """Mean relative score over the cases that qualify; 0.0 if none do."""
    values = [
        value
        for case in cases
        if (value := _case_relative_score(case, best_scores, objective)) is not None
    ]
    if not values:
        return 0.0
    return _finite(sum(values) / len(values))


class ScoreReconciler:
    """Computes aggregates from summaries and recomputes relative scores across history.

    Best scores change whenever a run beats a previous best, so relative scores
    of older runs go stale; recompute_all() brings them back in line.
    """

    def __init__(self, reference: ScoreReference, observer: ScoringObserver) -> None:
        self._reference = reference
        self._observer = observer

    def compute_stats(self, summary: SummaryArtifact) -> RunStats:
        """Derive aggregate statistics for one run from its summary artifact."""
        total = (
            summary.case_count if summary.case_count is not None else len(summary.cases)
        )
        failed_seeds = set(summary.wa_seeds)
        failed_seeds.update(case.seed for case in summary.cases if case.failed)
        accepted = max(total - len(failed_seeds), 0)

        if summary.total_score is not None:
            total_score = summary.total_score
        else:
            total_score = sum(c.score for c in summary.cases if c.score is not None)
        average_score = _finite(total_score / total) if total > 0 else 0.0

        average_relative = 0.0
        if total > 0 and summary.cases:
            average_relative = average_relative_score(
                cases=summary.cases,
                best_scores=self._reference.best_scores(),
                objective=self._reference.objective(),
            )

        if summary.max_execution_time is not None:
            max_seconds = summary.max_execution_time
        else:
            max_seconds = max((c.execution_time for c in summary.cases), default=0.0)

        return RunStats(
            total_count=total,
            accepted_count=accepted,
            average_score=average_score,
            average_relative_score=average_relative,
            max_execution_time=_finite(max_seconds * 1000),
        )

    def enrich_cases(self, cases: list[SummaryCase]) -> list[CaseResult]:
        """Attach relative scores to every case, loading the reference data once."""
        best_scores = self._reference.best_scores()
        objective = self._reference.objective()
        return [self._enrich(case, best_scores, objective) for case in cases]

    def enrich_case(self, case: SummaryCase) -> CaseResult:
        return self._enrich(
            case, self._reference.best_scores(), self._reference.objective()
        )

    def recompute_all(self, store: RunRepository) -> int:
        """Recompute every run's average relative score; return how many were rewritten.

        Only runs whose persisted value moved by more than RELATIVE_SCORE_EPSILON
        are saved, so a second pass over unchanged data writes nothing.
        """
        best_scores = self._reference.best_scores()
        objective = self._reference.objective()

        records = store.find_all()
        updated = 0
        for record in records:
            summary = store.load_summary(record.id)
            if summary is None or not summary.cases:
                continue

            current = average_relative_score(summary.cases, best_scores, objective)
            persisted = store.load_metadata(record.id)
            previous = (
                persisted.average_relative_score
                if persisted is not None and persisted.average_relative_score is not None
                else 0.0
            )
            if abs(current - previous) <= RELATIVE_SCORE_EPSILON:
                continue

            store.save(record.model_copy(update={"average_relative_score": current}))
            self._observer.run_relative_score_updated(
                run_id=record.id, previous=previous, current=current
            )
            updated += 1

        self._observer.relative_scores_recomputed(updated=updated, total=len(records))
        return updated

    def _enrich(
        self,
        case: SummaryCase,
        best_scores: dict[int, float],
        objective: Objective,
    ) -> CaseResult:
        return CaseResult(
            seed=case.seed,
            score=case.score,
            relative_score=_case_relative_score(case, best_scores, objective),
            status="failed" if case.failed else "completed",
            execution_time=case.execution_time * 1000,
        )
