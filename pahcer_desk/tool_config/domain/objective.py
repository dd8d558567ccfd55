"""Objective direction and the relative-score formula that depends on it."""

from enum import StrEnum


class Objective(StrEnum):
    """Whether higher or lower raw scores are better.

    Values match the ``problem.objective`` strings written by pahcer.
    """

    MAXIMIZE = "Max"
    MINIMIZE = "Min"

    @classmethod
    def parse(cls, value: object) -> "Objective":
        """Return the matching Objective, defaulting to MAXIMIZE for anything unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.MAXIMIZE


def relative_score(score: float, best: float, objective: Objective) -> float:
    """Normalise ``score`` against ``best`` for the given objective.

    Returns 0.0 whenever either input is <= 0; the tool writes 0 or negative
    scores for failed cases.
    """
    if score <= 0 or best <= 0:
        return 0.0
    if objective is Objective.MINIMIZE:
        return best / score
    return score / best
