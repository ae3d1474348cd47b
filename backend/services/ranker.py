from models.responses import EvaluationResult


def rank_evaluations(results: list[EvaluationResult]) -> list[EvaluationResult]:
    """Order results by overall_score (highest first) and assign 1-based ranks.

    Ties keep their submission order; ``sorted`` is stable.
    """
    ordered = sorted(results, key=lambda r: -(r.overall_score or 0))
    return [r.model_copy(update={"rank": i}) for i, r in enumerate(ordered, start=1)]
