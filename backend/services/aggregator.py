from models.responses import BatchResponse, EvaluationResult

ELLIPSIS = "..."


def preview_job_description(job_description: str, limit: int = 200) -> str:
    """Return the description unchanged if short enough, else its first `limit` chars + '...'."""
    if len(job_description) <= limit:
        return job_description
    return job_description[:limit] + ELLIPSIS


def build_batch_response(
    ranked: list[EvaluationResult],
    job_description: str,
    total: int,
    preview_chars: int = 200,
) -> BatchResponse:
    return BatchResponse(
        total_candidates=total,
        job_description_preview=preview_job_description(job_description, preview_chars),
        evaluations=ranked,
    )
