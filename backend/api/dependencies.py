"""Shared dependencies for API routes."""

from functools import lru_cache

from fastapi import Depends

from config import settings
from services.evaluator import ResumeEvaluator
from services.gemini_client import Oracle, build_oracle


@lru_cache
def get_oracle() -> Oracle:
    """One Gemini client per process. A missing key raises and is not cached."""
    return build_oracle(settings)


def get_evaluator(oracle: Oracle = Depends(get_oracle)) -> ResumeEvaluator:
    return ResumeEvaluator(
        oracle,
        max_concurrency=settings.max_concurrent_evaluations,
        preview_chars=settings.job_description_preview_chars,
    )
