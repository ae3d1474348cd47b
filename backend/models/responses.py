import math
from enum import Enum

from pydantic import BaseModel, field_validator


class Recommendation(str, Enum):
    STRONG_MATCH = "STRONG_MATCH"
    GOOD_MATCH = "GOOD_MATCH"
    MODERATE_MATCH = "MODERATE_MATCH"
    WEAK_MATCH = "WEAK_MATCH"
    NO_MATCH = "NO_MATCH"


def _clamp_score(value) -> int:
    """Coerce a model-supplied score into an int in [0, 100]."""
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"score must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ValueError("score must be finite")
    return max(0, min(100, int(round(number))))


def _empty_if_null(value, empty):
    # Models sometimes answer null for "nothing found"
    return empty if value is None else value


class _Scored(BaseModel):
    score: int = 0

    @field_validator("score", mode="before")
    @classmethod
    def _score_in_range(cls, v):
        return _clamp_score(v)


class SkillsMatch(_Scored):
    matched_skills: list[str] = []
    missing_skills: list[str] = []

    @field_validator("matched_skills", "missing_skills", mode="before")
    @classmethod
    def _null_lists(cls, v):
        return _empty_if_null(v, [])


class SectionMatch(_Scored):
    """Experience or education fit: a score plus a short summary."""
    summary: str = ""

    @field_validator("summary", mode="before")
    @classmethod
    def _null_summary(cls, v):
        return _empty_if_null(v, "")


class CertificationsMatch(_Scored):
    found: list[str] = []
    recommended: list[str] = []

    @field_validator("found", "recommended", mode="before")
    @classmethod
    def _null_lists(cls, v):
        return _empty_if_null(v, [])


class OracleEvaluation(BaseModel):
    """The JSON object the model is asked to return for one candidate."""
    overall_score: int
    skills_match: SkillsMatch | None = None
    experience_match: SectionMatch | None = None
    education_match: SectionMatch | None = None
    certifications: CertificationsMatch | None = None
    strengths: list[str] = []
    weaknesses: list[str] = []
    overall_assessment: str = ""
    recommendation: Recommendation

    @field_validator("overall_score", mode="before")
    @classmethod
    def _overall_in_range(cls, v):
        return _clamp_score(v)

    @field_validator("strengths", "weaknesses", mode="before")
    @classmethod
    def _null_lists(cls, v):
        return _empty_if_null(v, [])

    @field_validator("overall_assessment", mode="before")
    @classmethod
    def _null_assessment(cls, v):
        return _empty_if_null(v, "")

    @field_validator("recommendation", mode="before")
    @classmethod
    def _normalize_recommendation(cls, v):
        if isinstance(v, str):
            return v.strip().upper().replace(" ", "_").replace("-", "_")
        return v


class EvaluationResult(OracleEvaluation):
    candidate_name: str = "Unknown"
    rank: int | None = None
    error: str | None = None


class BatchResponse(BaseModel):
    total_candidates: int
    job_description_preview: str
    evaluations: list[EvaluationResult] = []
