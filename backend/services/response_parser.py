"""Turn free-text model output into a validated EvaluationResult."""

import json
import logging

from pydantic import ValidationError

from models.responses import EvaluationResult, OracleEvaluation
from services.exceptions import ResponseParseError

logger = logging.getLogger(__name__)

FENCE = "```"


def strip_code_fences(text: str) -> str:
    """Drop markdown fence lines (```json, ```) when the text starts with one."""
    text = text.strip()
    if text.startswith(FENCE):
        lines = text.split("\n")
        text = "\n".join(line for line in lines if not line.strip().startswith(FENCE))
    return text.strip()


def parse_evaluation(raw_text: str, candidate_name: str) -> EvaluationResult:
    """Parse the model's response for one candidate.

    Raises ResponseParseError if the text is not a JSON object or does not
    validate against OracleEvaluation.
    """
    text = strip_code_fences(raw_text or "")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Response is not valid JSON: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")

    try:
        evaluation = OracleEvaluation.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(
            f"Response does not match the evaluation schema: {e.error_count()} error(s)",
            cause=e,
        ) from e

    return EvaluationResult(**evaluation.model_dump(), candidate_name=candidate_name)
