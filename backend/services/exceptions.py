"""Error taxonomy for candidate evaluation.

Everything below ``EvaluationError`` is caught per candidate by the evaluator
and turned into a degraded record. ``OracleConfigurationError`` is the odd one
out: it is raised while wiring the service and surfaces to the caller.
"""


class EvaluationError(Exception):
    """Base class for failures scoped to a single candidate."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class UnsupportedFormatError(EvaluationError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"Unsupported file format: {filename}. Please upload PDF, DOCX, or TXT files."
        )


class ExtractionError(EvaluationError):
    """The underlying PDF/DOCX decoder failed."""


class EmptyTextError(EvaluationError):
    """Extraction succeeded but produced no text."""


class OracleInvocationError(EvaluationError):
    """Transport, auth, quota or timeout failure talking to the model."""


class ResponseParseError(EvaluationError):
    """The model answered, but not with a usable JSON evaluation."""


class OracleConfigurationError(Exception):
    """The oracle client cannot be built (e.g. no API key)."""
