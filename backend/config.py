import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.3
    gemini_max_output_tokens: int = 4096

    # Request limits
    max_resumes: int = 20
    max_upload_size_mb: int = 5
    max_job_description_chars: int = 10000
    job_description_preview_chars: int = 200

    # Oracle call policy (per candidate)
    evaluation_timeout_seconds: float = 60.0
    evaluation_max_attempts: int = 3
    evaluation_retry_backoff_seconds: float = 0.5
    max_concurrent_evaluations: int = 20

    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://localhost:8000",
    ]
    debug: bool = False
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
