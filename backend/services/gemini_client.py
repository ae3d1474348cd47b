"""Google Gemini API wrapper with timeout and retry handling."""

import asyncio
import logging
from typing import Protocol

from google import genai
from google.genai import errors, types
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from config import Settings
from services.exceptions import OracleConfigurationError, OracleInvocationError

logger = logging.getLogger(__name__)


class Oracle(Protocol):
    """Anything that turns a prompt into free text."""

    async def evaluate(self, prompt: str) -> str: ...


def _retryable(e: BaseException) -> bool:
    # Retry only timeouts, rate limits and server-side failures.
    if isinstance(e, asyncio.TimeoutError):
        return True
    if isinstance(e, errors.ServerError):
        return True
    if isinstance(e, errors.ClientError):
        return e.code in (408, 429)
    return False


class GeminiOracle:
    def __init__(
        self,
        client: genai.Client,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.3,
        max_output_tokens: int = 4096,
        timeout_seconds: float = 60.0,
        max_attempts: int = 3,
        backoff_seconds: float = 0.5,
    ) -> None:
        self._client = client
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds

    async def _generate_once(self, prompt: str) -> str:
        response = await asyncio.wait_for(
            self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            ),
            timeout=self.timeout_seconds,
        )
        return response.text or ""

    async def evaluate(self, prompt: str) -> str:
        """Send a prompt to Gemini and return the raw response text.

        Raises OracleInvocationError once retries are exhausted or on a
        non-transient failure.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, min=self.backoff_seconds, max=8),
            retry=retry_if_exception(_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            text = await retrying(self._generate_once, prompt)
        except asyncio.TimeoutError as e:
            raise OracleInvocationError(
                f"Gemini request timed out after {self.timeout_seconds:g}s", cause=e
            ) from e
        except errors.APIError as e:
            logger.error("Gemini API error: %s", e)
            raise OracleInvocationError(f"Gemini API error: {e}", cause=e) from e
        except Exception as e:
            logger.error("Gemini request failed: %s", e)
            raise OracleInvocationError(str(e) or type(e).__name__, cause=e) from e

        if not text.strip():
            raise OracleInvocationError("Gemini returned an empty response")
        return text.strip()


def build_oracle(settings: Settings) -> GeminiOracle:
    if not settings.gemini_api_key:
        raise OracleConfigurationError("No GEMINI_API_KEY set - evaluation is unavailable")
    return GeminiOracle(
        client=genai.Client(api_key=settings.gemini_api_key),
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        max_output_tokens=settings.gemini_max_output_tokens,
        timeout_seconds=settings.evaluation_timeout_seconds,
        max_attempts=settings.evaluation_max_attempts,
        backoff_seconds=settings.evaluation_retry_backoff_seconds,
    )
