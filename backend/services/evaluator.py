"""Batch resume evaluation: extract, ask Gemini, parse, rank.

Pipeline per request:
1. Fan out one task per uploaded document (all created before any is awaited)
2. Each task: text extraction -> prompt -> oracle call -> JSON parsing
3. Any per-candidate failure becomes a degraded NO_MATCH record
4. Fan in (gather), stable-rank by overall_score, wrap in BatchResponse
"""

import asyncio
import logging
import time
from dataclasses import dataclass

from models.responses import (
    BatchResponse,
    CertificationsMatch,
    EvaluationResult,
    Recommendation,
    SectionMatch,
    SkillsMatch,
)
from services import prompt_builder
from services.aggregator import build_batch_response
from services.exceptions import (
    EmptyTextError,
    EvaluationError,
    OracleInvocationError,
    ResponseParseError,
)
from services.gemini_client import Oracle
from services.ranker import rank_evaluations
from services.response_parser import parse_evaluation
from services.text_extractor import candidate_name_from_filename, extract_text

logger = logging.getLogger(__name__)

NOT_EVALUATED = "Could not evaluate"
EMPTY_RESUME_ASSESSMENT = "Resume file was empty or could not be read."
EMPTY_RESUME_ERROR = "Empty resume"
PARSE_FAILURE_ASSESSMENT = "The AI was unable to properly evaluate this resume."
PARSE_FAILURE_ERROR = "Failed to parse AI response"


@dataclass(frozen=True)
class SourceDocument:
    filename: str
    raw_bytes: bytes


def degraded_result(candidate_name: str, assessment: str, weakness: str, error: str) -> EvaluationResult:
    """Zero-score NO_MATCH record used whenever a candidate cannot be evaluated."""
    return EvaluationResult(
        candidate_name=candidate_name,
        overall_score=0,
        skills_match=SkillsMatch(score=0),
        experience_match=SectionMatch(score=0, summary=NOT_EVALUATED),
        education_match=SectionMatch(score=0, summary=NOT_EVALUATED),
        certifications=CertificationsMatch(score=0),
        strengths=[],
        weaknesses=[weakness],
        overall_assessment=assessment,
        recommendation=Recommendation.NO_MATCH,
        error=error,
    )


class ResumeEvaluator:
    def __init__(self, oracle: Oracle, max_concurrency: int = 20, preview_chars: int = 200) -> None:
        self.oracle = oracle
        self.preview_chars = preview_chars
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def _extract(self, document: SourceDocument) -> str:
        # pdfplumber is blocking; keep the event loop free for sibling candidates
        text = await asyncio.to_thread(extract_text, document.filename, document.raw_bytes)
        if not text.strip():
            raise EmptyTextError(EMPTY_RESUME_ERROR)
        return text

    async def _evaluate(self, document: SourceDocument, job_description: str) -> EvaluationResult:
        upload_name = document.filename or "Unknown"

        try:
            resume_text = await self._extract(document)
        except EmptyTextError as e:
            logger.warning("Empty resume: %s", upload_name)
            return degraded_result(
                upload_name, EMPTY_RESUME_ASSESSMENT, "Resume file was empty", e.message
            )
        except EvaluationError as e:
            logger.warning("Could not read %s: %s", upload_name, e.message)
            return degraded_result(upload_name, e.message, "Resume could not be read", e.message)

        candidate_name = candidate_name_from_filename(document.filename)
        prompt = prompt_builder.build_evaluation_prompt(resume_text, job_description, candidate_name)

        try:
            raw_response = await self.oracle.evaluate(prompt)
            return parse_evaluation(raw_response, candidate_name)
        except ResponseParseError as e:
            logger.warning("Unparseable evaluation for %s: %s", candidate_name, e.message)
            return degraded_result(
                candidate_name,
                PARSE_FAILURE_ASSESSMENT,
                "Resume could not be properly evaluated",
                PARSE_FAILURE_ERROR,
            )
        except OracleInvocationError as e:
            logger.warning("Evaluation failed for %s: %s", candidate_name, e.message)
            return degraded_result(
                candidate_name,
                f"Error during evaluation: {e.message}",
                "Evaluation failed due to an error",
                e.message,
            )

    async def evaluate_candidate(self, document: SourceDocument, job_description: str) -> EvaluationResult:
        """Evaluate one document. Never raises; failures come back as degraded records."""
        async with self._semaphore:
            try:
                return await self._evaluate(document, job_description)
            except Exception as e:
                logger.exception("Unexpected failure evaluating %s", document.filename)
                message = str(e) or type(e).__name__
                return degraded_result(
                    document.filename or "Unknown",
                    f"Error during evaluation: {message}",
                    "Evaluation failed due to an error",
                    message,
                )

    async def evaluate_batch(self, documents: list[SourceDocument], job_description: str) -> BatchResponse:
        """Evaluate every document concurrently and return the ranked batch."""
        started = time.perf_counter()
        logger.info("Evaluating %d resume(s)", len(documents))

        tasks = [
            asyncio.create_task(self.evaluate_candidate(doc, job_description))
            for doc in documents
        ]
        # gather keeps submission order regardless of completion order
        evaluations = list(await asyncio.gather(*tasks))

        ranked = rank_evaluations(evaluations)
        degraded = sum(1 for e in ranked if e.error)
        logger.info(
            "Evaluated %d resume(s) in %.2fs (%d degraded)",
            len(ranked), time.perf_counter() - started, degraded,
        )
        return build_batch_response(ranked, job_description, len(documents), self.preview_chars)
