import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from api.dependencies import get_evaluator
from config import settings
from models.requests import TextEvaluateRequest
from models.responses import BatchResponse
from services.evaluator import ResumeEvaluator, SourceDocument

logger = logging.getLogger(__name__)

router = APIRouter()


def _validate_batch(job_description: str | None, count: int) -> str:
    if not job_description or not job_description.strip():
        raise HTTPException(status_code=400, detail="Job description cannot be empty")
    if len(job_description) > settings.max_job_description_chars:
        raise HTTPException(
            status_code=400,
            detail=f"Job description too long (max {settings.max_job_description_chars} chars)",
        )
    if count == 0:
        raise HTTPException(status_code=400, detail="At least one resume file is required")
    if count > settings.max_resumes:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_resumes} resumes can be evaluated at once",
        )
    return job_description


async def _run_batch(
    evaluator: ResumeEvaluator, documents: list[SourceDocument], job_description: str
) -> BatchResponse:
    try:
        return await evaluator.evaluate_batch(documents, job_description)
    except Exception as e:
        logger.exception("Batch evaluation failed")
        raise HTTPException(status_code=500, detail=str(e) or "Evaluation failed")


@router.get("/health")
@router.get("/healthz")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
    }


@router.post("/evaluate", response_model=BatchResponse, response_model_exclude_none=True)
async def evaluate(
    job_description: str | None = Form(None),
    resumes: list[UploadFile] | None = File(None),
    evaluator: ResumeEvaluator = Depends(get_evaluator),
):
    resumes = resumes or []
    job_description = _validate_batch(job_description, len(resumes))

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    documents = []
    for upload in resumes:
        content = await upload.read()
        if len(content) > max_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"File too large: {upload.filename}. Max size: {settings.max_upload_size_mb}MB",
            )
        documents.append(SourceDocument(filename=upload.filename or "", raw_bytes=content))

    return await _run_batch(evaluator, documents, job_description)


@router.post("/evaluate/text", response_model=BatchResponse, response_model_exclude_none=True)
async def evaluate_text(
    body: TextEvaluateRequest,
    evaluator: ResumeEvaluator = Depends(get_evaluator),
):
    job_description = _validate_batch(body.job_description, len(body.resumes))
    documents = [
        SourceDocument(filename=f"{r.name}.txt", raw_bytes=r.text.encode("utf-8"))
        for r in body.resumes
    ]
    return await _run_batch(evaluator, documents, job_description)
