import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.router import router
from config import settings
from services.exceptions import OracleConfigurationError

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Resume Ranker API",
    description="AI-powered batch resume evaluation and ranking against a job description",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(OracleConfigurationError)
async def oracle_configuration_error(request: Request, exc: OracleConfigurationError):
    logger.error("Evaluation service unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


app.include_router(router)
