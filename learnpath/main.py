"""FastAPI application for the Red Hat learning path generator."""

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from learnpath.config import get_settings
from learnpath.exceptions import LearnPathError, ModelUnavailableError
from learnpath.llm.generator import LearningPathGenerator
from learnpath.middleware.request_logging import RequestLoggingMiddleware
from learnpath.routers import learning_path
from learnpath.utils.logging import setup_logging

settings = get_settings()
setup_logging(level=settings.log_level, json_format=settings.log_json, log_file=settings.log_file)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    description="Personalized Red Hat learning paths from live content search and a local LLM",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


def _error_details(exc: RequestValidationError) -> list[dict[str, Any]]:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.append(
            {
                "field": ".".join(loc),
                "message": error.get("msg", ""),
                "value": error.get("input"),
            }
        )
    return details


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": _error_details(exc)},
    )


@app.exception_handler(ModelUnavailableError)
async def model_unavailable_handler(request: Request, exc: ModelUnavailableError):
    logger.warning(f"Ollama unavailable for {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=503,
        content={
            "error": "Ollama service is not available",
            "details": exc.message,
            "suggestion": "Make sure Ollama is running and the model is installed",
        },
    )


@app.exception_handler(LearnPathError)
async def learn_path_error_handler(request: Request, exc: LearnPathError):
    logger.error(f"Unhandled service error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "healthy", "version": settings.app_version}


app.include_router(learning_path.router)


async def _log_connection_test(generator: LearningPathGenerator) -> None:
    try:
        result = await generator.test_connection()
    except Exception as e:
        logger.error(f"Ollama connection test crashed: {e}", exc_info=True)
        return
    if result["success"]:
        logger.info(f"Ollama connection test successful: {result['response']}")
    else:
        logger.error(f"Ollama connection test failed: {result['error']}")


@app.on_event("startup")
async def start_background_tasks():
    """Probe Ollama once without delaying startup."""
    if not settings.ollama_startup_check:
        return
    generator = LearningPathGenerator.from_settings(settings)
    app.state.ollama_probe = asyncio.create_task(_log_connection_test(generator))
