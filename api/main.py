"""
Appeal AI API - Main Application.

FastAPI application backing the parking fine appeal mobile app.
Provides endpoints for appeal strength checks and fine notice extraction.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings
from errors import AppealServiceError
from routers import appeals_router, fines_router
from schemas import HealthResponse

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

HIDDEN_DETAILS = "Something went wrong"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.api_title} on port {settings.port}...")
    logger.info(f"Health check: http://localhost:{settings.port}/health")
    logger.info(f"Appeal check: http://localhost:{settings.port}/api/appeal-check")
    logger.info(f"Extract fine: http://localhost:{settings.port}/api/extract-fine")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; upstream calls will fail")

    yield

    logger.info(f"Shutting down {settings.api_title}...")


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="""
    Appeal AI API - AI-assisted parking fine appeals.

    This API provides:
    - **Appeal Check**: Rate the strength of an appeal reason
    - **Fine Extraction**: Read fine details from a photo of the notice
    """,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _client_details(details: str | None) -> str | None:
    """Hide internal error details outside development."""
    if details is None:
        return None
    return details if get_settings().expose_error_details else HIDDEN_DETAILS


@app.exception_handler(AppealServiceError)
async def service_error_handler(request: Request, exc: AppealServiceError):
    """Translate service errors into {error, details} responses."""
    logger.error(
        f"{request.method} {request.url.path} failed with {exc.status_code}: "
        f"{exc.message} ({exc.details})"
    )
    content = {"error": exc.message}
    details = _client_details(exc.details)
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors, reported as 400."""
    logger.error(f"Invalid request to {request.url.path}: {exc.errors()}")
    content = {"error": "Invalid request body"}
    details = _client_details(str(exc.errors()))
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=400, content=content)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": _client_details(str(exc))},
    )


# Include routers
app.include_router(appeals_router)
app.include_router(fines_router)


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Liveness check."""
    return HealthResponse(status="OK", message="Appeal AI Backend is running")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.expose_error_details,
    )
