"""
ClipQA - Video Clip Question/Answer Platform
Main FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .utils.logger import setup_logger
from .utils.exceptions import ClipQAError
from .routers import auth_router, clips_router, questions_router, videos_router, analytics_router
from .services.database import get_database


# Set up logging
logger = setup_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    settings = get_settings()

    await get_database().initialize()

    logger.info("=" * 60)
    logger.info("ClipQA - Video Clip Question/Answer Platform")
    logger.info("=" * 60)
    logger.info(f"Data directory: {settings.data_dir}")
    logger.info(f"Video duration bounds: {settings.min_video_duration}-{settings.max_video_duration}s")
    logger.info(f"User question listing cap: {settings.user_questions_limit}")

    if settings.secret_key == "change-me-in-production":
        logger.warning("[!] Default token secret in use; set SECRET_KEY")
    else:
        logger.info("[OK] Token secret configured")

    logger.info("=" * 60)
    logger.info("Server started successfully!")
    logger.info("API Docs: http://localhost:8000/docs")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down ClipQA...")


# Create FastAPI app
app = FastAPI(
    title="ClipQA",
    description="Serve 10-second video clips and collect questions about them",
    version=get_settings().app_version,
    lifespan=lifespan
)

# CORS middleware
settings = get_settings()
cors_origins = settings.cors_allowed_origins or ["http://localhost:3000", "http://127.0.0.1:3000"]
cors_allow_credentials = "*" not in cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Global Exception Handlers
# ============================================================================

@app.exception_handler(ClipQAError)
async def clipqa_exception_handler(request: Request, exc: ClipQAError):
    """Handle all ClipQA custom exceptions"""
    if exc.status_code >= 500:
        logger.error(f"ClipQAError [{exc.code}]: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request body and query validation errors"""
    logger.warning(f"Validation error: {exc.errors()}")
    first = exc.errors()[0] if exc.errors() else {}
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": first.get("msg", "Invalid request"),
            "recoverable": True,
            "recovery_hint": "Check your input parameters and try again.",
            "details": {"field": ".".join(str(part) for part in first.get("loc", ()))}
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions"""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred. Please try again.",
            "recoverable": True,
            "recovery_hint": "If this persists, check the server logs for details."
        }
    )


# Include routers
app.include_router(auth_router)
app.include_router(clips_router)
app.include_router(questions_router)
app.include_router(videos_router)
app.include_router(analytics_router)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy", "app": "ClipQA"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clipqa.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
