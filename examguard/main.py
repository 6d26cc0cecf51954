"""
ExamGuard Proctoring Service - FastAPI Application
"""
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .proctor.api import router as proctor_router
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(
        service_name="examguard",
        level=settings.LOG_LEVEL,
        log_to_file=settings.LOG_TO_FILE,
        log_dir=settings.LOG_DIR
    )
    yield
    logger.info("=== EXAMGUARD STOPPED ===")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Webcam presence detection and exam-integrity violations",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan
)


# ============================================================================
# Request Logging Middleware
# ============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests with timing."""
    start = time.time()
    method = request.method
    path = request.url.path

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"RequestError {method} {path}: {e}")
        raise

    duration_ms = int((time.time() - start) * 1000)
    if path not in ["/health", "/favicon.ico"]:
        logger.info(f"{method} {path} -> {response.status_code} in {duration_ms}ms")

    return response


# CORS middleware - exam clients run on arbitrary origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # Must be False when using wildcard origin
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(proctor_router)


@app.get("/health")
async def health():
    """Service health check"""
    return {"status": "healthy", "service": settings.APP_NAME}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("examguard.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
