"""
Main FastAPI Application for Para Sports ID Card System
Serves ID card generation for the player registration backend
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import asyncio
import contextlib
import time
import logging

from app.core.config import get_settings
from app.api.v1.api import api_router
from app.services.card_file_manager import card_file_manager
from app.services.otp_store import otp_store

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = get_settings()


async def sweep_otp_store_periodically():
    """Drop expired OTP entries on a fixed interval"""
    while True:
        await asyncio.sleep(settings.OTP_SWEEP_INTERVAL_SECONDS)
        otp_store.sweep_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events
    Handles startup and shutdown tasks
    """
    # Startup
    logger.info("Starting Para Sports ID Card Service...")
    cards_path = card_file_manager.ensure_cards_directory()
    logger.info(f"ID card directory ready: {cards_path}")

    sweeper = asyncio.create_task(sweep_otp_store_periodically())

    yield

    # Shutdown
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    logger.info("Shutting down Para Sports ID Card Service...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Para Sports Association player ID card generation",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    lifespan=lifespan
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add request processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(Exception)
async def handle_unexpected_errors(request: Request, exc: Exception):
    """Log unhandled errors and return a generic 500"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "type": "internal_error",
            "status_code": 500
        }
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "system": "Para Sports ID Card Service",
        "timestamp": time.time(),
        "idcards_directory": str(card_file_manager.cards_path),
    }


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with basic system information"""
    return {
        "message": "Para Sports ID Card Service API",
        "version": settings.VERSION,
        "docs_url": f"{settings.API_V1_STR}/docs",
        "api_base": settings.API_V1_STR
    }


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
