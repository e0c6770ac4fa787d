"""
Attendance Tracker Service - Main Application Entry Point.

This service handles employee attendance tracking including:
- Check-in/Check-out with location and selfie evidence
- Hours worked per day
- Daily workforce statistics with Redis caching
- Geofenced work locations
- Employee invitations and onboarding
- Kafka event publishing for audit and notifications
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.dependencies import get_record_store
from app.api.routes.account import router as account_router
from app.api.routes.admin import router as admin_router
from app.api.routes.attendance import router as attendance_router
from app.api.routes.locations import router as locations_router
from app.core.cache import RedisClient
from app.core.config import settings
from app.core.database import create_db_and_tables, database_ready
from app.core.exceptions import AttendanceTrackerError
from app.core.invitation_service import InvitationService
from app.core.kafka import KafkaProducer
from app.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Attendance Tracker Service...")

    logger.info("Creating database and tables...")
    create_db_and_tables()
    logger.info("Database and tables created successfully")

    if settings.REDIS_ENABLED:
        logger.info("Initializing Redis client...")
        if RedisClient.ping():
            logger.info("Redis client connected successfully")
        else:
            logger.warning("Redis connection failed, stats caching will be disabled")

    logger.info("Initializing Kafka producer...")
    await KafkaProducer.start()

    if settings.BOOTSTRAP_ADMIN_EMAIL:
        service = InvitationService(get_record_store())
        await service.ensure_bootstrap_admin(settings.BOOTSTRAP_ADMIN_EMAIL)

    logger.info("Attendance Tracker Service startup complete")

    yield

    # Shutdown
    logger.info("Attendance Tracker Service shutting down...")

    logger.info("Stopping Kafka producer...")
    await KafkaProducer.stop()

    logger.info("Closing Redis client...")
    RedisClient.close()

    logger.info("Attendance Tracker Service shutdown complete")


# Initialize FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Attendance Tracker Service - check-in/out with location and selfie, hours worked and workforce statistics",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.exception_handler(AttendanceTrackerError)
async def attendance_error_handler(
    request: Request, exc: AttendanceTrackerError
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# Include routers
app.include_router(attendance_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(locations_router, prefix="/api/v1")
app.include_router(account_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint for container orchestration and monitoring.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/ready", tags=["health"])
async def readiness_check():
    """
    Readiness check endpoint for Kubernetes.
    The database must answer; Redis and Kafka only count when enabled.
    """
    checks = {"database": "ok" if database_ready() else "error"}
    if settings.REDIS_ENABLED:
        checks["redis"] = "ok" if RedisClient.ping() else "error"
    else:
        checks["redis"] = "disabled"
    if settings.KAFKA_ENABLED:
        checks["kafka_producer"] = "ok" if KafkaProducer.is_started() else "error"
    else:
        checks["kafka_producer"] = "disabled"

    all_ready = all(value != "error" for value in checks.values())
    return {
        "status": "ready" if all_ready else "not_ready",
        "checks": checks,
    }


@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint with service information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }
