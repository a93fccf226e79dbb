"""
FastAPI Application Entry Point

Food delivery marketplace backend.
Providers are mocked in development and real in staging/production.

Endpoints:
    - POST/GET /graphql: GraphQL API (queries, mutations)
    - WS /graphql: GraphQL subscriptions (graphql-transport-ws)
    - POST /uploads: Image upload to object storage
    - GET /health: System health check
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Internal imports
from food_delivery.api.schema import graphql_router
from food_delivery.core.config import get_settings, setup_logging
from food_delivery.database import engine, get_db, init_db
from food_delivery.schemas import ErrorResponse, HealthResponse
from food_delivery.services.mail import get_mail_service
from food_delivery.services.payment import get_payment_service
from food_delivery.services.pubsub import get_pubsub
from food_delivery.services.storage import get_storage_service
from food_delivery.services.uploads import router as uploads_router

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    logger.info("Database initialized")

    logger.info(f"Mail Service: {get_mail_service().provider_name}")
    logger.info(f"Payment Service: {get_payment_service().provider_name}")
    logger.info(f"Storage Service: {get_storage_service().provider_name}")
    logger.info(f"PubSub: {get_pubsub().provider_name}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing and settings.is_production:
            raise RuntimeError(f"Missing production config: {missing}")
        if missing:
            logger.warning(f"Missing production config: {missing}")

    logger.info("Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Food delivery platform: accounts, restaurant catalog, orders and "
        "promotion payments over GraphQL."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(graphql_router, prefix="/graphql")
app.include_router(uploads_router)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "graphql": "/graphql",
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db)
) -> HealthResponse:
    """Verify all system components are operational."""

    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    checks = {
        "pubsub": get_pubsub(),
        "mail_service": get_mail_service(),
        "payment_service": get_payment_service(),
        "storage_service": get_storage_service(),
    }
    statuses = {}
    for name, service in checks.items():
        statuses[name] = "healthy" if await service.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [db_status, *statuses.values()]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        timestamp=datetime.now(),
        **statuses,
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal Server Error",
            detail=str(exc) if settings.debug else "An unexpected error occurred",
        ).model_dump(),
    )
