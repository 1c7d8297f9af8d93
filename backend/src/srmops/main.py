"""FastAPI application entry point for SRM Ops.

Field operations records REST API: interventions, reclamations, report
emails and spreadsheet exports.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from . import __version__
from .api import register_exception_handlers
from .api.interventions import router as interventions_router
from .api.middleware import setup_middleware
from .api.reclamations import router as reclamations_router
from .api.records import router as records_router
from .api.uploads import router as uploads_router
from .config import get_settings
from .db import close_all_connections, get_db_session
from .logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    setup_logging()
    settings = get_settings()
    logger.info(
        "Starting SRM Ops API",
        extra={
            "environment": settings.environment,
            "debug": settings.api_debug,
        },
    )

    missing = settings.missing_required()
    if missing:
        if settings.is_production:
            logger.critical(f"Missing required configuration: {', '.join(missing)}")
            raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")
        logger.warning(f"Missing configuration (features degraded): {', '.join(missing)}")

    yield

    # Shutdown
    logger.info("Shutting down SRM Ops API")
    await close_all_connections()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SRM Ops API",
        description="Field intervention and reclamation records",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_middleware(app)
    register_exception_handlers(app)

    # =========================
    # Health Check Endpoints
    # =========================

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Basic health check endpoint."""
        return {"status": "healthy", "service": "srmops-api"}

    @app.get("/health/ready", tags=["Health"])
    async def readiness_check():
        """Readiness check that verifies database connectivity."""
        checks = {"postgres": "unknown"}
        try:
            async with get_db_session() as session:
                await session.execute(text("SELECT 1"))
                checks["postgres"] = "healthy"
        except Exception as e:
            checks["postgres"] = f"unhealthy: {e}"

        all_healthy = all(v == "healthy" for v in checks.values())
        return JSONResponse(
            status_code=200 if all_healthy else 503,
            content={
                "status": "ready" if all_healthy else "not_ready",
                "checks": checks,
            },
        )

    @app.get("/health/live", tags=["Health"])
    async def liveness_check():
        """Liveness check - just confirms the service is running."""
        return {"status": "alive"}

    # =========================
    # API Routers
    # =========================

    app.include_router(interventions_router, prefix="/api/v1")
    app.include_router(reclamations_router, prefix="/api/v1")
    app.include_router(records_router, prefix="/api/v1")
    app.include_router(uploads_router, prefix="/api/v1")

    return app


app = create_app()
