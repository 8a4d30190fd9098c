"""
Igreja Conciliada - Main Application Entry Point
Multi-tenant church administration: members, leaders, appointments and events
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import structlog

from igreja.api import appointments, auth, dashboard, events, leaders, members, public, settings as settings_api, users
from igreja.backend.service import HostedBackend
from igreja.core.config import get_settings
from igreja.core.database import create_db_engine

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Initializing Igreja Conciliada backend", environment=settings.ENVIRONMENT)
    # Tables are created by Alembic migrations, not auto-generated
    logger.info("Database managed by Alembic migrations")

    # Initialize storage buckets (if MinIO is available)
    try:
        await app.state.backend.client().storage.ensure_buckets_exist(
            [settings.EVENT_BANNERS_BUCKET, settings.CHURCH_LOGOS_BUCKET]
        )
        logger.info("Storage buckets verified")
    except Exception as e:
        logger.warning("Storage initialization skipped", error=str(e))

    yield

    # Shutdown
    logger.info("Shutting down Igreja Conciliada backend")
    app.state.backend.dispose()


def create_app(backend: Optional[HostedBackend] = None) -> FastAPI:
    """Build the application around a backend (tests pass their own)"""
    backend = backend or HostedBackend(create_db_engine(), settings)

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Multi-tenant church administration",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.backend = backend

    # Configure middleware stack
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(dashboard.router, tags=["dashboard"])
    app.include_router(members.router, prefix="/members", tags=["members"])
    app.include_router(leaders.router, prefix="/leaders", tags=["leaders"])
    app.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
    app.include_router(events.router, prefix="/events", tags=["events"])
    app.include_router(users.router, prefix="/users", tags=["users"])
    app.include_router(settings_api.router, prefix="/settings", tags=["settings"])
    app.include_router(public.router, prefix="/public", tags=["public"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "igreja-api"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "igreja.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
