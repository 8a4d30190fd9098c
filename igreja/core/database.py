"""
Database configuration and engine management
"""

from sqlmodel import SQLModel, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
import structlog

from igreja.core.config import get_settings

logger = structlog.get_logger(__name__)


def create_db_engine(url: str = None, echo: bool = None) -> Engine:
    """Create the engine backing the hosted backend"""
    settings = get_settings()
    url = url or settings.DATABASE_URL
    echo = settings.DEBUG and settings.ENVIRONMENT == "development" if echo is None else echo

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(
        url.replace("postgresql+asyncpg://", "postgresql://"),
        echo=echo,
        pool_pre_ping=True,
    )


def init_db(engine: Engine):
    """Create database tables (development and tests; production uses Alembic)"""
    import igreja.models  # noqa: F401  registers every table on the metadata

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created")
