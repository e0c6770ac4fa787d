"""
Database engine setup and readiness probe.
"""

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def _build_engine(url: str):
    kwargs = {"echo": settings.DATABASE_ECHO}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory SQLite must share one connection or tables vanish
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


engine = _build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    # Import models so they register on SQLModel.metadata
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ensured")


def database_ready() -> bool:
    """Round-trip a trivial query; used by the readiness probe."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except DBAPIError as e:
        logger.warning(f"Database readiness check failed: {e}")
        return False
    return True
