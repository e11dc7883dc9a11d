"""
Database engine construction.

One engine (and therefore one bounded connection pool) is created per
application instance; services open short-lived sessions against it.
"""

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from hr_service.core.config import Settings
from hr_service.core.logging import get_logger

logger = get_logger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    """Build the SQLAlchemy engine described by the settings."""
    if settings.is_sqlite:
        # In-memory SQLite must share a single connection across threads
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in settings.DATABASE_URL or settings.DATABASE_URL in (
            "sqlite://",
            "sqlite:///",
        ):
            kwargs["poolclass"] = StaticPool
        return create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, **kwargs)

    return create_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_MIN,
        max_overflow=max(settings.DB_POOL_MAX - settings.DB_POOL_MIN, 0),
        pool_pre_ping=True,
    )


def create_db_and_tables(engine: Engine) -> None:
    """Create every table registered on the SQLModel metadata."""
    # Table models must be imported before create_all sees them
    import hr_service.models  # noqa: F401

    logger.info(f"Creating tables on {engine.url.render_as_string(hide_password=True)}")
    SQLModel.metadata.create_all(engine)
