"""Database infrastructure for the Postgres catalog."""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.infrastructure.config.settings import settings


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker:
    """Build the engine and session factory on first use (CSV mode never touches it)."""
    if not settings.database_url:
        raise ValueError("DATABASE_URL is required when CATALOG_REPOSITORY=postgres")
    engine: Engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,
        echo=settings.debug_mode,
    )
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db_session() -> Session:
    """
    Get a database session; the caller closes it.

    Returns:
        SQLAlchemy session instance
    """
    return _session_factory()()
