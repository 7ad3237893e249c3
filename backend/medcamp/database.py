"""
MedCamp Backend — Database Engine Management
==============================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   Creates an async engine with connection pooling. The SQL document
       store opens one short-lived session per store operation from
       `async_session_factory`.
Who:   Used by SQLDocumentStore, the health route and Alembic.
When:  Engine is created at module import; sessions per store operation.

Connection Pooling:
    pool_size=20, max_overflow=10, pool_pre_ping, pool_recycle=3600.
    SQLite URLs (tests, local development) skip the pool arguments, which
    aiosqlite's pool classes do not accept.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from medcamp.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """Keyword arguments for create_async_engine() for the given URL."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


engine: AsyncEngine = create_async_engine(
    settings.database_url,
    **engine_options(settings.database_url),
)

# expire_on_commit=False: rows are converted to dicts after the commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every collection of the document store is backed by one model
    registered on this metadata (used by Alembic and create_all()).
    """
    pass


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create all tables known to Base.metadata (development only)."""
    # Importing the models package registers every table on Base.metadata
    import medcamp.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool at shutdown."""
    await engine.dispose()
