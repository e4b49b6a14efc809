"""
Async persistence layer.

PostgreSQL (asyncpg) in deployment; SQLite (aiosqlite) works for local
development and the test-suite.  Routers only ever see ``get_db``.
"""
from typing import Any, AsyncGenerator, Dict
import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from escriba.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str) -> AsyncEngine:
    """
    Engine for *url* with the options every environment shares.

    SQLite connections get foreign-key enforcement switched on so that
    ``ON DELETE CASCADE`` behaves as it does on PostgreSQL.
    """
    options: Dict[str, Any] = {"echo": False, "poolclass": NullPool}
    if not url.startswith("sqlite"):
        options["pool_pre_ping"] = True

    engine = create_async_engine(url, **options)
    if url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = build_engine(settings.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session: committed when the route returns normally,
    rolled back when it raises (HTTPException included).
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise


async def init_db() -> None:
    """
    Create any missing tables.  The Alembic scripts under alembic/versions
    remain the source of truth for deployed schemas.
    """
    from escriba.models import database_models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Tables verified: %s", ", ".join(sorted(Base.metadata.tables)))
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise


async def close_db() -> None:
    """Dispose of the engine on shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
