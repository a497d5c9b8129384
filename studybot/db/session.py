"""Database session configuration"""

import os
import logging
from typing import Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

logger = logging.getLogger(__name__)

# Connection pool configuration
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))  # Default 5 connections
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))  # Default 10 overflow
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))  # Default 30 seconds
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))  # Default 1 hour

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker] = None


def to_async_url(database_url: str) -> str:
    """
    Convert a DATABASE_URL to an async driver URL.

    postgresql:// and postgresql+asyncpg:// become postgresql+psycopg://.
    sqlite+aiosqlite:// is passed through for local runs.
    """
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    if database_url.startswith("postgresql+psycopg://"):
        return database_url
    if database_url.startswith("postgresql+asyncpg://"):
        return database_url.replace("postgresql+asyncpg://", "postgresql+psycopg://", 1)
    if database_url.startswith("sqlite+aiosqlite://"):
        return database_url
    raise ValueError(f"Unsupported database URL format: {database_url}")


def get_engine() -> AsyncEngine:
    """Create the async engine on first use"""
    global _engine

    if _engine is not None:
        return _engine

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable is not set")

    async_url = to_async_url(database_url)
    if async_url.startswith("sqlite"):
        _engine = create_async_engine(async_url, echo=False)
    else:
        _engine = create_async_engine(
            async_url,
            pool_pre_ping=True,  # Verify connections before using them
            pool_size=POOL_SIZE,
            max_overflow=MAX_OVERFLOW,
            pool_timeout=POOL_TIMEOUT,
            pool_recycle=POOL_RECYCLE,
            echo=False,  # Set to True to see SQL queries in logs
        )
    _register_pool_listeners(_engine)
    return _engine


def get_sessionmaker() -> async_sessionmaker:
    global _sessionmaker

    if _sessionmaker is None:
        _sessionmaker = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
    return _sessionmaker


async def dispose_engine() -> None:
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


def get_pool_stats() -> dict:
    """
    Get current connection pool statistics.

    Returns:
        Dictionary with pool statistics:
        - size: Total pool size
        - checked_in: Connections currently checked in (available)
        - checked_out: Connections currently checked out (in use)
        - overflow: Overflow connections
        - max_overflow: Overflow limit
    """
    try:
        # For async engines, access the underlying sync pool
        sync_pool = get_engine().sync_engine.pool

        size_func = getattr(sync_pool, "size", None)
        checkedin_func = getattr(sync_pool, "checkedin", None)
        checkedout_func = getattr(sync_pool, "checkedout", None)
        overflow_func = getattr(sync_pool, "overflow", None)

        size_val = size_func() if callable(size_func) else POOL_SIZE
        checked_in_val = checkedin_func() if callable(checkedin_func) else 0
        checked_out_val = checkedout_func() if callable(checkedout_func) else 0
        overflow_val = overflow_func() if callable(overflow_func) else 0
        max_overflow_val = getattr(sync_pool, "_max_overflow", MAX_OVERFLOW)

        return {
            "size": int(size_val),
            "checked_in": int(checked_in_val),
            "checked_out": int(checked_out_val),
            "overflow": max(0, int(overflow_val)),
            "max_overflow": int(max_overflow_val),
        }
    except Exception as e:
        logger.warning(f"Error getting pool stats: {e}")
        # Return safe defaults if pool stats can't be accessed
        return {
            "size": POOL_SIZE,
            "checked_in": 0,
            "checked_out": 0,
            "overflow": 0,
            "max_overflow": MAX_OVERFLOW,
        }


def _register_pool_listeners(engine: AsyncEngine) -> None:
    # For async engines, listen on the sync_engine

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_conn, connection_record):
        logger.debug("New database connection created")

    @event.listens_for(engine.sync_engine, "invalidate")
    def on_invalidate(dbapi_conn, connection_record, exception):
        logger.warning(
            f"Database connection invalidated: {exception}",
            exc_info=exception
        )
