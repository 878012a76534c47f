"""
Database initialization and connection management.

This module provides functions for:
1. Building an async engine suited to the configured database URL
2. Creating the session tables
3. Handing out the session factory used by the SQL session store
4. Disposing of the engine at shutdown
"""

from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pmpquiz.common.error_handling import DatabaseError
from pmpquiz.common.logger import app_logger
from pmpquiz.database.base import metadata
# Registers the tables on the shared metadata
from pmpquiz.database import models  # noqa: F401

logger = app_logger.getChild("database.init_db")

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def is_memory_sqlite(database_url: str) -> bool:
    """Whether the URL points at a private in-memory SQLite database."""
    if not database_url.startswith("sqlite"):
        return False
    path = database_url.split("://", 1)[-1].lstrip("/")
    return path in ("", ":memory:")


def get_engine_kwargs(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_timeout: int = 30,
) -> Dict[str, Any]:
    """
    Get engine keyword arguments based on database type.

    An in-memory SQLite database only lives as long as its connection, so it
    gets a single shared connection for the lifetime of the engine.
    """
    kwargs: Dict[str, Any] = {"echo": echo}

    if is_memory_sqlite(database_url):
        kwargs.update({
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        })
    elif database_url.startswith("postgresql"):
        kwargs.update({
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_pre_ping": True,
            "pool_recycle": 300,
        })

    return kwargs


def build_engine(database_url: str, **options: Any) -> AsyncEngine:
    """Create an async engine for the URL without touching the global state."""
    return create_async_engine(database_url, **get_engine_kwargs(database_url, **options))


async def create_tables(engine: AsyncEngine) -> None:
    """Create the session tables if they do not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


def get_engine() -> AsyncEngine:
    """Get the global async engine instance."""
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call initialize_database() first.")
    return _engine


def get_session_factory() -> async_sessionmaker:
    """Get the session factory bound to the global engine."""
    if _session_factory is None:
        raise RuntimeError("Database engine not initialized. Call initialize_database() first.")
    return _session_factory


async def initialize_database(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_timeout: int = 30,
) -> AsyncEngine:
    """
    Initialize the async database engine and create the schema.

    Args:
        database_url: Database connection URL
        echo: Whether to echo SQL statements
        pool_size: Connection pool size
        max_overflow: Maximum number of connections to allow above pool_size
        pool_timeout: Timeout for getting a connection from the pool

    Returns:
        AsyncEngine instance

    Raises:
        DatabaseError: If the engine cannot connect or the schema cannot be created
    """
    global _engine, _session_factory

    if _engine is not None:
        await close_database()

    logger.info(f"Initializing database with URL: {database_url.split('://')[0]}://...")

    engine = build_engine(
        database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
    )

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        await create_tables(engine)
    except Exception as e:
        await engine.dispose()
        logger.error(f"Failed to initialize async database: {e}")
        raise DatabaseError("initialize", cause=e) from e

    _engine = engine
    _session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    logger.info("Database engine initialized successfully")
    return engine


async def close_database() -> None:
    """Close the database engine and all connections."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database engine closed successfully")
