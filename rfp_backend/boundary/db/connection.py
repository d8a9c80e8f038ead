"""
Async database connection management for Lambda.

Builds an asyncpg-backed SQLAlchemy engine from a plain Postgres URL.

Dependencies: sqlalchemy, asyncpg
System role: Database connection lifecycle for both pipelines
"""

import os

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine


def to_async_url(database_url: str) -> str:
    """Convert postgres:// or postgresql:// URLs to the asyncpg driver form."""
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def get_async_engine(database_url: str | None = None, require_ssl: bool = True) -> AsyncEngine:
    """
    Create async engine.

    Args:
        database_url: Connection string (falls back to DATABASE_URL)
        require_ssl: Require TLS for asyncpg connections (RDS)

    Returns:
        AsyncEngine: SQLAlchemy async engine

    Raises:
        ValueError: No database URL configured
    """
    database_url = database_url or os.getenv("DATABASE_URL", "")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable not set")

    async_url = to_async_url(database_url)
    connect_args = {"ssl": "require"} if require_ssl and "+asyncpg" in async_url else {}

    return create_async_engine(
        async_url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def get_async_session_factory(
    database_url: str | None = None,
    engine: AsyncEngine | None = None,
) -> async_sessionmaker:
    """
    Create async session factory for Lambda use.

    Args:
        database_url: Connection string used when no engine is given
        engine: Existing engine to bind (lets the caller dispose it)

    Returns:
        async_sessionmaker: Session factory with manual transaction control
    """
    engine = engine or get_async_engine(database_url)
    return async_sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
