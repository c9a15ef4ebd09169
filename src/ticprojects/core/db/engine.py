"""Async engine singleton for SQLite (default) or PostgreSQL."""

import ssl
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

from src.ticprojects.core.config import Settings, get_settings

_engine: AsyncEngine | None = None


def _postgres_ssl_context(ssl_mode: str) -> ssl.SSLContext | None:
    """libpq-style sslmode to an SSLContext for asyncpg (None means plain TCP)."""
    if ssl_mode == "disable":
        return None
    context = ssl.create_default_context()
    if ssl_mode in ("verify-ca", "verify-full"):
        context.check_hostname = ssl_mode == "verify-full"
        context.verify_mode = ssl.CERT_REQUIRED
    else:
        # prefer / require: encrypt without verifying the server certificate
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # Off by default in SQLite; ON DELETE CASCADE depends on it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_engine(settings: Settings) -> AsyncEngine:
    if settings.is_sqlite:
        engine = create_async_engine(settings.database_url)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    connect_args: dict[str, Any] = {}
    ssl_context = _postgres_ssl_context(settings.database_ssl_mode)
    if ssl_context is not None:
        connect_args["ssl"] = ssl_context
    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def get_engine() -> AsyncEngine:
    """Engine for DATABASE_URL, created on first use."""
    global _engine
    if _engine is None:
        _engine = _create_engine(get_settings())
    return _engine


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine (shutdown, tests)."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """Create every table from model metadata (tests and local tooling)."""
    # Register all tables on SQLModel.metadata
    import src.ticprojects.models  # noqa: F401

    if engine is None:
        engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
