"""Database utilities - engine, session, migrations."""

from src.ticprojects.core.db.engine import (
    create_all_tables,
    dispose_engine,
    get_engine,
)
from src.ticprojects.core.db.migrations import run_migrations_async, run_migrations_sync
from src.ticprojects.core.db.session import get_session

__all__ = [
    # Engine
    "create_all_tables",
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
    # Migrations
    "run_migrations_async",
    "run_migrations_sync",
]
