"""Reusable migration runner for both production and tests."""

import asyncio
from pathlib import Path

from alembic.config import Config

from alembic import command

# src/alembic, next to the application package
SCRIPT_LOCATION = Path(__file__).resolve().parents[3] / "alembic"


def _alembic_config(database_url: str | None = None) -> Config:
    """Build the Alembic config in code so migrations do not depend on the cwd."""
    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(SCRIPT_LOCATION))
    if database_url:
        alembic_cfg.set_main_option("sqlalchemy.url", database_url)
    return alembic_cfg


def run_migrations_sync(database_url: str | None = None) -> None:
    """Run Alembic migrations synchronously up to head.

    Args:
        database_url: Optional override; defaults to settings.database_url.
    """
    command.upgrade(_alembic_config(database_url), "head")


async def run_migrations_async(database_url: str | None = None) -> None:
    """Run Alembic migrations from async context in a worker thread."""
    await asyncio.to_thread(run_migrations_sync, database_url)
