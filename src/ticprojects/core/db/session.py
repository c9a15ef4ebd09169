"""AsyncSession factory bound to the application engine."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.ticprojects.core.db.engine import get_engine


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Read models are returned after commit, so attributes must stay loaded
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@asynccontextmanager
async def get_session(engine: AsyncEngine | None = None) -> AsyncGenerator[AsyncSession]:
    """Open a session on engine (default: the application engine) and close it on exit.

    Nothing is committed implicitly.
    """
    factory = make_session_factory(engine if engine is not None else get_engine())
    async with factory() as session:
        yield session
