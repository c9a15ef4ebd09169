"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file and upload directory under
pytest's tmp_path, so no external services are needed.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.ticprojects.core import db
from src.ticprojects.core.config import get_settings
from src.ticprojects.core.security import create_access_token
from src.ticprojects.main import create_app
from src.ticprojects.models import User
from tests.factories import DEFAULT_TEST_PASSWORD, UserFactory


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
async def engine(
    tmp_path: Path, upload_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[AsyncEngine]:
    """Point the app at a fresh SQLite file and create every table."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    get_settings.cache_clear()
    await db.dispose_engine()

    test_engine = db.get_engine()
    await db.create_all_tables(test_engine)

    yield test_engine

    await db.dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does not auto-commit; call `await session.commit()` to persist.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to an app built against the test database."""
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def _create_user(db_session: AsyncSession, name: str) -> dict:
    user: User = UserFactory.build(username=name, email=f"{name.lower()}@example.com")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    assert user.id is not None

    token = create_access_token(user.id, user.email)
    return {
        "id": user.id,
        "name": user.username,
        "email": user.email,
        "password": DEFAULT_TEST_PASSWORD,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture
async def alice(db_session: AsyncSession) -> dict:
    """A registered identity with a valid access token."""
    return await _create_user(db_session, "Alice")


@pytest.fixture
async def bob(db_session: AsyncSession) -> dict:
    """A second identity, used for ownership checks."""
    return await _create_user(db_session, "Bob")
