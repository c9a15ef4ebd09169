"""Credential store backed by the users table."""

from sqlmodel import select

from src.ticprojects.models import User
from src.ticprojects.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Look up an identity by its normalized email."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def exists_by_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None
