"""Identity model - the single durable store of registered users."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.ticprojects.models.base import utc_now


class User(SQLModel, table=True):
    """A registered identity. Immutable after registration."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(max_length=100, unique=True, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utc_now)
