"""Project, attachment and review models."""

from datetime import datetime

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from src.ticprojects.models.base import utc_now


class Project(SQLModel, table=True):
    """A project owned by exactly one identity (author_id never changes)."""

    __tablename__ = "projects"

    id: int | None = Field(default=None, primary_key=True)
    title: str
    description: str
    author_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)


class ProjectFile(SQLModel, table=True):
    """Pointer to an uploaded file stored outside the database."""

    __tablename__ = "project_files"

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", ondelete="CASCADE", index=True)
    file_path: str = Field(max_length=500)
    uploaded_at: datetime = Field(default_factory=utc_now)


class Review(SQLModel, table=True):
    """Rating of a project by another identity.

    Only the table exists; no endpoints read or write it yet.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", ondelete="CASCADE", index=True)
    reviewer_id: int = Field(foreign_key="users.id", index=True)
    rating: int
    comment: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
