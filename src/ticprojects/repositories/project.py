"""Repositories for projects and their file attachments."""

from typing import Any

from sqlalchemy import delete
from sqlmodel import col, select

from src.ticprojects.models import Project, ProjectFile, User
from src.ticprojects.repositories.base import BaseRepository
from src.ticprojects.schemas.project import ProjectRead


def _first_file_path() -> Any:
    """Correlated subquery: path of the earliest attachment of the outer project."""
    return (
        select(ProjectFile.file_path)
        .where(ProjectFile.project_id == Project.id)
        .order_by(col(ProjectFile.id))
        .limit(1)
        .correlate(Project)
        .scalar_subquery()
    )


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity."""

    model = Project

    def _detail_query(self) -> Any:
        return select(
            Project.id,
            Project.title,
            Project.description,
            Project.created_at,
            Project.author_id,
            col(User.username).label("author_name"),
            _first_file_path().label("file_path"),
        ).join(User, col(Project.author_id) == col(User.id))

    async def list_with_authors(self) -> list[ProjectRead]:
        """All projects, newest first; equal timestamps fall back to ascending id."""
        query = self._detail_query().order_by(
            col(Project.created_at).desc(),
            col(Project.id).asc(),
        )
        result = await self.session.execute(query)
        return [ProjectRead.model_validate(dict(row._mapping)) for row in result.all()]

    async def get_with_author(self, project_id: int) -> ProjectRead | None:
        """One project joined with its author name and attachment path."""
        query = self._detail_query().where(col(Project.id) == project_id)
        result = await self.session.execute(query)
        row = result.one_or_none()
        if row is None:
            return None
        return ProjectRead.model_validate(dict(row._mapping))


class ProjectFileRepository(BaseRepository[ProjectFile]):
    """Repository for ProjectFile entity."""

    model = ProjectFile

    async def list_for_project(self, project_id: int) -> list[ProjectFile]:
        result = await self.session.execute(
            select(ProjectFile)
            .where(ProjectFile.project_id == project_id)
            .order_by(col(ProjectFile.id))
        )
        return list(result.scalars().all())

    async def delete_for_project(self, project_id: int) -> int:
        """Delete every attachment row of a project. Returns the number of rows removed."""
        result = await self.session.execute(
            delete(ProjectFile).where(col(ProjectFile.project_id) == project_id)
        )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]
