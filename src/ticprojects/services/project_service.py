"""Project service - project lifecycle with ownership checks and attachments."""

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.ticprojects.core.exceptions import (
    ForbiddenError,
    InternalError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.ticprojects.core.logging import get_logger
from src.ticprojects.core.storage import FileStorage, StoredFile
from src.ticprojects.models import Project, ProjectFile, User
from src.ticprojects.repositories import ProjectFileRepository, ProjectRepository
from src.ticprojects.schemas.project import ProjectRead

logger = get_logger(__name__)

MIN_TITLE_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 10


def _assigned_id(entity_id: int | None) -> int:
    if entity_id is None:
        raise InternalError("Database did not assign an id")
    return entity_id


def validate_project_fields(title: str | None, description: str | None) -> tuple[str, str]:
    """Apply the title/description rules, returning the validated pair.

    Values are taken as given (no trimming).

    Raises:
        ValidationError: with a message naming the first rule that failed.
    """
    if not title or not description:
        raise ValidationError("Title and description are required")
    if len(title) < MIN_TITLE_LENGTH:
        raise ValidationError(f"Title must be at least {MIN_TITLE_LENGTH} characters")
    if len(description) < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
        )
    return title, description


class ProjectService:
    """Public project operations.

    Reads are open to everyone. Create requires a verified identity, which
    becomes the author; update and delete are restricted to the author.
    """

    def __init__(
        self,
        project_repo: ProjectRepository,
        file_repo: ProjectFileRepository,
        storage: FileStorage,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.file_repo = file_repo
        self.storage = storage
        self.session = session

    async def list_projects(self) -> list[ProjectRead]:
        try:
            return await self.project_repo.list_with_authors()
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch projects")
            raise StorageError("Failed to fetch projects") from e

    async def get_project(self, project_id: int) -> ProjectRead:
        try:
            project = await self.project_repo.get_with_author(project_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch project", project_id=project_id)
            raise StorageError("Failed to fetch project") from e
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def create_project(
        self,
        identity: User,
        title: str | None,
        description: str | None,
        upload: UploadFile | None = None,
    ) -> ProjectRead:
        """Create a project owned by identity, optionally with one attachment.

        The file is written first (size-capped) so an oversized upload fails
        before any row exists. If the database write then fails, the file is
        removed again.
        """
        title, description = validate_project_fields(title, description)
        # Rollback expires identity; keep its id for the failure path
        author_id = _assigned_id(identity.id)

        stored: StoredFile | None = None
        if upload is not None and upload.filename:
            stored = await self.storage.save(upload)

        project = Project(title=title, description=description, author_id=author_id)
        try:
            self.project_repo.add(project)
            await self.session.flush()
            project_id = _assigned_id(project.id)
            if stored is not None:
                self.file_repo.add(
                    ProjectFile(project_id=project_id, file_path=stored.public_path)
                )
            await self.session.commit()
        except (SQLAlchemyError, InternalError) as e:
            await self.session.rollback()
            if stored is not None:
                await self.storage.remove(stored.public_path)
            logger.exception("Failed to create project", author_id=author_id)
            raise InternalError("Failed to create project") from e

        logger.info(
            "Project created",
            project_id=project_id,
            author_id=author_id,
            has_file=stored is not None,
        )
        return await self.get_project(project_id)

    async def _get_owned(self, identity: User, project_id: int, action: str) -> Project:
        try:
            project = await self.project_repo.get_by_id(project_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch project", project_id=project_id)
            raise StorageError("Failed to fetch project") from e
        if project is None:
            raise NotFoundError("Project not found")
        if project.author_id != identity.id:
            logger.info(
                "Ownership check failed",
                project_id=project_id,
                author_id=project.author_id,
                action=action,
            )
            raise ForbiddenError(f"You can only {action} your own projects")
        return project

    async def update_project(
        self,
        identity: User,
        project_id: int,
        title: str | None,
        description: str | None,
    ) -> ProjectRead:
        """Replace title and description. Same rules as creation apply."""
        project = await self._get_owned(identity, project_id, "edit")
        title, description = validate_project_fields(title, description)

        project.title = title
        project.description = description
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Failed to update project", project_id=project_id)
            raise InternalError("Failed to update project") from e

        logger.info("Project updated", project_id=project_id)
        return await self.get_project(project_id)

    async def delete_project(self, identity: User, project_id: int) -> None:
        """Delete a project, its attachment rows and the stored files."""
        project = await self._get_owned(identity, project_id, "delete")

        try:
            attachments = await self.file_repo.list_for_project(project_id)
            file_paths = [attachment.file_path for attachment in attachments]
            await self.file_repo.delete_for_project(project_id)
            await self.project_repo.delete(project)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Failed to delete project", project_id=project_id)
            raise InternalError("Failed to delete project") from e

        # Rows are gone; a file that cannot be unlinked is only logged
        for file_path in file_paths:
            await self.storage.remove(file_path)

        logger.info("Project deleted", project_id=project_id, files_removed=len(file_paths))
