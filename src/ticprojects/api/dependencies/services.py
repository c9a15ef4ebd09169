"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.ticprojects.api.dependencies.db import DBSession
from src.ticprojects.api.dependencies.repositories import (
    ProjectFileRepo,
    ProjectRepo,
    UserRepo,
)
from src.ticprojects.core.storage import FileStorage, get_file_storage
from src.ticprojects.services import AuthService, ProjectService


def get_auth_service(user_repo: UserRepo, session: DBSession) -> AuthService:
    return AuthService(user_repo, session)


def get_project_service(
    project_repo: ProjectRepo,
    file_repo: ProjectFileRepo,
    storage: Annotated[FileStorage, Depends(get_file_storage)],
    session: DBSession,
) -> ProjectService:
    """Get project service with its repositories and the attachment storage."""
    return ProjectService(project_repo, file_repo, storage, session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
