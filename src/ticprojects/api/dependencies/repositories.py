"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.ticprojects.api.dependencies.db import DBSession
from src.ticprojects.repositories import (
    ProjectFileRepository,
    ProjectRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_project_file_repository(session: DBSession) -> ProjectFileRepository:
    return ProjectFileRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
ProjectFileRepo = Annotated[ProjectFileRepository, Depends(get_project_file_repository)]
