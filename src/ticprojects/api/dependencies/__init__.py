"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenience.
"""

# Auth
from src.ticprojects.api.dependencies.auth import (
    CurrentIdentity,
    get_current_identity,
    verify_bearer_token,
)

# Database
from src.ticprojects.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.ticprojects.api.dependencies.repositories import (
    ProjectFileRepo,
    ProjectRepo,
    UserRepo,
    get_project_file_repository,
    get_project_repository,
    get_user_repository,
)

# Services
from src.ticprojects.api.dependencies.services import (
    AuthServiceDep,
    ProjectServiceDep,
    get_auth_service,
    get_project_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentIdentity",
    "get_current_identity",
    "verify_bearer_token",
    # Repositories
    "ProjectFileRepo",
    "ProjectRepo",
    "UserRepo",
    "get_project_file_repository",
    "get_project_repository",
    "get_user_repository",
    # Services
    "AuthServiceDep",
    "ProjectServiceDep",
    "get_auth_service",
    "get_project_service",
]
