"""Repository layer - data access abstraction."""

from src.ticprojects.repositories.base import BaseRepository
from src.ticprojects.repositories.project import ProjectFileRepository, ProjectRepository
from src.ticprojects.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ProjectFileRepository",
    "ProjectRepository",
    "UserRepository",
]
