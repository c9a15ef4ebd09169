from src.ticprojects.models.base import utc_now
from src.ticprojects.models.project import Project, ProjectFile, Review
from src.ticprojects.models.user import User

__all__ = [
    "Project",
    "ProjectFile",
    "Review",
    "User",
    "utc_now",
]
