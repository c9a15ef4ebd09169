from src.ticprojects.services.auth_service import AuthResult, AuthService
from src.ticprojects.services.project_service import ProjectService, validate_project_fields

__all__ = [
    "AuthResult",
    "AuthService",
    "ProjectService",
    "validate_project_fields",
]
