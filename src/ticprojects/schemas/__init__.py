from src.ticprojects.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenClaims,
)
from src.ticprojects.schemas.project import (
    MessageResponse,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectRead,
    ProjectResponse,
    ProjectUpdate,
)
from src.ticprojects.schemas.user import UserRead

__all__ = [
    # Auth
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenClaims",
    # Project
    "MessageResponse",
    "ProjectDetailResponse",
    "ProjectListResponse",
    "ProjectRead",
    "ProjectResponse",
    "ProjectUpdate",
    # User
    "UserRead",
]
