from datetime import datetime

from pydantic import BaseModel, EmailStr

from src.ticprojects.schemas.user import UserRead


class RegisterRequest(BaseModel):
    """Presence of every field is checked by AuthService.register."""

    email: EmailStr | None = None
    password: str | None = None
    name: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    """Returned by both register and login."""

    message: str
    token: str
    user: UserRead


class TokenClaims(BaseModel):
    """Decoded, verified access token."""

    identity_id: int
    email: str
    issued_at: datetime
    expires_at: datetime
