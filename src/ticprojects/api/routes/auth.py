"""Authentication endpoints."""

from fastapi import APIRouter, status

from src.ticprojects.api.dependencies import AuthServiceDep
from src.ticprojects.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from src.ticprojects.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {
            "description": "Identity created",
            "content": {
                "application/json": {
                    "example": {
                        "message": "User registered successfully",
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "user": {"id": 1, "name": "Alice", "email": "alice@example.com"},
                    }
                }
            },
        },
        400: {"description": "Missing or invalid fields"},
        409: {"description": "Email or username already registered"},
    },
)
async def register(register_data: RegisterRequest, service: AuthServiceDep) -> AuthResponse:
    """Register a new identity and return a signed access token."""
    result = await service.register(
        name=register_data.name,
        email=register_data.email,
        password=register_data.password,
    )
    return AuthResponse(
        message="User registered successfully",
        token=result.token,
        user=UserRead.model_validate(result.user),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Missing fields"},
        401: {"description": "Invalid email or password"},
    },
)
async def login(login_data: LoginRequest, service: AuthServiceDep) -> AuthResponse:
    """Authenticate with email and password and return a fresh token."""
    result = await service.login(login_data.email, login_data.password)
    return AuthResponse(
        message="Login successful",
        token=result.token,
        user=UserRead.model_validate(result.user),
    )
