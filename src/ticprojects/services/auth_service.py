"""Identity service - registration, login and token issuance."""

import asyncio
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.ticprojects.core.exceptions import (
    AuthError,
    ConflictError,
    InternalError,
    ValidationError,
)
from src.ticprojects.core.logging import get_logger
from src.ticprojects.core.security import (
    create_access_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from src.ticprojects.models import User
from src.ticprojects.repositories import UserRepository

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Registers identities and authenticates them.

    Both operations return the identity together with a freshly signed
    access token.
    """

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
    ) -> AuthResult:
        """Create a new identity.

        Raises:
            ValidationError: a field is missing or empty.
            ConflictError: the email or username is already registered.
        """
        if not email or not password or not name:
            raise ValidationError("Email, password, and name are required")

        email = normalize_email(email)

        if await self.user_repo.exists_by_email(email):
            raise ConflictError("User already exists")
        if await self.user_repo.get_by_username(name) is not None:
            raise ConflictError("Username already taken")

        hashed = await asyncio.to_thread(hash_password, password)
        user = User(username=name, email=email, hashed_password=hashed)
        self.user_repo.add(user)

        try:
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent registration
            await self.session.rollback()
            raise ConflictError("User already exists") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Failed to register user")
            raise InternalError("Failed to register user") from e

        await self.session.refresh(user)
        if user.id is None:
            raise InternalError("Failed to register user")

        logger.info("User registered", user_id=user.id)
        return AuthResult(user=user, token=create_access_token(user.id, user.email))

    async def login(self, email: str | None, password: str | None) -> AuthResult:
        """Authenticate by email and password.

        Unknown email and wrong password fail identically.

        Raises:
            ValidationError: a field is missing or empty.
            AuthError: the credentials do not match.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.user_repo.get_by_email(normalize_email(email))

        # Always verify so that unknown emails take as long as wrong passwords
        if user is not None:
            password_hash = user.hashed_password
        else:
            password_hash = await asyncio.to_thread(dummy_password_hash)
        password_valid = await asyncio.to_thread(verify_password, password, password_hash)

        if user is None or not password_valid:
            logger.info("Login failed")
            raise AuthError(INVALID_CREDENTIALS)

        if user.id is None:
            raise InternalError("Failed to load user")
        logger.info("User logged in", user_id=user.id)
        return AuthResult(user=user, token=create_access_token(user.id, user.email))
