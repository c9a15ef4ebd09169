"""Password hashing (argon2id) and signed access tokens (HS256 JWT)."""

import secrets
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import argon2
from jose import JWTError, jwt

from src.ticprojects.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


@lru_cache
def get_password_hasher() -> argon2.PasswordHasher:
    """argon2id hasher using the cost parameters from settings."""
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


def hash_password(password: str) -> str:
    return get_password_hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """True only if hashed is a valid argon2 hash of password."""
    try:
        return get_password_hasher().verify(hashed, password)
    except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
        return False


@lru_cache
def dummy_password_hash() -> str:
    """Hash of a random secret, checked when a login names an unknown email."""
    return hash_password(secrets.token_urlsafe(32))


def create_access_token(
    identity_id: int,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token naming the identity. Lifetime defaults to ACCESS_TOKEN_EXPIRE_DAYS."""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.access_token_expire_days)

    issued_at = datetime.now(UTC)
    claims = {
        "sub": str(identity_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
        "type": ACCESS_TOKEN_TYPE,
    }
    token: str = jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token


def decode_token(token: str) -> dict[str, Any] | None:
    """Verified claims of token, or None if the signature or expiry check fails."""
    settings = get_settings()
    try:
        claims: dict[str, Any] = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None
    return claims
