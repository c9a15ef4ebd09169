"""Authentication dependencies - bearer token verification."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, Header

from src.ticprojects.api.dependencies.repositories import UserRepo
from src.ticprojects.core.exceptions import AuthError
from src.ticprojects.core.logging import bind_user_context
from src.ticprojects.core.security import ACCESS_TOKEN_TYPE, decode_token
from src.ticprojects.models import User
from src.ticprojects.schemas.auth import TokenClaims

NO_TOKEN = "No token provided"
INVALID_TOKEN = "Invalid or expired token"


def verify_bearer_token(authorization: str | None) -> TokenClaims:
    """Validate an Authorization header value and return the token claims.

    Pure check: signature, expiry, token type and claim shape.

    Raises:
        AuthError: header missing, or token malformed, tampered or expired.
    """
    if not authorization:
        raise AuthError(NO_TOKEN)

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError(INVALID_TOKEN)

    payload = decode_token(token.strip())
    if payload is None:
        raise AuthError(INVALID_TOKEN)

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthError(INVALID_TOKEN)

    try:
        return TokenClaims(
            identity_id=int(payload["sub"]),
            email=str(payload["email"]),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise AuthError(INVALID_TOKEN) from e


async def get_current_identity(
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Verify the bearer token and load the identity it names."""
    claims = verify_bearer_token(authorization)

    user = await user_repo.get_by_id(claims.identity_id)
    if user is None:
        raise AuthError(INVALID_TOKEN)

    bind_user_context(claims.identity_id, claims.email)
    return user


CurrentIdentity = Annotated[User, Depends(get_current_identity)]
