"""Security utilities.

Re-exports all security-related functions for convenience.
"""

from src.ticprojects.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    dummy_password_hash,
    get_password_hasher,
    hash_password,
    verify_password,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "create_access_token",
    "decode_token",
    "dummy_password_hash",
    "get_password_hasher",
    "hash_password",
    "verify_password",
]
