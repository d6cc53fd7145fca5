"""
Sync Password Operations
========================
Synchronous hashing and verification. Async callers should use
``twofa_core.password.async_ops`` instead.
"""

from typing import Optional

import bcrypt
from argon2.exceptions import InvalidHashError, VerificationError

from twofa_core.config import AuthConfig
from .hasher import get_cached_hasher, detect_scheme

# bcrypt only looks at the first 72 bytes; longer inputs are refused, not truncated.
BCRYPT_MAX_BYTES = 72


def _bcrypt_input(password: str) -> Optional[bytes]:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return None
    return encoded


def _argon2_hasher(config: AuthConfig):
    return get_cached_hasher(
        config.argon2_time_cost,
        config.argon2_memory_cost,
        config.argon2_parallelism,
    )


def hash_password_sync(password: str, config: Optional[AuthConfig] = None) -> str:
    """
    Hash a password with the configured scheme.

    A fresh salt is generated for every call and embedded in the result,
    so hashing the same password twice yields different strings.

    Raises:
        ValueError: bcrypt is configured and the password exceeds 72 bytes
    """
    config = config or AuthConfig()

    if config.password_scheme == "bcrypt":
        encoded = _bcrypt_input(password)
        if encoded is None:
            raise ValueError(f"bcrypt passwords are limited to {BCRYPT_MAX_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=config.bcrypt_rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    return _argon2_hasher(config).hash(password)


def verify_password_sync(
    password: str,
    password_hash: str,
    config: Optional[AuthConfig] = None,
) -> bool:
    """
    Verify a password against an Argon2id or bcrypt hash.

    Never raises: malformed or unrecognised hashes verify as False, as do
    passwords over 72 bytes checked against a bcrypt hash.
    """
    if password is None:
        return False

    scheme = detect_scheme(password_hash)

    if scheme == "argon2":
        config = config or AuthConfig()
        try:
            return _argon2_hasher(config).verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False
        except Exception:
            return False

    if scheme == "bcrypt":
        encoded = _bcrypt_input(password)
        if encoded is None:
            return False
        try:
            return bcrypt.checkpw(
                encoded,
                password_hash.encode("utf-8"),
            )
        except Exception:
            return False

    return False
