"""
Async Password Hashing
======================
Event-loop friendly wrappers that run hashing in an executor.
"""

import asyncio
from functools import partial
from typing import Optional

from twofa_core.config import AuthConfig
from .sync_ops import hash_password_sync, verify_password_sync


async def hash_password(password: str, config: Optional[AuthConfig] = None) -> str:
    """
    Hash a password with the configured scheme.

    Args:
        password: Plain text password to hash
        config: Service config selecting scheme and cost parameters

    Returns:
        Encoded hash string (includes algorithm, parameters and salt)
    """
    loop = asyncio.get_event_loop()

    # Run in executor to avoid blocking the event loop
    return await loop.run_in_executor(None, partial(hash_password_sync, password, config))


async def verify_password(
    password: str,
    password_hash: str,
    config: Optional[AuthConfig] = None,
) -> bool:
    """
    Verify a password against an Argon2id or bcrypt hash.

    Args:
        password: Plain text password to verify
        password_hash: Stored hash
        config: Service config with Argon2 cost parameters

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    if not password_hash:
        return False

    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(
        None, partial(verify_password_sync, password, password_hash, config)
    )
