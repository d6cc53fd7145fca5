"""
Password Hashing
================
Salted, slow, one-way password hashing.

Argon2id (argon2-cffi) is the default scheme. bcrypt is supported both as a
configurable scheme and for verifying hashes produced by older deployments.
The scheme of a stored hash is detected from its prefix.

Hashing runs in a thread pool executor so the event loop stays responsive.
"""

from .hasher import get_cached_hasher, detect_scheme
from .async_ops import hash_password, verify_password
from .sync_ops import hash_password_sync, verify_password_sync

__all__ = [
    # Hasher
    "get_cached_hasher",
    "detect_scheme",
    # Async Operations
    "hash_password",
    "verify_password",
    # Sync Operations
    "hash_password_sync",
    "verify_password_sync",
]
