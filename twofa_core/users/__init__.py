"""
Credential Store
================
User records keyed by unique username.
"""

from .models import UserRecord
from .store import CredentialStore, InMemoryCredentialStore

__all__ = [
    "UserRecord",
    "CredentialStore",
    "InMemoryCredentialStore",
]
