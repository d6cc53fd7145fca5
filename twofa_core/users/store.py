"""
Credential Stores
=================
Storage backends for user records.

Backends raise ``StorageUnavailable`` when the underlying storage fails.
``register`` must be atomic: the existence check and the insert happen
under one lock (or one transaction in a database backend).
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
import structlog

from twofa_core.errors import UsernameTaken
from twofa_core.locks import KeyedLock
from .models import UserRecord

logger = structlog.get_logger(__name__)


class CredentialStore(ABC):
    """Interface for user record storage."""

    @abstractmethod
    async def register(self, username: str, password_hash: str) -> UserRecord:
        """
        Insert a new user record.

        Raises:
            UsernameTaken: If the username is already registered
            StorageUnavailable: If the backend failed
        """

    @abstractmethod
    async def lookup(self, username: str) -> Optional[UserRecord]:
        """
        Fetch a user record, or None if absent.

        Raises:
            StorageUnavailable: If the backend failed
        """


class InMemoryCredentialStore(CredentialStore):
    """
    Process-local credential store.

    Suitable for development and tests; records are lost on restart.
    """

    def __init__(self):
        self._users: Dict[str, UserRecord] = {}
        self._locks = KeyedLock()

    async def register(self, username: str, password_hash: str) -> UserRecord:
        async with self._locks.hold(username):
            if username in self._users:
                raise UsernameTaken(
                    f"User '{username}' already exists", username=username
                )
            record = UserRecord(username=username, password_hash=password_hash)
            self._users[username] = record

        logger.info("User registered", username=username)
        return record

    async def lookup(self, username: str) -> Optional[UserRecord]:
        return self._users.get(username)
