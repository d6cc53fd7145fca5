"""
OTP Stores
==========
Issue, verify and expire one-time codes, one pending challenge per username.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Dict, Optional
import structlog

from twofa_core.config import AuthConfig
from twofa_core.locks import KeyedLock
from .models import Clock, OtpChallenge, OtpEntry, OtpVerification, utc_now
from .codes import generate_challenge_id, generate_otp

logger = structlog.get_logger(__name__)


class OtpStore(ABC):
    """
    Interface for OTP storage.

    Implementations must make ``issue`` and ``verify`` atomic per username:
    issuing a new code and consuming the current one never interleave.
    Backend failures surface as ``StorageUnavailable``.
    """

    @abstractmethod
    async def issue(self, username: str) -> OtpChallenge:
        """Create a code for username, replacing any pending one."""

    @abstractmethod
    async def verify(
        self,
        username: str,
        submitted_code: str,
        challenge_id: Optional[str] = None,
    ) -> OtpVerification:
        """Check a submitted code, consuming it when valid."""

    @abstractmethod
    async def discard(self, username: str, challenge_id: Optional[str] = None) -> bool:
        """
        Drop the pending challenge. Returns True if one was removed.

        With ``challenge_id`` the entry is only removed while it still belongs
        to that attempt, so cleaning up a failed login cannot drop a newer one.
        """

    @abstractmethod
    async def purge_expired(self) -> int:
        """Remove stale entries. Returns how many were removed."""


class InMemoryOtpStore(OtpStore):
    """
    Process-local OTP store with per-username locking.

    Expiry is evaluated lazily at verify time; ``issue`` also sweeps stale
    entries of other users opportunistically.

    Example:
        store = InMemoryOtpStore(AuthConfig(otp_validity_seconds=120))
        challenge = await store.issue("alice")
        result = await store.verify("alice", challenge.code)
    """

    def __init__(self, config: Optional[AuthConfig] = None, clock: Optional[Clock] = None):
        self.config = config or AuthConfig()
        self.clock = clock or utc_now
        self.validity = timedelta(seconds=self.config.otp_validity_seconds)
        self._entries: Dict[str, OtpEntry] = {}
        self._locks = KeyedLock()

    async def issue(self, username: str) -> OtpChallenge:
        code = generate_otp(self.config.otp_length)
        entry = OtpEntry.create(username, code, generate_challenge_id(), self.clock())

        async with self._locks.hold(username):
            replaced = username in self._entries
            self._entries[username] = entry

        logger.info(
            "OTP issued",
            username=username,
            challenge_id=entry.challenge_id,
            replaced_previous=replaced,
            expires_in=self.config.otp_validity_seconds,
        )

        await self.purge_expired()

        return OtpChallenge(
            username=username,
            code=code,
            challenge_id=entry.challenge_id,
            created_at=entry.created_at,
            expires_in=self.config.otp_validity_seconds,
        )

    async def verify(
        self,
        username: str,
        submitted_code: str,
        challenge_id: Optional[str] = None,
    ) -> OtpVerification:
        async with self._locks.hold(username):
            entry = self._entries.get(username)

            if entry is None:
                logger.info("OTP not found", username=username)
                return OtpVerification.NOT_FOUND

            if entry.is_expired(self.clock(), self.validity):
                del self._entries[username]
                logger.warning("OTP expired", username=username, challenge_id=entry.challenge_id)
                return OtpVerification.EXPIRED

            if entry.consumed:
                logger.warning("OTP replay rejected", username=username, challenge_id=entry.challenge_id)
                return OtpVerification.INVALID

            if challenge_id is not None and challenge_id != entry.challenge_id:
                logger.warning("OTP challenge mismatch", username=username)
                return OtpVerification.INVALID

            if not entry.matches(submitted_code):
                logger.warning("Invalid OTP attempt", username=username, challenge_id=entry.challenge_id)
                return OtpVerification.INVALID

            entry.consumed = True

        logger.info("OTP verified successfully", username=username, challenge_id=entry.challenge_id)
        return OtpVerification.VALID

    async def discard(self, username: str, challenge_id: Optional[str] = None) -> bool:
        async with self._locks.hold(username):
            entry = self._entries.get(username)
            if entry is None:
                return False
            if challenge_id is not None and entry.challenge_id != challenge_id:
                logger.info("OTP discard skipped, challenge replaced", username=username)
                return False
            del self._entries[username]
            return True

    async def purge_expired(self) -> int:
        now = self.clock()
        # Entries whose username is locked are left for their holder to judge.
        expired = [
            username for username, entry in self._entries.items()
            if username not in self._locks and entry.is_expired(now, self.validity)
        ]
        for username in expired:
            del self._entries[username]

        if expired:
            logger.debug("Purged expired OTPs", count=len(expired))
        return len(expired)

    def pending_count(self) -> int:
        """Number of stored entries, including not-yet-collected expired ones."""
        return len(self._entries)
