"""
OTP Models
==========
Data models and enums for OTP issuance and verification.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OtpVerification(str, Enum):
    """Outcome of checking a submitted code."""
    VALID = "valid"
    INVALID = "invalid"
    EXPIRED = "expired"
    NOT_FOUND = "not_found"


def _code_digest(salt: str, code: str, challenge_id: str) -> str:
    # The challenge id is mixed in so a digest is only meaningful for its own attempt.
    return hashlib.sha256(f"{salt}:{challenge_id}:{code}".encode("utf-8")).hexdigest()


@dataclass
class OtpEntry:
    """The pending challenge for one username. Only a salted digest of the code is kept."""
    username: str
    challenge_id: str
    code_hash: str = field(repr=False)
    salt: str = field(repr=False)
    created_at: datetime
    consumed: bool = False

    @classmethod
    def create(cls, username: str, code: str, challenge_id: str, created_at: datetime) -> "OtpEntry":
        """Build an entry for a freshly generated code, discarding the plaintext."""
        salt = secrets.token_hex(16)
        return cls(
            username=username,
            challenge_id=challenge_id,
            code_hash=_code_digest(salt, code, challenge_id),
            salt=salt,
            created_at=created_at,
        )

    def matches(self, submitted_code: str) -> bool:
        """Constant-time exact comparison; whitespace is not trimmed."""
        submitted = _code_digest(self.salt, submitted_code, self.challenge_id)
        return hmac.compare_digest(submitted, self.code_hash)

    def is_expired(self, now: datetime, validity: timedelta) -> bool:
        # Exactly at the window edge still counts as valid.
        return now - self.created_at > validity


@dataclass(frozen=True)
class OtpChallenge:
    """A freshly issued code, handed to the delivery channel."""
    username: str
    code: str = field(repr=False)
    challenge_id: str
    created_at: datetime
    expires_in: int  # seconds

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.expires_in)
