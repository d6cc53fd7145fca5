"""
Authentication Errors
=====================
Exception classes for credential, OTP and storage failures.

Messages carried by these exceptions are technical and meant for logs.
User-facing wording lives in ``twofa_core.auth.messages``.
"""

from typing import Optional


class AuthError(Exception):
    """Base exception for all authentication errors."""

    code = "AUTH_ERROR"

    def __init__(self, message: str = "", username: Optional[str] = None):
        self.message = message or self.__class__.__doc__ or self.code
        self.username = username
        super().__init__(self.message)


class UsernameTaken(AuthError):
    """Username is already registered."""
    code = "USERNAME_TAKEN"


class InvalidCredentials(AuthError):
    """Unknown username or wrong password."""
    code = "INVALID_CREDENTIALS"


class OtpInvalid(AuthError):
    """Submitted OTP does not match the pending challenge."""
    code = "OTP_INVALID"


class NoPendingChallenge(AuthError):
    """No OTP challenge is pending for the username."""
    code = "NO_PENDING_CHALLENGE"


class OtpExpired(NoPendingChallenge):
    """Pending OTP is past its validity window."""
    code = "OTP_EXPIRED"


class StorageUnavailable(AuthError):
    """Underlying credential or OTP store failed."""
    code = "STORAGE_UNAVAILABLE"

    def __init__(
        self,
        message: str = "",
        username: Optional[str] = None,
        store: str = "unknown",
    ):
        self.store = store
        super().__init__(message, username=username)


class OtpDeliveryFailed(AuthError):
    """OTP could not be handed to the delivery channel."""
    code = "OTP_DELIVERY_FAILED"
