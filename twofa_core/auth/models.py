"""
Auth Models
===========
States, outcome kinds and the result object returned to callers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from twofa_core.errors import (
    AuthError,
    InvalidCredentials,
    OtpDeliveryFailed,
    OtpExpired,
    OtpInvalid,
    StorageUnavailable,
    UsernameTaken,
)
from . import messages


class AuthState(str, Enum):
    """Where a username stands in the login flow."""
    ANONYMOUS = "anonymous"
    PASSWORD_VERIFIED = "password_verified"
    OTP_PENDING = "otp_pending"
    AUTHENTICATED = "authenticated"


class AuthStatus(str, Enum):
    """Machine-readable outcome of an auth operation."""
    REGISTERED = "registered"
    USERNAME_TAKEN = "username_taken"
    REGISTRATION_FAILED = "registration_failed"
    INVALID_INPUT = "invalid_input"
    INVALID_CREDENTIALS = "invalid_credentials"
    OTP_SENT = "otp_sent"
    OTP_DELIVERY_FAILED = "otp_delivery_failed"
    AUTHENTICATED = "authenticated"
    OTP_INVALID = "otp_invalid"
    OTP_EXPIRED = "otp_expired"
    RESET = "reset"
    SERVICE_UNAVAILABLE = "service_unavailable"


_SUCCESS_STATUSES = {
    AuthStatus.REGISTERED,
    AuthStatus.OTP_SENT,
    AuthStatus.AUTHENTICATED,
    AuthStatus.RESET,
}

_DEFAULT_MESSAGES = {
    AuthStatus.REGISTERED: messages.REGISTERED,
    AuthStatus.USERNAME_TAKEN: messages.USERNAME_TAKEN,
    AuthStatus.REGISTRATION_FAILED: messages.REGISTRATION_FAILED,
    AuthStatus.INVALID_INPUT: messages.CREDENTIALS_REQUIRED,
    AuthStatus.INVALID_CREDENTIALS: messages.INVALID_CREDENTIALS,
    AuthStatus.OTP_SENT: messages.OTP_SENT,
    AuthStatus.OTP_DELIVERY_FAILED: messages.OTP_DELIVERY_FAILED,
    AuthStatus.AUTHENTICATED: messages.AUTHENTICATED,
    AuthStatus.OTP_INVALID: messages.OTP_INVALID,
    AuthStatus.OTP_EXPIRED: messages.OTP_EXPIRED,
    AuthStatus.RESET: messages.RESET,
    AuthStatus.SERVICE_UNAVAILABLE: messages.SERVICE_UNAVAILABLE,
}

# Expired and missing challenges are one outcome for callers, so both
# raise OtpExpired (a NoPendingChallenge).
_ERRORS = {
    AuthStatus.USERNAME_TAKEN: UsernameTaken,
    AuthStatus.REGISTRATION_FAILED: AuthError,
    AuthStatus.INVALID_INPUT: AuthError,
    AuthStatus.INVALID_CREDENTIALS: InvalidCredentials,
    AuthStatus.OTP_DELIVERY_FAILED: OtpDeliveryFailed,
    AuthStatus.OTP_INVALID: OtpInvalid,
    AuthStatus.OTP_EXPIRED: OtpExpired,
    AuthStatus.SERVICE_UNAVAILABLE: StorageUnavailable,
}


@dataclass(frozen=True)
class AuthAttemptResult:
    """Outcome of one register/login/verify call. Not persisted."""
    status: AuthStatus
    message: str
    state: AuthState = AuthState.ANONYMOUS
    challenge_id: Optional[str] = None
    expires_in: Optional[int] = None

    @classmethod
    def of(cls, status: AuthStatus, state: AuthState = AuthState.ANONYMOUS, **kwargs) -> "AuthAttemptResult":
        """Build a result carrying the standard message for status."""
        message = kwargs.pop("message", None) or _DEFAULT_MESSAGES[status]
        return cls(status=status, message=message, state=state, **kwargs)

    @property
    def ok(self) -> bool:
        return self.status in _SUCCESS_STATUSES

    def raise_for_status(self) -> "AuthAttemptResult":
        """
        Raise the matching ``AuthError`` subclass for a failed outcome.

        Returns self on success, so calls can be chained.
        """
        if self.ok:
            return self
        raise _ERRORS[self.status](self.message)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "message": self.message,
            "status": self.status.value,
            "state": self.state.value,
        }
        if self.challenge_id is not None:
            data["challenge_id"] = self.challenge_id
        if self.expires_in is not None:
            data["expires_in"] = self.expires_in
        return data
