"""
twofa-core
==========
Two-factor authentication backend: username/password login followed by a
time-boxed one-time passcode.
"""

__version__ = "1.0.0"

# Config
from twofa_core.config import AuthConfig

# Errors
from twofa_core.errors import (
    AuthError,
    UsernameTaken,
    InvalidCredentials,
    OtpInvalid,
    OtpExpired,
    NoPendingChallenge,
    StorageUnavailable,
    OtpDeliveryFailed,
)

# Password
from twofa_core.password import hash_password, verify_password

# Credential Store
from twofa_core.users import UserRecord, CredentialStore, InMemoryCredentialStore

# OTP
from twofa_core.otp import (
    OtpChallenge,
    OtpVerification,
    OtpStore,
    InMemoryOtpStore,
    OtpDelivery,
    ConsoleOtpDelivery,
)

# Auth
from twofa_core.auth import AuthService, AuthAttemptResult, AuthState, AuthStatus

__all__ = [
    "__version__",
    "AuthConfig",
    "AuthError",
    "UsernameTaken",
    "InvalidCredentials",
    "OtpInvalid",
    "OtpExpired",
    "NoPendingChallenge",
    "StorageUnavailable",
    "OtpDeliveryFailed",
    "hash_password",
    "verify_password",
    "UserRecord",
    "CredentialStore",
    "InMemoryCredentialStore",
    "OtpChallenge",
    "OtpVerification",
    "OtpStore",
    "InMemoryOtpStore",
    "OtpDelivery",
    "ConsoleOtpDelivery",
    "AuthService",
    "AuthAttemptResult",
    "AuthState",
    "AuthStatus",
]
