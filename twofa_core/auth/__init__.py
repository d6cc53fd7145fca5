"""
Authentication State Machine
============================
Registration, password login and OTP verification.
"""

from .models import AuthState, AuthStatus, AuthAttemptResult
from .service import AuthService

__all__ = [
    "AuthState",
    "AuthStatus",
    "AuthAttemptResult",
    "AuthService",
]
