"""
OTP Generation and Verification
================================
Time-boxed, single-use numeric codes forming the second factor.
"""

from .models import OtpEntry, OtpChallenge, OtpVerification, Clock, utc_now
from .codes import generate_otp, generate_challenge_id
from .store import OtpStore, InMemoryOtpStore
from .delivery import OtpDelivery, ConsoleOtpDelivery

__all__ = [
    # Models
    "OtpEntry",
    "OtpChallenge",
    "OtpVerification",
    "Clock",
    "utc_now",
    # Codes
    "generate_otp",
    "generate_challenge_id",
    # Stores
    "OtpStore",
    "InMemoryOtpStore",
    # Delivery
    "OtpDelivery",
    "ConsoleOtpDelivery",
]
