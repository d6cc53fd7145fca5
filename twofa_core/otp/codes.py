"""
OTP Codes
=========
Random material for a login challenge: the numeric code and its opaque id.
"""

import secrets


def generate_otp(length: int = 6) -> str:
    """
    Generate a uniformly random numeric OTP.

    Leading zeros are preserved, so every value in 000000-999999 is possible.
    """
    return str(secrets.randbelow(10 ** length)).zfill(length)


def generate_challenge_id() -> str:
    """Opaque identifier binding a login attempt to its OTP."""
    return secrets.token_urlsafe(16)
