"""
OTP Delivery
============
Out-of-band channels for handing a code to the user.
"""

from abc import ABC, abstractmethod
import structlog

from .models import OtpChallenge

logger = structlog.get_logger("twofa_core.otp.delivery")


class OtpDelivery(ABC):
    """Channel that transmits an issued code to its user."""

    @abstractmethod
    async def deliver(self, challenge: OtpChallenge) -> None:
        """
        Send the code.

        Raises:
            Exception: Any failure; the caller discards the challenge.
        """


class ConsoleOtpDelivery(OtpDelivery):
    """
    Writes the code to the operational log.

    Development stand-in for SMS/email. Never use in production: anyone
    with log access can complete a login.
    """

    async def deliver(self, challenge: OtpChallenge) -> None:
        minutes = challenge.expires_in / 60
        logger.warning(
            f"[MFA OTP] User={challenge.username} OTP={challenge.code} "
            f"(valid {minutes:g} min)",
            username=challenge.username,
            challenge_id=challenge.challenge_id,
            expires_in=challenge.expires_in,
        )
