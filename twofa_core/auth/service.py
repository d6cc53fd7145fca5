"""
Auth Service
============
Orchestrates the login flow:

    ANONYMOUS -> PASSWORD_VERIFIED -> OTP_PENDING -> AUTHENTICATED

There is no server-side session: each call re-derives the state of a
username from the credential and OTP stores. Failures are reported as
generic messages that never reveal whether the username or the password
was wrong.
"""

from typing import Optional
import structlog

from twofa_core.config import AuthConfig
from twofa_core.errors import StorageUnavailable, UsernameTaken
from twofa_core.logging_config import log_audit, log_error
from twofa_core.otp import (
    ConsoleOtpDelivery,
    InMemoryOtpStore,
    OtpDelivery,
    OtpStore,
    OtpVerification,
)
from twofa_core.password import hash_password, verify_password
from twofa_core.retry import RetryExhausted, retry_read
from twofa_core.users import CredentialStore, InMemoryCredentialStore, UserRecord
from . import messages
from .models import AuthAttemptResult, AuthState, AuthStatus

logger = structlog.get_logger(__name__)

# Verified against when the username is unknown, so both failure paths
# spend the same hashing time.
_DUMMY_PASSWORD = "twofa-core-timing-equalizer"


class AuthService:
    """
    The authentication state machine.

    Stores and the delivery channel are injected; the defaults are
    process-local and log the OTP to the console.

    Example:
        service = AuthService()
        await service.register("alice", "Secr3t!")
        result = await service.login("alice", "Secr3t!")
        # code arrives via the delivery channel
        result = await service.verify_otp("alice", code, result.challenge_id)
    """

    def __init__(
        self,
        config: Optional[AuthConfig] = None,
        credentials: Optional[CredentialStore] = None,
        otps: Optional[OtpStore] = None,
        delivery: Optional[OtpDelivery] = None,
    ):
        self.config = config or AuthConfig()
        self.credentials = credentials or InMemoryCredentialStore()
        self.otps = otps or InMemoryOtpStore(self.config)
        self.delivery = delivery or ConsoleOtpDelivery()
        self._dummy_hash: Optional[str] = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register(self, username: str, password: str) -> AuthAttemptResult:
        """
        Create an account.

        Validation and storage failures share one message so callers cannot
        tell them apart; only a taken username is reported distinctly.
        """
        username = (username or "").strip()

        if not username or not password:
            log_audit("auth.register", username or None, "failure", reason="invalid_input")
            return AuthAttemptResult.of(AuthStatus.REGISTRATION_FAILED)

        try:
            existing = await self._lookup(username)
        except RetryExhausted as e:
            log_error(e, context="register.lookup", username=username)
            return AuthAttemptResult.of(AuthStatus.REGISTRATION_FAILED)

        if existing is not None:
            log_audit("auth.register", username, "failure", reason="username_taken")
            return AuthAttemptResult.of(AuthStatus.USERNAME_TAKEN)

        try:
            password_hash = await hash_password(password, self.config)
        except ValueError as e:
            # The configured scheme cannot represent this password.
            log_audit("auth.register", username, "failure", reason="password_rejected")
            logger.info("Password rejected by hasher", username=username, error=str(e))
            return AuthAttemptResult.of(AuthStatus.REGISTRATION_FAILED)

        # Mutations are never retried.
        try:
            await self.credentials.register(username, password_hash)
        except UsernameTaken:
            log_audit("auth.register", username, "failure", reason="username_taken")
            return AuthAttemptResult.of(AuthStatus.USERNAME_TAKEN)
        except StorageUnavailable as e:
            log_error(e, context="register.insert", username=username)
            return AuthAttemptResult.of(AuthStatus.REGISTRATION_FAILED)

        log_audit("auth.register", username)
        return AuthAttemptResult.of(AuthStatus.REGISTERED)

    # ------------------------------------------------------------------
    # Login (first factor)
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str) -> AuthAttemptResult:
        """
        Check the password and, on success, issue and deliver an OTP.

        An unknown username and a wrong password produce identical results.
        """
        username = (username or "").strip()

        if not username or not password:
            return AuthAttemptResult.of(AuthStatus.INVALID_INPUT)

        try:
            user = await self._lookup(username)
        except RetryExhausted as e:
            log_error(e, context="login.lookup", username=username)
            return AuthAttemptResult.of(AuthStatus.SERVICE_UNAVAILABLE)

        if not await self._password_matches(user, password):
            log_audit("auth.login", username, "failure", reason="invalid_credentials")
            return AuthAttemptResult.of(AuthStatus.INVALID_CREDENTIALS)

        logger.info("Password verified", username=username, state=AuthState.PASSWORD_VERIFIED.value)

        try:
            challenge = await self.otps.issue(username)
        except StorageUnavailable as e:
            log_error(e, context="login.issue_otp", username=username)
            return AuthAttemptResult.of(AuthStatus.SERVICE_UNAVAILABLE)

        try:
            await self.delivery.deliver(challenge)
        except Exception as e:
            log_error(e, context="login.deliver_otp", username=username)
            try:
                await self.otps.discard(username, challenge.challenge_id)
            except StorageUnavailable as cleanup_error:
                log_error(cleanup_error, context="login.discard_otp", username=username)
            log_audit("auth.login", username, "failure", reason="otp_delivery_failed")
            return AuthAttemptResult.of(AuthStatus.OTP_DELIVERY_FAILED)

        log_audit("auth.login", username, challenge_id=challenge.challenge_id)
        return AuthAttemptResult.of(
            AuthStatus.OTP_SENT,
            AuthState.OTP_PENDING,
            challenge_id=challenge.challenge_id,
            expires_in=challenge.expires_in,
        )

    # ------------------------------------------------------------------
    # OTP verification (second factor)
    # ------------------------------------------------------------------

    async def verify_otp(
        self,
        username: str,
        code: str,
        challenge_id: Optional[str] = None,
    ) -> AuthAttemptResult:
        """
        Check a submitted OTP.

        A missing challenge is reported exactly like an expired one, so the
        response does not reveal whether the account exists.
        """
        username = (username or "").strip()

        if not username or not code:
            return AuthAttemptResult.of(
                AuthStatus.INVALID_INPUT, message=messages.OTP_REQUIRED
            )

        try:
            outcome = await self.otps.verify(username, code, challenge_id)
        except StorageUnavailable as e:
            log_error(e, context="verify_otp", username=username)
            return AuthAttemptResult.of(AuthStatus.SERVICE_UNAVAILABLE, AuthState.OTP_PENDING)

        if outcome == OtpVerification.VALID:
            log_audit("auth.otp.verify", username)
            return AuthAttemptResult.of(AuthStatus.AUTHENTICATED, AuthState.AUTHENTICATED)

        log_audit("auth.otp.verify", username, "failure", reason=outcome.value)

        if outcome == OtpVerification.INVALID:
            return AuthAttemptResult.of(
                AuthStatus.OTP_INVALID, AuthState.OTP_PENDING, challenge_id=challenge_id
            )

        # EXPIRED and NOT_FOUND: restart from login.
        return AuthAttemptResult.of(AuthStatus.OTP_EXPIRED, AuthState.ANONYMOUS)

    # ------------------------------------------------------------------
    # Reset ("Back to Login")
    # ------------------------------------------------------------------

    async def reset(self, username: str) -> AuthAttemptResult:
        """Abandon any pending challenge and return to ANONYMOUS."""
        username = (username or "").strip()
        if username:
            try:
                discarded = await self.otps.discard(username)
            except StorageUnavailable as e:
                log_error(e, context="reset", username=username)
                return AuthAttemptResult.of(AuthStatus.SERVICE_UNAVAILABLE)
            if discarded:
                logger.info("Pending OTP discarded", username=username)
        return AuthAttemptResult.of(AuthStatus.RESET)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _lookup(self, username: str) -> Optional[UserRecord]:
        """Read a user record, retrying transient storage failures."""
        return await retry_read(self.credentials.lookup, username, config=self.config)

    async def _password_matches(self, user: Optional[UserRecord], password: str) -> bool:
        if user is None:
            if self._dummy_hash is None:
                self._dummy_hash = await hash_password(_DUMMY_PASSWORD, self.config)
            await verify_password(password, self._dummy_hash, self.config)
            return False
        return await verify_password(password, user.password_hash, self.config)
