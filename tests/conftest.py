"""
Shared fixtures: cheap hashing parameters, a manual clock and a delivery
channel that records codes instead of logging them.
"""

from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from twofa_core.config import AuthConfig
from twofa_core.otp import InMemoryOtpStore, OtpChallenge, OtpDelivery


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class RecordingDelivery(OtpDelivery):
    """Keeps delivered challenges so tests can read the codes."""

    def __init__(self):
        self.sent: List[OtpChallenge] = []

    async def deliver(self, challenge: OtpChallenge) -> None:
        self.sent.append(challenge)

    @property
    def last_code(self) -> str:
        return self.sent[-1].code


@pytest.fixture
def config():
    return AuthConfig(
        argon2_time_cost=1,
        argon2_memory_cost=1024,
        argon2_parallelism=1,
        bcrypt_rounds=4,
        storage_retry_delay=0.0,
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def delivery():
    return RecordingDelivery()


@pytest.fixture
def otp_store(config, clock):
    return InMemoryOtpStore(config, clock=clock)
