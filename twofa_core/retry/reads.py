"""
Store Read Retries
==================
Bounded retries for idempotent store reads. Writes are never routed through
here: a failed write may have landed before the error surfaced.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar
import structlog

from twofa_core.config import AuthConfig
from twofa_core.errors import StorageUnavailable

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RetryExhausted(Exception):
    """A store read kept failing after every allowed attempt."""

    def __init__(self, attempts: int, last_exception: StorageUnavailable):
        super().__init__(f"Store read failed after {attempts} attempts: {last_exception}")
        self.attempts = attempts
        self.last_exception = last_exception


async def retry_read(
    read: Callable[..., Awaitable[T]],
    *args,
    config: Optional[AuthConfig] = None,
    **kwargs,
) -> T:
    """
    Await ``read(*args, **kwargs)``, retrying on ``StorageUnavailable``.

    ``config.storage_read_retries`` extra attempts are made after the first,
    spaced ``storage_retry_delay`` apart and doubling each time. Any other
    exception propagates untouched.

    Raises:
        RetryExhausted: every attempt raised ``StorageUnavailable``
    """
    config = config or AuthConfig()
    attempts = 1 + config.storage_read_retries
    name = getattr(read, "__qualname__", repr(read))

    attempt = 0
    while True:
        attempt += 1
        try:
            return await read(*args, **kwargs)
        except StorageUnavailable as e:
            if attempt >= attempts:
                logger.error(
                    "Store read failed",
                    read=name,
                    store=e.store,
                    attempts=attempt,
                    error=e.message,
                )
                raise RetryExhausted(attempt, e) from e

            delay = config.storage_retry_delay * (2 ** (attempt - 1))
            delay *= 0.5 + random.random()

            logger.warning(
                "Retrying store read",
                read=name,
                store=e.store,
                attempt=attempt,
                delay=round(delay, 3),
                error=e.message,
            )
            await asyncio.sleep(delay)
