"""
Store Read Retries
==================
Bounded retries for idempotent storage reads.
"""

from .reads import RetryExhausted, retry_read

__all__ = [
    "RetryExhausted",
    "retry_read",
]
