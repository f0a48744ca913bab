"""Retry utilities for transient storage failures.

Built on tenacity. Only idempotent reads are wrapped; writes surface their
failure to the caller, which owns the retry decision.
"""

from __future__ import annotations

import logging

from pymongo.errors import AutoReconnect, NetworkTimeout, ServerSelectionTimeoutError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

TRANSIENT_STORE_ERRORS: tuple[type[BaseException], ...] = (
    AutoReconnect,
    NetworkTimeout,
    ServerSelectionTimeoutError,
)


def retry_async(
    max_retries: int = 2,
    retry_delay: float = 0.2,
    backoff_factor: float = 2.0,
    retry_exceptions: tuple[type[BaseException], ...] = TRANSIENT_STORE_ERRORS,
):
    """Return a tenacity decorator for async callables.

    Args:
        max_retries: Attempts after the first one.
        retry_delay: Multiplier for the exponential wait, in seconds.
        backoff_factor: Exponential base.
        retry_exceptions: Exception types that trigger another attempt.

    Example:
        @retry_async(max_retries=3)
        async def load():
            return await UserLocation.find_one(...)
    """
    return retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=retry_delay, exp_base=backoff_factor),
        retry=retry_if_exception_type(retry_exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
