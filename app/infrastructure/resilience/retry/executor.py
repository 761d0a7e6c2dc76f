"""Async retry executor with jittered exponential backoff.

Every external call of the bot (Torn API, Google Sheets, the processing
cycle itself) goes through :func:`with_retry` with a :class:`RetryPolicy`
taken from the active resilience profiles.

Behavior:
- Each attempt runs under ``asyncio.wait_for`` with the policy's
  per-attempt timeout; an expired attempt is an ordinary failure.
- A bounded policy gives up after ``max_attempts + 1`` invocations and
  raises :class:`RetryExhaustedError` chained from the last error.
- Cancelling the awaiting task interrupts the running attempt or the
  backoff sleep and propagates ``asyncio.CancelledError`` unchanged.
"""

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry.policy import RetryPolicy

logger = get_module_logger()

T = TypeVar("T")

# Exponent cap; keeps 2**attempt finite for infinite policies.
MAX_BACKOFF_EXPONENT = 30


class RetryExhaustedError(Exception):
    """Raised when a bounded policy runs out of attempts.

    Attributes:
        operation_name: Label of the operation that failed.
        attempts: Number of invocations made.
        last_error: Error raised by the final attempt.
    """

    def __init__(self, operation_name: str, attempts: int, last_error: BaseException):
        self.operation_name = operation_name
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{operation_name} failed after {attempts} attempts: "
            f"{_describe_error(last_error)}"
        )


def _describe_error(error: BaseException) -> str:
    # asyncio timeouts carry no message
    return str(error) or type(error).__name__


def calculate_backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Compute the wait before the next attempt.

    The exponential delay ``base_delay * 2**attempt`` is capped at
    ``max_delay``, scaled by a uniform jitter factor in [0.5, 1.5] and
    capped again, so the result always lies in
    ``[0.5 * min(base_delay * 2**attempt, max_delay), max_delay]``.

    Args:
        attempt: Zero-based index of the attempt that just failed.
        base_delay: Base delay (seconds).
        max_delay: Upper bound on the delay (seconds).

    Returns:
        Delay in seconds.
    """
    safe_attempt = min(max(attempt, 0), MAX_BACKOFF_EXPONENT)
    delay = min(base_delay * (2**safe_attempt), max_delay)
    delay *= random.uniform(0.5, 1.5)
    return min(delay, max_delay)


async def with_retry(
    policy: RetryPolicy,
    operation: Callable[[], Awaitable[T]],
    *,
    operation_name: str = "operation",
) -> T:
    """Run ``operation`` until it succeeds or the policy gives up.

    Args:
        policy: Retry policy to apply.
        operation: Zero-argument callable returning a fresh awaitable per
            attempt (e.g. ``lambda: client.get_item(item_id)``).
        operation_name: Label used in logs and in the exhaustion error.

    Returns:
        The value produced by the first successful attempt.

    Raises:
        RetryExhaustedError: A bounded policy ran out of attempts.
        asyncio.CancelledError: The awaiting task was cancelled.
    """
    attempt = 0
    while True:
        try:
            return await asyncio.wait_for(operation(), timeout=policy.per_attempt_timeout)
        except Exception as e:
            if not policy.infinite and attempt >= policy.max_attempts:
                logger.warning(
                    "retry_exhausted",
                    operation=operation_name,
                    attempts=attempt + 1,
                    error=_describe_error(e),
                )
                raise RetryExhaustedError(operation_name, attempt + 1, e) from e

            delay = calculate_backoff_delay(attempt, policy.base_delay, policy.max_delay)
            logger.debug(
                "retry_attempt_failed",
                operation=operation_name,
                attempt=attempt + 1,
                error=_describe_error(e),
                error_type=type(e).__name__,
                delay_seconds=round(delay, 3),
            )
            await asyncio.sleep(delay)
            attempt += 1
