"""Circuit breaker for the notification channel.

The breaker stops hammering a failing push endpoint:
1. CLOSED state: Sends pass through
2. OPEN state: Sends are rejected without a network call

State transitions:
- CLOSED -> OPEN: After failure_threshold consecutive failures
- OPEN -> CLOSED: When a send is requested after half_open_after_seconds
  have elapsed since the last failure; that send is the probe, and a
  failing probe counts toward a fresh threshold
- Any success resets the consecutive failure count

Callers drive the breaker explicitly (allow_request, then record_success
or record_failure) because one logical send may span several retried
HTTP attempts.
"""

import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"


class CircuitBreaker:
    """Thread-safe circuit breaker with send counters.

    Args:
        name: Name of the circuit (typically the channel name)
        failure_threshold: Consecutive failures before opening
        half_open_after_seconds: Seconds after the last failure before a
            probe send is let through
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        half_open_after_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.half_open_after_seconds = half_open_after_seconds
        self._clock = clock

        # State management
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._last_failure_time: Optional[float] = None

        # Lifetime totals
        self._total_sent = 0
        self._total_failed = 0
        self._total_retries = 0

        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        """Get current circuit state."""
        with self._lock:
            return self._state

    @property
    def consecutive_failures(self) -> int:
        with self._lock:
            return self._consecutive_failures

    def allow_request(self) -> bool:
        """Decide whether a send may proceed.

        Returns:
            True when the circuit is closed, or when it is open and the
            half-open window has elapsed (the circuit is then closed and the
            failure count reset). False otherwise.
        """
        with self._lock:
            if self._state == CircuitState.CLOSED:
                return True

            elapsed = self._elapsed_since_failure()
            if elapsed > self.half_open_after_seconds:
                logger.info(
                    "circuit_breaker_half_open",
                    name=self.name,
                    seconds_since_failure=round(elapsed, 1),
                )
                self._transition_to_closed()
                return True

            logger.debug(
                "circuit_breaker_open",
                name=self.name,
                failure_count=self._consecutive_failures,
                retry_in_seconds=int(self.half_open_after_seconds - elapsed),
            )
            return False

    def record_success(self) -> None:
        """Count a delivered message and close the circuit."""
        with self._lock:
            self._total_sent += 1
            if self._consecutive_failures > 0:
                logger.debug(
                    "circuit_breaker_failure_count_reset",
                    name=self.name,
                    previous_failures=self._consecutive_failures,
                )
            if self._state == CircuitState.OPEN:
                self._transition_to_closed()
            self._consecutive_failures = 0

    def record_failure(self) -> None:
        """Count a failed send; open the circuit at the threshold."""
        with self._lock:
            self._total_failed += 1
            self._consecutive_failures += 1
            self._last_failure_time = self._clock()

            if (
                self._state == CircuitState.CLOSED
                and self._consecutive_failures >= self.failure_threshold
            ):
                logger.error(
                    "circuit_breaker_threshold_exceeded",
                    name=self.name,
                    failure_count=self._consecutive_failures,
                    threshold=self.failure_threshold,
                )
                self._transition_to_open()

    def record_retry(self) -> None:
        with self._lock:
            self._total_retries += 1

    def _elapsed_since_failure(self) -> float:
        if self._last_failure_time is None:
            return float("inf")
        return self._clock() - self._last_failure_time

    def _transition_to_closed(self) -> None:
        logger.info("circuit_breaker_closed", name=self.name)
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0

    def _transition_to_open(self) -> None:
        logger.error(
            "circuit_breaker_opened",
            name=self.name,
            half_open_after_seconds=self.half_open_after_seconds,
        )
        self._state = CircuitState.OPEN

    def get_stats(self) -> Dict[str, Any]:
        """Get circuit breaker statistics."""
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "consecutive_failures": self._consecutive_failures,
                "total_sent": self._total_sent,
                "total_failed": self._total_failed,
                "total_retries": self._total_retries,
            }

    def reset(self) -> None:
        """Manually reset the circuit state (counters are kept)."""
        with self._lock:
            logger.info("circuit_breaker_manual_reset", name=self.name)
            self._transition_to_closed()
            self._last_failure_time = None
