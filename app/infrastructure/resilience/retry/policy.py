"""Retry policy definition.

A policy describes how persistently one external call is retried: how many
extra attempts it gets, the exponential backoff window, and how long a
single attempt may take before it counts as a failure.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry behavior for one class of operation.

    Attributes:
        max_attempts: Attempts allowed after the first one. Ignored when
            ``infinite`` is set.
        base_delay: Base delay for exponential backoff (seconds).
        max_delay: Cap on any single backoff delay (seconds).
        per_attempt_timeout: Deadline for a single attempt (seconds).
        infinite: Retry until success or cancellation.

    Example:
        policy = RetryPolicy(
            max_attempts=3,
            base_delay=1.0,
            max_delay=30.0,
            per_attempt_timeout=10.0,
        )
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    per_attempt_timeout: float = 10.0
    infinite: bool = False

    def __post_init__(self) -> None:
        """Validate policy values."""
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if self.per_attempt_timeout <= 0:
            raise ValueError("per_attempt_timeout must be positive")

    @property
    def total_attempts(self) -> int:
        """Total invocations a bounded policy allows (first call included)."""
        return self.max_attempts + 1
