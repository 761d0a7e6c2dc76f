"""Resilience patterns and implementations.

This module contains resilience-related infrastructure components: the
async retry executor with its resilience profiles, and the circuit breaker
guarding the notification channel.
"""

from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitState,
)
from infrastructure.resilience.retry import (
    DEFAULT_RESILIENCE_PROFILES,
    INFINITE_RESILIENCE_PROFILES,
    ResilienceProfiles,
    RetryExhaustedError,
    RetryPolicy,
    calculate_backoff_delay,
    get_resilience_profiles,
    with_retry,
)

__all__ = [
    # Circuit Breaker
    "CircuitBreaker",
    "CircuitState",
    # Retry
    "RetryPolicy",
    "RetryExhaustedError",
    "calculate_backoff_delay",
    "with_retry",
    "ResilienceProfiles",
    "DEFAULT_RESILIENCE_PROFILES",
    "INFINITE_RESILIENCE_PROFILES",
    "get_resilience_profiles",
]
