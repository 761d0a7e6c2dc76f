"""Retry executor and resilience profiles.

Architecture:
- RetryPolicy: Immutable retry behavior (attempts, backoff window, per-attempt timeout)
- with_retry: Async executor applying a policy to a zero-argument operation
- ResilienceProfiles: Named policies for API requests, sheet I/O and the cycle
- get_resilience_profiles: Select the bounded or infinite profile table

Usage:
    from infrastructure.resilience.retry import (
        get_resilience_profiles,
        with_retry,
    )

    profiles = get_resilience_profiles("default")
    item = await with_retry(
        profiles.api_request,
        lambda: torn_client.get_item(item_id),
        operation_name="get_item",
    )
"""

from infrastructure.resilience.retry.executor import (
    RetryExhaustedError,
    calculate_backoff_delay,
    with_retry,
)
from infrastructure.resilience.retry.policy import RetryPolicy
from infrastructure.resilience.retry.profiles import (
    DEFAULT_RESILIENCE_PROFILES,
    INFINITE_RESILIENCE_PROFILES,
    RETRY_MODE_DEFAULT,
    RETRY_MODE_INFINITE,
    ResilienceProfiles,
    get_resilience_profiles,
)

__all__ = [
    "RetryPolicy",
    "RetryExhaustedError",
    "calculate_backoff_delay",
    "with_retry",
    "ResilienceProfiles",
    "DEFAULT_RESILIENCE_PROFILES",
    "INFINITE_RESILIENCE_PROFILES",
    "RETRY_MODE_DEFAULT",
    "RETRY_MODE_INFINITE",
    "get_resilience_profiles",
]
