"""Named resilience profiles.

Three policies cover every call site: single API requests, spreadsheet
reads and writes, and the processing cycle as a whole. Two tables exist,
bounded and infinite, sharing the same timings.
"""

from dataclasses import dataclass

from infrastructure.resilience.retry.policy import RetryPolicy

RETRY_MODE_DEFAULT = "default"
RETRY_MODE_INFINITE = "infinite"


@dataclass(frozen=True)
class ResilienceProfiles:
    """The policies applied to each class of operation."""

    api_request: RetryPolicy
    sheet_read: RetryPolicy
    process_loop: RetryPolicy


DEFAULT_RESILIENCE_PROFILES = ResilienceProfiles(
    api_request=RetryPolicy(
        max_attempts=3, base_delay=1.0, max_delay=30.0, per_attempt_timeout=10.0
    ),
    sheet_read=RetryPolicy(
        max_attempts=3, base_delay=2.0, max_delay=30.0, per_attempt_timeout=30.0
    ),
    process_loop=RetryPolicy(
        max_attempts=3, base_delay=5.0, max_delay=60.0, per_attempt_timeout=30.0
    ),
)

INFINITE_RESILIENCE_PROFILES = ResilienceProfiles(
    api_request=RetryPolicy(
        max_attempts=0,
        base_delay=1.0,
        max_delay=30.0,
        per_attempt_timeout=10.0,
        infinite=True,
    ),
    sheet_read=RetryPolicy(
        max_attempts=0,
        base_delay=2.0,
        max_delay=30.0,
        per_attempt_timeout=30.0,
        infinite=True,
    ),
    process_loop=RetryPolicy(
        max_attempts=0,
        base_delay=5.0,
        max_delay=60.0,
        per_attempt_timeout=30.0,
        infinite=True,
    ),
)


def get_resilience_profiles(mode: str = RETRY_MODE_DEFAULT) -> ResilienceProfiles:
    """Select the profile table for a retry mode.

    Args:
        mode: ``"default"`` for bounded retries or ``"infinite"``.

    Returns:
        The matching ResilienceProfiles.

    Raises:
        ValueError: If mode is not recognised.
    """
    normalized = mode.strip().lower()
    if normalized == RETRY_MODE_DEFAULT:
        return DEFAULT_RESILIENCE_PROFILES
    if normalized == RETRY_MODE_INFINITE:
        return INFINITE_RESILIENCE_PROFILES
    raise ValueError(f"Unknown retry mode: {mode!r}")
