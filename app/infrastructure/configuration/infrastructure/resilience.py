"""Resilience infrastructure settings."""

from typing import Literal

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ResilienceSettings(InfrastructureSettings):
    """Retry mode and processing cadence.

    Environment Variables:
        RETRY_MODE: 'default' for bounded retries, 'infinite' to retry
            every external call until it succeeds or the process stops
        PROCESS_INTERVAL_SECONDS: Seconds between processing cycles (default: 60)

    Example:
        ```python
        from infrastructure.configuration import settings

        profiles = get_resilience_profiles(settings.resilience.retry_mode)
        ```
    """

    retry_mode: Literal["default", "infinite"] = Field(
        default="default",
        alias="RETRY_MODE",
        description="Retry profile table: 'default' (bounded) or 'infinite'",
    )
    process_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        alias="PROCESS_INTERVAL_SECONDS",
        description="Fixed period between processing cycles (seconds)",
    )
