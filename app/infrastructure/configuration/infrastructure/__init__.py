"""Infrastructure settings __init__ - exports infrastructure-level settings."""

from infrastructure.configuration.infrastructure.resilience import ResilienceSettings

__all__ = ["ResilienceSettings"]
