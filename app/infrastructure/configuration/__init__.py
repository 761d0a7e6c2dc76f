"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the Torn OC
items bot using Pydantic BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    TornSettings, GoogleSheetsSettings, NtfySettings, ResilienceSettings:
        Domain settings classes (for testing)

Example:
    ```python
    from infrastructure.configuration import settings

    # Access settings
    api_key = settings.torn.TORN_API_KEY
    topic = settings.ntfy.NTFY_TOPIC
    retry_mode = settings.resilience.retry_mode

    # Check environment
    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.integrations import (
    TornSettings,
    GoogleSheetsSettings,
    NtfySettings,
)
from infrastructure.configuration.infrastructure import ResilienceSettings

__all__ = [
    "Settings",
    "settings",
    "TornSettings",
    "GoogleSheetsSettings",
    "NtfySettings",
    "ResilienceSettings",
]
