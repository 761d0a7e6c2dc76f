"""Torn OC items configuration settings - main aggregator."""

from typing import List

from pydantic_settings import BaseSettings

from infrastructure.configuration.base import ENV_FILE_CONFIG

# Integration settings
from infrastructure.configuration.integrations import (
    TornSettings,
    GoogleSheetsSettings,
    NtfySettings,
)

# Infrastructure settings
from infrastructure.configuration.infrastructure import ResilienceSettings

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Torn OC items configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: External service configurations (Torn, Google Sheets, ntfy)
    - **Infrastructure**: Core system configurations (retry mode, interval)

    Environment Variables:
        ENV: Deployment environment; 'production' switches logs to JSON
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR). When empty
            it defaults to WARNING in production and INFO elsewhere.

    Example:
        ```python
        from infrastructure.configuration import settings

        api_key = settings.torn.TORN_API_KEY
        spreadsheet_id = settings.google_sheets.SPREADSHEET_ID

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    # Application-level settings
    ENV: str = "development"
    LOG_LEVEL: str = ""

    # Integration settings
    torn: TornSettings
    google_sheets: GoogleSheetsSettings
    ntfy: NtfySettings

    # Infrastructure settings
    resilience: ResilienceSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if ENV is 'production' (case-insensitive), False otherwise.
        """
        return self.ENV.strip().lower() == "production"

    @property
    def log_level(self) -> str:
        """Resolve the effective log level name.

        Returns:
            The upper-cased LOG_LEVEL when it names a known level, WARNING
            in production or INFO otherwise when it is empty, and INFO when
            it names an unknown level.
        """
        level = self.LOG_LEVEL.strip().upper()
        if not level:
            return "WARNING" if self.is_production else "INFO"
        if level not in VALID_LOG_LEVELS:
            return "INFO"
        return level

    @property
    def has_unknown_log_level(self) -> bool:
        level = self.LOG_LEVEL.strip().upper()
        return bool(level) and level not in VALID_LOG_LEVELS

    def missing_required(self) -> List[str]:
        """List required environment variables that are not set.

        Returns:
            Names of missing variables, in a stable order.
        """
        required = {
            "TORN_API_KEY": self.torn.TORN_API_KEY,
            "TORN_FACTION_API_KEY": self.torn.TORN_FACTION_API_KEY,
            "SPREADSHEET_ID": self.google_sheets.SPREADSHEET_ID,
        }
        return [name for name, value in required.items() if not value.strip()]

    def __init__(self, **kwargs):
        """Build any settings section that was not passed explicitly.

        Args:
            **kwargs: Field values or ready-made sections (mostly for tests).
        """
        for section, section_class in SECTIONS.items():
            if section not in kwargs:
                kwargs[section] = section_class()
        super().__init__(**kwargs)

    model_config = ENV_FILE_CONFIG


SECTIONS = {
    "torn": TornSettings,
    "google_sheets": GoogleSheetsSettings,
    "ntfy": NtfySettings,
    "resilience": ResilienceSettings,
}

settings = Settings()
