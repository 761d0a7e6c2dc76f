"""Common configuration for every settings section."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Values come from the process environment, then from ./.env
ENV_FILE_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Settings for an external service (Torn API, Google Sheets, ntfy)."""

    model_config = ENV_FILE_CONFIG


class InfrastructureSettings(BaseSettings):
    """Settings for in-process machinery such as retry mode and cycle cadence."""

    model_config = ENV_FILE_CONFIG
