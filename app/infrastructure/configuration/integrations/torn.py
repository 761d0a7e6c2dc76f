"""Torn API integration settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class TornSettings(IntegrationSettings):
    """Torn API configuration.

    Environment Variables:
        TORN_API_KEY: Key used for item and user lookups
        TORN_FACTION_API_KEY: Key with faction access, used for crimes
        PROVIDER_KEYS: Comma-separated keys of members who send items
        TORN_API_URL: Base URL of the Torn API
        TORN_HTTP_TIMEOUT_SECONDS: Transport timeout for a single request
        TORN_CACHE_TTL_SECONDS: Freshness window for item/user lookups

    Example:
        ```python
        from infrastructure.configuration import settings

        api_key = settings.torn.TORN_API_KEY
        keys = settings.torn.provider_keys
        ```
    """

    TORN_API_KEY: str = Field(default="", alias="TORN_API_KEY")
    TORN_FACTION_API_KEY: str = Field(default="", alias="TORN_FACTION_API_KEY")
    PROVIDER_KEYS: str = Field(default="", alias="PROVIDER_KEYS")
    TORN_API_URL: str = Field(default="https://api.torn.com", alias="TORN_API_URL")
    TORN_HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0, alias="TORN_HTTP_TIMEOUT_SECONDS"
    )
    TORN_CACHE_TTL_SECONDS: int = Field(default=3600, alias="TORN_CACHE_TTL_SECONDS")

    @property
    def provider_keys(self) -> List[str]:
        """Provider API keys with blanks and surrounding whitespace removed."""
        return [key.strip() for key in self.PROVIDER_KEYS.split(",") if key.strip()]
