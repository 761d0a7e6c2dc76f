"""ntfy push notification settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class NtfySettings(IntegrationSettings):
    """ntfy configuration.

    Environment Variables:
        NTFY_ENABLED: Send push notifications for new items (default: False)
        NTFY_URL: ntfy server base URL
        NTFY_TOPIC: Topic the notifications are published to
        NTFY_BATCH_MODE: One digest per cycle instead of one message per item
        NTFY_PRIORITY: Value of the Priority header (empty to omit)
        NTFY_MAX_RETRIES: Retries after the first send attempt
        NTFY_BASE_DELAY_MS: Base backoff delay in milliseconds
        NTFY_MAX_DELAY_MS: Backoff cap in milliseconds
        NTFY_HTTP_TIMEOUT_SECONDS: Transport timeout for a single send
    """

    NTFY_ENABLED: bool = Field(default=False, alias="NTFY_ENABLED")
    NTFY_URL: str = Field(default="https://ntfy.sh", alias="NTFY_URL")
    NTFY_TOPIC: str = Field(default="torn-oc-items", alias="NTFY_TOPIC")
    NTFY_BATCH_MODE: bool = Field(default=True, alias="NTFY_BATCH_MODE")
    NTFY_PRIORITY: str = Field(default="default", alias="NTFY_PRIORITY")
    NTFY_MAX_RETRIES: int = Field(default=3, alias="NTFY_MAX_RETRIES")
    NTFY_BASE_DELAY_MS: int = Field(default=1000, alias="NTFY_BASE_DELAY_MS")
    NTFY_MAX_DELAY_MS: int = Field(default=30000, alias="NTFY_MAX_DELAY_MS")
    NTFY_HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0, alias="NTFY_HTTP_TIMEOUT_SECONDS"
    )
