"""ntfy push notification integration."""

from integrations.ntfy.client import NtfyClient
from integrations.ntfy.errors import (
    NotificationError,
    NotificationErrorType,
    classify_status_code,
)
from integrations.ntfy.messages import (
    NotificationItem,
    format_batch_message,
    format_individual_message,
)

__all__ = [
    "NtfyClient",
    "NotificationError",
    "NotificationErrorType",
    "classify_status_code",
    "NotificationItem",
    "format_batch_message",
    "format_individual_message",
]
