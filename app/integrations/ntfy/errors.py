"""Notification error classification."""

from enum import Enum
from typing import Optional


class NotificationErrorType(Enum):
    """Why a notification could not be delivered."""

    AUTH = "auth"
    CLIENT = "client"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    NETWORK = "network"
    TIMEOUT = "timeout"
    CIRCUIT_OPEN = "circuit_open"
    MAX_RETRIES_EXCEEDED = "max_retries_exceeded"
    UNKNOWN = "unknown"


RETRYABLE_TYPES = frozenset(
    {
        NotificationErrorType.NETWORK,
        NotificationErrorType.SERVER,
        NotificationErrorType.TIMEOUT,
        NotificationErrorType.RATE_LIMIT,
    }
)

NON_RETRYABLE_TYPES = frozenset(
    {
        NotificationErrorType.AUTH,
        NotificationErrorType.CLIENT,
        NotificationErrorType.CIRCUIT_OPEN,
        NotificationErrorType.MAX_RETRIES_EXCEEDED,
    }
)


class NotificationError(Exception):
    """A failed notification send.

    Attributes:
        error_type: Classification of the failure.
        status_code: HTTP status code, 0 when there was no response.
        attempt: 1-based attempt that produced the error (0 if none was made).
        underlying: The original error, if any.
    """

    def __init__(
        self,
        error_type: NotificationErrorType,
        status_code: int = 0,
        attempt: int = 0,
        underlying: Optional[BaseException] = None,
    ):
        self.error_type = error_type
        self.status_code = status_code
        self.attempt = attempt
        self.underlying = underlying
        super().__init__(
            f"notification failed [{error_type.value}] attempt {attempt}: {underlying}"
        )

    @property
    def is_retryable(self) -> bool:
        if self.error_type in RETRYABLE_TYPES:
            return True
        if self.error_type in NON_RETRYABLE_TYPES:
            return False
        return self.status_code >= 500


def classify_status_code(status_code: int) -> NotificationErrorType:
    """Map an HTTP error status to a notification error type.

    Status Code Mapping:
    - 401, 403: AUTH
    - 429: RATE_LIMIT
    - other 4xx: CLIENT
    - 5xx: SERVER
    - anything else: UNKNOWN
    """
    if status_code in (401, 403):
        return NotificationErrorType.AUTH
    if status_code == 429:
        return NotificationErrorType.RATE_LIMIT
    if 400 <= status_code < 500:
        return NotificationErrorType.CLIENT
    if status_code >= 500:
        return NotificationErrorType.SERVER
    return NotificationErrorType.UNKNOWN
