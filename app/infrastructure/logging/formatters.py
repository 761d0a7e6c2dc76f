"""Structlog processors that sanitise log entries.

Torn API keys travel both as settings values and inside request URLs
(``?selections=basic&key=...``), so masking covers sensitive field names as
well as ``key=`` query parameters embedded in any string value.
"""

import re
from typing import Any, Callable, Dict, FrozenSet, Optional

EventDict = Dict[str, Any]
Processor = Callable[[Any, str, EventDict], EventDict]

# Substrings of field names whose values are never logged
SENSITIVE_PATTERNS = frozenset(
    {
        "api_key",
        "apikey",
        "provider_key",
        "password",
        "secret",
        "token",
        "authorization",
        "credential",
        "private_key",
    }
)

_QUERY_KEY_PATTERN = re.compile(r"([?&]key=)[^&\s]+")


def redact_query_keys(text: str, mask_value: str = "***REDACTED***") -> str:
    """Replace the value of every ``key=`` query parameter in ``text``."""
    return _QUERY_KEY_PATTERN.sub(lambda m: m.group(1) + mask_value, text)


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: Optional[FrozenSet[str]] = None,
) -> Processor:
    """Build a processor that hides secrets.

    Args:
        mask_value: Replacement for hidden values.
        additional_patterns: Extra field-name substrings to hide.

    Returns:
        A structlog processor.
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def is_sensitive(field: str) -> bool:
        field = field.lower()
        return any(pattern in field for pattern in patterns)

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        sanitised: EventDict = {}
        for field, value in event_dict.items():
            if value is not None and is_sensitive(field):
                sanitised[field] = mask_value
            elif isinstance(value, str) and "key=" in value:
                sanitised[field] = redact_query_keys(value, mask_value)
            else:
                sanitised[field] = value
        return sanitised

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Build a processor that shortens string values over ``max_length``.

    Notification digests and sheet payloads can be long; this keeps single
    log lines readable.
    """

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for field, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[field] = (
                    f"{value[:max_length]}...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
