"""Structured logging for the Torn OC items bot.

Public API:
    - configure_logging(): (Re)configure structlog and stdlib logging
    - get_module_logger(): Logger bound to the calling module
    - bind_cycle_context(): Tag every log line of a cycle with its id
    - get_cycle_id(): Id of the cycle currently bound, if any

Processors:
    - mask_sensitive_data(): Redact API keys, including ``key=`` in URLs
    - truncate_large_values(): Cap long string values

Example:
    from infrastructure.logging import get_module_logger

    logger = get_module_logger()
    logger.info("provider_loaded", provider="Bob")
"""

from infrastructure.logging.context import bind_cycle_context, get_cycle_id
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    mask_sensitive_data,
    truncate_large_values,
)
from infrastructure.logging.setup import configure_logging, get_module_logger

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_cycle_context",
    "get_cycle_id",
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
