"""Torn game API integration."""

from integrations.torn.client import TornAPIError, TornClient
from integrations.torn.models import (
    Crime,
    CrimesResponse,
    Item,
    ItemSendData,
    LogEntry,
    LogItem,
    LogResponse,
    Slot,
    SuppliedItem,
    UserInfo,
)

__all__ = [
    "TornClient",
    "TornAPIError",
    "Crime",
    "CrimesResponse",
    "Item",
    "ItemSendData",
    "LogEntry",
    "LogItem",
    "LogResponse",
    "Slot",
    "SuppliedItem",
    "UserInfo",
]
