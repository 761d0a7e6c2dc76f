"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.torn import TornSettings
from infrastructure.configuration.integrations.google import GoogleSheetsSettings
from infrastructure.configuration.integrations.ntfy import NtfySettings

__all__ = [
    "TornSettings",
    "GoogleSheetsSettings",
    "NtfySettings",
]
