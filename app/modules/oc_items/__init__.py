"""Organized-crime item work queue.

Keeps a Google Sheet in step with the faction's planned crimes: items that
members still need are appended as "Needed" rows, and rows are marked
"Provided" once a provider's item-send log shows the item was sent.
"""

from modules.oc_items.provided import find_provider_updates, process_provided_items
from modules.oc_items.providers import Provider, aggregate_logs, load_providers
from modules.oc_items.sheet_items import SheetConfig, SheetItem, SheetRowUpdate
from modules.oc_items.supplied import build_new_rows, process_supplied_items

__all__ = [
    "Provider",
    "SheetConfig",
    "SheetItem",
    "SheetRowUpdate",
    "aggregate_logs",
    "build_new_rows",
    "find_provider_updates",
    "load_providers",
    "process_provided_items",
    "process_supplied_items",
]
