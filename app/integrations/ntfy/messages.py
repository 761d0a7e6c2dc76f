"""Notification message formatting."""

from dataclasses import dataclass
from typing import List, Sequence

MAX_BATCH_ITEMS = 10


@dataclass(frozen=True)
class NotificationItem:
    """A newly queued item, as shown in a notification."""

    item_name: str
    user_name: str
    crime_url: str = ""


def format_batch_message(items: Sequence[NotificationItem], total_added: int) -> str:
    """Build one digest message for a cycle's new items.

    At most ten items are listed; the rest are summarised in a final line.
    """
    noun = "item" if total_added == 1 else "items"
    lines: List[str] = [f"🎯 Torn OC: {total_added} new {noun} needed"]

    for item in items[:MAX_BATCH_ITEMS]:
        lines.append(f"• {item.item_name} for {item.user_name}")

    if len(items) > MAX_BATCH_ITEMS:
        lines.append(f"... and {len(items) - MAX_BATCH_ITEMS} more items")

    return "\n".join(lines)


def format_individual_message(
    item: NotificationItem, item_number: int, total_items: int
) -> str:
    """Build the message for a single new item."""
    if total_items > 1:
        lines = [f"📋 New item needed ({item_number}/{total_items})"]
    else:
        lines = ["📋 New item needed"]

    lines.append(f"🎯 **{item.item_name}**")
    lines.append(f"👤 For: {item.user_name}")
    if item.crime_url:
        lines.append(f"🔗 Crime: {item.crime_url}")

    return "\n".join(lines)
