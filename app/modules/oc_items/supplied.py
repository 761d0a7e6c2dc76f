"""Queue items that faction members still need for planned crimes."""

from typing import Collection, List, Optional, Set

from infrastructure.clients.google_workspace import SheetsClient
from infrastructure.logging import get_module_logger
from infrastructure.resilience import ResilienceProfiles, RetryPolicy, with_retry
from integrations.ntfy import NtfyClient
from integrations.torn import SuppliedItem, TornClient
from modules.oc_items.resolution import (
    item_placeholder,
    resolve_item_name,
    resolve_user_name,
    user_placeholder,
)
from modules.oc_items.sheet_items import (
    SheetConfig,
    build_existing_keys,
    composite_key,
    crime_url,
    extract_notification_items,
    new_item_row,
)

logger = get_module_logger()


async def fetch_supplied_items(client: TornClient, policy: RetryPolicy) -> List[SuppliedItem]:
    calls_before = client.api_call_count
    supplied = await with_retry(
        policy, client.get_supplied_items, operation_name="get_supplied_items"
    )
    logger.debug(
        "supplied_items_retrieved",
        count=len(supplied),
        api_calls=client.api_call_count - calls_before,
    )
    return supplied


def slot_keys(
    url: str, supplied_item: SuppliedItem, item_name: str, user_name: str
) -> Set[str]:
    """Every key a row for this slot may have been written under.

    A row queued while a lookup was failing carries the ID placeholder
    instead of the name.
    """
    items = {item_name, item_placeholder(supplied_item.item_id)}
    users = {user_name, user_placeholder(supplied_item.user_id)}
    return {composite_key(url, user, item) for user in users for item in items}


async def build_new_rows(
    client: TornClient,
    supplied: List[SuppliedItem],
    existing_keys: Collection[str],
    policy: RetryPolicy,
) -> List[List[str]]:
    """Rows for supplied items whose (crime URL, user, item) key is not yet queued.

    Keys are also deduplicated within the batch, so two slots that resolve
    to the same triple produce a single row. A row stored with ID
    placeholders counts as the same slot once its names resolve.
    """
    seen = set(existing_keys)
    rows: List[List[str]] = []

    for supplied_item in supplied:
        url = crime_url(supplied_item.crime_id)
        item_name = await resolve_item_name(client, supplied_item.item_id, policy)
        user_name = await resolve_user_name(client, supplied_item.user_id, policy)

        key = composite_key(url, user_name, item_name)
        if seen & slot_keys(url, supplied_item, item_name, user_name):
            logger.debug("supplied_item_duplicate_skipped", key=key)
            continue

        logger.info(
            "supplied_item_queued",
            crime_id=supplied_item.crime_id,
            item=item_name,
            user=user_name,
        )
        rows.append(new_item_row(url, item_name, user_name))
        seen.add(key)

    return rows


async def process_supplied_items(
    torn_client: TornClient,
    sheets_client: SheetsClient,
    sheet_config: SheetConfig,
    profiles: ResilienceProfiles,
    notifier: Optional[NtfyClient] = None,
) -> int:
    """Append rows for newly needed items and announce them.

    Returns:
        Number of rows appended.

    Raises:
        RetryExhaustedError: The crimes fetch, the sheet read or the append
            ran out of attempts.
    """
    supplied = await fetch_supplied_items(torn_client, profiles.api_request)
    if not supplied:
        logger.debug("no_supplied_items")
        return 0

    existing_rows = await with_retry(
        profiles.sheet_read,
        lambda: sheets_client.read_range(
            sheet_config.spreadsheet_id, sheet_config.read_range
        ),
        operation_name="read_sheet",
    )
    existing_keys = build_existing_keys(existing_rows)

    new_rows = await build_new_rows(
        torn_client, supplied, existing_keys, profiles.api_request
    )
    if not new_rows:
        logger.debug("no_new_rows", total_items=len(supplied))
        return 0

    await with_retry(
        profiles.sheet_read,
        lambda: sheets_client.append_rows(
            sheet_config.spreadsheet_id, sheet_config.append_range, new_rows
        ),
        operation_name="append_rows",
    )
    logger.info(
        "sheet_update_complete",
        added=len(new_rows),
        skipped=len(supplied) - len(new_rows),
    )

    if notifier is not None:
        await notifier.notify_new_items(
            extract_notification_items(new_rows), len(new_rows)
        )
    return len(new_rows)
