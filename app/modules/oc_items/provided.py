"""Mark queued items as provided by matching provider send logs."""

from datetime import datetime
from typing import Dict, List, Sequence, Set

from infrastructure.clients.google_workspace import SheetsClient
from infrastructure.logging import get_module_logger
from infrastructure.resilience import (
    ResilienceProfiles,
    RetryExhaustedError,
    RetryPolicy,
    with_retry,
)
from integrations.torn import LogEntry, TornClient
from modules.oc_items.providers import Provider, aggregate_logs, extract_provider_name
from modules.oc_items.resolution import (
    get_item_market_value,
    lookup_item_name,
    lookup_user_name,
    matches_item,
    matches_user,
)
from modules.oc_items.sheet_items import (
    SheetConfig,
    SheetItem,
    SheetRowUpdate,
    parse_sheet_items,
)
from modules.oc_items.updates import update_provided_rows

logger = get_module_logger()

PROVIDED_DATETIME_FORMAT = "%H:%M:%S - %d/%m/%y"


def format_log_timestamp(timestamp: int) -> str:
    """Format a log timestamp (epoch seconds) in local time."""
    return datetime.fromtimestamp(timestamp).strftime(PROVIDED_DATETIME_FORMAT)


async def find_provider_updates(
    client: TornClient,
    sheet_items: Sequence[SheetItem],
    logs: Dict[str, LogEntry],
    policy: RetryPolicy,
) -> List[SheetRowUpdate]:
    """Match log items to rows that have no provider yet.

    Log entries are processed oldest first. Each log item is assigned to at
    most one row and each row receives at most one assignment.
    """
    candidates = [item for item in sheet_items if not item.has_provider]
    if not candidates or not logs:
        logger.debug(
            "provider_matching_skipped",
            candidate_rows=len(candidates),
            log_entries=len(logs),
        )
        return []

    updates: List[SheetRowUpdate] = []
    claimed: Set[int] = set()
    ordered = sorted(logs.items(), key=lambda pair: (pair[1].timestamp, pair[0]))

    for combined_id, entry in ordered:
        provider_name = extract_provider_name(combined_id)
        receiver_id = entry.data.receiver
        receiver_name = await lookup_user_name(client, receiver_id, policy)
        if receiver_name is None:
            continue

        for log_item in entry.data.items:
            item_name = await lookup_item_name(client, log_item.id, policy)
            if item_name is None:
                continue

            for sheet_item in candidates:
                if sheet_item.row_index in claimed:
                    continue
                if not (
                    matches_user(sheet_item.user_name, receiver_name, receiver_id)
                    and matches_item(sheet_item.item_name, item_name, log_item.id)
                ):
                    continue

                market_value = await get_item_market_value(client, log_item.id, policy)
                update = SheetRowUpdate(
                    row_index=sheet_item.row_index,
                    provider=provider_name,
                    date_time=format_log_timestamp(entry.timestamp),
                    market_value=market_value,
                )
                updates.append(update)
                claimed.add(sheet_item.row_index)
                logger.info(
                    "provided_item_matched",
                    row=sheet_item.row_index,
                    item=sheet_item.item_name,
                    user=sheet_item.user_name,
                    provider=provider_name,
                    market_value=market_value,
                )
                break

    logger.debug("provider_matching_complete", updates_found=len(updates))
    return updates


async def process_provided_items(
    torn_client: TornClient,
    sheets_client: SheetsClient,
    providers: Sequence[Provider],
    sheet_config: SheetConfig,
    profiles: ResilienceProfiles,
) -> int:
    """Run the provided-items pass.

    Returns:
        Number of rows fully updated. A sheet read that runs out of
        attempts skips the pass for this cycle.
    """
    try:
        rows = await with_retry(
            profiles.sheet_read,
            lambda: sheets_client.read_range(
                sheet_config.spreadsheet_id, sheet_config.read_range
            ),
            operation_name="read_sheet",
        )
    except RetryExhaustedError as e:
        logger.error("provided_items_sheet_read_failed", error=str(e))
        return 0

    sheet_items = parse_sheet_items(rows)
    logs = await aggregate_logs(providers, profiles.api_request)
    updates = await find_provider_updates(
        torn_client, sheet_items, logs, profiles.api_request
    )
    if not updates:
        logger.debug("no_provided_items_to_update")
        return 0

    return await update_provided_rows(
        sheets_client, sheet_config, updates, profiles.sheet_read
    )
