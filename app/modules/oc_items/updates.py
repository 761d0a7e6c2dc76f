"""Write provider details back to work-queue rows."""

from typing import Any, List, Tuple

from infrastructure.clients.google_workspace import SheetsClient
from infrastructure.logging import get_module_logger
from infrastructure.resilience import RetryExhaustedError, RetryPolicy, with_retry
from modules.oc_items.sheet_items import STATUS_PROVIDED, SheetConfig, SheetRowUpdate

logger = get_module_logger()


def provided_cells(update: SheetRowUpdate) -> List[Tuple[str, Any]]:
    """(column, value) pairs written for a provided item, in write order.

    The provider cell goes last: a row is only skipped by later matching once
    it names a provider, so an interrupted row is picked up again next cycle.
    """
    return [
        ("A", STATUS_PROVIDED),
        ("D", update.date_time),
        ("G", update.market_value),
        ("B", update.provider),
    ]


async def update_provided_row(
    sheets_client: SheetsClient,
    sheet_config: SheetConfig,
    update: SheetRowUpdate,
    policy: RetryPolicy,
) -> bool:
    """Write one row cell by cell; stop at the first cell that cannot be written."""
    for column, value in provided_cells(update):
        try:
            await with_retry(
                policy,
                lambda column=column, value=value: sheets_client.update_cell(
                    sheet_config.spreadsheet_id,
                    sheet_config.sheet_name,
                    column,
                    update.row_index,
                    value,
                ),
                operation_name="update_cell",
            )
        except RetryExhaustedError as e:
            logger.error(
                "sheet_cell_update_failed",
                row=update.row_index,
                column=column,
                error=str(e),
            )
            return False
    return True


async def update_provided_rows(
    sheets_client: SheetsClient,
    sheet_config: SheetConfig,
    updates: List[SheetRowUpdate],
    policy: RetryPolicy,
) -> int:
    """Apply every update; returns how many rows were fully written."""
    updated = 0
    for update in updates:
        if await update_provided_row(sheets_client, sheet_config, update, policy):
            updated += 1
            logger.info(
                "provided_item_row_updated",
                row=update.row_index,
                provider=update.provider,
                datetime=update.date_time,
                market_value=update.market_value,
            )
    logger.debug("provided_item_rows_updated", updates=len(updates), updated=updated)
    return updated
