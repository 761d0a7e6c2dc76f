"""Spreadsheet row layout for the OC items work queue.

Columns are positional:
    A (0) status, B (1) provider, C (2) crime URL, D (3) provided timestamp,
    E (4) item name, F (5) recipient name, G (6) market value,
    H (7) market value formula
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence, Set

from infrastructure.logging import get_module_logger
from integrations.ntfy import NotificationItem

logger = get_module_logger()

STATUS_COL, PROVIDER_COL, CRIME_URL_COL, DATETIME_COL = 0, 1, 2, 3
ITEM_NAME_COL, USER_NAME_COL, MARKET_VALUE_COL, FORMULA_COL = 4, 5, 6, 7
MIN_ROW_COLUMNS = 6

STATUS_NEEDED = "Needed"
STATUS_PROVIDED = "Provided"

READ_RANGE_SUFFIX = "!A1:Z1000"
KEY_SEPARATOR = "|"

CRIME_URL_TEMPLATE = "http://www.torn.com/factions.php?step=your#/tab=crimes&crimeId={crime_id}"

# Shows the market value (column G) once the row is Provided or Cash Sent
MARKET_VALUE_FORMULA = (
    '=IF(OR(INDIRECT("A"&ROW())="Provided",INDIRECT("A"&ROW())="Cash Sent"), '
    'INDIRECT("G"&ROW()), 0)'
)


@dataclass(frozen=True)
class SheetConfig:
    """Where the work queue lives.

    Attributes:
        spreadsheet_id: Spreadsheet ID.
        append_range: A1 range new rows are appended to, e.g. "Sheet1!A1".
    """

    spreadsheet_id: str
    append_range: str = "Test Sheet!A1"

    @property
    def sheet_name(self) -> str:
        return self.append_range.split("!", 1)[0]

    @property
    def read_range(self) -> str:
        return self.sheet_name + READ_RANGE_SUFFIX


@dataclass(frozen=True)
class SheetItem:
    """A parsed work-queue row. ``row_index`` is the 1-based sheet row."""

    row_index: int
    crime_url: str
    item_name: str
    user_name: str
    provider: str = ""
    has_provider: bool = False


@dataclass(frozen=True)
class SheetRowUpdate:
    """Values to write when a queued item has been sent."""

    row_index: int
    provider: str
    date_time: str
    market_value: float


def crime_url(crime_id: int) -> str:
    return CRIME_URL_TEMPLATE.format(crime_id=crime_id)


def composite_key(crime_url: str, user_name: str, item_name: str) -> str:
    return KEY_SEPARATOR.join((crime_url, user_name, item_name))


def _cell(row: Sequence[Any], index: int) -> str:
    if len(row) > index and row[index] is not None:
        return str(row[index])
    return ""


def new_item_row(crime_url: str, item_name: str, user_name: str) -> List[str]:
    return [
        STATUS_NEEDED,
        "",
        crime_url,
        "",
        item_name,
        user_name,
        "",
        MARKET_VALUE_FORMULA,
    ]


def build_existing_keys(rows: Iterable[Sequence[Any]]) -> Set[str]:
    """Collect dedup keys of rows that have a URL, recipient and item."""
    existing: Set[str] = set()
    for row in rows:
        if len(row) < MIN_ROW_COLUMNS:
            continue
        url = _cell(row, CRIME_URL_COL)
        user = _cell(row, USER_NAME_COL)
        item = _cell(row, ITEM_NAME_COL)
        if url and user and item:
            existing.add(composite_key(url, user, item))
    logger.debug("existing_keys_built", entries=len(existing))
    return existing


def parse_sheet_items(rows: Sequence[Sequence[Any]]) -> List[SheetItem]:
    """Parse raw rows into SheetItems, skipping short or incomplete rows."""
    items: List[SheetItem] = []
    for index, row in enumerate(rows, start=1):
        if len(row) < MIN_ROW_COLUMNS:
            continue

        provider = _cell(row, PROVIDER_COL).strip()
        item = SheetItem(
            row_index=index,
            crime_url=_cell(row, CRIME_URL_COL),
            item_name=_cell(row, ITEM_NAME_COL),
            user_name=_cell(row, USER_NAME_COL),
            provider=provider,
            has_provider=bool(provider),
        )
        if not (item.crime_url and item.item_name and item.user_name):
            logger.debug("sheet_row_skipped_missing_fields", row=index)
            continue
        items.append(item)

    logger.debug("sheet_items_parsed", total_rows=len(rows), parsed_items=len(items))
    return items


def extract_notification_items(rows: Iterable[Sequence[Any]]) -> List[NotificationItem]:
    """Turn newly appended rows into notification entries."""
    items: List[NotificationItem] = []
    for row in rows:
        if len(row) < MIN_ROW_COLUMNS:
            continue
        item_name = _cell(row, ITEM_NAME_COL)
        user_name = _cell(row, USER_NAME_COL)
        if item_name and user_name:
            items.append(
                NotificationItem(
                    item_name=item_name,
                    user_name=user_name,
                    crime_url=_cell(row, CRIME_URL_COL),
                )
            )
    return items
