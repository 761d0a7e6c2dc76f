"""Sheets client for the work-queue spreadsheet.

Provides async access to the Google Sheets values API. Each call runs on a
worker thread with its own service resource.
"""

from typing import TYPE_CHECKING, Any, Dict, List

import structlog

from infrastructure.clients.google_workspace.executor import execute_google_api_call

if TYPE_CHECKING:
    from infrastructure.clients.google_workspace.session_provider import (
        SessionProvider,
    )

logger = structlog.get_logger()

# Sheets API scopes
SHEETS_FULL_SCOPE = "https://www.googleapis.com/auth/spreadsheets"

# Value input options
VALUE_INPUT_OPTION_USER_ENTERED = "USER_ENTERED"

# Insert data options
INSERT_DATA_OPTION_INSERT_ROWS = "INSERT_ROWS"


class SheetsClient:
    """Client for Google Sheets values operations.

    Args:
        session_provider: SessionProvider for authentication and service creation

    Usage:
        rows = await sheets_client.read_range("abc123", "Sheet1!A1:Z1000")

        await sheets_client.append_rows(
            "abc123", "Sheet1!A1", [["Needed", "", "http://...", "", "Item", "User"]]
        )
    """

    def __init__(self, session_provider: "SessionProvider") -> None:
        self._session_provider = session_provider
        self._logger = logger.bind(client="sheets")

    def _service(self) -> Any:
        return self._session_provider.get_service(
            service_name="sheets",
            version="v4",
            scopes=[SHEETS_FULL_SCOPE],
        )

    async def read_range(self, spreadsheet_id: str, cell_range: str) -> List[List[Any]]:
        """Read the values of a range.

        Args:
            spreadsheet_id: The spreadsheet ID
            cell_range: A1 notation range

        Returns:
            Rows of cell values; trailing empty cells are omitted by the API,
            so rows may have different lengths. Empty list for an empty range.

        Reference:
            https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/get
        """
        self._logger.debug(
            "reading_range", spreadsheet_id=spreadsheet_id, cell_range=cell_range
        )

        def api_call() -> Dict[str, Any]:
            return (
                self._service()
                .spreadsheets()
                .values()
                .get(spreadsheetId=spreadsheet_id, range=cell_range)
                .execute()
            )

        response = await execute_google_api_call("sheets.values.get", api_call)
        return (response or {}).get("values", [])

    async def append_rows(
        self, spreadsheet_id: str, cell_range: str, rows: List[List[Any]]
    ) -> Dict[str, Any]:
        """Append rows after the table found at ``cell_range``.

        Values are parsed as if typed by a user (formulas are evaluated) and
        new rows are inserted rather than overwriting.

        Reference:
            https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/append
        """
        self._logger.info(
            "appending_rows",
            spreadsheet_id=spreadsheet_id,
            cell_range=cell_range,
            row_count=len(rows),
        )

        def api_call() -> Dict[str, Any]:
            return (
                self._service()
                .spreadsheets()
                .values()
                .append(
                    spreadsheetId=spreadsheet_id,
                    range=cell_range,
                    valueInputOption=VALUE_INPUT_OPTION_USER_ENTERED,
                    insertDataOption=INSERT_DATA_OPTION_INSERT_ROWS,
                    body={"values": rows},
                )
                .execute()
            )

        return await execute_google_api_call("sheets.values.append", api_call)

    async def update_range(
        self, spreadsheet_id: str, cell_range: str, values: List[List[Any]]
    ) -> Dict[str, Any]:
        """Overwrite the values of a range.

        Reference:
            https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/update
        """
        self._logger.debug(
            "updating_range", spreadsheet_id=spreadsheet_id, cell_range=cell_range
        )

        def api_call() -> Dict[str, Any]:
            return (
                self._service()
                .spreadsheets()
                .values()
                .update(
                    spreadsheetId=spreadsheet_id,
                    range=cell_range,
                    valueInputOption=VALUE_INPUT_OPTION_USER_ENTERED,
                    body={"values": values},
                )
                .execute()
            )

        return await execute_google_api_call("sheets.values.update", api_call)

    async def update_cell(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        column: str,
        row_index: int,
        value: Any,
    ) -> Dict[str, Any]:
        """Write a single cell, e.g. column "A" of row 5 -> ``Sheet!A5``."""
        cell_range = f"{sheet_name}!{column}{row_index}"
        return await self.update_range(spreadsheet_id, cell_range, [[value]])
