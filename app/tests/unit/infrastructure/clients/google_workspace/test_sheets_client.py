"""Unit tests for SheetsClient, SessionProvider and the API executor."""

from unittest.mock import MagicMock, patch

import pytest

from infrastructure.clients.google_workspace import (
    SessionProvider,
    SheetsAPIError,
    SheetsClient,
)

SESSION_MODULE = "infrastructure.clients.google_workspace.session_provider"


@pytest.fixture
def mock_session_provider():
    provider = MagicMock()
    provider.get_service.return_value = MagicMock()
    return provider


@pytest.fixture
def mock_service(mock_session_provider):
    """The chained Sheets service mock returned by the session provider."""
    return mock_session_provider.get_service.return_value


@pytest.fixture
def sheets_client(mock_session_provider):
    return SheetsClient(session_provider=mock_session_provider)


@pytest.mark.unit
class TestReadRange:
    """Tests for SheetsClient.read_range."""

    @pytest.mark.asyncio
    async def test_returns_values(self, sheets_client, mock_service):
        """Rows are returned from the 'values' field."""
        # Arrange
        values = mock_service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.return_value = {
            "range": "Queue!A1:Z1000",
            "values": [["Needed", "", "http://x", "", "Lockpick", "Alice"]],
        }

        # Act
        rows = await sheets_client.read_range("sheet-123", "Queue!A1:Z1000")

        # Assert
        assert rows == [["Needed", "", "http://x", "", "Lockpick", "Alice"]]
        values.get.assert_called_once_with(
            spreadsheetId="sheet-123", range="Queue!A1:Z1000"
        )

    @pytest.mark.asyncio
    async def test_empty_sheet_returns_empty_list(self, sheets_client, mock_service):
        """The API omits 'values' for an empty range."""
        values = mock_service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.return_value = {"range": "Queue!A1:Z1000"}

        rows = await sheets_client.read_range("sheet-123", "Queue!A1:Z1000")

        assert rows == []

    @pytest.mark.asyncio
    async def test_requests_sheets_v4_service(
        self, sheets_client, mock_session_provider, mock_service
    ):
        """The client asks for the Sheets v4 service with the spreadsheets scope."""
        values = mock_service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.return_value = {}

        await sheets_client.read_range("sheet-123", "Queue!A1")

        mock_session_provider.get_service.assert_called_with(
            service_name="sheets",
            version="v4",
            scopes=["https://www.googleapis.com/auth/spreadsheets"],
        )

    @pytest.mark.asyncio
    async def test_http_error_becomes_sheets_api_error(
        self, sheets_client, mock_service, mock_google_api_error
    ):
        """HttpError is translated and carries the status code."""
        # Arrange
        error = mock_google_api_error(status=503, reason="Backend Error")
        values = mock_service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.side_effect = error

        # Act
        with pytest.raises(SheetsAPIError) as exc_info:
            await sheets_client.read_range("sheet-123", "Queue!A1")

        # Assert
        assert exc_info.value.status_code == 503
        assert exc_info.value.operation == "sheets.values.get"
        assert exc_info.value.__cause__ is error


@pytest.mark.unit
class TestWrites:
    """Tests for append and update operations."""

    @pytest.mark.asyncio
    async def test_append_rows_inserts_user_entered_values(
        self, sheets_client, mock_service
    ):
        """Appends parse values as user input and insert new rows."""
        # Arrange
        values = mock_service.spreadsheets.return_value.values.return_value
        values.append.return_value.execute.return_value = {"updates": {}}
        rows = [["Needed", "", "http://x", "", "Lockpick", "Alice", "", "=F()"]]

        # Act
        await sheets_client.append_rows("sheet-123", "Queue!A1", rows)

        # Assert
        values.append.assert_called_once_with(
            spreadsheetId="sheet-123",
            range="Queue!A1",
            valueInputOption="USER_ENTERED",
            insertDataOption="INSERT_ROWS",
            body={"values": rows},
        )

    @pytest.mark.asyncio
    async def test_update_cell_builds_a1_range(self, sheets_client, mock_service):
        """A single cell is addressed as <sheet>!<column><row>."""
        values = mock_service.spreadsheets.return_value.values.return_value
        values.update.return_value.execute.return_value = {"updatedCells": 1}

        await sheets_client.update_cell("sheet-123", "Queue", "B", 5, "Bob")

        values.update.assert_called_once_with(
            spreadsheetId="sheet-123",
            range="Queue!B5",
            valueInputOption="USER_ENTERED",
            body={"values": [["Bob"]]},
        )

    @pytest.mark.asyncio
    async def test_update_error_names_operation(
        self, sheets_client, mock_service, mock_google_api_error
    ):
        """Update failures report the update operation."""
        values = mock_service.spreadsheets.return_value.values.return_value
        values.update.return_value.execute.side_effect = mock_google_api_error(
            status=429, reason="Rate Limit Exceeded"
        )

        with pytest.raises(SheetsAPIError) as exc_info:
            await sheets_client.update_cell("sheet-123", "Queue", "A", 2, "Provided")

        assert exc_info.value.operation == "sheets.values.update"
        assert exc_info.value.status_code == 429


@pytest.mark.unit
class TestSessionProvider:
    """Tests for SessionProvider."""

    @patch(f"{SESSION_MODULE}.build")
    @patch(f"{SESSION_MODULE}.service_account.Credentials.from_service_account_file")
    def test_loads_credentials_once(self, mock_from_file, mock_build):
        """Credentials are read from disk once and scoped per service."""
        # Arrange
        creds = MagicMock()
        mock_from_file.return_value = creds
        provider = SessionProvider("credentials.json")

        # Act
        provider.get_service("sheets", "v4", scopes=["scope-a"])
        provider.get_service("sheets", "v4", scopes=["scope-a"])

        # Assert
        mock_from_file.assert_called_once_with("credentials.json")
        creds.with_scopes.assert_called_with(["scope-a"])
        mock_build.assert_called_with(
            "sheets",
            "v4",
            credentials=creds.with_scopes.return_value,
            cache_discovery=False,
        )

    @patch(f"{SESSION_MODULE}.service_account.Credentials.from_service_account_file")
    def test_missing_credentials_file_raises_value_error(self, mock_from_file):
        """An unreadable key file surfaces as ValueError."""
        mock_from_file.side_effect = FileNotFoundError("credentials.json")
        provider = SessionProvider("credentials.json")

        with pytest.raises(ValueError, match="Unable to load credentials"):
            provider.get_service("sheets", "v4")
