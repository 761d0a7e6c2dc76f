"""Google Sheets client for infrastructure layer.

Public API (Package Level):
- SessionProvider: Service account credentials and service creation
- SheetsClient: Async values API (read, append, update)
- SheetsAPIError: HTTP failures reported by the Sheets API

Usage:
    from infrastructure.clients.google_workspace import SessionProvider, SheetsClient

    sheets = SheetsClient(SessionProvider("credentials.json"))
    rows = await sheets.read_range(spreadsheet_id, "Sheet1!A1:Z1000")
"""

from infrastructure.clients.google_workspace.executor import SheetsAPIError
from infrastructure.clients.google_workspace.session_provider import SessionProvider
from infrastructure.clients.google_workspace.sheets import SheetsClient

__all__ = [
    "SessionProvider",
    "SheetsClient",
    "SheetsAPIError",
]
