"""Google Sheets integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class GoogleSheetsSettings(IntegrationSettings):
    """Google Sheets configuration settings.

    Environment Variables:
        SPREADSHEET_ID: ID of the spreadsheet used as the work queue
        SPREADSHEET_RANGE: Append target in A1 notation; its sheet name is
            also used for reads
        GOOGLE_CREDENTIALS_FILE: Path to the service account key file

    Example:
        ```python
        from infrastructure.configuration import settings

        spreadsheet_id = settings.google_sheets.SPREADSHEET_ID
        ```
    """

    SPREADSHEET_ID: str = Field(default="", alias="SPREADSHEET_ID")
    SPREADSHEET_RANGE: str = Field(default="Test Sheet!A1", alias="SPREADSHEET_RANGE")
    GOOGLE_CREDENTIALS_FILE: str = Field(
        default="credentials.json", alias="GOOGLE_CREDENTIALS_FILE"
    )
