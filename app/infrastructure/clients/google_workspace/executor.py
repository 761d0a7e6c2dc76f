"""Low-level Google API execution utilities.

Runs blocking googleapiclient requests on a worker thread so they can be
awaited from the event loop, and translates HttpError into SheetsAPIError.
Retries are applied by callers through the resilience profiles.
"""

import asyncio
from typing import Any, Callable, Optional

import structlog
from googleapiclient.errors import HttpError

logger = structlog.get_logger()


class SheetsAPIError(Exception):
    """Raised when the Google Sheets API rejects a request.

    Attributes:
        operation: Name of the failed operation.
        status_code: HTTP status code, when one was returned.
    """

    def __init__(self, operation: str, message: str, status_code: Optional[int] = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(f"{operation} failed (status={status_code}): {message}")


def _status_code(error: HttpError) -> Optional[int]:
    if getattr(error, "resp", None) is not None:
        try:
            return int(error.resp.status)
        except (TypeError, ValueError):
            return None
    return None


async def execute_google_api_call(
    operation_name: str,
    api_callable: Callable[[], Any],
) -> Any:
    """Execute a blocking Google API call off the event loop.

    Args:
        operation_name: Name of operation for logging (e.g., "sheets.values.get")
        api_callable: Callable that builds and executes the request

    Returns:
        The decoded API response.

    Raises:
        SheetsAPIError: The API answered with an HTTP error.
    """
    logger.debug("google_api_call", operation=operation_name)
    try:
        return await asyncio.to_thread(api_callable)
    except HttpError as e:
        status_code = _status_code(e)
        logger.warning(
            "google_api_error",
            operation=operation_name,
            status_code=status_code,
            error=str(e),
        )
        raise SheetsAPIError(operation_name, str(e), status_code) from e
