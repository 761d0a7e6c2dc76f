import json
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from googleapiclient.errors import HttpError

from infrastructure.resilience import ResilienceProfiles, RetryPolicy
from integrations.torn import Item, UserInfo
from modules.oc_items import SheetConfig

# Tight timings so retry paths finish in milliseconds
FAST_POLICY = RetryPolicy(
    max_attempts=2, base_delay=0.001, max_delay=0.002, per_attempt_timeout=1.0
)


@pytest.fixture
def fast_policy() -> RetryPolicy:
    return FAST_POLICY


@pytest.fixture
def fast_profiles() -> ResilienceProfiles:
    """Bounded profiles with near-zero backoff for every operation class."""
    return ResilienceProfiles(
        api_request=FAST_POLICY,
        sheet_read=FAST_POLICY,
        process_loop=FAST_POLICY,
    )


@pytest.fixture
def sheet_config() -> SheetConfig:
    return SheetConfig(spreadsheet_id="sheet-123", append_range="Queue!A1")


@pytest.fixture
def mock_torn_client():
    """TornClient double with item and user catalogues.

    Tests extend ``items`` and ``users`` to control what lookups resolve;
    unknown IDs raise, which exhausts the retry policy.
    """
    client = MagicMock()
    client.items = {
        206: Item(name="Lockpick", market_value=1500.0),
        1012: Item(name="Hair Dryer", market_value=250.0),
    }
    client.users = {
        1001: UserInfo(player_id=1001, name="Alice"),
        1002: UserInfo(player_id=1002, name="Bob"),
    }

    async def get_item(item_id):
        if item_id not in client.items:
            raise RuntimeError(f"item {item_id} unavailable")
        return client.items[item_id]

    async def get_user(user_id):
        if user_id not in client.users:
            raise RuntimeError(f"user {user_id} unavailable")
        return client.users[user_id]

    client.get_item = AsyncMock(side_effect=get_item)
    client.get_user = AsyncMock(side_effect=get_user)
    client.get_supplied_items = AsyncMock(return_value=[])
    client.api_call_count = 0
    return client


@pytest.fixture
def mock_sheets_client():
    client = MagicMock()
    client.read_range = AsyncMock(return_value=[])
    client.append_rows = AsyncMock(return_value={})
    client.update_cell = AsyncMock(return_value={})
    return client


@pytest.fixture
def mock_google_api_error():
    """Factory for HttpError instances.

    Usage:
        error = mock_google_api_error(status=503, reason="Backend Error")
    """

    def _make(status: int = 500, reason: str = "Internal Server Error") -> HttpError:
        resp = Mock()
        resp.status = status
        resp.reason = reason
        content = json.dumps(
            {"error": {"code": status, "message": reason}}
        ).encode()
        return HttpError(resp=resp, content=content)

    return _make
