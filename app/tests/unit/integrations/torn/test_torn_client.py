"""Unit tests for the Torn API client.

Requests are served by an httpx.MockTransport so no network is used.
"""

from urllib.parse import parse_qs

import httpx
import pytest
from freezegun import freeze_time

from integrations.torn import SuppliedItem, TornAPIError, TornClient


class TornAPIStub:
    """Route table for the mock transport; records every request."""

    def __init__(self):
        self.requests = []
        self.routes = {}

    def add(self, path, payload, status_code=200):
        self.routes[path] = (status_code, payload)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, payload = self.routes.get(
            request.url.path, (404, {"error": "not routed"})
        )
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    def params(self, index=-1):
        query = parse_qs(self.requests[index].url.query.decode())
        return {key: values[0] for key, values in query.items()}


@pytest.fixture
def api():
    return TornAPIStub()


@pytest.fixture
def torn_client(api):
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(api), base_url="https://api.torn.com"
    )
    return TornClient(
        api_key="user-key", faction_api_key="faction-key", http_client=http_client
    )


def crimes_payload():
    return {
        "crimes": [
            {
                "id": 501,
                "name": "Mob Mentality",
                "status": "Planning",
                "slots": [
                    {
                        "position": "Looter",
                        "item_requirement": {
                            "id": 206,
                            "is_reusable": False,
                            "is_available": False,
                        },
                        "user": {"id": 1001, "joined_at": 1700000000, "progress": 10},
                    },
                    {
                        "position": "Muscle",
                        "item_requirement": {"id": 1012, "is_available": True},
                        "user": {"id": 1002},
                    },
                    {
                        "position": "Thief",
                        "item_requirement": {"id": 206, "is_available": False},
                        "user": None,
                    },
                    {"position": "Lookout", "item_requirement": None, "user": {"id": 9}},
                ],
            },
            {
                "id": 502,
                "slots": [
                    {
                        "position": "Picklock",
                        "item_requirement": {"id": 1012, "is_available": False},
                        "user": {"id": 1003},
                    }
                ],
            },
        ]
    }


@pytest.mark.unit
class TestItemAndUserLookups:
    """Tests for cached item and user lookups."""

    @pytest.mark.asyncio
    async def test_get_item_parses_and_caches(self, torn_client, api):
        """Items are fetched once and then served from cache."""
        # Arrange
        api.add(
            "/torn/206",
            {"items": {"206": {"name": "Lockpick", "market_value": 1500, "type": "Tool"}}},
        )

        # Act
        first = await torn_client.get_item(206)
        second = await torn_client.get_item(206)

        # Assert
        assert first.name == "Lockpick"
        assert first.market_value == 1500.0
        assert second is first
        assert len(api.requests) == 1
        assert torn_client.api_call_count == 1
        assert api.params() == {"selections": "items", "key": "user-key"}

    @pytest.mark.asyncio
    async def test_get_item_missing_from_payload_raises(self, torn_client, api):
        """An item absent from the response is an error."""
        api.add("/torn/999", {"items": {}})

        with pytest.raises(TornAPIError, match="Item 999 not found"):
            await torn_client.get_item(999)

    @pytest.mark.asyncio
    async def test_get_user_parses_and_caches(self, torn_client, api):
        """User profiles are cached per ID."""
        api.add("/user/1001", {"player_id": 1001, "name": "Alice", "level": 20})

        user = await torn_client.get_user(1001)
        await torn_client.get_user(1001)

        assert user.name == "Alice"
        assert user.player_id == 1001
        assert len(api.requests) == 1

    @pytest.mark.asyncio
    async def test_whoami_returns_key_owner(self, torn_client, api):
        """whoami resolves the name of the key owner."""
        api.add("/user/", {"player_id": 7, "name": "Bob"})

        assert await torn_client.whoami() == "Bob"


@pytest.mark.unit
class TestErrors:
    """Tests for error translation."""

    @pytest.mark.asyncio
    async def test_non_200_raises_with_status(self, torn_client, api):
        """HTTP failures carry the status code."""
        api.add("/user/1001", "Service Unavailable", status_code=503)

        with pytest.raises(TornAPIError) as exc_info:
            await torn_client.get_user(1001)

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_error_payload_raises_with_code(self, torn_client, api):
        """Torn in-body errors carry the Torn error code."""
        api.add("/user/1001", {"error": {"code": 2, "error": "Incorrect key"}})

        with pytest.raises(TornAPIError, match="Incorrect key") as exc_info:
            await torn_client.get_user(1001)

        assert exc_info.value.error_code == 2

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, torn_client, api):
        """Unparseable bodies are reported as API errors."""
        api.add("/user/1001", "<html>oops</html>")

        with pytest.raises(TornAPIError, match="Invalid JSON"):
            await torn_client.get_user(1001)

    @pytest.mark.asyncio
    async def test_failed_lookup_is_not_cached(self, torn_client, api):
        """A failure does not poison the cache."""
        api.add("/torn/206", {"error": {"code": 5, "error": "Too many requests"}})
        with pytest.raises(TornAPIError):
            await torn_client.get_item(206)

        api.add("/torn/206", {"items": {"206": {"name": "Lockpick"}}})
        item = await torn_client.get_item(206)

        assert item.name == "Lockpick"
        assert torn_client.api_call_count == 2


@pytest.mark.unit
class TestFactionCrimes:
    """Tests for planning-crime slot extraction."""

    @pytest.mark.asyncio
    async def test_supplied_items_only_unavailable_assigned_slots(self, torn_client, api):
        """Only slots with an unavailable item and an assigned user qualify."""
        # Arrange
        api.add("/v2/faction/crimes", crimes_payload())

        # Act
        supplied = await torn_client.get_supplied_items()

        # Assert
        assert supplied == [
            SuppliedItem(item_id=206, user_id=1001, crime_id=501),
            SuppliedItem(item_id=1012, user_id=1003, crime_id=502),
        ]
        assert api.params() == {
            "key": "faction-key",
            "cat": "planning",
            "offset": "0",
        }

    @pytest.mark.asyncio
    async def test_no_crimes(self, torn_client, api):
        """An empty crime list yields nothing."""
        api.add("/v2/faction/crimes", {"crimes": []})

        assert await torn_client.get_supplied_items() == []


@pytest.mark.unit
class TestItemSendLogs:
    """Tests for the item-send log fetch."""

    @pytest.mark.asyncio
    async def test_requests_trailing_48_hour_window(self, torn_client, api):
        """The window ends now and starts 172800 seconds earlier."""
        # Arrange
        api.add(
            "/user",
            {
                "log": {
                    "abc": {
                        "log": 4102,
                        "title": "Item send",
                        "timestamp": 1704060000,
                        "data": {"receiver": 1001, "items": [{"id": 206, "qty": 1}]},
                    }
                }
            },
        )

        # Act
        with freeze_time("2024-01-01 00:00:00"):
            logs = await torn_client.get_item_send_logs()

        # Assert
        params = api.params()
        assert params["selections"] == "log"
        assert params["log"] == "4102"
        assert params["to"] == "1704067200"
        assert params["from"] == str(1704067200 - 172800)
        assert logs.log["abc"].data.receiver == 1001
        assert logs.log["abc"].data.items[0].id == 206

    @pytest.mark.asyncio
    async def test_empty_log_list_is_normalised(self, torn_client, api):
        """Torn's empty-list form becomes an empty mapping."""
        api.add("/user", {"log": []})

        logs = await torn_client.get_item_send_logs(now=1704067200)

        assert logs.log == {}


@pytest.mark.unit
class TestCallCounting:
    """Tests for the per-cycle API call counter."""

    @pytest.mark.asyncio
    async def test_counts_every_request_and_resets(self, torn_client, api):
        """Each outgoing request increments the counter, including failures."""
        api.add("/user/1", {"name": "A"})
        api.add("/user/2", "nope", status_code=500)

        await torn_client.get_user(1)
        with pytest.raises(TornAPIError):
            await torn_client.get_user(2)

        assert torn_client.api_call_count == 2
        torn_client.reset_api_call_count()
        assert torn_client.api_call_count == 0
