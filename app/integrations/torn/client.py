"""Torn API client.

Async HTTP client for the Torn game API. Item and user lookups are cached
for a fixed window; every outgoing request is counted so a processing
cycle can report how many calls it made.
"""

import time
from typing import Any, Dict, List, Optional

import httpx

from infrastructure.caching import TTLCache
from infrastructure.logging import get_module_logger
from integrations.torn.models import (
    CrimesResponse,
    Item,
    LogResponse,
    SuppliedItem,
    UserInfo,
)

logger = get_module_logger()

DEFAULT_API_URL = "https://api.torn.com"
ITEM_SEND_LOG_TYPE = 4102
ITEM_SEND_LOG_WINDOW_SECONDS = 48 * 60 * 60
PLANNING_CATEGORY = "planning"


class TornAPIError(Exception):
    """Raised when the Torn API returns a non-200 response or an error payload.

    Attributes:
        status_code: HTTP status code, if the failure was an HTTP error.
        error_code: Torn error code from an in-body error payload.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[int] = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class TornClient:
    """Client for the Torn API.

    Args:
        api_key: Key used for user-scoped selections (items, users, logs)
        faction_api_key: Key with faction access, used for crimes
        base_url: API base URL
        timeout_seconds: Transport timeout for a single request
        cache_ttl_seconds: Freshness window for item and user lookups
        http_client: Optional pre-built httpx.AsyncClient (for tests)
    """

    def __init__(
        self,
        api_key: str,
        faction_api_key: str = "",
        base_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 10.0,
        cache_ttl_seconds: float = 3600,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self._faction_api_key = faction_api_key
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds
        )
        self._item_cache: TTLCache[Item] = TTLCache("torn_items", cache_ttl_seconds)
        self._user_cache: TTLCache[UserInfo] = TTLCache(
            "torn_users", cache_ttl_seconds
        )
        self._api_call_count = 0

    @property
    def api_call_count(self) -> int:
        return self._api_call_count

    def reset_api_call_count(self) -> None:
        self._api_call_count = 0

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self._api_call_count += 1
        response = await self._http.get(path, params=params)

        if response.status_code != 200:
            raise TornAPIError(
                f"API request to {path} failed with status "
                f"{response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TornAPIError(f"Invalid JSON from {path}: {e}") from e

        if isinstance(payload, dict) and "error" in payload:
            error = payload["error"] or {}
            if isinstance(error, dict):
                code = error.get("code")
                message = error.get("error", "unknown error")
            else:
                code, message = None, str(error)
            raise TornAPIError(
                f"Torn API error from {path}: {message}", error_code=code
            )

        return payload

    async def get_item(self, item_id: int) -> Item:
        """Look up item details (cached).

        Raises:
            TornAPIError: Request failed or the item is not in the response.
        """
        cached = self._item_cache.get(item_id)
        if cached is not None:
            return cached

        payload = await self._get(
            f"/torn/{item_id}", {"selections": "items", "key": self._api_key}
        )
        raw = (payload.get("items") or {}).get(str(item_id))
        if raw is None:
            raise TornAPIError(f"Item {item_id} not found")

        item = Item.model_validate(raw)
        self._item_cache.set(item_id, item)
        return item

    async def get_user(self, user_id: int) -> UserInfo:
        """Look up a player's basic profile (cached)."""
        cached = self._user_cache.get(user_id)
        if cached is not None:
            return cached

        payload = await self._get(
            f"/user/{user_id}", {"selections": "basic", "key": self._api_key}
        )
        user = UserInfo.model_validate(payload)
        self._user_cache.set(user_id, user)
        return user

    async def get_faction_crimes(
        self, category: str = PLANNING_CATEGORY, offset: int = 0
    ) -> CrimesResponse:
        payload = await self._get(
            "/v2/faction/crimes",
            {"key": self._faction_api_key, "cat": category, "offset": offset},
        )
        return CrimesResponse.model_validate(payload)

    async def get_supplied_items(self) -> List[SuppliedItem]:
        """Find planning-crime slots whose assigned member still needs an item.

        Returns:
            One record per slot with an unavailable item requirement and an
            assigned user, in crime and slot order.
        """
        crimes = await self.get_faction_crimes(PLANNING_CATEGORY, 0)
        logger.debug("faction_crimes_retrieved", total_crimes=len(crimes.crimes))

        supplied: List[SuppliedItem] = []
        for crime in crimes.crimes:
            for slot_index, slot in enumerate(crime.slots):
                if not slot.needs_item:
                    continue
                logger.debug(
                    "supplied_item_found",
                    crime_id=crime.id,
                    slot_index=slot_index,
                    item_id=slot.item_requirement.id,
                    user_id=slot.user.id,
                )
                supplied.append(
                    SuppliedItem(
                        item_id=slot.item_requirement.id,
                        user_id=slot.user.id,
                        crime_id=crime.id,
                    )
                )

        logger.debug("supplied_items_processed", total_supplied_items=len(supplied))
        return supplied

    async def get_item_send_logs(self, now: Optional[float] = None) -> LogResponse:
        """Fetch this key's item-send log entries for the trailing 48 hours."""
        to_ts = int(now if now is not None else time.time())
        from_ts = to_ts - ITEM_SEND_LOG_WINDOW_SECONDS

        payload = await self._get(
            "/user",
            {
                "selections": "log",
                "log": ITEM_SEND_LOG_TYPE,
                "from": from_ts,
                "to": to_ts,
                "key": self._api_key,
            },
        )
        logs = LogResponse.model_validate(payload)
        logger.debug("item_send_logs_parsed", log_entries_count=len(logs.log))
        return logs

    async def whoami(self) -> str:
        """Return the player name that owns this client's key."""
        payload = await self._get(
            "/user/", {"selections": "basic", "key": self._api_key}
        )
        return UserInfo.model_validate(payload).name
