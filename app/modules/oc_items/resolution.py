"""Resolve Torn item and user IDs to names.

Lookups go through the retry executor. The ``resolve_*`` helpers never fail:
when a lookup is exhausted they return a placeholder ("Item ID: 206") that is
written to the sheet and later recognised by the ``matches_*`` helpers. The
``lookup_*`` helpers return None instead, for matching where a placeholder
would be meaningless.
"""

from typing import Optional

from infrastructure.logging import get_module_logger
from infrastructure.resilience import RetryExhaustedError, RetryPolicy, with_retry
from integrations.torn import TornClient

logger = get_module_logger()


def item_placeholder(item_id: int) -> str:
    return f"Item ID: {item_id}"


def user_placeholder(user_id: int) -> str:
    return f"User ID: {user_id}"


async def lookup_item_name(
    client: TornClient, item_id: int, policy: RetryPolicy
) -> Optional[str]:
    try:
        item = await with_retry(
            policy, lambda: client.get_item(item_id), operation_name="get_item"
        )
    except RetryExhaustedError as e:
        logger.debug("item_lookup_failed", item_id=item_id, error=str(e))
        return None
    return item.name


async def lookup_user_name(
    client: TornClient, user_id: int, policy: RetryPolicy
) -> Optional[str]:
    try:
        user = await with_retry(
            policy, lambda: client.get_user(user_id), operation_name="get_user"
        )
    except RetryExhaustedError as e:
        logger.debug("user_lookup_failed", user_id=user_id, error=str(e))
        return None
    return user.name


async def resolve_item_name(client: TornClient, item_id: int, policy: RetryPolicy) -> str:
    name = await lookup_item_name(client, item_id, policy)
    if name is None:
        logger.warning("item_name_unresolved", item_id=item_id)
        return item_placeholder(item_id)
    return name


async def resolve_user_name(client: TornClient, user_id: int, policy: RetryPolicy) -> str:
    name = await lookup_user_name(client, user_id, policy)
    if name is None:
        logger.warning("user_name_unresolved", user_id=user_id)
        return user_placeholder(user_id)
    return name


async def get_item_market_value(
    client: TornClient, item_id: int, policy: RetryPolicy
) -> float:
    """Market value of an item, or 0 if it cannot be looked up."""
    try:
        item = await with_retry(
            policy, lambda: client.get_item(item_id), operation_name="get_item"
        )
    except RetryExhaustedError as e:
        logger.warning("item_market_value_failed", item_id=item_id, error=str(e))
        return 0.0
    return item.market_value


def matches_item(sheet_item_name: str, item_name: str, item_id: int) -> bool:
    return sheet_item_name in (item_name, item_placeholder(item_id))


def matches_user(sheet_user_name: str, user_name: str, user_id: int) -> bool:
    return sheet_user_name in (user_name, user_placeholder(user_id))
