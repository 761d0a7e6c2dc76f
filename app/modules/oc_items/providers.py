"""Provider roster: faction members whose item-send logs are watched."""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Tuple

from infrastructure.logging import get_module_logger
from infrastructure.resilience import RetryExhaustedError, RetryPolicy, with_retry
from integrations.torn import LogEntry, TornClient

logger = get_module_logger()

PROVIDER_SEPARATOR = "|"
UNKNOWN_PROVIDER = "Unknown"


@dataclass(frozen=True)
class Provider:
    name: str
    client: TornClient


async def load_providers(
    keys: Iterable[str],
    policy: RetryPolicy,
    client_factory: Callable[[str], TornClient],
) -> Tuple[Provider, ...]:
    """Resolve each provider API key to its player name.

    Keys that cannot be resolved are skipped with a warning and their
    client is closed.

    Args:
        keys: Provider API keys.
        policy: Retry policy for the whoami lookup.
        client_factory: Builds a TornClient for a key.

    Returns:
        The roster, in key order.
    """
    providers = []
    for index, raw in enumerate(keys):
        key = raw.strip()
        if not key:
            continue

        client = client_factory(key)
        try:
            name = await with_retry(policy, client.whoami, operation_name="whoami")
        except RetryExhaustedError as e:
            logger.warning("provider_key_unresolved", key_index=index, error=str(e))
            await client.aclose()
            continue

        providers.append(Provider(name=name, client=client))
        logger.info("provider_loaded", provider=name)

    return tuple(providers)


async def aggregate_logs(
    providers: Iterable[Provider], policy: RetryPolicy
) -> Dict[str, LogEntry]:
    """Merge every provider's item-send logs, keyed "<provider>|<log id>".

    A provider whose fetch is exhausted is skipped for this cycle.
    """
    combined: Dict[str, LogEntry] = {}
    for provider in providers:
        try:
            response = await with_retry(
                policy,
                provider.client.get_item_send_logs,
                operation_name="get_item_send_logs",
            )
        except RetryExhaustedError as e:
            logger.warning(
                "provider_logs_fetch_failed", provider=provider.name, error=str(e)
            )
            continue

        for log_id, entry in response.log.items():
            combined[f"{provider.name}{PROVIDER_SEPARATOR}{log_id}"] = entry

    logger.debug("provider_logs_aggregated", combined_log_entries=len(combined))
    return combined


def extract_provider_name(combined_id: str) -> str:
    """Provider name from a "<provider>|<log id>" key, or "Unknown"."""
    name, separator, _ = combined_id.partition(PROVIDER_SEPARATOR)
    return name if separator else UNKNOWN_PROVIDER
