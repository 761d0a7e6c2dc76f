import asyncio
import signal
import sys

from dotenv import load_dotenv

from infrastructure.clients.google_workspace import SessionProvider, SheetsClient
from infrastructure.configuration import settings
from infrastructure.logging import get_module_logger
from infrastructure.resilience import get_resilience_profiles
from integrations.ntfy import NtfyClient
from integrations.torn import TornClient
from jobs.process_loop import ProcessLoop
from modules.oc_items import SheetConfig, load_providers

logger = get_module_logger()

load_dotenv()


def build_torn_client(api_key: str, faction_api_key: str = "") -> TornClient:
    return TornClient(
        api_key=api_key,
        faction_api_key=faction_api_key,
        base_url=settings.torn.TORN_API_URL,
        timeout_seconds=settings.torn.TORN_HTTP_TIMEOUT_SECONDS,
        cache_ttl_seconds=settings.torn.TORN_CACHE_TTL_SECONDS,
    )


def build_notifier() -> NtfyClient:
    ntfy = settings.ntfy
    return NtfyClient(
        base_url=ntfy.NTFY_URL,
        topic=ntfy.NTFY_TOPIC,
        enabled=ntfy.NTFY_ENABLED,
        batch_mode=ntfy.NTFY_BATCH_MODE,
        priority=ntfy.NTFY_PRIORITY,
        max_retries=ntfy.NTFY_MAX_RETRIES,
        base_delay_seconds=ntfy.NTFY_BASE_DELAY_MS / 1000,
        max_delay_seconds=ntfy.NTFY_MAX_DELAY_MS / 1000,
        timeout_seconds=ntfy.NTFY_HTTP_TIMEOUT_SECONDS,
    )


def list_configs() -> None:
    logger.info(
        "application_configuration",
        env=settings.ENV,
        log_level=settings.log_level,
        retry_mode=settings.resilience.retry_mode,
        interval_seconds=settings.resilience.process_interval_seconds,
        spreadsheet_range=settings.google_sheets.SPREADSHEET_RANGE,
        ntfy_enabled=settings.ntfy.NTFY_ENABLED,
        ntfy_topic=settings.ntfy.NTFY_TOPIC,
        ntfy_batch_mode=settings.ntfy.NTFY_BATCH_MODE,
    )


async def run() -> int:
    """Build the clients, load providers and run the processing loop."""
    logger.info("application_startup")

    missing = settings.missing_required()
    if missing:
        logger.error("missing_required_settings", missing=missing)
        return 1

    list_configs()
    profiles = get_resilience_profiles(settings.resilience.retry_mode)

    torn_client = build_torn_client(
        settings.torn.TORN_API_KEY, settings.torn.TORN_FACTION_API_KEY
    )
    sheets_client = SheetsClient(
        SessionProvider(settings.google_sheets.GOOGLE_CREDENTIALS_FILE)
    )
    notifier = build_notifier()
    providers = ()

    try:
        providers = await load_providers(
            settings.torn.provider_keys, profiles.api_request, build_torn_client
        )
        logger.info("providers_loaded", count=len(providers))

        process_loop = ProcessLoop(
            torn_client=torn_client,
            sheets_client=sheets_client,
            sheet_config=SheetConfig(
                spreadsheet_id=settings.google_sheets.SPREADSHEET_ID,
                append_range=settings.google_sheets.SPREADSHEET_RANGE,
            ),
            profiles=profiles,
            providers=providers,
            notifier=notifier,
            interval_seconds=settings.resilience.process_interval_seconds,
        )
        await process_loop.run_forever()
    finally:
        for provider in providers:
            await provider.client.aclose()
        await torn_client.aclose()
        await notifier.aclose()
        sent, failed, retries = notifier.get_metrics()
        logger.info(
            "application_shutdown",
            notifications_sent=sent,
            notifications_failed=failed,
            notification_retries=retries,
        )
    return 0


async def serve() -> int:
    """Run until SIGINT/SIGTERM cancels the main task."""
    loop = asyncio.get_running_loop()
    main_task = asyncio.current_task()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, main_task.cancel)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops
            pass

    try:
        return await run()
    except asyncio.CancelledError:
        logger.info("shutdown_requested")
        return 0


def main() -> None:
    sys.exit(asyncio.run(serve()))


if __name__ == "__main__":
    main()
