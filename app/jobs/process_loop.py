"""Periodic processing loop.

Runs one cycle immediately and then on a fixed period. A cycle appends
newly needed items to the sheet and marks provided ones; any failure inside
it is converted to CycleFailedError and retried with the process-loop
profile, so nothing short of cancellation stops the loop.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from infrastructure.clients.google_workspace import SheetsClient
from infrastructure.logging import bind_cycle_context, get_module_logger
from infrastructure.resilience import ResilienceProfiles, RetryExhaustedError, with_retry
from integrations.ntfy import NtfyClient
from integrations.torn import TornClient
from modules.oc_items import (
    Provider,
    SheetConfig,
    process_provided_items,
    process_supplied_items,
)

logger = get_module_logger()

DEFAULT_INTERVAL_SECONDS = 60.0


class CycleFailedError(Exception):
    """A processing cycle raised; the original error is chained as __cause__."""


@dataclass(frozen=True)
class CycleSummary:
    rows_added: int
    rows_updated: int
    api_calls: int


class ProcessLoop:
    """Drives processing cycles.

    Args:
        torn_client: Client for faction crimes and item/user lookups
        sheets_client: Client for the work-queue spreadsheet
        sheet_config: Spreadsheet ID and ranges
        profiles: Retry policies for every external call
        providers: Provider roster; fixed for the lifetime of the loop
        notifier: Push notification client (None disables notifications)
        interval_seconds: Period between cycle starts
    """

    def __init__(
        self,
        torn_client: TornClient,
        sheets_client: SheetsClient,
        sheet_config: SheetConfig,
        profiles: ResilienceProfiles,
        providers: Sequence[Provider] = (),
        notifier: Optional[NtfyClient] = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._torn = torn_client
        self._sheets = sheets_client
        self._sheet_config = sheet_config
        self._profiles = profiles
        self._providers: Tuple[Provider, ...] = tuple(providers)
        self._notifier = notifier
        self.interval_seconds = interval_seconds

    @property
    def providers(self) -> Tuple[Provider, ...]:
        return self._providers

    def _reset_api_call_counts(self) -> None:
        self._torn.reset_api_call_count()
        for provider in self._providers:
            provider.client.reset_api_call_count()

    def _api_call_count(self) -> int:
        return self._torn.api_call_count + sum(
            provider.client.api_call_count for provider in self._providers
        )

    async def run_cycle(self) -> CycleSummary:
        """Run one cycle. Failures of the primary fetch or writes propagate."""
        self._reset_api_call_counts()
        logger.debug("cycle_started", providers=len(self._providers))

        rows_added = await process_supplied_items(
            self._torn,
            self._sheets,
            self._sheet_config,
            self._profiles,
            notifier=self._notifier,
        )
        rows_updated = await process_provided_items(
            self._torn,
            self._sheets,
            self._providers,
            self._sheet_config,
            self._profiles,
        )

        summary = CycleSummary(
            rows_added=rows_added,
            rows_updated=rows_updated,
            api_calls=self._api_call_count(),
        )
        logger.info(
            "cycle_completed",
            rows_added=summary.rows_added,
            rows_updated=summary.rows_updated,
            total_api_calls=summary.api_calls,
        )
        return summary

    async def _run_cycle_guarded(self) -> CycleSummary:
        try:
            return await self.run_cycle()
        except Exception as e:
            logger.error(
                "cycle_failed",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise CycleFailedError(f"cycle failed: {e}") from e

    async def run_cycle_safely(self) -> Optional[CycleSummary]:
        """Run a cycle under the process-loop retry profile.

        Returns:
            The cycle summary, or None when every attempt failed.
        """
        with bind_cycle_context():
            try:
                return await with_retry(
                    self._profiles.process_loop,
                    self._run_cycle_guarded,
                    operation_name="process_cycle",
                )
            except RetryExhaustedError as e:
                logger.error(
                    "cycle_abandoned",
                    attempts=e.attempts,
                    error=str(e.last_error),
                )
                return None

    async def run_forever(self) -> None:
        """Run a cycle now and then once per interval until cancelled.

        Ticks that elapse while a cycle is still running are dropped rather
        than run back to back.
        """
        logger.info("process_loop_started", interval_seconds=self.interval_seconds)
        loop = asyncio.get_running_loop()

        await self.run_cycle_safely()
        next_tick = loop.time() + self.interval_seconds

        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            await self.run_cycle_safely()

            next_tick += self.interval_seconds
            now = loop.time()
            if next_tick <= now:
                missed = int((now - next_tick) // self.interval_seconds) + 1
                next_tick += missed * self.interval_seconds
                logger.warning("cycle_ticks_skipped", skipped=missed)
