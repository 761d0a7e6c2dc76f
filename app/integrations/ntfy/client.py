"""ntfy push notification client.

Publishes plain-text messages to an ntfy topic. Each send is retried with
jittered exponential backoff according to its error classification, and a
circuit breaker skips sends entirely while the endpoint keeps failing.
Sends triggered by the processing cycle run as background tasks so a slow
or broken notification channel never holds up sheet processing.
"""

import asyncio
import random
from typing import Optional, Sequence, Set, Tuple

import httpx

from infrastructure.logging import get_module_logger
from infrastructure.resilience import CircuitBreaker
from integrations.ntfy.errors import (
    NotificationError,
    NotificationErrorType,
    classify_status_code,
)
from integrations.ntfy.messages import (
    NotificationItem,
    format_batch_message,
    format_individual_message,
)

logger = get_module_logger()

INDIVIDUAL_SEND_GAP_SECONDS = 0.1
JITTER_FRACTION = 0.25


class NtfyClient:
    """Client for publishing notifications to ntfy.

    Args:
        base_url: ntfy server URL, e.g. "https://ntfy.sh"
        topic: Topic name messages are published to
        enabled: When False every send is a no-op
        batch_mode: One digest per cycle instead of one message per item
        priority: Value for the Priority header (omitted when empty)
        max_retries: Retries after the first attempt
        base_delay_seconds: Base backoff delay
        max_delay_seconds: Backoff cap
        timeout_seconds: Transport timeout per HTTP request
        circuit_breaker: Breaker guarding the channel (one is created if None)
        http_client: Optional pre-built httpx.AsyncClient (for tests)
    """

    def __init__(
        self,
        base_url: str,
        topic: str,
        enabled: bool = False,
        batch_mode: bool = True,
        priority: str = "",
        max_retries: int = 3,
        base_delay_seconds: float = 1.0,
        max_delay_seconds: float = 30.0,
        timeout_seconds: float = 10.0,
        circuit_breaker: Optional[CircuitBreaker] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.topic = topic
        self.enabled = enabled
        self.batch_mode = batch_mode
        self.priority = priority
        self.max_retries = max_retries
        self.base_delay_seconds = base_delay_seconds
        self.max_delay_seconds = max_delay_seconds
        self.circuit_breaker = circuit_breaker or CircuitBreaker("ntfy")
        self._http = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self._background_tasks: Set[asyncio.Task] = set()

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.topic}"

    def calculate_backoff(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (1-based), +/-25% jitter, capped."""
        backoff = self.base_delay_seconds * (2 ** (attempt - 1))
        backoff *= 1 + random.uniform(-JITTER_FRACTION, JITTER_FRACTION)
        return min(backoff, self.max_delay_seconds)

    async def _send_once(self, message: str, attempt: int) -> None:
        headers = {"Content-Type": "text/plain"}
        if self.priority:
            headers["Priority"] = self.priority

        logger.debug("sending_notification", topic=self.topic, attempt=attempt)
        try:
            response = await self._http.post(
                self.url, content=message.encode("utf-8"), headers=headers
            )
        except httpx.TimeoutException as e:
            raise NotificationError(
                NotificationErrorType.TIMEOUT, attempt=attempt, underlying=e
            ) from e
        except httpx.TransportError as e:
            raise NotificationError(
                NotificationErrorType.NETWORK, attempt=attempt, underlying=e
            ) from e

        if response.status_code >= 400:
            raise NotificationError(
                classify_status_code(response.status_code),
                status_code=response.status_code,
                attempt=attempt,
                underlying=Exception(
                    f"HTTP {response.status_code}: {response.reason_phrase}"
                ),
            )

        logger.debug(
            "notification_sent",
            status_code=response.status_code,
            attempt=attempt,
        )

    async def send_notification(self, message: str) -> None:
        """Deliver one message, retrying transient failures.

        Raises:
            NotificationError: CIRCUIT_OPEN when the breaker rejects the
                send, the original error for non-retryable failures, or
                MAX_RETRIES_EXCEEDED after the last retry.
        """
        if not self.enabled:
            logger.debug("notifications_disabled")
            return

        if not self.circuit_breaker.allow_request():
            logger.warning("notification_skipped_circuit_open", topic=self.topic)
            raise NotificationError(
                NotificationErrorType.CIRCUIT_OPEN,
                underlying=Exception("circuit breaker is open"),
            )

        last_error: Optional[NotificationError] = None
        for attempt in range(self.max_retries + 1):
            if attempt > 0:
                delay = self.calculate_backoff(attempt)
                logger.debug(
                    "notification_retry_scheduled",
                    attempt=attempt,
                    delay_seconds=round(delay, 3),
                )
                await asyncio.sleep(delay)
                self.circuit_breaker.record_retry()

            try:
                await self._send_once(message, attempt + 1)
            except NotificationError as e:
                last_error = e
                if not e.is_retryable:
                    logger.warning(
                        "notification_failed_non_retryable",
                        error=str(e),
                        error_type=e.error_type.value,
                        attempt=attempt + 1,
                    )
                    self.circuit_breaker.record_failure()
                    raise
                logger.warning(
                    "notification_attempt_failed",
                    error=str(e),
                    error_type=e.error_type.value,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                )
                continue

            self.circuit_breaker.record_success()
            return

        self.circuit_breaker.record_failure()
        raise NotificationError(
            NotificationErrorType.MAX_RETRIES_EXCEEDED,
            attempt=self.max_retries + 1,
            underlying=last_error,
        )

    def send_notification_async(self, message: str) -> Optional[asyncio.Task]:
        """Schedule a send in the background and return immediately.

        Failures are logged, never raised to the caller. Must be called from
        a running event loop.
        """
        if not self.enabled:
            return None

        task = asyncio.create_task(self.send_notification(message))
        self._background_tasks.add(task)
        task.add_done_callback(self._on_background_send_done)
        return task

    def _on_background_send_done(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("async_notification_failed", error=str(error))

    async def notify_new_items(
        self, items: Sequence[NotificationItem], total_added: int
    ) -> None:
        """Announce items newly added to the sheet.

        Batch mode schedules one digest; individual mode schedules one
        message per item with a short gap between dispatches.
        """
        if not self.enabled:
            return

        if total_added == 0:
            logger.debug("no_new_items_to_notify")
            return

        if self.batch_mode:
            logger.info("sending_batch_notification", items_added=total_added)
            self.send_notification_async(format_batch_message(items, total_added))
            return

        logger.info("sending_individual_notifications", items_added=len(items))
        for index, item in enumerate(items):
            self.send_notification_async(
                format_individual_message(item, index + 1, len(items))
            )
            if index < len(items) - 1:
                await asyncio.sleep(INDIVIDUAL_SEND_GAP_SECONDS)

    def get_metrics(self) -> Tuple[int, int, int]:
        """Return (sent, failed, retries) totals."""
        stats = self.circuit_breaker.get_stats()
        return stats["total_sent"], stats["total_failed"], stats["total_retries"]

    @property
    def pending_sends(self) -> int:
        return len(self._background_tasks)

    async def aclose(self, drain_timeout: float = 5.0) -> None:
        """Give in-flight background sends a moment to finish, then close."""
        pending = set(self._background_tasks)
        if pending:
            _, still_running = await asyncio.wait(pending, timeout=drain_timeout)
            for task in still_running:
                task.cancel()
            if still_running:
                await asyncio.gather(*still_running, return_exceptions=True)
        await self._http.aclose()
