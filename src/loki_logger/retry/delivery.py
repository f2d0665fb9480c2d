r"""Retry loop delivering a single log entry.

A ``Delivery`` pushes one entry through the inner client, retrying with
its own backoff for as long as the server answers with a non-2xx status.
It runs in its own task, created by ``RetryClient``.
"""

from __future__ import annotations

__all__ = ["Delivery"]

import asyncio
import logging
from typing import TYPE_CHECKING

from loki_logger.exceptions import PushStatusError
from loki_logger.retry.outcome import DeliveryOutcome, DeliveryStatus

if TYPE_CHECKING:
    from loki_logger.backoff import Backoff
    from loki_logger.client import PushClient
    from loki_logger.entry import Entry

logger: logging.Logger = logging.getLogger(__name__)


class Delivery:
    """Delivery attempt sequence for one entry.

    The backoff is owned by the delivery and advanced on each retry, so
    it must not be shared with another delivery. Attempts are strictly
    sequential.

    Args:
        inner: The client performing each push attempt.
        entry: The entry to deliver.
        backoff: The backoff producing the delays between attempts.
        cancel: Optional event; setting it abandons the delivery at its
            next backoff wait. A new event is created if ``None``.
    """

    def __init__(
        self,
        inner: PushClient,
        entry: Entry,
        backoff: Backoff,
        cancel: asyncio.Event | None = None,
    ) -> None:
        self._inner = inner
        self._entry = entry
        self._backoff = backoff
        self._cancel = cancel if cancel is not None else asyncio.Event()
        self.attempts = 0

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        self._cancel.set()

    async def run(self) -> DeliveryOutcome:
        """Push the entry until it is delivered, fails, exhausts the
        backoff or is cancelled.

        Only ``PushStatusError`` is retried. Any other exception raised by
        the inner client ends the delivery immediately as ``FAILED``.

        Returns:
            The outcome of the delivery.
        """
        while True:
            self.attempts += 1
            try:
                await self._inner.push(self._entry)
            except PushStatusError as exc:
                error = exc
            except Exception as exc:  # noqa: BLE001
                logger.debug(f"push attempt {self.attempts} failed with {type(exc).__name__}, not retrying: {exc}")
                return DeliveryOutcome(DeliveryStatus.FAILED, error=exc, attempts=self.attempts)
            else:
                logger.debug(f"entry delivered on attempt {self.attempts}")
                return DeliveryOutcome(DeliveryStatus.DELIVERED, attempts=self.attempts)

            delay = self._backoff.next_delay()
            if delay is None:
                logger.debug(f"backoff exhausted after {self.attempts} attempts: {error}")
                return DeliveryOutcome(DeliveryStatus.EXHAUSTED, error=error, attempts=self.attempts)

            logger.debug(
                f"push attempt {self.attempts} failed with status {error.status_code}, "
                f"retrying in {delay:.2f}s"
            )
            if not await self._wait(delay):
                logger.debug(f"delivery cancelled after {self.attempts} attempts")
                return DeliveryOutcome(DeliveryStatus.CANCELLED, attempts=self.attempts)

    async def _wait(self, delay: float) -> bool:
        """Wait for ``delay`` seconds or until the delivery is cancelled.

        Returns:
            ``True`` if the delay elapsed, ``False`` if cancelled first.
        """
        if self._cancel.is_set():
            return False
        try:
            await asyncio.wait_for(self._cancel.wait(), timeout=delay)
        except TimeoutError:
            return True
        return False
