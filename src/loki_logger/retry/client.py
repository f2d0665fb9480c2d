r"""Client wrapper retrying failed pushes with exponential backoff.

``RetryClient`` decorates any ``PushClient``: each push runs in its own
task and is retried with a fresh copy of the configured backoff while
Loki answers with a non-2xx status.
"""

from __future__ import annotations

__all__ = ["RetryClient"]

import asyncio
import logging
from typing import TYPE_CHECKING

from loki_logger.backoff import ExponentialBackoff
from loki_logger.retry.delivery import Delivery
from loki_logger.retry.outcome import DeliveryHandle, DeliveryOutcome, DeliveryStatus

if TYPE_CHECKING:
    from loki_logger.backoff import Backoff
    from loki_logger.client import PushClient
    from loki_logger.entry import Entry

logger: logging.Logger = logging.getLogger(__name__)


class RetryClient:
    r"""Client retrying pushes to an inner client with backoff.

    The configured backoff is a template: it is cloned when the client is
    created and again for every delivery, so concurrent deliveries never
    share backoff progress. The inner client is shared by all deliveries
    and must be safe for concurrent use. No ordering is guaranteed
    between concurrent deliveries.

    Args:
        inner: The client performing the actual pushes.
        backoff: Optional backoff template. Defaults to a zero-valued
            ``ExponentialBackoff`` (0.1s, doubling, no ceiling).

    Example:
        ```pycon
        >>> import asyncio
        >>> from loki_logger import Entry, LokiClient, RetryClient
        >>> from loki_logger.backoff import ExponentialBackoff
        >>> async def main():  # doctest: +SKIP
        ...     async with LokiClient("http://localhost:3100/loki/api/v1/push") as loki:
        ...         client = RetryClient(loki).with_backoff(ExponentialBackoff(max_delay=5.0))
        ...         handle = client.push_with_handle(Entry("hello", labels={"app": "demo"}))
        ...         outcome = await handle
        ...         outcome.raise_for_error()
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, inner: PushClient, backoff: Backoff | None = None) -> None:
        self._inner = inner
        self._backoff = backoff.clone() if backoff is not None else ExponentialBackoff()
        self._background: set[asyncio.Task[DeliveryOutcome]] = set()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(inner={self._inner!r}, backoff={self._backoff!r})"

    @property
    def inner(self) -> PushClient:
        return self._inner

    @property
    def backoff(self) -> Backoff:
        """A copy of the backoff template used for each delivery."""
        return self._backoff.clone()

    @property
    def pending(self) -> int:
        """Number of fire-and-forget deliveries still in flight."""
        return len(self._background)

    def with_backoff(self, backoff: Backoff) -> RetryClient:
        """Return a new client using a copy of ``backoff``.

        The new client shares the inner client. This client is not
        modified.

        Args:
            backoff: The backoff template for the new client.

        Returns:
            A new RetryClient.
        """
        return RetryClient(self._inner, backoff)

    async def push(self, entry: Entry, *, cancel: asyncio.Event | None = None) -> None:
        """Start delivering ``entry`` and return immediately.

        The result of the delivery is never reported to the caller. A
        delivery that ends in failure is logged at WARNING level.

        Args:
            entry: The entry to deliver.
            cancel: Optional event abandoning the delivery when set.
        """
        handle = self.push_with_handle(entry, cancel=cancel)
        task = handle.task
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def push_with_handle(self, entry: Entry, *, cancel: asyncio.Event | None = None) -> DeliveryHandle:
        """Start delivering ``entry`` and return a handle on the result.

        Must be called from a running event loop. The delivery runs in a
        new task that is not tied to the caller.

        Args:
            entry: The entry to deliver.
            cancel: Optional event abandoning the delivery when set. It
                may be shared by several deliveries, like a context.

        Returns:
            A handle resolving to the ``DeliveryOutcome``.
        """
        delivery = Delivery(self._inner, entry, self._backoff.clone(), cancel=cancel)
        task = asyncio.create_task(delivery.run())
        return DeliveryHandle(task, delivery)

    async def drain(self) -> None:
        """Wait until no fire-and-forget delivery is in flight."""
        while self._background:
            await asyncio.wait(set(self._background))

    def _on_background_done(self, task: asyncio.Task[DeliveryOutcome]) -> None:
        self._background.discard(task)
        if task.cancelled():
            logger.debug("background delivery task was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error("background delivery crashed", exc_info=exc)
            return
        outcome = task.result()
        if outcome.status in (DeliveryStatus.FAILED, DeliveryStatus.EXHAUSTED):
            logger.warning(
                f"dropping log entry after {outcome.attempts} attempts "
                f"({outcome.status.value}): {outcome.error}"
            )
