r"""Outcome of a delivery and the handle used to observe it.

A delivery ends in exactly one of four states. The ``DeliveryHandle``
returned by ``RetryClient.push_with_handle`` resolves once to the
corresponding ``DeliveryOutcome`` and can be awaited any number of times.
"""

from __future__ import annotations

__all__ = ["DeliveryHandle", "DeliveryOutcome", "DeliveryStatus"]

import asyncio
import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loki_logger.exceptions import DeliveryCancelledError

if TYPE_CHECKING:
    from collections.abc import Generator

    from loki_logger.retry.delivery import Delivery


class DeliveryStatus(enum.Enum):
    """Terminal state of a delivery."""

    DELIVERED = "delivered"
    FAILED = "failed"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DeliveryOutcome:
    """Final result of a delivery.

    Attributes:
        status: How the delivery ended.
        error: The terminal exception. Set for ``FAILED`` (the
            non-retriable error) and ``EXHAUSTED`` (the last
            ``PushStatusError``), ``None`` otherwise.
        attempts: The number of push attempts that were made.

    Example:
        ```pycon
        >>> from loki_logger.retry import DeliveryOutcome, DeliveryStatus
        >>> outcome = DeliveryOutcome(DeliveryStatus.DELIVERED, attempts=1)
        >>> outcome.ok
        True
        >>> outcome.raise_for_error()

        ```
    """

    status: DeliveryStatus
    error: Exception | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED

    def raise_for_error(self) -> None:
        """Raise the terminal error of an unsuccessful delivery.

        Raises:
            DeliveryCancelledError: If the delivery was cancelled.
            Exception: The stored error if the delivery failed or
                exhausted its retries.
        """
        if self.status is DeliveryStatus.CANCELLED:
            msg = f"delivery cancelled after {self.attempts} attempts"
            raise DeliveryCancelledError(msg)
        if self.error is not None:
            raise self.error


class DeliveryHandle:
    """One-shot handle on an in-flight delivery.

    Awaiting the handle (or ``wait``) returns the ``DeliveryOutcome``.
    Cancelling the awaiting task does not cancel the delivery itself; use
    ``cancel`` for that.

    Args:
        task: The task running the delivery.
        delivery: The delivery run by ``task``.
    """

    def __init__(self, task: asyncio.Task[DeliveryOutcome], delivery: Delivery) -> None:
        self._task = task
        self._delivery = delivery

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"{self.__class__.__qualname__}({state}, attempts={self.attempts})"

    @property
    def task(self) -> asyncio.Task[DeliveryOutcome]:
        return self._task

    @property
    def attempts(self) -> int:
        return self._delivery.attempts

    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        """Ask the delivery to stop retrying.

        The delivery stops before its next backoff wait, or during it,
        and resolves to ``CANCELLED``. A push already in flight is
        allowed to complete, so a delivery that succeeds on that push
        still resolves to ``DELIVERED``.
        """
        self._delivery.cancel()

    async def wait(self) -> DeliveryOutcome:
        """Wait for the delivery to finish.

        Returns:
            The outcome of the delivery. A delivery whose task was
            cancelled resolves to ``CANCELLED``.
        """
        try:
            return await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise
            return DeliveryOutcome(DeliveryStatus.CANCELLED, attempts=self._delivery.attempts)

    def __await__(self) -> Generator[object, None, DeliveryOutcome]:
        return self.wait().__await__()
