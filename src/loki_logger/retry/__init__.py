r"""Retrying delivery of log entries.

Public API:
    - RetryClient: Client wrapper retrying pushes with backoff
    - Delivery: The retry loop for a single entry
    - DeliveryHandle: Awaitable handle on an in-flight delivery
    - DeliveryOutcome: Final result of a delivery
    - DeliveryStatus: Terminal states of a delivery
"""

from __future__ import annotations

__all__ = [
    "Delivery",
    "DeliveryHandle",
    "DeliveryOutcome",
    "DeliveryStatus",
    "RetryClient",
]

from loki_logger.retry.client import RetryClient
from loki_logger.retry.delivery import Delivery
from loki_logger.retry.outcome import DeliveryHandle, DeliveryOutcome, DeliveryStatus
