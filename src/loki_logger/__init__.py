r"""loki_logger - Push log entries to Grafana Loki with automatic retry.

This package delivers structured log entries to the Loki push API over
HTTP. Built on top of httpx and asyncio, deliveries run in background
tasks and are retried with exponential backoff while Loki answers with
a non-2xx status.

Key Features:
    - ``LokiClient``: async HTTP client for the Loki JSON push API
    - ``RetryClient``: retrying wrapper around any push client
    - Fire-and-forget ``push`` and awaitable ``push_with_handle``
    - Explicit delivery outcomes: delivered, failed, exhausted, cancelled
    - Per-delivery exponential backoff with optional ceiling
    - In-memory ``FakeClient`` for tests

Example:
    ```pycon
    >>> import asyncio
    >>> from loki_logger import Entry, LokiClient, RetryClient, PUSH_PATH
    >>> async def main():  # doctest: +SKIP
    ...     async with LokiClient("http://localhost:3100" + PUSH_PATH) as loki:
    ...         client = RetryClient(loki)
    ...         await client.push(Entry("Hello, world!", labels={"app": "demo"}))
    ...         await client.drain()
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "PUSH_PATH",
    "ClientConfig",
    "DeliveryCancelledError",
    "DeliveryHandle",
    "DeliveryOutcome",
    "DeliveryStatus",
    "Entry",
    "EntryEncodeError",
    "ExponentialBackoff",
    "LokiClient",
    "PushClient",
    "PushError",
    "PushStatusError",
    "PushTransportError",
    "RetryClient",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from loki_logger.backoff import ExponentialBackoff
from loki_logger.client import LokiClient, PushClient
from loki_logger.core.config import PUSH_PATH, ClientConfig
from loki_logger.entry import Entry
from loki_logger.exceptions import (
    DeliveryCancelledError,
    EntryEncodeError,
    PushError,
    PushStatusError,
    PushTransportError,
)
from loki_logger.retry import DeliveryHandle, DeliveryOutcome, DeliveryStatus, RetryClient

try:
    __version__ = version("loki-logger")
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
