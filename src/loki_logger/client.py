r"""Asynchronous clients that push log entries to a Loki instance.

This module defines the ``PushClient`` protocol that every client
implements, and ``LokiClient``, which sends each entry to the Loki push
API over HTTP using ``httpx.AsyncClient``.
"""

from __future__ import annotations

__all__ = ["LokiClient", "PushClient"]

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from loki_logger.core.config import DEFAULT_TIMEOUT, ClientConfig
from loki_logger.exceptions import PushStatusError, PushTransportError

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from loki_logger.entry import Entry

logger: logging.Logger = logging.getLogger(__name__)


@runtime_checkable
class PushClient(Protocol):
    """Anything that can push a single log entry to Loki.

    Implementations must be safe to use from many concurrent tasks.
    ``push`` returns on success and raises ``PushStatusError`` when the
    server answered with a non-2xx status. Any other exception is a
    terminal failure.
    """

    async def push(self, entry: Entry) -> None: ...


class LokiClient:
    r"""Client for pushing log entries to a Loki instance.

    Each call to ``push`` sends exactly one entry in its own request.
    The client can be used as an async context manager, which closes the
    underlying ``httpx.AsyncClient`` on exit if this instance created it.

    Args:
        url: The full URL of the push endpoint, usually ending in
            ``PUSH_PATH``.
        config: Optional ClientConfig. If ``None``, a default ClientConfig
            is used.
        timeout: Shortcut overriding ``config.timeout``.
        client: Optional ``httpx.AsyncClient`` to send requests with. It
            is not closed by ``aclose``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from loki_logger import Entry, LokiClient, PUSH_PATH
        >>> async def main():  # doctest: +SKIP
        ...     async with LokiClient("http://localhost:3100" + PUSH_PATH) as client:
        ...         await client.push(Entry("hello", labels={"app": "demo"}))
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        url: str,
        *,
        config: ClientConfig | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not url:
            msg = "url must be a non-empty string"
            raise ValueError(msg)
        self._url = url
        config = config if config is not None else ClientConfig()
        self._config = config.merge(timeout=timeout)
        self._headers = self._config.request_headers()
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=self._config.timeout)

    @property
    def url(self) -> str:
        return self._url

    @property
    def config(self) -> ClientConfig:
        return self._config

    def with_http_client(self, client: httpx.AsyncClient) -> LokiClient:
        """Return a new LokiClient sending requests with ``client``.

        The URL and configuration are shared, the original instance is
        left untouched. The returned client does not own ``client``.

        Args:
            client: The ``httpx.AsyncClient`` to use.

        Returns:
            A new LokiClient.
        """
        return LokiClient(self._url, config=self._config, client=client)

    async def push(self, entry: Entry) -> None:
        """Send a single entry to Loki.

        Args:
            entry: The log entry to send.

        Raises:
            EntryEncodeError: If the entry cannot be serialized.
            PushStatusError: If Loki answers with a non-2xx status.
            PushTransportError: If the request fails before a response
                is received (connection refused, timeout, ...).
        """
        body = entry.encode()
        try:
            response = await self._client.post(self._url, content=body, headers=self._headers)
        except httpx.RequestError as exc:
            logger.debug(f"push to {self._url} encountered {type(exc).__name__}: {exc}")
            msg = f"push request to {self._url} failed: {exc}"
            raise PushTransportError(msg, cause=exc) from exc

        if not response.is_success:
            logger.debug(f"push to {self._url} failed with status {response.status_code}")
            raise PushStatusError(
                status_code=response.status_code,
                status=f"{response.status_code} {response.reason_phrase}".strip(),
                body=response.content,
            )

    async def aclose(self) -> None:
        """Close the underlying ``httpx.AsyncClient`` if owned."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
