r"""In-memory push client for tests.

``FakeClient`` implements the ``PushClient`` protocol without any network
access. It records every attempt and every delivered entry, and can be
told to fail a number of times before succeeding.
"""

from __future__ import annotations

__all__ = ["FakeClient"]

import logging
from typing import TYPE_CHECKING

from loki_logger.exceptions import PushStatusError

if TYPE_CHECKING:
    from loki_logger.entry import Entry

logger: logging.Logger = logging.getLogger(__name__)


class FakeClient:
    """Push client storing entries in memory.

    Args:
        failures: Number of calls to ``push`` that raise ``error`` before
            entries are accepted.
        always_fail: If ``True``, every call to ``push`` raises ``error``.
        error: The exception to raise. Defaults to a fresh
            ``PushStatusError`` with status 500 for each failing call.

    Example:
        ```pycon
        >>> import asyncio
        >>> from loki_logger import Entry
        >>> from loki_logger.fake import FakeClient
        >>> client = FakeClient(failures=1)
        >>> async def main():
        ...     try:
        ...         await client.push(Entry("first"))
        ...     except Exception as exc:
        ...         print(exc)
        ...     await client.push(Entry("second"))
        ...
        >>> asyncio.run(main())
        push request failed with status 500 Internal Server Error: Internal Server Error
        >>> client.attempts, [entry.line for entry in client.entries]
        (2, ['second'])

        ```
    """

    def __init__(
        self,
        *,
        failures: int = 0,
        always_fail: bool = False,
        error: Exception | None = None,
    ) -> None:
        if failures < 0:
            msg = f"failures must be >= 0, got {failures}"
            raise ValueError(msg)
        self._failures = failures
        self._always_fail = always_fail
        self._error = error
        self._entries: list[Entry] = []
        self.attempts = 0

    @property
    def entries(self) -> list[Entry]:
        """The entries accepted so far, in push order."""
        return list(self._entries)

    async def push(self, entry: Entry) -> None:
        self.attempts += 1
        if self._always_fail or self._failures > 0:
            if self._failures > 0:
                self._failures -= 1
            logger.debug(f"fake push attempt {self.attempts} failing")
            raise self._make_error()
        self._entries.append(entry)

    def _make_error(self) -> Exception:
        if self._error is not None:
            return self._error
        return PushStatusError(
            status_code=500,
            status="500 Internal Server Error",
            body=b"Internal Server Error",
        )
