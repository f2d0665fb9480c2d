r"""Exceptions raised while pushing log entries to Loki.

The retry logic only retries ``PushStatusError``: the server answered
with a non-2xx status, which is usually transient (overload, rate
limiting, ingester restarts). Every other failure is terminal.
"""

from __future__ import annotations

__all__ = [
    "DeliveryCancelledError",
    "EntryEncodeError",
    "PushError",
    "PushStatusError",
    "PushTransportError",
]


class PushError(Exception):
    """Base class for failures while delivering a log entry.

    Args:
        message: Human readable description of the failure.
        cause: Optional underlying exception.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class PushStatusError(PushError):
    """Raised when the Loki server answers a push with a non-2xx status.

    Args:
        status_code: The HTTP status code of the response.
        status: The status line, e.g. ``"500 Internal Server Error"``.
        body: The raw response body.

    Example:
        ```pycon
        >>> from loki_logger.exceptions import PushStatusError
        >>> exc = PushStatusError(status_code=429, status="429 Too Many Requests", body=b"slow down")
        >>> str(exc)
        'push request failed with status 429 Too Many Requests: slow down'
        >>> exc.status_code
        429

        ```
    """

    def __init__(
        self,
        status_code: int,
        status: str = "",
        body: bytes = b"",
        *,
        cause: BaseException | None = None,
    ) -> None:
        self.status_code = status_code
        self.status = status or str(status_code)
        self.body = body
        text = body.decode("utf-8", errors="replace")
        super().__init__(f"push request failed with status {self.status}: {text}", cause=cause)


class PushTransportError(PushError):
    """Raised when the push request could not reach the Loki server."""


class EntryEncodeError(PushError):
    """Raised when a log entry cannot be serialized into a push body."""


class DeliveryCancelledError(PushError):
    """Raised by ``DeliveryOutcome.raise_for_error`` for a cancelled
    delivery."""
