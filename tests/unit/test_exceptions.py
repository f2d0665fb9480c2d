r"""Unit tests for the push exception hierarchy."""

from __future__ import annotations

import pytest

from loki_logger.exceptions import (
    DeliveryCancelledError,
    EntryEncodeError,
    PushError,
    PushStatusError,
    PushTransportError,
)


@pytest.mark.parametrize(
    "cls", [PushStatusError, PushTransportError, EntryEncodeError, DeliveryCancelledError]
)
def test_push_error_hierarchy(cls: type[Exception]) -> None:
    assert issubclass(cls, PushError)


def test_push_error_attributes() -> None:
    cause = OSError("connection reset")
    exc = PushError("push failed", cause=cause)
    assert exc.message == "push failed"
    assert exc.cause is cause
    assert str(exc) == "push failed"


def test_push_status_error() -> None:
    exc = PushStatusError(status_code=500, status="500 Internal Server Error", body=b"oops")
    assert exc.status_code == 500
    assert exc.status == "500 Internal Server Error"
    assert exc.body == b"oops"
    assert str(exc) == "push request failed with status 500 Internal Server Error: oops"


def test_push_status_error_default_status() -> None:
    exc = PushStatusError(status_code=429)
    assert exc.status == "429"
    assert exc.body == b""
    assert str(exc) == "push request failed with status 429: "


def test_push_status_error_invalid_utf8_body() -> None:
    exc = PushStatusError(status_code=502, status="502 Bad Gateway", body=b"\xff")
    assert "�" in str(exc)
