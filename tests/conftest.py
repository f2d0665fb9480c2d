from __future__ import annotations

from datetime import datetime, timezone

import pytest

from loki_logger import Entry
from loki_logger.backoff import ExponentialBackoff
from loki_logger.fake import FakeClient


@pytest.fixture
def entry() -> Entry:
    """Create a log entry with labels and structured metadata."""
    return Entry(
        "test message",
        labels={"foo": "bar"},
        timestamp=datetime(2024, 5, 17, 12, 30, 0, 250, tzinfo=timezone.utc),
        structured_metadata={"key": "value"},
    )


@pytest.fixture
def fake_client() -> FakeClient:
    """Create an in-memory push client that always succeeds."""
    return FakeClient()


@pytest.fixture
def fast_backoff() -> ExponentialBackoff:
    """Create a backoff short enough to keep retry tests fast."""
    return ExponentialBackoff(delay=0.001, factor=2.0)
