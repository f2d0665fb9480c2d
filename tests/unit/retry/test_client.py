r"""Unit tests for RetryClient."""

from __future__ import annotations

import asyncio
import logging

import pytest

from loki_logger import Entry, PushClient, PushStatusError, RetryClient
from loki_logger.backoff import ExponentialBackoff
from loki_logger.fake import FakeClient
from loki_logger.retry import DeliveryStatus


class RecordingBackoff(ExponentialBackoff):
    """ExponentialBackoff recording every delay it hands out.

    Clones share the record list.
    """

    def __init__(self, record: list[float | None], **kwargs: float) -> None:
        super().__init__(**kwargs)
        self.record = record

    def next_delay(self) -> float | None:
        delay = super().next_delay()
        self.record.append(delay)
        return delay


class PerEntryFailingClient:
    """Push client failing the first ``failures`` pushes of each line."""

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.attempts: dict[str, int] = {}

    async def push(self, entry: Entry) -> None:
        count = self.attempts.get(entry.line, 0) + 1
        self.attempts[entry.line] = count
        if count <= self.failures:
            raise PushStatusError(status_code=503, status="503 Service Unavailable")


#################################
#     Tests for RetryClient     #
#################################


def test_retry_client_default_backoff(fake_client: FakeClient) -> None:
    client = RetryClient(fake_client)
    assert client.inner is fake_client
    assert client.backoff == ExponentialBackoff()


def test_retry_client_clones_backoff_at_construction(fake_client: FakeClient) -> None:
    backoff = ExponentialBackoff(delay=1.0, factor=2.0, max_delay=10.0)
    client = RetryClient(fake_client, backoff)
    backoff.next_delay()
    assert client.backoff == ExponentialBackoff(delay=1.0, factor=2.0, max_delay=10.0)


def test_retry_client_backoff_property_returns_copy(fake_client: FakeClient) -> None:
    client = RetryClient(fake_client, ExponentialBackoff(delay=1.0))
    client.backoff.next_delay()
    assert client.backoff.delay == 1.0


def test_retry_client_with_backoff(fake_client: FakeClient) -> None:
    """Test that with_backoff returns a new client and leaves the original
    untouched."""
    client = RetryClient(fake_client)
    backoff = ExponentialBackoff(delay=1.0, factor=2.0, max_delay=10.0)

    retry_client = client.with_backoff(backoff)

    assert retry_client is not client
    assert retry_client.inner is fake_client
    assert retry_client.backoff == backoff
    assert client.backoff == ExponentialBackoff()
    assert client.backoff != retry_client.backoff


def test_retry_client_is_push_client(fake_client: FakeClient) -> None:
    assert isinstance(RetryClient(fake_client), PushClient)


def test_retry_client_repr(fake_client: FakeClient) -> None:
    assert repr(RetryClient(fake_client)).startswith("RetryClient(inner=")


@pytest.mark.asyncio
async def test_push_with_handle_success(entry: Entry, fake_client: FakeClient) -> None:
    client = RetryClient(fake_client)

    outcome = await client.push_with_handle(entry)

    assert outcome.status is DeliveryStatus.DELIVERED
    assert outcome.attempts == 1
    assert fake_client.entries == [entry]


@pytest.mark.asyncio
async def test_push_with_handle_retries_until_success(
    entry: Entry, fast_backoff: ExponentialBackoff
) -> None:
    """Test that four transient failures followed by a success make
    exactly five attempts."""
    fake = FakeClient(failures=4)
    client = RetryClient(fake, fast_backoff)

    outcome = await asyncio.wait_for(client.push_with_handle(entry).wait(), timeout=5.0)

    assert outcome.status is DeliveryStatus.DELIVERED
    assert outcome.error is None
    assert outcome.attempts == 5
    assert fake.attempts == 5
    assert fake.entries == [entry]


@pytest.mark.asyncio
async def test_push_with_handle_permanent_failure(entry: Entry, fast_backoff: ExponentialBackoff) -> None:
    """Test that a non-transient error is reported after one attempt."""
    error = ValueError("cannot build request")
    fake = FakeClient(always_fail=True, error=error)
    client = RetryClient(fake, fast_backoff)

    outcome = await client.push_with_handle(entry)

    assert outcome.status is DeliveryStatus.FAILED
    assert outcome.error is error
    assert fake.attempts == 1
    with pytest.raises(ValueError, match=r"cannot build request"):
        outcome.raise_for_error()


@pytest.mark.asyncio
async def test_push_with_handle_exhausted(entry: Entry) -> None:
    """Test that retries stop once the backoff ceiling is exceeded."""
    fake = FakeClient(always_fail=True)
    client = RetryClient(fake, ExponentialBackoff(delay=0.001, factor=2.0, max_delay=0.004))

    outcome = await asyncio.wait_for(client.push_with_handle(entry).wait(), timeout=5.0)

    # delays 0.001, 0.002, 0.004, then exhausted
    assert outcome.status is DeliveryStatus.EXHAUSTED
    assert isinstance(outcome.error, PushStatusError)
    assert outcome.error.status_code == 500
    assert outcome.attempts == 4
    assert fake.attempts == 4


@pytest.mark.asyncio
async def test_push_with_handle_cancel_mid_wait(entry: Entry) -> None:
    """Test that cancelling during the backoff wait stops all further
    attempts without deadlocking."""
    fake = FakeClient(always_fail=True)
    client = RetryClient(fake, ExponentialBackoff(delay=10.0))

    handle = client.push_with_handle(entry)
    await asyncio.sleep(0.01)
    assert fake.attempts == 1

    handle.cancel()
    outcome = await asyncio.wait_for(handle.wait(), timeout=1.0)
    await asyncio.sleep(0.05)

    assert outcome.status is DeliveryStatus.CANCELLED
    assert outcome.error is None
    assert fake.attempts == 1


@pytest.mark.asyncio
async def test_push_with_handle_shared_cancel_event(entry: Entry) -> None:
    """Test that one event can cancel several deliveries at once."""
    fake = FakeClient(always_fail=True)
    client = RetryClient(fake, ExponentialBackoff(delay=10.0))
    cancel = asyncio.Event()

    handles = [client.push_with_handle(entry, cancel=cancel) for _ in range(3)]
    await asyncio.sleep(0.01)
    cancel.set()
    outcomes = await asyncio.wait_for(asyncio.gather(*(handle.wait() for handle in handles)), timeout=1.0)

    assert [outcome.status for outcome in outcomes] == [DeliveryStatus.CANCELLED] * 3
    assert fake.attempts == 3


@pytest.mark.asyncio
async def test_push_with_handle_clones_backoff_per_delivery(entry: Entry) -> None:
    """Test that concurrent deliveries never share backoff progress."""
    record: list[float | None] = []
    inner = PerEntryFailingClient(failures=2)
    client = RetryClient(inner, RecordingBackoff(record, delay=0.01, factor=2.0))

    handles = [client.push_with_handle(Entry(line)) for line in ("a", "b", "c")]
    outcomes = await asyncio.wait_for(asyncio.gather(*(handle.wait() for handle in handles)), timeout=5.0)

    assert all(outcome.status is DeliveryStatus.DELIVERED for outcome in outcomes)
    assert sorted(record) == [0.01, 0.01, 0.01, 0.02, 0.02, 0.02]
    assert inner.attempts == {"a": 3, "b": 3, "c": 3}
    assert client.backoff.delay == 0.01


@pytest.mark.asyncio
async def test_with_backoff_isolation_under_concurrency() -> None:
    """Test that deliveries on the original client keep the default
    backoff while deliveries on a reconfigured client run concurrently."""
    original_record: list[float | None] = []
    new_record: list[float | None] = []
    inner = PerEntryFailingClient(failures=2)
    original = RetryClient(inner, RecordingBackoff(original_record))
    reconfigured = original.with_backoff(RecordingBackoff(new_record, delay=0.02, factor=3.0))

    outcomes = await asyncio.wait_for(
        asyncio.gather(
            original.push_with_handle(Entry("original")).wait(),
            reconfigured.push_with_handle(Entry("reconfigured")).wait(),
        ),
        timeout=5.0,
    )

    assert [outcome.status for outcome in outcomes] == [DeliveryStatus.DELIVERED] * 2
    assert original_record == [0.1, 0.2]
    assert new_record == pytest.approx([0.02, 0.06])
    assert original.backoff == ExponentialBackoff()


@pytest.mark.asyncio
async def test_push_returns_immediately(entry: Entry, fake_client: FakeClient) -> None:
    """Test that push returns before the delivery runs."""
    client = RetryClient(fake_client)

    result = await client.push(entry)

    assert result is None
    assert fake_client.attempts == 0
    assert client.pending == 1
    await client.drain()
    assert client.pending == 0
    assert fake_client.entries == [entry]


@pytest.mark.asyncio
async def test_push_never_raises(entry: Entry, fast_backoff: ExponentialBackoff) -> None:
    fake = FakeClient(always_fail=True, error=RuntimeError("boom"))
    client = RetryClient(fake, fast_backoff)

    await client.push(entry)
    await client.drain()

    assert fake.attempts == 1
    assert fake.entries == []


@pytest.mark.asyncio
async def test_push_logs_dropped_entry(
    entry: Entry, fast_backoff: ExponentialBackoff, caplog: pytest.LogCaptureFixture
) -> None:
    fake = FakeClient(always_fail=True, error=RuntimeError("boom"))
    client = RetryClient(fake, fast_backoff)

    with caplog.at_level(logging.WARNING, logger="loki_logger.retry.client"):
        await client.push(entry)
        await client.drain()

    assert "dropping log entry after 1 attempts (failed): boom" in caplog.text


@pytest.mark.asyncio
async def test_push_does_not_log_success(
    entry: Entry, fake_client: FakeClient, caplog: pytest.LogCaptureFixture
) -> None:
    client = RetryClient(fake_client)

    with caplog.at_level(logging.WARNING, logger="loki_logger.retry.client"):
        await client.push(entry)
        await client.drain()

    assert caplog.records == []


@pytest.mark.asyncio
async def test_push_cancel_event(entry: Entry) -> None:
    fake = FakeClient(always_fail=True)
    client = RetryClient(fake, ExponentialBackoff(delay=10.0))
    cancel = asyncio.Event()

    await client.push(entry, cancel=cancel)
    await asyncio.sleep(0.01)
    cancel.set()
    await asyncio.wait_for(client.drain(), timeout=1.0)

    assert fake.attempts == 1
    assert client.pending == 0


@pytest.mark.asyncio
async def test_drain_without_pending(fake_client: FakeClient) -> None:
    client = RetryClient(fake_client)
    await client.drain()
    assert client.pending == 0
