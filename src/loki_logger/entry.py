r"""Log entry representation and its Loki push encoding.

An ``Entry`` is a single log line with its timestamp, the labels that
select the Loki stream and optional structured metadata. It has no
knowledge of streams or batching: each entry is encoded into its own
push request.
"""

from __future__ import annotations

__all__ = ["Entry", "to_unix_nanos"]

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from loki_logger.exceptions import EntryEncodeError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def to_unix_nanos(timestamp: datetime) -> int:
    """Convert a datetime to nanoseconds since the Unix epoch.

    The conversion is exact to the microsecond. Naive datetimes are
    interpreted as local time, like ``datetime.timestamp``.

    Args:
        timestamp: The datetime to convert.

    Returns:
        The number of nanoseconds since 1970-01-01T00:00:00Z.

    Example:
        ```pycon
        >>> from datetime import datetime, timezone
        >>> from loki_logger.entry import to_unix_nanos
        >>> to_unix_nanos(datetime(2024, 1, 1, 0, 0, 0, 5, tzinfo=timezone.utc))
        1704067200000005000

        ```
    """
    delta = timestamp.astimezone(timezone.utc) - _EPOCH
    seconds = delta.days * 86_400 + delta.seconds
    return seconds * 1_000_000_000 + delta.microseconds * 1_000


@dataclass(frozen=True)
class Entry:
    """A single log entry to be sent to Loki.

    Args:
        line: The log line.
        labels: Labels identifying the stream the line belongs to.
        timestamp: When the line was logged. Defaults to now (UTC).
        structured_metadata: Optional key/value pairs attached to the
            line without being part of the stream identity.

    Example:
        ```pycon
        >>> from datetime import datetime, timezone
        >>> from loki_logger import Entry
        >>> entry = Entry(
        ...     "hello",
        ...     labels={"app": "demo"},
        ...     timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ... )
        >>> entry.to_payload()
        {'streams': [{'stream': {'app': 'demo'}, 'values': [['1704067200000000000', 'hello']]}]}

        ```
    """

    line: str
    labels: dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_now)
    structured_metadata: dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON push request body for this entry.

        Returns:
            A dictionary following the Loki JSON push format. The
            structured metadata object is only present when non-empty.
        """
        value: list[Any] = [str(to_unix_nanos(self.timestamp)), self.line]
        if self.structured_metadata:
            value.append(dict(self.structured_metadata))
        return {"streams": [{"stream": dict(self.labels), "values": [value]}]}

    def encode(self) -> bytes:
        """Serialize the entry into the bytes sent to Loki.

        Returns:
            The UTF-8 encoded JSON push request body.

        Raises:
            EntryEncodeError: If the labels or metadata cannot be
                serialized, or the timestamp is invalid.
        """
        try:
            return json.dumps(self.to_payload(), separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError, OverflowError) as exc:
            msg = f"failed to encode log entry: {exc}"
            raise EntryEncodeError(msg, cause=exc) from exc
