r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import copy

from loki_logger.backoff.base import Backoff
from loki_logger.core.config import DEFAULT_FACTOR, DEFAULT_INITIAL_DELAY
from loki_logger.core.validation import validate_backoff_params


class ExponentialBackoff(Backoff):
    """Exponential backoff strategy.

    Each call to ``next_delay`` returns the current delay and multiplies it
    by ``factor``. Once the current delay exceeds ``max_delay`` the
    backoff is exhausted and stays exhausted.

    Zero-valued fields mean "unset" and are resolved lazily on each call:
    ``delay`` falls back to ``DEFAULT_INITIAL_DELAY`` (0.1s), ``factor`` to
    ``DEFAULT_FACTOR`` (2.0), and ``max_delay=0`` means no ceiling. An
    explicit ``factor=0`` is therefore indistinguishable from the default
    and produces exponential growth, not a constant delay.

    Args:
        delay: The initial delay in seconds (default: 0, meaning 0.1s).
        factor: The growth factor (default: 0, meaning 2.0). Must be 0 or
            >= 1.
        max_delay: The delay ceiling in seconds (default: 0, meaning
            unbounded).

    Example:
        ```pycon
        >>> from loki_logger.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(max_delay=1.0)
        >>> [backoff.next_delay() for _ in range(5)]
        [0.1, 0.2, 0.4, 0.8, None]
        >>> backoff = ExponentialBackoff(delay=1.0, factor=1.5)
        >>> backoff.next_delay(), backoff.next_delay()
        (1.0, 1.5)

        ```
    """

    def __init__(self, delay: float = 0.0, factor: float = 0.0, max_delay: float = 0.0) -> None:
        validate_backoff_params(delay=delay, factor=factor, max_delay=max_delay)

        self.delay = delay
        self.factor = factor
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(delay={self.delay!r}, "
            f"factor={self.factor!r}, max_delay={self.max_delay!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExponentialBackoff):
            return NotImplemented
        return (self.delay, self.factor, self.max_delay) == (
            other.delay,
            other.factor,
            other.max_delay,
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def exhausted(self) -> bool:
        """``True`` if the next call to ``next_delay`` returns ``None``."""
        return self.max_delay != 0 and self.delay > self.max_delay

    def next_delay(self) -> float | None:
        """Return the current delay and grow it by ``factor``.

        Returns:
            The delay in seconds, or ``None`` once the current delay
            exceeds ``max_delay``. The state is not modified when
            exhausted.
        """
        if self.exhausted:
            return None

        if self.delay == 0:
            self.delay = DEFAULT_INITIAL_DELAY

        if self.factor == 0:
            self.factor = DEFAULT_FACTOR

        delay = self.delay
        self.delay = self.delay * self.factor
        return delay

    def clone(self) -> ExponentialBackoff:
        """Return a copy with the same configuration and progress.

        Returns:
            A new ExponentialBackoff. Advancing it does not affect this
            instance.
        """
        return copy.copy(self)
