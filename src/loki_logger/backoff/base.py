r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["Backoff"]

from abc import ABC, abstractmethod


class Backoff(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy produces the successive delays to wait between
    push attempts. Since a backoff carries mutable progress and must not
    be shared between concurrent retry loops, ``clone`` is called once per
    delivery to give each retry loop its own instance.
    """

    @abstractmethod
    def next_delay(self) -> float | None:
        """Return the delay before the next attempt and advance the
        backoff.

        Returns:
            The delay in seconds, or ``None`` if the backoff is exhausted
            and the caller should stop retrying.
        """

    @abstractmethod
    def clone(self) -> Backoff:
        """Return an independent copy of this backoff.

        The copy has the same configuration and the same progress, so a
        backoff that has already been advanced yields an advanced clone.
        """
