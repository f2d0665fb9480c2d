r"""Backoff strategies for delays between push attempts."""

from __future__ import annotations

__all__ = ["Backoff", "ExponentialBackoff"]

from loki_logger.backoff.base import Backoff
from loki_logger.backoff.exponential import ExponentialBackoff
