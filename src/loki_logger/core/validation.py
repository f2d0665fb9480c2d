r"""Parameter validation utilities for the Loki push clients.

This module provides validation functions used by the configuration
objects and the backoff strategies to reject invalid values at
construction time.
"""

from __future__ import annotations

__all__ = ["validate_backoff_params", "validate_headers", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

_RESERVED_HEADERS = frozenset({"content-type", "user-agent"})


def validate_timeout(timeout: float) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from loki_logger.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_headers(headers: Mapping[str, str]) -> None:
    """Validate user supplied request headers.

    Args:
        headers: Extra headers to send with each push request.

    Raises:
        ValueError: If a header would override ``Content-Type`` or
            ``User-Agent``.
    """
    for name in headers:
        if name.lower() in _RESERVED_HEADERS:
            msg = f"header {name!r} is set by the client and cannot be overridden"
            raise ValueError(msg)


def validate_backoff_params(delay: float, factor: float, max_delay: float) -> None:
    """Validate exponential backoff parameters.

    Zero is accepted for every parameter and means "use the default"
    (no ceiling for ``max_delay``).

    Args:
        delay: Initial delay in seconds. Must be >= 0.
        factor: Growth factor. Must be 0 or >= 1.
        max_delay: Delay ceiling in seconds. Must be >= 0.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from loki_logger.core.validation import validate_backoff_params
        >>> validate_backoff_params(delay=0.5, factor=1.5, max_delay=10.0)
        >>> validate_backoff_params(delay=0.0, factor=0.0, max_delay=0.0)

        ```
    """
    if delay < 0:
        msg = f"delay must be non-negative, got {delay}"
        raise ValueError(msg)
    if factor != 0 and factor < 1:
        msg = f"factor must be 0 (default) or >= 1, got {factor}"
        raise ValueError(msg)
    if max_delay < 0:
        msg = f"max_delay must be non-negative, got {max_delay}"
        raise ValueError(msg)
