r"""Core shared configuration and validation.

This module contains the defaults, the client configuration object and
the parameter validation helpers shared by the backoff strategies and
the Loki push clients.
"""

from __future__ import annotations

__all__ = [
    "CONTENT_TYPE",
    "DEFAULT_FACTOR",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_TIMEOUT",
    "PUSH_PATH",
    "TENANT_HEADER",
    "USER_AGENT",
    "ClientConfig",
    "validate_backoff_params",
    "validate_headers",
    "validate_timeout",
]

from loki_logger.core.config import (
    CONTENT_TYPE,
    DEFAULT_FACTOR,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_TIMEOUT,
    PUSH_PATH,
    TENANT_HEADER,
    USER_AGENT,
    ClientConfig,
)
from loki_logger.core.validation import (
    validate_backoff_params,
    validate_headers,
    validate_timeout,
)
