r"""Configuration dataclass and defaults for the Loki push clients.

This module provides configuration constants and a dataclass-based
configuration object for ``LokiClient``. The backoff defaults are resolved
lazily by ``ExponentialBackoff`` when a field is left at zero.
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
]

from dataclasses import dataclass, field, replace
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from loki_logger.core.validation import validate_headers, validate_timeout

# Initial delay in seconds used by ExponentialBackoff when none is provided
DEFAULT_INITIAL_DELAY = 0.1

# Multiplier applied to the delay after each step of ExponentialBackoff
# With the defaults: 0.1s, 0.2s, 0.4s, 0.8s, ...
DEFAULT_FACTOR = 2.0

# Default timeout in seconds for a single push request
DEFAULT_TIMEOUT = 10.0

# Path of the Loki push endpoint. It is not appended to the URL automatically.
PUSH_PATH = "/loki/api/v1/push"

# Body of every push request is the JSON encoding of the push payload
CONTENT_TYPE = "application/json"

# Header used by Loki to select the tenant in multi-tenant deployments
TENANT_HEADER = "X-Scope-OrgID"

try:
    USER_AGENT = f"loki-logger/{version('loki-logger')}"
except PackageNotFoundError:  # pragma: no cover
    USER_AGENT = "loki-logger/0.0.0"


@dataclass
class ClientConfig:
    """Configuration for ``LokiClient`` requests.

    Args:
        timeout: Maximum seconds to wait for the Loki server. Must be > 0.
        tenant_id: Optional tenant sent in the ``X-Scope-OrgID`` header.
        headers: Extra headers added to every push request. They cannot
            override ``Content-Type`` or ``User-Agent``.

    Example:
        ```pycon
        >>> from loki_logger.core.config import ClientConfig
        >>> config = ClientConfig(tenant_id="team-a")
        >>> config.timeout
        10.0
        >>> merged = config.merge(timeout=2.5)
        >>> merged.timeout, merged.tenant_id
        (2.5, 'team-a')
        >>> config.timeout  # Original unchanged
        10.0

        ```
    """

    timeout: float = DEFAULT_TIMEOUT
    tenant_id: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_timeout(self.timeout)
        validate_headers(self.headers)
        if self.tenant_id is not None and not self.tenant_id:
            msg = "tenant_id must be a non-empty string if specified"
            raise ValueError(msg)

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def request_headers(self) -> dict[str, str]:
        """Build the headers sent with every push request.

        Returns:
            The user headers, the tenant header if configured, and the
            fixed ``Content-Type`` and ``User-Agent`` headers.

        Example:
            ```pycon
            >>> from loki_logger.core.config import ClientConfig
            >>> headers = ClientConfig(tenant_id="team-a").request_headers()
            >>> headers["X-Scope-OrgID"], headers["Content-Type"]
            ('team-a', 'application/json')

            ```
        """
        headers = dict(self.headers)
        if self.tenant_id is not None:
            headers[TENANT_HEADER] = self.tenant_id
        headers["Content-Type"] = CONTENT_TYPE
        headers["User-Agent"] = USER_AGENT
        return headers
