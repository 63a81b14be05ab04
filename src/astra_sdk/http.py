"""HTTP client factory for the Astra SDK."""

from __future__ import annotations

import httpx

from .config import DEFAULT_TIMEOUT
from .telemetry import SDK_NAME, SDK_VERSION

USER_AGENT = f"{SDK_NAME}/{SDK_VERSION} Python"


def create_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create configured sync HTTP client.

    The client has no base URL: callers pass absolute URLs because the
    document API and the DevOps API live on different hosts.

    Args:
        timeout: Per-request timeout in seconds.
        transport: Optional transport override (used by tests).

    Returns:
        Configured httpx.Client.
    """
    return httpx.Client(
        timeout=httpx.Timeout(timeout),
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
        follow_redirects=True,
        transport=transport,
    )
