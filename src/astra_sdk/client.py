"""Astra document API client."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Callable

import httpx

from .config import AstraConfig
from .core.http_executor import RequestExecutor
from .core.outcomes import Outcome
from .core.paths import ResourceAddress, build_path, build_schema_path
from .core.session import Session
from .core.token_manager import TokenManager
from .devops import DevopsClient
from .documents import NamespaceClient
from .errors import InvalidConfigError
from .http import create_http_client
from .models import Namespace
from .telemetry import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping


class AstraClient:
    """Synchronous client for one document API deployment.

    Instances are safe to share between threads: the token cache serializes
    renewal and every other call is independent.
    """

    def __init__(
        self,
        config: AstraConfig,
        *,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the client.

        Args:
            config: Session configuration.
            transport: Optional httpx transport (used by tests).
            clock: Monotonic clock driving token expiry.
        """
        self.config = config
        self._http = create_http_client(timeout=config.timeout, transport=transport)
        self._executor = RequestExecutor(
            self._http,
            timeout=config.timeout,
            token_header=config.token_header,
        )
        self._session = Session(
            self._executor,
            TokenManager.from_config(config, self._executor, clock=clock),
            invalidate_on_unauthorized=config.invalidate_on_unauthorized,
        )
        self._transport = transport
        self._logger = get_logger().bind(base_url=config.base_url_str)
        self._logger.debug(
            "Client initialized",
            username=config.username,
            token_ttl=config.token_ttl,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> AstraClient:
        """Create a client configured from environment variables."""
        return cls(AstraConfig.from_env(), **kwargs)

    def __enter__(self) -> AstraClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()

    @property
    def token_manager(self) -> TokenManager:
        return self._session.token_manager

    @property
    def session(self) -> Session:
        return self._session

    def get_token(self) -> str:
        """Get a valid authentication token."""
        return self._session.token_manager.get_token()

    def invalidate_token(self) -> None:
        """Force re-authentication on the next call."""
        self._session.token_manager.invalidate()

    def connect(self) -> bool:
        """Check the credentials by obtaining a token.

        Raises:
            AuthError: If the credentials are rejected.
        """
        return len(self.get_token()) > 0

    # =========================================================================
    # Dispatch
    # =========================================================================

    def url_for(self, address: ResourceAddress, suffix: str = "") -> str:
        """Absolute URL of a document API resource."""
        path = build_path(address, prefix=self.config.document_api_prefix)
        return f"{self.config.base_url_str}{path}{suffix}"

    def schema_url(self, namespace: str | None = None) -> str:
        """Absolute URL of the namespace schema endpoint."""
        path = build_schema_path(namespace, prefix=self.config.document_api_prefix)
        return f"{self.config.base_url_str}{path}"

    def dispatch(
        self,
        method: str,
        url: str,
        body: Any = None,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> Outcome:
        """Send an authenticated request and classify the response."""
        return self._session.dispatch(method, url, body, params=params)

    # =========================================================================
    # Namespaces
    # =========================================================================

    def namespace(self, name: str) -> NamespaceClient:
        """Get a client for one namespace."""
        return NamespaceClient(self, name)

    def namespaces(self) -> list[Namespace]:
        """List namespaces of the database."""
        body = self.dispatch("GET", self.schema_url(), params={"raw": "true"}).unwrap()
        items = body.get("data", []) if isinstance(body, dict) else body or []
        return [Namespace.model_validate(item) for item in items]

    def namespace_names(self) -> list[str]:
        """List namespace names of the database."""
        return [ns.name for ns in self.namespaces()]

    # =========================================================================
    # DevOps
    # =========================================================================

    def devops(self) -> DevopsClient:
        """Get a DevOps API client using this session's bearer token.

        Raises:
            InvalidConfigError: If the configuration has no bearer token.
        """
        if self.config.bearer_token is None:
            msg = "The DevOps API requires a bearer_token"
            raise InvalidConfigError(msg, fields=["bearer_token"])
        return DevopsClient(
            self.config.bearer_token.get_secret_value(),
            devops_url=self.config.devops_url_str,
            timeout=self.config.timeout,
            transport=self._transport,
        )
