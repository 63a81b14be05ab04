"""Client for the Astra DevOps (control plane) API.

Single-call database operations authenticated with a static bearer token.
Waiting for a database to reach a given status is left to the caller.
"""

from __future__ import annotations

from typing import Any

import httpx

from .config import DEFAULT_DEVOPS_URL, DEFAULT_TIMEOUT
from .core.errors import ErrorTranslator
from .core.http_executor import RequestExecutor
from .core.outcomes import NotFound, Success
from .core.session import Session
from .core.token_manager import TokenManager
from .errors import ErrorCode, ServerError, ValidationError
from .http import create_http_client
from .models import CloudProvider, Database, DatabaseCreationRequest
from .telemetry import get_logger, traced

PATH_DATABASES = "/databases"
HEADER_AUTHORIZATION = "Authorization"
HEADER_LOCATION = "location"
BEARER_SCHEME = "Bearer"

DEFAULT_INCLUDE = "nonterminated"
DEFAULT_LIMIT = 25


def _require_id(database_id: str) -> None:
    if not database_id:
        msg = "database_id is required"
        raise ValidationError(msg, code=ErrorCode.MISSING_PAYLOAD, details={"field": "database_id"})


class DevopsClient:
    """Synchronous DevOps API client."""

    def __init__(
        self,
        token: str,
        *,
        devops_url: str = DEFAULT_DEVOPS_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Organization bearer token.
            devops_url: API root, without trailing slash.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.devops_url = devops_url.rstrip("/")
        self._http = create_http_client(timeout=timeout, transport=transport)
        executor = RequestExecutor(
            self._http,
            timeout=timeout,
            token_header=HEADER_AUTHORIZATION,
            token_scheme=BEARER_SCHEME,
        )
        self._session = Session(executor, TokenManager(executor, bearer_token=token))
        self._logger = get_logger().bind(devops_url=self.devops_url)

    def __enter__(self) -> DevopsClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()

    def _url(self, *segments: str) -> str:
        return "/".join([self.devops_url + PATH_DATABASES, *segments])

    @traced("devops.find_all_databases")
    def find_all_databases(
        self,
        include: str = DEFAULT_INCLUDE,
        provider: CloudProvider | str | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[Database]:
        """List databases of the organization.

        Args:
            include: Status filter (``nonterminated``, ``all``, ``active`` ...).
            provider: Optional cloud provider filter.
            limit: Maximum number of databases returned.
        """
        params = {
            "include": include,
            "provider": str(provider) if provider is not None else None,
            "limit": limit,
        }
        body = self._session.dispatch("GET", self._url(), params=params).unwrap()
        return [Database.model_validate(item) for item in body or []]

    @traced("devops.find_database", record=("database_id",))
    def find_database_by_id(self, database_id: str) -> Database | None:
        """Get a database, or None if it does not exist."""
        _require_id(database_id)
        outcome = self._session.dispatch("GET", self._url(database_id))
        match outcome:
            case NotFound():
                return None
            case Success(body=body):
                return Database.model_validate(body)
            case _:
                return outcome.unwrap()

    def database_exists(self, database_id: str) -> bool:
        """Check if a database exists."""
        return self.find_database_by_id(database_id) is not None

    @traced("devops.create_database")
    def create_database(self, request: DatabaseCreationRequest) -> str:
        """Request creation of a database.

        Returns:
            The id of the new database, read from the ``Location`` header.

        Raises:
            ServerError: If the response carries no ``Location`` header.
        """
        executor = self._session.executor
        token = self._session.token_manager.get_token()
        raw = executor.execute("POST", self._url(), request, token=token)
        if raw.status_code not in (201, 202):
            ErrorTranslator.translate(raw).unwrap()

        location = {k.lower(): v for k, v in raw.headers.items()}.get(HEADER_LOCATION)
        if not location:
            msg = "Database creation response has no Location header"
            raise ServerError(msg, status_code=raw.status_code, body=raw.text)

        database_id = location.rstrip("/").rsplit("/", 1)[-1]
        self._logger.info("Database creation requested", database_id=database_id, name=request.name)
        return database_id

    @traced("devops.terminate_database", record=("database_id",))
    def terminate_database(self, database_id: str) -> None:
        """Request termination of a database.

        Raises:
            NotFoundError: If the database does not exist.
        """
        _require_id(database_id)
        self._session.dispatch("POST", self._url(database_id, "terminate"), {}).unwrap()
        self._logger.info("Database termination requested", database_id=database_id)
