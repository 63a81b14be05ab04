"""Request execution for the Astra SDK.

Builds requests carrying the session token, a timeout and JSON headers,
executes them, and hands back the raw response. HTTP statuses are returned
as data; only network-level failures raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel

from ..config import DEFAULT_TIMEOUT
from ..errors import ErrorCode, ValidationError
from ..telemetry import get_logger, trace_operation
from .errors import ErrorTranslator, parse_body

if TYPE_CHECKING:
    from collections.abc import Mapping

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

DEFAULT_TOKEN_HEADER = "X-Cassandra-Token"
HEADER_CONTENT_TYPE = "Content-Type"
CONTENT_TYPE_JSON = "application/json"


@dataclass(frozen=True)
class RawResponse:
    """Status, body text and headers of an HTTP response."""

    status_code: int
    text: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> RawResponse:
        """Capture an httpx response."""
        return cls(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    def json(self) -> Any:
        """Parsed body, or the plain text if it is not JSON."""
        return parse_body(self.text)


def serialize_body(body: Any) -> Any:
    """Convert a payload to JSON-compatible data."""
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return body


class RequestExecutor:
    """Synchronous request executor.

    The executor performs exactly one attempt per call; retry policy belongs
    to the caller.
    """

    def __init__(
        self,
        client: httpx.Client,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        token_header: str = DEFAULT_TOKEN_HEADER,
        token_scheme: str | None = None,
    ) -> None:
        """Initialize request executor.

        Args:
            client: HTTP client, shared by all calls of a session.
            timeout: Per-request timeout in seconds.
            token_header: Header carrying the token.
            token_scheme: Optional scheme put before the token (``Bearer``).
        """
        self._client = client
        self._timeout = timeout
        self._token_header = token_header
        self._token_scheme = token_scheme
        self._logger = get_logger()

    @property
    def timeout(self) -> float:
        """Per-request timeout in seconds."""
        return self._timeout

    def build_headers(self, method: str, token: str | None, *, has_body: bool) -> dict[str, str]:
        """Headers for a request: token and, except for a body-less GET, the content type."""
        headers: dict[str, str] = {}
        if token is not None:
            value = f"{self._token_scheme} {token}" if self._token_scheme else token
            headers[self._token_header] = value
        if has_body or method != "GET":
            headers[HEADER_CONTENT_TYPE] = CONTENT_TYPE_JSON
        return headers

    def execute(
        self,
        method: str,
        url: str,
        body: Any = None,
        *,
        token: str | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> RawResponse:
        """Execute one HTTP request.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            body: JSON payload, required for POST, PUT and PATCH.
            token: Authentication token.
            params: Query parameters; ``None`` values are dropped.

        Returns:
            Raw response, whatever its status.

        Raises:
            ValidationError: On an unsupported method or a missing payload.
            TransportError: On timeout or connection failure.
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            msg = f"Unsupported HTTP method: {method}"
            raise ValidationError(msg, details={"method": method})
        if method in BODY_METHODS and body is None:
            msg = f"{method} requires a payload"
            raise ValidationError(msg, code=ErrorCode.MISSING_PAYLOAD, details={"method": method})

        has_body = body is not None
        headers = self.build_headers(method, token, has_body=has_body)
        query = {k: v for k, v in params.items() if v is not None} if params else None

        with trace_operation(
            "http_request",
            attributes={"http.method": method, "http.url": url},
        ):
            try:
                response = self._client.request(
                    method,
                    url,
                    json=serialize_body(body) if has_body else None,
                    params=query,
                    headers=headers,
                    timeout=self._timeout,
                )
            except httpx.HTTPError as e:
                error = ErrorTranslator.translate_exception(e)
                self._logger.warning(
                    "Request failed",
                    method=method,
                    url=url,
                    error=str(e),
                    correlation_id=error.correlation_id,
                )
                raise error from e

        self._logger.debug(
            "Request completed",
            method=method,
            url=url,
            status=response.status_code,
        )
        return RawResponse.from_httpx(response)

