"""Centralized response translation for the Astra SDK.

Turns raw HTTP responses into typed outcomes and transport exceptions into
SDK errors, so every resource client classifies results the same way.
"""

from __future__ import annotations

import json
import uuid
from typing import TYPE_CHECKING, Any

import httpx

from ..errors import AstraError, ErrorCode, TransportError
from .outcomes import (
    NotFound,
    Outcome,
    ServerFailure,
    Success,
    ValidationFailure,
)

if TYPE_CHECKING:
    from .http_executor import RawResponse

SUCCESS_STATUSES = frozenset({200, 201, 202})
VALIDATION_STATUSES = frozenset({400, 422})

# First match wins; ConnectTimeout counts as a timeout.
TRANSPORT_FAILURES: tuple[tuple[type[Exception], ErrorCode, str], ...] = (
    (httpx.TimeoutException, ErrorCode.TIMEOUT_ERROR, "Request timed out"),
    (httpx.ConnectError, ErrorCode.CONNECTION_ERROR, "Connection failed"),
    (httpx.HTTPError, ErrorCode.TRANSPORT_ERROR, "HTTP transport error"),
)


def parse_body(text: str) -> Any:
    """Parse a response body as JSON, keeping plain text when it is not JSON."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class ErrorTranslator:
    """Classifies responses and failures with a consistent structure.

    Outcomes created here carry a correlation ID so a failure seen by a
    caller can be matched with the SDK logs.
    """

    @staticmethod
    def generate_correlation_id() -> str:
        """Generate a unique correlation ID."""
        return str(uuid.uuid4())

    @staticmethod
    def translate(
        raw: RawResponse,
        *,
        correlation_id: str | None = None,
    ) -> Outcome:
        """Create an outcome from a raw response.

        Args:
            raw: Raw HTTP response.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            ``Success`` for 2xx, ``NotFound`` for 404, ``ValidationFailure``
            for 400/422 and ``ServerFailure`` for anything else.
        """
        status = raw.status_code

        if status == 204:
            return Success(None, status=status)

        if status in SUCCESS_STATUSES:
            return Success(parse_body(raw.text), status=status)

        correlation_id = correlation_id or ErrorTranslator.generate_correlation_id()

        if status == 404:
            return NotFound(correlation_id=correlation_id)

        if status in VALIDATION_STATUSES:
            return ValidationFailure(raw.text, status=status, correlation_id=correlation_id)

        return ServerFailure(status, raw.text, correlation_id=correlation_id)

    @staticmethod
    def translate_exception(
        exc: Exception,
        *,
        correlation_id: str | None = None,
    ) -> AstraError:
        """Wrap a transport exception into a ``TransportError``.

        SDK errors pass through unchanged apart from getting a correlation ID.
        """
        correlation_id = correlation_id or ErrorTranslator.generate_correlation_id()

        if isinstance(exc, AstraError):
            if exc.correlation_id is None:
                exc.correlation_id = correlation_id
            return exc

        for exc_type, code, label in TRANSPORT_FAILURES:
            if isinstance(exc, exc_type):
                break
        else:
            code, label = ErrorCode.TRANSPORT_ERROR, "Unexpected transport failure"

        return TransportError(f"{label}: {exc}", code=code, correlation_id=correlation_id, cause=exc)
