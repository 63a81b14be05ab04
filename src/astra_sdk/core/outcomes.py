"""Typed outcomes of a dispatched request.

An outcome is one of :class:`Success`, :class:`NotFound`,
:class:`ValidationFailure`, :class:`ServerFailure` or
:class:`TransportFailure`. Callers pattern-match on it, or call
:meth:`unwrap` to get the body or the matching exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import (
    AstraError,
    NotFoundError,
    ServerError,
    TransportError,
    ValidationError,
)


@dataclass(frozen=True)
class Success:
    """2xx response, with the parsed body if there was one."""

    body: Any = None
    status: int = 200

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.body


@dataclass(frozen=True)
class NotFound:
    """404 response. Not an error: existence checks rely on it."""

    correlation_id: str | None = None

    @property
    def ok(self) -> bool:
        return False

    def to_error(self) -> AstraError:
        return NotFoundError(correlation_id=self.correlation_id)

    def unwrap(self) -> Any:
        raise self.to_error()


@dataclass(frozen=True)
class ValidationFailure:
    """400/422 response: the server rejected the request."""

    reason: str
    status: int = 400
    correlation_id: str | None = None

    @property
    def ok(self) -> bool:
        return False

    def to_error(self) -> AstraError:
        return ValidationError(
            f"Invalid request: {self.reason}" if self.reason else "Invalid request",
            status_code=self.status,
            correlation_id=self.correlation_id,
            details={"body": self.reason} if self.reason else None,
        )

    def unwrap(self) -> Any:
        raise self.to_error()


@dataclass(frozen=True)
class ServerFailure:
    """Any status the translator does not model."""

    status: int
    body: str = ""
    correlation_id: str | None = None

    @property
    def ok(self) -> bool:
        return False

    def to_error(self) -> AstraError:
        return ServerError(
            f"Unexpected response HTTP_CODE={self.status}",
            status_code=self.status,
            body=self.body,
            correlation_id=self.correlation_id,
        )

    def unwrap(self) -> Any:
        raise self.to_error()


@dataclass(frozen=True)
class TransportFailure:
    """The request never produced an HTTP response."""

    cause: TransportError

    @property
    def ok(self) -> bool:
        return False

    def to_error(self) -> AstraError:
        return self.cause

    def unwrap(self) -> Any:
        raise self.cause


Outcome = Success | NotFound | ValidationFailure | ServerFailure | TransportFailure
