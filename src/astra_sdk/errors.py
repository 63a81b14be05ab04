"""Error classes for the Astra SDK.

Every failure raised to callers is an ``AstraError`` carrying a category
code (``AUTH_``, ``VAL_``, ``NET_``, ``RES_``, ``SRV_``), the HTTP status
when a response was received, and the correlation ID of the request.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar


class ErrorCode(StrEnum):
    """Standardized error codes for the Astra SDK."""

    # Authentication (1xxx)
    AUTH_FAILED = "AUTH_1001"
    AUTH_RESPONSE_INVALID = "AUTH_1002"
    UNAUTHORIZED = "AUTH_1003"

    # Validation (2xxx)
    VALIDATION_ERROR = "VAL_2001"
    INVALID_CONFIG = "VAL_2002"
    INVALID_ADDRESS = "VAL_2003"
    MISSING_PAYLOAD = "VAL_2004"

    # Transport (3xxx)
    TRANSPORT_ERROR = "NET_3001"
    TIMEOUT_ERROR = "NET_3002"
    CONNECTION_ERROR = "NET_3003"

    # Resources (4xxx)
    NOT_FOUND = "RES_4001"

    # Server (5xxx)
    SERVER_ERROR = "SRV_5001"


class AstraError(Exception):
    """Base error for the Astra SDK.

    Subclasses declare ``default_code`` and ``default_message``; both can be
    overridden per instance.
    """

    default_code: ClassVar[ErrorCode] = ErrorCode.SERVER_ERROR
    default_message: ClassVar[str] = "Astra request failed"

    def __init__(
        self,
        message: str | None = None,
        code: ErrorCode | str | None = None,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.code = str(code or self.default_code)
        self.status_code = status_code
        self.correlation_id = correlation_id
        self.details = dict(details) if details else {}

    @property
    def category(self) -> str:
        """Code prefix, e.g. ``AUTH`` or ``NET``."""
        return self.code.partition("_")[0]

    def to_dict(self) -> dict[str, Any]:
        """Serializable view used in log events."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "correlation_id": self.correlation_id,
            "details": self.details,
        }

    def __repr__(self) -> str:
        status = f", status_code={self.status_code}" if self.status_code is not None else ""
        return f"{type(self).__name__}(code={self.code!r}{status}, message={self.message!r})"


class ResponseError(AstraError):
    """Failure tied to an HTTP response whose body is kept verbatim."""

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | None = None,
        status_code: int | None = None,
        body: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            status_code=status_code,
            correlation_id=correlation_id,
            details={"body": body} if body else None,
        )
        self.body = body


class AuthError(ResponseError):
    """Credential exchange with the authentication endpoint failed."""

    default_code = ErrorCode.AUTH_FAILED
    default_message = "Cannot generate authentication token"


class ServerError(ResponseError):
    """Unexpected HTTP status; raw status and body are preserved."""

    default_code = ErrorCode.SERVER_ERROR
    default_message = "Server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int = 500,
        body: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, body=body, correlation_id=correlation_id)


class ValidationError(AstraError):
    """Caller input was rejected, locally or by the server (400/422)."""

    default_code = ErrorCode.VALIDATION_ERROR
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, *, code: ErrorCode | None = None, **kwargs: Any) -> None:
        super().__init__(message, code, **kwargs)


class NotFoundError(AstraError):
    """Requested resource does not exist."""

    default_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"

    def __init__(self, message: str | None = None, *, correlation_id: str | None = None) -> None:
        super().__init__(message, status_code=404, correlation_id=correlation_id)


class TransportError(AstraError):
    """No response was received: timeout, refused or reset connection."""

    default_code = ErrorCode.TRANSPORT_ERROR
    default_message = "Network request failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | None = None,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            correlation_id=correlation_id,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class InvalidConfigError(AstraError):
    """Configuration is incomplete; ``fields`` names everything missing."""

    default_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"

    def __init__(self, message: str | None = None, *, fields: list[str] | None = None) -> None:
        super().__init__(message, details={"fields": fields} if fields else None)
        self.fields = fields or []
