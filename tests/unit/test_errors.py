"""Unit tests for error classes.

Tests error hierarchy, serialization, and error codes.
"""

import httpx
import pytest

from astra_sdk.core.errors import ErrorTranslator
from astra_sdk.errors import (
    AstraError,
    AuthError,
    ErrorCode,
    InvalidConfigError,
    NotFoundError,
    ResponseError,
    ServerError,
    TransportError,
    ValidationError,
)


class TestErrorCode:
    """Tests for ErrorCode enum."""

    def test_error_codes_are_strings(self) -> None:
        """Error codes should be string values."""
        assert ErrorCode.AUTH_FAILED == "AUTH_1001"
        assert ErrorCode.VALIDATION_ERROR == "VAL_2001"
        assert ErrorCode.TRANSPORT_ERROR == "NET_3001"
        assert ErrorCode.NOT_FOUND == "RES_4001"
        assert ErrorCode.SERVER_ERROR == "SRV_5001"

    def test_error_code_categories(self) -> None:
        """Error codes should follow category pattern."""
        assert ErrorCode.AUTH_RESPONSE_INVALID.value.startswith("AUTH_1")
        assert ErrorCode.INVALID_ADDRESS.value.startswith("VAL_2")
        assert ErrorCode.MISSING_PAYLOAD.value.startswith("VAL_2")
        assert ErrorCode.TIMEOUT_ERROR.value.startswith("NET_3")
        assert ErrorCode.CONNECTION_ERROR.value.startswith("NET_3")


class TestAstraError:
    """Tests for base AstraError."""

    def test_basic_error(self) -> None:
        """Should create error with message and code."""
        error = AstraError("Test error", ErrorCode.AUTH_FAILED)

        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.code == "AUTH_1001"

    def test_error_with_correlation_id(self) -> None:
        """Should include correlation ID."""
        error = AstraError("Error", ErrorCode.SERVER_ERROR, correlation_id="req-123")

        assert error.correlation_id == "req-123"

    def test_to_dict(self) -> None:
        """Should serialize to dictionary."""
        error = AstraError(
            "Test error",
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            correlation_id="req-456",
            details={"field": "namespace"},
        )

        assert error.to_dict() == {
            "error": "Test error",
            "code": "VAL_2001",
            "status_code": 400,
            "correlation_id": "req-456",
            "details": {"field": "namespace"},
        }

    def test_repr(self) -> None:
        """Should have informative repr."""
        error = AstraError("Test", ErrorCode.NOT_FOUND)

        assert "AstraError" in repr(error)
        assert "RES_4001" in repr(error)


class TestSpecificErrors:
    """Tests for specific error types."""

    def test_auth_error_keeps_status_and_body(self) -> None:
        """AuthError carries the rejected response."""
        error = AuthError(status_code=401, body='{"description":"bad"}')

        assert error.code == ErrorCode.AUTH_FAILED
        assert error.status_code == 401
        assert error.body == '{"description":"bad"}'
        assert error.details == {"body": '{"description":"bad"}'}
        assert "authentication token" in error.message

    def test_not_found_error(self) -> None:
        """NotFoundError has status 404."""
        error = NotFoundError(correlation_id="c-1")

        assert error.status_code == 404
        assert error.code == ErrorCode.NOT_FOUND
        assert error.correlation_id == "c-1"

    def test_server_error_keeps_raw_status(self) -> None:
        """ServerError keeps the unmodelled status."""
        error = ServerError("Unexpected", status_code=503, body="unavailable")

        assert error.status_code == 503
        assert error.body == "unavailable"

    def test_transport_error_chains_cause(self) -> None:
        """TransportError exposes the underlying exception."""
        cause = httpx.ConnectError("refused")
        error = TransportError("Connection failed", cause=cause)

        assert error.__cause__ is cause
        assert error.details == {"cause": "refused"}

    def test_invalid_config_error_lists_fields(self) -> None:
        """InvalidConfigError lists every missing field."""
        error = InvalidConfigError("Missing", fields=["base_url", "username"])

        assert error.fields == ["base_url", "username"]
        assert error.details == {"fields": ["base_url", "username"]}
        assert error.code == ErrorCode.INVALID_CONFIG

    def test_validation_error_code_override(self) -> None:
        """ValidationError accepts a more specific code."""
        error = ValidationError("bad address", code=ErrorCode.INVALID_ADDRESS)

        assert error.code == "VAL_2003"

    @pytest.mark.parametrize(
        "error_class",
        [AuthError, ValidationError, NotFoundError, TransportError, ServerError, InvalidConfigError],
    )
    def test_hierarchy(self, error_class: type) -> None:
        """All SDK errors derive from AstraError."""
        assert issubclass(error_class, AstraError)

    def test_response_errors_share_base(self) -> None:
        """Errors built from a response keep its body."""
        assert issubclass(AuthError, ResponseError)
        assert issubclass(ServerError, ResponseError)
        assert not issubclass(TransportError, ResponseError)

    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (AuthError(), "AUTH"),
            (ValidationError(), "VAL"),
            (TransportError(), "NET"),
            (NotFoundError(), "RES"),
            (ServerError(), "SRV"),
        ],
    )
    def test_category(self, error: AstraError, category: str) -> None:
        """The category is the code prefix."""
        assert error.category == category

    def test_default_message(self) -> None:
        """Each class supplies a message when none is given."""
        assert NotFoundError().message == "Resource not found"
        assert str(InvalidConfigError()) == "Invalid configuration"

    def test_repr_includes_status(self) -> None:
        """Status appears in repr when known."""
        assert "status_code=503" in repr(ServerError(status_code=503))


class TestTranslateException:
    """Tests for transport exception mapping."""

    def test_timeout(self) -> None:
        """Timeouts map to TIMEOUT_ERROR."""
        error = ErrorTranslator.translate_exception(httpx.ReadTimeout("slow"))

        assert isinstance(error, TransportError)
        assert error.code == ErrorCode.TIMEOUT_ERROR
        assert error.correlation_id is not None

    def test_connect_error(self) -> None:
        """Connection failures map to CONNECTION_ERROR."""
        error = ErrorTranslator.translate_exception(httpx.ConnectError("refused"))

        assert error.code == ErrorCode.CONNECTION_ERROR

    def test_generic_http_error(self) -> None:
        """Other httpx errors map to TRANSPORT_ERROR."""
        error = ErrorTranslator.translate_exception(httpx.RemoteProtocolError("reset"))

        assert error.code == ErrorCode.TRANSPORT_ERROR

    def test_sdk_error_passes_through(self) -> None:
        """SDK errors are returned as-is with a correlation ID added."""
        original = ServerError("boom")
        error = ErrorTranslator.translate_exception(original, correlation_id="c-9")

        assert error is original
        assert error.correlation_id == "c-9"
