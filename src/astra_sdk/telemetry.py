"""Structured logging and tracing for the Astra SDK.

Log events go through structlog with credentials masked; every network
round-trip runs inside an OpenTelemetry span.
"""

from __future__ import annotations

import functools
import inspect
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator, MutableMapping

    from .config import TelemetryConfig

P = ParamSpec("P")
T = TypeVar("T")

SDK_NAME = "astra-sdk"
SDK_VERSION = "0.1.0"

SECRET_KEYS = frozenset({"password", "token", "auth_token", "bearer_token", "authorization"})
REDACTED = "***"

_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    """Get or create the SDK tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SDK_NAME, SDK_VERSION)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    """Get or create the SDK logger."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(SDK_NAME)
    return _logger


def redact_secrets(
    _logger: Any,
    _method: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """structlog processor masking credential-bearing keys."""
    for key in event_dict.keys() & SECRET_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def configure_telemetry(config: TelemetryConfig) -> None:
    """Install the SDK logging pipeline and tracer.

    With telemetry disabled spans become no-ops; logging is left as it is.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            redact_secrets,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_number(config.log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _tracer = trace.get_tracer(config.service_name, SDK_VERSION)
    _logger = structlog.get_logger(config.service_name).bind(sdk=SDK_NAME)


def level_number(level: str) -> int:
    """Numeric value of a level name; unknown names mean INFO."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run a block inside a span, recording any exception on it.

    Attributes set to None are skipped.
    """
    with get_tracer().start_as_current_span(name) as span:
        span.set_attribute("sdk.name", SDK_NAME)
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise


def traced(
    name: str | None = None,
    *,
    record: tuple[str, ...] = (),
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator running a function inside a span.

    Args:
        name: Span name; defaults to the function's qualified name.
        record: Parameter names whose scalar values become span attributes.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        span_name = name or func.__qualname__
        signature = inspect.signature(func) if record else None

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            attributes: dict[str, Any] = {}
            if signature is not None:
                bound = signature.bind_partial(*args, **kwargs)
                for param in record:
                    value = bound.arguments.get(param)
                    if isinstance(value, (str, int, float, bool)):
                        attributes[f"astra.{param}"] = value

            with trace_operation(span_name, attributes=attributes):
                return func(*args, **kwargs)

        return wrapper

    return decorator
