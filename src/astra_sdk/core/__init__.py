"""Core components for the Astra SDK.

Authenticated session core shared by the document and DevOps clients:
token cache, request execution, response translation and path building.
"""

from __future__ import annotations

from .errors import ErrorTranslator
from .http_executor import RawResponse, RequestExecutor
from .outcomes import (
    NotFound,
    Outcome,
    ServerFailure,
    Success,
    TransportFailure,
    ValidationFailure,
)
from .paths import ResourceAddress, build_path
from .session import Session
from .token_manager import CachedToken, TokenManager, TokenState

__all__ = [
    "CachedToken",
    "ErrorTranslator",
    "NotFound",
    "Outcome",
    "RawResponse",
    "RequestExecutor",
    "ResourceAddress",
    "ServerFailure",
    "Session",
    "Success",
    "TokenManager",
    "TokenState",
    "TransportFailure",
    "ValidationFailure",
    "build_path",
]
