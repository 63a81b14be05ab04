"""Astra document API Python SDK."""

from .client import AstraClient
from .config import AstraConfig, TelemetryConfig
from .core import (
    NotFound,
    Outcome,
    ResourceAddress,
    ServerFailure,
    Success,
    TransportFailure,
    ValidationFailure,
    build_path,
)
from .devops import DevopsClient
from .documents import CollectionClient, DocumentClient, NamespaceClient
from .errors import (
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
from .models import (
    CloudProvider,
    CollectionInfo,
    DataCenter,
    Database,
    DatabaseCreationRequest,
    DatabaseStatus,
    Document,
    DocumentPage,
    Namespace,
)

__all__ = [
    "AstraClient",
    "AstraConfig",
    "TelemetryConfig",
    "NamespaceClient",
    "CollectionClient",
    "DocumentClient",
    "DevopsClient",
    "ResourceAddress",
    "build_path",
    "Outcome",
    "Success",
    "NotFound",
    "ValidationFailure",
    "ServerFailure",
    "TransportFailure",
    "AstraError",
    "AuthError",
    "ErrorCode",
    "InvalidConfigError",
    "NotFoundError",
    "ResponseError",
    "ServerError",
    "TransportError",
    "ValidationError",
    "CloudProvider",
    "CollectionInfo",
    "DataCenter",
    "Database",
    "DatabaseCreationRequest",
    "DatabaseStatus",
    "Document",
    "DocumentPage",
    "Namespace",
]

__version__ = "0.1.0"
