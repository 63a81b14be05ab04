"""Pydantic models for the Astra SDK.

Wire models are frozen and permissive on read: unknown fields are ignored and
``null`` values fall back to field defaults, so responses keep parsing while
the server schema evolves.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

T = TypeVar("T")


class WireModel(BaseModel):
    """Base for payloads exchanged with the server."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat explicit nulls as absent so defaults apply."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_payload(self) -> dict[str, Any]:
        """Serialize for a request body using wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Authentication
# =============================================================================


class AuthRequest(BaseModel):
    """Credential exchange request body."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: SecretStr

    def to_payload(self) -> dict[str, str]:
        """Serialize with the secret revealed, for the request body only."""
        return {
            "username": self.username,
            "password": self.password.get_secret_value(),
        }


class AuthResponse(WireModel):
    """Credential exchange response."""

    auth_token: str = Field(..., min_length=1, alias="authToken")


# =============================================================================
# Documents
# =============================================================================


class Document(BaseModel, Generic[T]):
    """A document body together with its identifier."""

    model_config = ConfigDict(frozen=True)

    id: str
    body: T


class DocumentId(WireModel):
    """Response of a write call on a document."""

    document_id: str = Field(..., alias="documentId")


class DocumentPage(WireModel):
    """One page of documents from a collection search."""

    page_state: str | None = Field(default=None, alias="pageState")
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def has_more(self) -> bool:
        """Check if another page can be requested."""
        return bool(self.page_state)

    def documents(self) -> list[Document[Any]]:
        """Get documents of the page as id/body pairs."""
        return [Document[Any](id=doc_id, body=body) for doc_id, body in self.data.items()]


# =============================================================================
# Schemas
# =============================================================================


class DataCenter(WireModel):
    """Replication settings of a namespace in one datacenter."""

    name: str
    replicas: int = 1


class Namespace(WireModel):
    """Namespace description from the schema API."""

    name: str
    datacenters: list[DataCenter] = Field(default_factory=list)


class NamespaceDefinition(WireModel):
    """Namespace creation request body."""

    name: str = Field(..., min_length=1)
    datacenters: list[DataCenter] | None = None


class CollectionInfo(WireModel):
    """Collection description from the collections API."""

    name: str
    upgrade_available: bool = Field(default=False, alias="upgradeAvailable")
    upgrade_type: str | None = Field(default=None, alias="upgradeType")


# =============================================================================
# DevOps
# =============================================================================


class DatabaseStatus(StrEnum):
    """Lifecycle states of a provisioned database."""

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    PREPARED = "PREPARED"
    INITIALIZING = "INITIALIZING"
    MAINTENANCE = "MAINTENANCE"
    PARKING = "PARKING"
    PARKED = "PARKED"
    UNPARKING = "UNPARKING"
    RESIZING = "RESIZING"
    HIBERNATING = "HIBERNATING"
    HIBERNATED = "HIBERNATED"
    TERMINATING = "TERMINATING"
    TERMINATED = "TERMINATED"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"


class CloudProvider(StrEnum):
    """Cloud providers a database can be deployed to."""

    AWS = "AWS"
    GCP = "GCP"
    AZURE = "AZURE"


class DatabaseInfo(WireModel):
    """Settings part of a database description."""

    name: str | None = None
    keyspace: str | None = None
    keyspaces: list[str] = Field(default_factory=list)
    cloud_provider: str | None = Field(default=None, alias="cloudProvider")
    tier: str | None = None
    capacity_units: int | None = Field(default=None, alias="capacityUnits")
    region: str | None = None


class Database(WireModel):
    """Database description from the DevOps API."""

    id: str
    org_id: str | None = Field(default=None, alias="orgId")
    owner_id: str | None = Field(default=None, alias="ownerId")
    info: DatabaseInfo = Field(default_factory=DatabaseInfo)
    status: DatabaseStatus | str = Field(default=DatabaseStatus.UNKNOWN, union_mode="left_to_right")
    creation_time: datetime | None = Field(default=None, alias="creationTime")
    termination_time: datetime | None = Field(default=None, alias="terminationTime")
    data_endpoint_url: str | None = Field(default=None, alias="dataEndpointUrl")

    @property
    def is_terminated(self) -> bool:
        """Check if the database is gone or going."""
        return self.status in (DatabaseStatus.TERMINATING, DatabaseStatus.TERMINATED)


class DatabaseCreationRequest(WireModel):
    """Database creation request body."""

    name: str = Field(..., min_length=1)
    keyspace: str = Field(..., min_length=1)
    cloud_provider: CloudProvider = Field(default=CloudProvider.GCP, alias="cloudProvider")
    tier: str = "serverless"
    capacity_units: int = Field(default=1, ge=1, alias="capacityUnits")
    region: str = "us-east1"
    user: str | None = None
    password: str | None = None
