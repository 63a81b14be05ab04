"""Resource clients for the document API.

Thin façades over :class:`~astra_sdk.client.AstraClient`: each one knows its
address in the namespace hierarchy, builds the endpoint URL and maps request
outcomes to return values. A missing resource is reported as ``None`` or
``False``; every other failure is raised.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any, TypeVar, overload

from pydantic import BaseModel, TypeAdapter

from .core.outcomes import NotFound, Success
from .core.paths import PATH_COLLECTIONS, ResourceAddress
from .errors import ErrorCode, ValidationError
from .models import (
    CollectionInfo,
    DataCenter,
    Document,
    DocumentId,
    DocumentPage,
    Namespace,
    NamespaceDefinition,
)
from .telemetry import get_logger

if TYPE_CHECKING:
    from .client import AstraClient
    from .core.outcomes import Outcome

T = TypeVar("T")

RAW_PARAMS = {"raw": "true"}
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 20


def _require(value: Any, name: str) -> None:
    """Reject missing or blank payloads before sending."""
    if value is None or (isinstance(value, str) and not value):
        msg = f"{name} is required"
        raise ValidationError(msg, code=ErrorCode.MISSING_PAYLOAD, details={"field": name})


def _document_id(outcome: Outcome, fallback: str | None = None) -> str:
    """Read the ``documentId`` of a write response."""
    body = outcome.unwrap()
    if isinstance(body, Mapping) and "documentId" in body:
        return DocumentId.model_validate(body).document_id
    if fallback is None:
        msg = "Response carries no documentId"
        raise ValidationError(msg, details={"body": body})
    return fallback


def _items(body: Any) -> list[Any]:
    """Listing endpoints answer either a bare list or ``{"data": [...]}``."""
    if isinstance(body, Mapping):
        return list(body.get("data") or [])
    return list(body or [])


class NamespaceClient:
    """Client for one namespace."""

    def __init__(self, client: AstraClient, namespace: str) -> None:
        self._client = client
        self.address = ResourceAddress(namespace)

    @property
    def name(self) -> str:
        return self.address.namespace

    def __repr__(self) -> str:
        return f"NamespaceClient(namespace={self.name!r})"

    @property
    def collections_url(self) -> str:
        return self._client.url_for(self.address, PATH_COLLECTIONS)

    def exist(self) -> bool:
        """Check if the namespace exists."""
        return self.find() is not None

    def find(self) -> Namespace | None:
        """Get the namespace description, or None if it does not exist."""
        outcome = self._client.dispatch("GET", self._client.schema_url(self.name), params=RAW_PARAMS)
        match outcome:
            case NotFound():
                return None
            case Success(body=body) if isinstance(body, Mapping) and "data" in body:
                return Namespace.model_validate(body["data"])
            case _:
                return Namespace.model_validate(outcome.unwrap())

    def create(self, datacenters: list[DataCenter] | None = None) -> None:
        """Create the namespace.

        Args:
            datacenters: Replication settings; server defaults when omitted.
        """
        definition = NamespaceDefinition(name=self.name, datacenters=datacenters)
        self._client.dispatch("POST", self._client.schema_url(), definition).unwrap()

    def delete(self) -> bool:
        """Delete the namespace.

        Returns:
            False if the namespace did not exist.
        """
        outcome = self._client.dispatch("DELETE", self._client.schema_url(self.name))
        if isinstance(outcome, NotFound):
            return False
        outcome.unwrap()
        return True

    def collection(self, name: str) -> CollectionClient:
        """Get a client for one collection of this namespace."""
        return CollectionClient(self._client, self.address.collection_address(name))

    def collections(self) -> list[CollectionInfo]:
        """List collections of the namespace."""
        body = self._client.dispatch("GET", self.collections_url, params=RAW_PARAMS).unwrap()
        return [CollectionInfo.model_validate(item) for item in _items(body)]

    def collection_names(self) -> list[str]:
        """List collection names of the namespace."""
        return [c.name for c in self.collections()]


class CollectionClient:
    """Client for one collection."""

    def __init__(self, client: AstraClient, address: ResourceAddress) -> None:
        self._client = client
        self.address = address
        self.url = client.url_for(address)

    @property
    def name(self) -> str:
        return self.address.collection or ""

    @property
    def namespace(self) -> str:
        return self.address.namespace

    def __repr__(self) -> str:
        return f"CollectionClient(namespace={self.namespace!r}, collection={self.name!r})"

    def exist(self) -> bool:
        """Check if the collection is listed in its namespace.

        A missing namespace means a missing collection.
        """
        namespace = NamespaceClient(self._client, self.namespace)
        outcome = self._client.dispatch("GET", namespace.collections_url, params=RAW_PARAMS)
        if isinstance(outcome, NotFound):
            return False
        names = {CollectionInfo.model_validate(item).name for item in _items(outcome.unwrap())}
        return self.name in names

    def create(self) -> None:
        """Create the collection."""
        url = self._client.url_for(ResourceAddress(self.namespace), PATH_COLLECTIONS)
        self._client.dispatch("POST", url, {"name": self.name}).unwrap()

    def delete(self) -> bool:
        """Delete the collection.

        Returns:
            False if the collection did not exist.
        """
        outcome = self._client.dispatch("DELETE", self.url)
        if isinstance(outcome, NotFound):
            return False
        outcome.unwrap()
        return True

    def create_document(self, doc: Any) -> str:
        """Create a document with a server-assigned id.

        Returns:
            The new document id.
        """
        _require(doc, "document")
        return _document_id(self._client.dispatch("POST", self.url, doc))

    def find_page(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_state: str | None = None,
        where: str | None = None,
    ) -> DocumentPage:
        """Get one page of documents.

        Args:
            page_size: Documents per page, between 1 and 20.
            page_state: Cursor returned by the previous page.
            where: JSON search clause, passed through as-is.

        Raises:
            ValidationError: If page_size is out of range.
        """
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            msg = f"page_size must be between 1 and {MAX_PAGE_SIZE}"
            raise ValidationError(msg, details={"field": "page_size"})

        params = {"page-size": page_size, "page-state": page_state, "where": where}
        outcome = self._client.dispatch("GET", self.url, params=params)
        if isinstance(outcome, NotFound):
            return DocumentPage()
        return DocumentPage.model_validate(outcome.unwrap() or {})

    def find_all(self, page_size: int = DEFAULT_PAGE_SIZE, where: str | None = None) -> Iterator[Document[Any]]:
        """Iterate over every document, following page cursors."""
        page_state: str | None = None
        while True:
            page = self.find_page(page_size, page_state, where)
            yield from page.documents()
            if not page.has_more:
                return
            page_state = page.page_state

    def document(self, document_id: str) -> DocumentClient:
        """Get a client for one document of this collection."""
        return DocumentClient(self._client, self.address.document_address(document_id))


class DocumentClient:
    """Client for one document and its sub-documents."""

    def __init__(self, client: AstraClient, address: ResourceAddress) -> None:
        if not address.document_id:
            msg = "document_id is required"
            raise ValidationError(msg, code=ErrorCode.INVALID_ADDRESS, details={"field": "document_id"})
        self._client = client
        self.address = address
        self.url = client.url_for(address)
        self._logger = get_logger().bind(document_id=address.document_id)

    @property
    def id(self) -> str:
        return self.address.document_id or ""

    def __repr__(self) -> str:
        return f"DocumentClient(collection={self.address.collection!r}, id={self.id!r})"

    def _sub_url(self, path: str) -> str:
        _require(path, "path")
        return self._client.url_for(self.address.sub_document_address(path))

    def exist(self) -> bool:
        """Check if the document exists."""
        outcome = self._client.dispatch("GET", self.url)
        if isinstance(outcome, NotFound):
            return False
        outcome.unwrap()
        return True

    def upsert(self, doc: Any) -> str:
        """Create or replace the document.

        Returns:
            The document id.
        """
        _require(doc, "document")
        return _document_id(self._client.dispatch("PUT", self.url, doc), self.id)

    def update(self, doc: Any) -> str:
        """Merge fields into the document.

        Returns:
            The document id.
        """
        _require(doc, "document")
        return _document_id(self._client.dispatch("PATCH", self.url, doc), self.id)

    @overload
    def find(self) -> Any: ...

    @overload
    def find(self, model: type[T]) -> T | None: ...

    def find(self, model: type[Any] | None = None) -> Any:
        """Get the document body.

        Args:
            model: Optional type to validate the body into (a pydantic model,
                a dataclass or any type pydantic can adapt).

        Returns:
            The body, or None if the document does not exist. A success
            with an empty body also gives None; use ``exist()`` to tell the
            two apart.
        """
        outcome = self._client.dispatch("GET", self.url, params=RAW_PARAMS)
        return self._read(outcome, model)

    def delete(self) -> bool:
        """Delete the document.

        Returns:
            False if the document did not exist.
        """
        outcome = self._client.dispatch("DELETE", self.url)
        if isinstance(outcome, NotFound):
            self._logger.debug("Document to delete not found")
            return False
        outcome.unwrap()
        return True

    # =========================================================================
    # Sub-documents
    # =========================================================================

    def find_sub_document(self, path: str, model: type[Any] | None = None) -> Any:
        """Get the value at a path inside the document, or None if absent."""
        outcome = self._client.dispatch("GET", self._sub_url(path), params=RAW_PARAMS)
        return self._read(outcome, model)

    def replace_sub_document(self, path: str, value: Any) -> None:
        """Replace the value at a path inside the document."""
        _require(value, "value")
        self._client.dispatch("PUT", self._sub_url(path), value).unwrap()

    def update_sub_document(self, path: str, value: Any) -> None:
        """Merge fields into the value at a path inside the document."""
        _require(value, "value")
        self._client.dispatch("PATCH", self._sub_url(path), value).unwrap()

    def delete_sub_document(self, path: str) -> bool:
        """Delete the value at a path inside the document.

        Returns:
            False if the document or path did not exist.
        """
        outcome = self._client.dispatch("DELETE", self._sub_url(path))
        if isinstance(outcome, NotFound):
            return False
        outcome.unwrap()
        return True

    @staticmethod
    def _read(outcome: Outcome, model: type[Any] | None) -> Any:
        match outcome:
            case NotFound():
                return None
            case Success(body=None):
                return None
            case Success(body=body):
                if model is None:
                    return body
                if isinstance(model, type) and issubclass(model, BaseModel):
                    return model.model_validate(body)
                return TypeAdapter(model).validate_python(body)
            case _:
                return outcome.unwrap()
