"""Resource path composition for the document API.

Maps a hierarchical (namespace, collection, document, sub-path) address to
the URL path of the matching endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import ErrorCode, ValidationError

DEFAULT_API_PREFIX = "/v2"
PATH_NAMESPACES = "/namespaces"
PATH_COLLECTIONS = "/collections"
PATH_SCHEMAS = "/schemas"


@dataclass(frozen=True)
class ResourceAddress:
    """Logical address of a resource in the namespace hierarchy.

    Each level may be set only if every level above it is set.
    """

    namespace: str
    collection: str | None = None
    document_id: str | None = None
    sub_path: str | None = None

    def collection_address(self, collection: str) -> ResourceAddress:
        """Address of a collection inside this namespace."""
        return ResourceAddress(self.namespace, collection)

    def document_address(self, document_id: str) -> ResourceAddress:
        """Address of a document inside this collection."""
        return ResourceAddress(self.namespace, self.collection, document_id)

    def sub_document_address(self, sub_path: str) -> ResourceAddress:
        """Address of a sub-document inside this document."""
        return ResourceAddress(self.namespace, self.collection, self.document_id, sub_path)


def normalize_sub_path(sub_path: str) -> str:
    """Prefix a sub-path with ``/`` if it lacks one."""
    if not sub_path.startswith("/"):
        sub_path = "/" + sub_path
    return sub_path


def _check_segment(name: str, value: str | None) -> None:
    if value is not None and "/" in value:
        msg = f"{name} must not contain '/': {value!r}"
        raise ValidationError(msg, code=ErrorCode.INVALID_ADDRESS, details={"field": name})


def validate_address(address: ResourceAddress) -> None:
    """Check the hierarchy invariant of an address.

    Raises:
        ValidationError: If a level is set while a level above it is empty.
    """
    if address.document_id and not address.collection:
        msg = "document_id requires a collection"
        raise ValidationError(msg, code=ErrorCode.INVALID_ADDRESS, details={"field": "collection"})
    if address.collection and not address.namespace:
        msg = "collection requires a namespace"
        raise ValidationError(msg, code=ErrorCode.INVALID_ADDRESS, details={"field": "namespace"})
    if address.sub_path and not address.document_id:
        msg = "sub_path requires a document_id"
        raise ValidationError(msg, code=ErrorCode.INVALID_ADDRESS, details={"field": "document_id"})
    if not address.namespace:
        msg = "namespace is required"
        raise ValidationError(msg, code=ErrorCode.INVALID_ADDRESS, details={"field": "namespace"})

    # Segments are sent unescaped, a '/' would alias another address
    _check_segment("namespace", address.namespace)
    _check_segment("collection", address.collection)
    _check_segment("document_id", address.document_id)


def build_schema_path(namespace: str | None = None, *, prefix: str = DEFAULT_API_PREFIX) -> str:
    """Build the path of the namespace schema endpoint.

    Without a namespace this is the listing/creation endpoint.
    """
    path = f"{prefix.rstrip('/')}{PATH_SCHEMAS}{PATH_NAMESPACES}"
    if namespace is not None:
        _check_segment("namespace", namespace)
        if not namespace:
            msg = "namespace is required"
            raise ValidationError(msg, code=ErrorCode.INVALID_ADDRESS, details={"field": "namespace"})
        path += f"/{namespace}"
    return path


def build_path(address: ResourceAddress, *, prefix: str = DEFAULT_API_PREFIX) -> str:
    """Build the URL path of a resource.

    Segments are concatenated as-is without percent-encoding.

    Args:
        address: Resource address.
        prefix: API prefix placed before ``/namespaces``.

    Returns:
        Path such as ``/v2/namespaces/ns1/collections/coll1/d1``.

    Raises:
        ValidationError: If the address violates the hierarchy invariant.
    """
    validate_address(address)

    path = f"{prefix.rstrip('/')}{PATH_NAMESPACES}/{address.namespace}"
    if address.collection:
        path += f"{PATH_COLLECTIONS}/{address.collection}"
    if address.document_id:
        path += f"/{address.document_id}"
    if address.sub_path:
        path += normalize_sub_path(address.sub_path)
    return path
