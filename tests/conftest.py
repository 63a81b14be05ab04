"""
Shared test fixtures for Astra SDK tests.

Provides configuration fixtures, a controllable clock, and an in-memory
document service served through httpx.MockTransport.
"""

import json
import threading
import uuid
from typing import Any

import httpx
import pytest

from astra_sdk.client import AstraClient
from astra_sdk.config import AstraConfig, TelemetryConfig

BASE_URL = "https://db.example.com"
DEVOPS_URL = "https://devops.example.com/v2"
USERNAME = "cassandra"
PASSWORD = "s3cret"


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _json(status: int, payload: Any = None, headers: dict[str, str] | None = None) -> httpx.Response:
    if payload is None:
        return httpx.Response(status, headers=headers)
    return httpx.Response(status, json=payload, headers=headers)


class FakeDocumentService:
    """In-memory namespace/collection/document store speaking the REST dialect.

    Tokens are issued as ``tok-A``, ``tok-B`` ... and every issued token stays
    accepted unless listed in ``revoked``.
    """

    def __init__(self) -> None:
        self.auth_calls = 0
        self.auth_status = 201
        self.auth_payload: dict[str, Any] | None = None
        self.issued: list[str] = []
        self.revoked: set[str] = set()
        self.requests: list[httpx.Request] = []
        self.namespaces: dict[str, list[dict[str, Any]]] = {}
        self.collections: dict[tuple[str, str], dict[str, Any]] = {}
        self.forced: dict[tuple[str, str], httpx.Response] = {}
        self.auth_gate: threading.Event | None = None
        self._lock = threading.Lock()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def force(self, method: str, path: str, response: httpx.Response) -> None:
        """Answer every ``method path`` request with a canned response."""
        self.forced[(method, path)] = response

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/v1/auth/" and request.method == "POST":
            return self._auth(request)

        token = request.headers.get("X-Cassandra-Token")
        if token not in self.issued or token in self.revoked:
            return _json(401, {"description": "Invalid token"})

        forced = self.forced.get((request.method, path))
        if forced is not None:
            return forced

        if path.startswith("/v2/schemas/namespaces"):
            return self._schemas(request, path.removeprefix("/v2/schemas/namespaces").strip("/"))
        if path.startswith("/v2/namespaces/"):
            return self._documents(request, path.removeprefix("/v2/namespaces/").split("/"))
        return _json(404, {"description": "Not found"})

    def _auth(self, request: httpx.Request) -> httpx.Response:
        if self.auth_gate is not None:
            self.auth_gate.wait(timeout=5)
        with self._lock:
            self.auth_calls += 1
            credentials = json.loads(request.content)
            if self.auth_status not in (200, 201):
                return _json(self.auth_status, {"description": "Rejected"})
            if credentials != {"username": USERNAME, "password": PASSWORD}:
                return _json(401, {"description": "Bad credentials"})
            if self.auth_payload is not None:
                return _json(self.auth_status, self.auth_payload)
            token = f"tok-{chr(ord('A') + len(self.issued))}"
            self.issued.append(token)
            return _json(self.auth_status, {"authToken": token})

    def _schemas(self, request: httpx.Request, name: str) -> httpx.Response:
        if not name:
            if request.method == "GET":
                return _json(200, {"data": [{"name": n, "datacenters": dcs} for n, dcs in self.namespaces.items()]})
            if request.method == "POST":
                body = json.loads(request.content)
                self.namespaces[body["name"]] = body.get("datacenters", [])
                return _json(201, {"name": body["name"]})
        elif name in self.namespaces:
            if request.method == "GET":
                return _json(200, {"name": name, "datacenters": self.namespaces[name]})
            if request.method == "DELETE":
                del self.namespaces[name]
                for key in [k for k in self.collections if k[0] == name]:
                    del self.collections[key]
                return _json(204)
        return _json(404, {"description": "Namespace not found"})

    def _documents(self, request: httpx.Request, segments: list[str]) -> httpx.Response:
        method = request.method
        namespace = segments[0]
        if namespace not in self.namespaces or len(segments) < 2 or segments[1] != "collections":
            return _json(404, {"description": "Namespace not found"})

        if len(segments) == 2:
            if method == "GET":
                names = [c for ns, c in self.collections if ns == namespace]
                return _json(200, {"data": [{"name": c, "upgradeAvailable": False} for c in names]})
            if method == "POST":
                self.collections.setdefault((namespace, json.loads(request.content)["name"]), {})
                return _json(201)
            return _json(405)

        key = (namespace, segments[2])
        if len(segments) == 3 and method == "POST":
            docs = self.collections.setdefault(key, {})
            document_id = str(uuid.uuid4())
            docs[document_id] = json.loads(request.content)
            return _json(201, {"documentId": document_id})

        if key not in self.collections:
            return _json(404, {"description": "Collection not found"})
        docs = self.collections[key]

        if len(segments) == 3:
            if method == "GET":
                return self._page(request, docs)
            if method == "DELETE":
                del self.collections[key]
                return _json(204)
            return _json(405)

        document_id, sub_path = segments[3], [s for s in segments[4:] if s]
        if sub_path:
            return self._sub_document(request, docs, document_id, sub_path)

        if method == "GET":
            if document_id not in docs:
                return _json(404, {"description": "Document not found"})
            if request.url.params.get("raw") == "true":
                return _json(200, docs[document_id])
            return _json(200, {"documentId": document_id, "data": docs[document_id]})
        if method == "PUT":
            docs[document_id] = json.loads(request.content)
            return _json(200, {"documentId": document_id})
        if method == "PATCH":
            docs.setdefault(document_id, {}).update(json.loads(request.content))
            return _json(200, {"documentId": document_id})
        if method == "DELETE":
            if document_id not in docs:
                return _json(404, {"description": "Document not found"})
            del docs[document_id]
            return _json(204)
        return _json(405)

    def _page(self, request: httpx.Request, docs: dict[str, Any]) -> httpx.Response:
        size = int(request.url.params.get("page-size", "3"))
        state = request.url.params.get("page-state", "0")
        start = int(state) if state.isdigit() else 0
        ids = sorted(docs)
        chunk = ids[start : start + size]
        payload: dict[str, Any] = {"data": {i: docs[i] for i in chunk}}
        if start + size < len(ids):
            payload["pageState"] = str(start + size)
        return _json(200, payload)

    def _sub_document(
        self,
        request: httpx.Request,
        docs: dict[str, Any],
        document_id: str,
        sub_path: list[str],
    ) -> httpx.Response:
        if document_id not in docs:
            return _json(404, {"description": "Document not found"})
        parent: Any = docs[document_id]
        for segment in sub_path[:-1]:
            if not isinstance(parent, dict) or segment not in parent:
                return _json(404, {"description": "Path not found"})
            parent = parent[segment]
        leaf = sub_path[-1]
        if not isinstance(parent, dict):
            return _json(404, {"description": "Path not found"})

        if request.method == "GET":
            if leaf not in parent:
                return _json(404, {"description": "Path not found"})
            return _json(200, parent[leaf])
        if request.method == "PUT":
            parent[leaf] = json.loads(request.content)
            return _json(200, {"documentId": document_id})
        if request.method == "PATCH":
            current = parent.get(leaf)
            update = json.loads(request.content)
            parent[leaf] = {**current, **update} if isinstance(current, dict) else update
            return _json(200, {"documentId": document_id})
        if request.method == "DELETE":
            if leaf not in parent:
                return _json(404, {"description": "Path not found"})
            del parent[leaf]
            return _json(204)
        return _json(405)


@pytest.fixture
def base_config() -> AstraConfig:
    """Provide a basic SDK configuration for testing."""
    return AstraConfig(
        base_url=BASE_URL,
        username=USERNAME,
        password=PASSWORD,
        devops_url=DEVOPS_URL,
    )


@pytest.fixture
def bearer_config() -> AstraConfig:
    """Provide SDK configuration using a static bearer token."""
    return AstraConfig(
        base_url=BASE_URL,
        bearer_token="AstraCS:static-token",
        devops_url=DEVOPS_URL,
    )


@pytest.fixture
def telemetry_config() -> TelemetryConfig:
    """Provide telemetry configuration for testing."""
    return TelemetryConfig(enabled=False, service_name="test-sdk", log_level="DEBUG")


@pytest.fixture
def clock() -> FakeClock:
    """Provide a hand-driven clock."""
    return FakeClock()


@pytest.fixture
def service() -> FakeDocumentService:
    """Provide an empty in-memory document service."""
    return FakeDocumentService()


@pytest.fixture
def client(base_config: AstraConfig, service: FakeDocumentService, clock: FakeClock) -> AstraClient:
    """Provide a client wired to the in-memory service."""
    with AstraClient(base_config, transport=service.transport, clock=clock) as c:
        yield c


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """Provide a sample JSON document."""
    return {
        "firstname": "Ada",
        "lastname": "Lovelace",
        "address": {"city": "London", "country": "UK"},
        "languages": ["en", "fr"],
    }
