"""Shared fixtures: a scriptable fake search backend and a fixed resolver."""

import json
from typing import Any, Optional

import httpx
import pytest

from smlt.client.query import SimilarityQueryClient
from smlt.entities import BackendEndpoint, Credentials
from smlt.errors import ResolutionError
from smlt.resolver.base import EndpointResolver
from smlt.service.similarity import SimilarityService

BASE_URI = "http://solr.test:8983/solr/core_en"


class FakeBackend:
    """httpx MockTransport handler that records requests and replays one answer."""

    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        content: Optional[bytes] = None,
        error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.payload = payload
        self.content = content
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, stream=httpx.ByteStream(self.content))
        body = json.dumps(self.payload if self.payload is not None else {}).encode("utf-8")
        return httpx.Response(
            self.status_code,
            stream=httpx.ByteStream(body),
            headers={"Content-Type": "application/json"},
        )

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "backend was never called"
        return self.requests[-1]

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


class FixedResolver(EndpointResolver):
    """Resolver returning one endpoint, or raising for unknown sites."""

    def __init__(self, endpoint: BackendEndpoint, site_root_ids: tuple[int, ...] = (1,)):
        self.endpoint = endpoint
        self.site_root_ids = site_root_ids
        self.calls: list[tuple[int, int]] = []

    def resolve_endpoint(self, site_root_id: int, language_id: int = 0) -> BackendEndpoint:
        self.calls.append((site_root_id, language_id))
        if site_root_id not in self.site_root_ids:
            raise ResolutionError(
                message=f"No connection for site root {site_root_id}",
                site_root_id=site_root_id,
                language_id=language_id,
            )
        return self.endpoint


def smlt_payload(source_id: str = "page-42", mode: str = "hybrid", docs: Optional[list] = None) -> dict:
    docs = docs if docs is not None else [{"id": "a"}, {"id": "b"}]
    return {
        "responseHeader": {"status": 0, "QTime": 3},
        "response": {"numFound": 0, "start": 0, "docs": []},
        "semanticMoreLikeThis": {
            "sourceId": source_id,
            "mode": mode,
            "numFound": len(docs),
            "docs": docs,
        },
    }


@pytest.fixture
def endpoint() -> BackendEndpoint:
    return BackendEndpoint(base_uri=BASE_URI + "/")


@pytest.fixture
def auth_endpoint() -> BackendEndpoint:
    return BackendEndpoint(
        base_uri=BASE_URI,
        credentials=Credentials(username="user", password="pass"),
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(payload=smlt_payload())


@pytest.fixture
def make_service(endpoint):
    """Build a service talking to the given fake backend."""
    created = []

    def _make(
        backend: FakeBackend,
        resolver: Optional[EndpointResolver] = None,
        strict_resolution: bool = False,
        debug: bool = False,
    ) -> SimilarityService:
        client = SimilarityQueryClient(http_client=backend.http_client(), debug=debug)
        service = SimilarityService(
            resolver=resolver or FixedResolver(endpoint),
            client=client,
            strict_resolution=strict_resolution,
        )
        created.append(client)
        return service

    yield _make

    for client in created:
        client._client.close()
