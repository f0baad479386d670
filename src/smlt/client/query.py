"""HTTP client for the Semantic More-Like-This search handler.

Builds the hybrid similarity query for one source document, sends it to
the resolved core and reports what came back. It never retries and never
raises for transport problems: those are returned as ``TransportFailure``
so the service can degrade to the empty result.

How to use:
    from smlt.client.query import SimilarityQueryClient

    with SimilarityQueryClient(timeout=5.0) as client:
        response = client.query(request, endpoint)
"""

from dataclasses import dataclass
from typing import Optional, Union

import httpx

from smlt.config.schema import TransportConfig
from smlt.entities import BackendEndpoint, SimilarityRequest
from smlt.observability.logging import get_logger

logger = get_logger(__name__)

HANDLER_PATH = "/smlt"

# Run only the custom handler, no regular result rows
FIXED_PARAMS = (
    ("q", "*:*"),
    ("rows", "0"),
    ("wt", "json"),
)


@dataclass(frozen=True)
class RawBackendResponse:
    """HTTP response from the backend, successful or not."""

    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return self.status_code == 200


@dataclass(frozen=True)
class TransportFailure:
    """The request never produced an HTTP response."""

    error: str
    error_type: str


QueryResponse = Union[RawBackendResponse, TransportFailure]


def format_weight(value: float) -> str:
    """Render a weight the way the backend expects it (``1.0`` -> ``1``)."""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def build_query_params(request: SimilarityRequest, debug: bool = False) -> list[tuple[str, str]]:
    """Build the ordered query parameters of an SMLT request.

    Args:
        request: Similarity request
        debug: Ask the backend for per-document score breakdowns

    Returns:
        List of (name, value) pairs, not yet url-encoded
    """
    params = [
        ("smlt", "true"),
        ("smlt.id", request.document_id),
        ("smlt.count", str(request.count)),
        ("smlt.mode", request.mode),
        ("smlt.vectorWeight", format_weight(request.vector_weight)),
        ("smlt.mltWeight", format_weight(request.mlt_weight)),
        *FIXED_PARAMS,
    ]
    if debug:
        params.append(("debugQuery", "true"))
    return params


def build_headers(endpoint: BackendEndpoint) -> dict[str, str]:
    """Build request headers; adds basic auth only with complete credentials."""
    headers = {"Accept": "application/json"}
    auth = endpoint.basic_auth_header()
    if auth is not None:
        headers["Authorization"] = auth
    return headers


class SimilarityQueryClient:
    """Sends SMLT queries to a search core over HTTP."""

    def __init__(
        self,
        timeout: float = 10.0,
        verify_tls: bool = True,
        user_agent: str = "smlt-client",
        debug: bool = False,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize the query client.

        Args:
            timeout: Request timeout in seconds
            verify_tls: Verify TLS certificates
            user_agent: User-Agent header value
            debug: Request score breakdowns from the backend
            http_client: Pre-built httpx client (not closed by this object)
        """
        self.debug = debug
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=timeout,
            verify=verify_tls,
            headers={"User-Agent": user_agent},
        )

    @classmethod
    def from_config(
        cls, config: TransportConfig, http_client: Optional[httpx.Client] = None
    ) -> "SimilarityQueryClient":
        return cls(
            timeout=config.timeout,
            verify_tls=config.verify_tls,
            user_agent=config.user_agent,
            debug=config.debug,
            http_client=http_client,
        )

    def build_url(self, endpoint: BackendEndpoint) -> str:
        return endpoint.base_uri + HANDLER_PATH

    def query(self, request: SimilarityRequest, endpoint: BackendEndpoint) -> QueryResponse:
        """Send one similarity query.

        Args:
            request: Similarity request
            endpoint: Resolved backend endpoint

        Returns:
            RawBackendResponse for any HTTP response (including non-200),
            TransportFailure when no response was received
        """
        url = self.build_url(endpoint)
        params = build_query_params(request, debug=self.debug)

        logger.debug(
            "smlt_request_started",
            url=url,
            document_id=request.document_id,
            mode=request.mode,
            count=request.count,
        )

        try:
            response = self._client.get(url, params=params, headers=build_headers(endpoint))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return TransportFailure(error=str(e) or type(e).__name__, error_type=type(e).__name__)

        logger.debug(
            "smlt_request_completed",
            document_id=request.document_id,
            status=response.status_code,
            elapsed_ms=int(response.elapsed.total_seconds() * 1000),
        )

        return RawBackendResponse(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SimilarityQueryClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
