"""Backend client: query construction, transport and response normalization."""

from smlt.client.normalizer import normalize
from smlt.client.query import (
    QueryResponse,
    RawBackendResponse,
    SimilarityQueryClient,
    TransportFailure,
    build_query_params,
)

__all__ = [
    "QueryResponse",
    "RawBackendResponse",
    "SimilarityQueryClient",
    "TransportFailure",
    "build_query_params",
    "normalize",
]
