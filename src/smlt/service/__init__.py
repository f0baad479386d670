"""Service layer - Business logic orchestration.

This module contains the service shared by every front end:
- SimilarityService: resolve endpoint, query, normalize
- create_similarity_service: wire a service from configuration
"""

from typing import Optional

import httpx

from smlt.client.query import SimilarityQueryClient
from smlt.config.schema import AppConfig
from smlt.resolver import EndpointResolver, create_endpoint_resolver
from smlt.service.similarity import SimilarityService


def create_similarity_service(
    config: AppConfig,
    resolver: Optional[EndpointResolver] = None,
    http_client: Optional[httpx.Client] = None,
) -> SimilarityService:
    """Build a SimilarityService from configuration.

    Args:
        config: Application configuration
        resolver: Resolver to use instead of the configured one
        http_client: httpx client to use instead of a fresh one

    Returns:
        Ready-to-use service; call ``close()`` when done
    """
    return SimilarityService(
        resolver=resolver or create_endpoint_resolver(config),
        client=SimilarityQueryClient.from_config(config.transport, http_client=http_client),
        strict_resolution=config.resolver.strict_resolution,
    )


__all__ = [
    "SimilarityService",
    "create_similarity_service",
]
