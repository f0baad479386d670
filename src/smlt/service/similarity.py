"""Similarity service: the single entry point shared by every front end.

Why this exists:
- Controllers and template helpers call the same code with the same inputs
- Every failure (bad input, unknown site, unreachable backend, error status,
  garbage body) ends in the same empty result for rendering
- Logs still say which failure it was

How to use:
    from smlt.service import create_similarity_service

    service = create_similarity_service(config)
    result = service.find_similar("page-42", site_root_id=1)
    for doc in result.docs:
        print(doc.title, doc.score)
"""

from typing import Any

from pydantic import ValidationError

from smlt.client.normalizer import normalize
from smlt.client.query import SimilarityQueryClient, TransportFailure
from smlt.entities import (
    OutcomeStatus,
    SimilarityOutcome,
    SimilarityRequest,
    SimilarityResult,
)
from smlt.entities.request import (
    DEFAULT_COUNT,
    DEFAULT_MLT_WEIGHT,
    DEFAULT_MODE,
    DEFAULT_VECTOR_WEIGHT,
)
from smlt.errors import ResolutionError
from smlt.observability.logging import get_logger
from smlt.resolver.base import EndpointResolver

logger = get_logger(__name__)


class SimilarityService:
    """Find documents similar to a given one through the SMLT handler."""

    def __init__(
        self,
        resolver: EndpointResolver,
        client: SimilarityQueryClient,
        strict_resolution: bool = False,
    ):
        """Initialize the service.

        Args:
            resolver: Maps site root + language to a backend endpoint
            client: Sends the SMLT query
            strict_resolution: Re-raise ResolutionError instead of returning
                the empty result
        """
        self.resolver = resolver
        self.client = client
        self.strict_resolution = strict_resolution

    def find_similar(
        self,
        document_id: str,
        site_root_id: int,
        language_id: int = 0,
        count: int = DEFAULT_COUNT,
        mode: str = DEFAULT_MODE,
        vector_weight: float = DEFAULT_VECTOR_WEIGHT,
        mlt_weight: float = DEFAULT_MLT_WEIGHT,
    ) -> SimilarityResult:
        """Return documents similar to ``document_id``.

        Never returns None. On any failure the result is empty but still
        carries ``source_id`` and ``mode``.
        """
        return self.find_similar_outcome(
            document_id,
            site_root_id,
            language_id=language_id,
            count=count,
            mode=mode,
            vector_weight=vector_weight,
            mlt_weight=mlt_weight,
        ).result

    def find_similar_outcome(
        self,
        document_id: str,
        site_root_id: int,
        language_id: int = 0,
        count: int = DEFAULT_COUNT,
        mode: str = DEFAULT_MODE,
        vector_weight: float = DEFAULT_VECTOR_WEIGHT,
        mlt_weight: float = DEFAULT_MLT_WEIGHT,
    ) -> SimilarityOutcome:
        """Like find_similar, but also report how the result was obtained.

        Raises:
            ResolutionError: Only when the service was built with
                strict_resolution=True
        """
        try:
            request = SimilarityRequest(
                document_id=document_id,
                site_root_id=site_root_id,
                language_id=language_id,
                count=count,
                mode=mode,
                vector_weight=vector_weight,
                mlt_weight=mlt_weight,
            )
        except ValidationError as e:
            return self._invalid_request(document_id, mode, e)

        if not request.known_mode:
            logger.warning("smlt_unknown_mode", mode=request.mode, document_id=request.document_id)

        try:
            endpoint = self.resolver.resolve_endpoint(request.site_root_id, request.language_id)
        except ResolutionError as e:
            logger.error(
                "smlt_endpoint_resolution_failed",
                message=e.message,
                document_id=request.document_id,
                site_root_id=request.site_root_id,
                language_id=request.language_id,
            )
            if self.strict_resolution:
                raise
            return SimilarityOutcome.fallback(
                OutcomeStatus.RESOLUTION_FAILURE,
                request.document_id,
                request.mode,
                error=e.message,
            )

        response = self.client.query(request, endpoint)

        if isinstance(response, TransportFailure):
            logger.error(
                "smlt_request_failed",
                message=response.error,
                error_type=response.error_type,
                document_id=request.document_id,
            )
            return SimilarityOutcome.fallback(
                OutcomeStatus.TRANSPORT_FAILURE,
                request.document_id,
                request.mode,
                error=response.error,
            )

        if not response.ok:
            logger.warning(
                "smlt_http_status",
                status=response.status_code,
                document_id=request.document_id,
            )
            return SimilarityOutcome.fallback(
                OutcomeStatus.STATUS_FAILURE,
                request.document_id,
                request.mode,
                status_code=response.status_code,
                error=f"HTTP {response.status_code}",
            )

        outcome = normalize(response.body, request)
        if outcome.ok:
            logger.info(
                "smlt_similar_found",
                document_id=request.document_id,
                mode=outcome.result.mode,
                num_found=outcome.result.num_found,
                returned=len(outcome.result.docs),
            )
        return outcome

    def close(self) -> None:
        self.client.close()

    def _invalid_request(self, document_id: Any, mode: Any, error: ValidationError) -> SimilarityOutcome:
        source_id = "" if document_id is None else str(document_id)
        effective_mode = mode.strip() if isinstance(mode, str) and mode.strip() else DEFAULT_MODE
        logger.warning(
            "smlt_invalid_request",
            document_id=source_id,
            errors=[err["msg"] for err in error.errors()],
        )
        return SimilarityOutcome.fallback(
            OutcomeStatus.INVALID_REQUEST,
            source_id,
            str(effective_mode),
            error=f"invalid request: {error.error_count()} error(s)",
        )
