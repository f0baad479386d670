"""Normalize raw SMLT responses into a SimilarityOutcome.

Rules, in order:
1. No body (transport failure or non-200 status): empty fallback.
2. Body that is not JSON, not an object, has no ``semanticMoreLikeThis``
   envelope, or whose envelope does not fit the result schema: empty
   fallback, tagged as malformed.
3. Otherwise the envelope is the result. Document entries pass through as
   sent, unknown fields included; missing top-level fields default to the
   request's values.

Nothing in here raises.
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from smlt.entities import OutcomeStatus, SimilarityOutcome, SimilarityRequest, SimilarityResult
from smlt.observability.logging import get_logger

logger = get_logger(__name__)

ENVELOPE_KEY = "semanticMoreLikeThis"


def _malformed(request: SimilarityRequest, reason: str) -> SimilarityOutcome:
    logger.warning(
        "smlt_malformed_response",
        document_id=request.document_id,
        reason=reason,
    )
    return SimilarityOutcome.fallback(
        OutcomeStatus.MALFORMED_RESPONSE,
        request.document_id,
        request.mode,
        status_code=200,
        error=reason,
    )


def parse_envelope(raw_body: bytes) -> tuple[Optional[dict[str, Any]], Optional[str]]:
    """Extract the ``semanticMoreLikeThis`` object from a response body.

    Returns:
        Tuple of (envelope, error); exactly one of them is None
    """
    try:
        body = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError) as e:
        return None, f"invalid JSON: {e}"
    except RecursionError:
        return None, "invalid JSON: nested too deeply"

    if not isinstance(body, dict):
        return None, f"expected a JSON object, got {type(body).__name__}"

    if ENVELOPE_KEY not in body or body[ENVELOPE_KEY] is None:
        return None, f"missing '{ENVELOPE_KEY}' key"

    envelope = body[ENVELOPE_KEY]
    if not isinstance(envelope, dict):
        return None, f"'{ENVELOPE_KEY}' is not an object"

    return envelope, None


def normalize(raw_body: Optional[bytes], request: SimilarityRequest) -> SimilarityOutcome:
    """Turn a raw response body into an outcome with a well-formed result.

    Args:
        raw_body: Response body, or None when no usable response was received
        request: The request the body answers

    Returns:
        SimilarityOutcome; its result is the backend's result or the empty fallback
    """
    if raw_body is None:
        return SimilarityOutcome.fallback(
            OutcomeStatus.TRANSPORT_FAILURE,
            request.document_id,
            request.mode,
            error="no response body",
        )

    envelope, error = parse_envelope(raw_body)
    if envelope is None:
        return _malformed(request, error)

    data = {
        "sourceId": request.document_id,
        "mode": request.mode,
        "numFound": 0,
        "docs": [],
    }
    data.update({k: v for k, v in envelope.items() if v is not None})

    try:
        result = SimilarityResult.model_validate(data)
    except ValidationError as e:
        return _malformed(request, f"unexpected result shape: {e.error_count()} error(s)")

    return SimilarityOutcome.success(result)
