"""SimilarityOutcome entity - a result plus how it was obtained."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from smlt.entities.result import SimilarityResult


class OutcomeStatus(str, Enum):
    """How a similarity call ended."""

    FOUND = "found"
    NO_MATCHES = "no_matches"
    TRANSPORT_FAILURE = "transport_failure"
    STATUS_FAILURE = "status_failure"
    MALFORMED_RESPONSE = "malformed_response"
    RESOLUTION_FAILURE = "resolution_failure"
    INVALID_REQUEST = "invalid_request"


_SUCCESS_STATUSES = {OutcomeStatus.FOUND, OutcomeStatus.NO_MATCHES}


class SimilarityOutcome(BaseModel):
    """Result of a similarity call, tagged with its status.

    ``result`` is always populated. Degraded outcomes carry the empty
    fallback, so front ends render "nothing found" and "backend down" the
    same way while logs and tests can still tell them apart.
    """

    status: OutcomeStatus
    result: SimilarityResult
    status_code: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, result: SimilarityResult) -> "SimilarityOutcome":
        status = OutcomeStatus.NO_MATCHES if result.is_empty else OutcomeStatus.FOUND
        return cls(status=status, result=result, status_code=200)

    @classmethod
    def fallback(
        cls,
        status: OutcomeStatus,
        document_id: str,
        mode: str,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> "SimilarityOutcome":
        return cls(
            status=status,
            result=SimilarityResult.empty(document_id, mode),
            status_code=status_code,
            error=error,
        )

    @property
    def ok(self) -> bool:
        return self.status in _SUCCESS_STATUSES

    @property
    def degraded(self) -> bool:
        return not self.ok
