"""Entities - Domain models for similarity lookups.

This module contains pure domain entities without business logic:
- SimilarityRequest: One "find similar" call
- BackendEndpoint: Resolved search core location and credentials
- SimilarityResult: Normalized ranked list of similar documents
- SimilarityOutcome: A result tagged with how it was obtained
"""

from smlt.entities.endpoint import BackendEndpoint, Credentials
from smlt.entities.outcome import OutcomeStatus, SimilarityOutcome
from smlt.entities.request import SimilarityMode, SimilarityRequest
from smlt.entities.result import ScoreBreakdown, SimilarDocument, SimilarityResult

__all__ = [
    "BackendEndpoint",
    "Credentials",
    "OutcomeStatus",
    "ScoreBreakdown",
    "SimilarDocument",
    "SimilarityMode",
    "SimilarityOutcome",
    "SimilarityRequest",
    "SimilarityResult",
]
