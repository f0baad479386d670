"""SimilarityRequest entity - one "find similar" call."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SimilarityMode(str, Enum):
    """Scoring modes understood by the SMLT handler."""

    HYBRID = "hybrid"
    VECTOR_ONLY = "vector_only"
    MLT_ONLY = "mlt_only"


DEFAULT_COUNT = 5
DEFAULT_MODE = SimilarityMode.HYBRID.value
DEFAULT_VECTOR_WEIGHT = 0.7
DEFAULT_MLT_WEIGHT = 0.3


def is_known_mode(mode: str) -> bool:
    return mode in {m.value for m in SimilarityMode}


class SimilarityRequest(BaseModel):
    """Immutable input of a similarity query.

    The mode is a plain string at this boundary: blank values fall back to
    ``hybrid`` and unknown values are passed through to the backend, which
    decides what to do with them. Weights are not clamped.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str = Field(..., description="Backend ID of the source document")
    site_root_id: int = Field(..., description="Site root used to pick the backend connection")
    language_id: int = 0
    count: int = Field(default=DEFAULT_COUNT, ge=0, description="Maximum number of similar documents")
    mode: str = DEFAULT_MODE
    vector_weight: float = DEFAULT_VECTOR_WEIGHT
    mlt_weight: float = DEFAULT_MLT_WEIGHT

    @field_validator("document_id")
    @classmethod
    def document_id_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Document ID cannot be empty")
        return v

    @field_validator("mode", mode="before")
    @classmethod
    def default_blank_mode(cls, v: Any) -> Any:
        if isinstance(v, SimilarityMode):
            return v.value
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_MODE
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def known_mode(self) -> bool:
        """Whether the mode is one the backend handler recognizes."""
        return is_known_mode(self.mode)
