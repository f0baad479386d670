"""SimilarityResult entity - the normalized answer handed to front ends."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ScoreBreakdown(BaseModel):
    """Per-document scores, present when the backend runs in debug mode."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    vector_score: Optional[float] = Field(default=None, alias="vectorScore")
    mlt_score: Optional[float] = Field(default=None, alias="mltScore")
    combined_score: Optional[float] = Field(default=None, alias="combinedScore")


class SimilarDocument(BaseModel):
    """One ranked document as returned by the backend.

    Field values are kept exactly as sent, whatever their type, and unknown
    fields are kept too, so a change in the backend's stored fields (or a
    multi-valued field) never breaks rendering.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Any = None
    title: Any = None
    url: Any = None
    content: Any = None
    category: Any = None
    score: Any = None
    score_breakdown: Any = Field(default=None, alias="scoreBreakdown")

    @property
    def numeric_score(self) -> Optional[float]:
        """The score as a float, or None when it is missing or not a number."""
        if isinstance(self.score, bool) or not isinstance(self.score, (int, float)):
            return None
        return float(self.score)

    @property
    def breakdown(self) -> Optional[ScoreBreakdown]:
        """The parsed score breakdown, or None when absent or not parseable."""
        if not isinstance(self.score_breakdown, dict):
            return None
        try:
            return ScoreBreakdown.model_validate(self.score_breakdown)
        except ValidationError:
            return None

    def to_payload(self) -> dict[str, Any]:
        """Return the document as the backend sent it (camelCase, no injected fields)."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class SimilarityResult(BaseModel):
    """Ranked list of documents similar to ``source_id``.

    ``docs`` keeps the backend's relevance order.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    source_id: str = Field(..., alias="sourceId")
    mode: str
    num_found: int = Field(default=0, ge=0, alias="numFound")
    docs: list[SimilarDocument] = Field(default_factory=list)

    @classmethod
    def empty(cls, document_id: str, mode: str) -> "SimilarityResult":
        """Build the fallback result used whenever nothing could be retrieved."""
        return cls(source_id=document_id, mode=mode, num_found=0, docs=[])

    @property
    def is_empty(self) -> bool:
        return not self.docs

    def to_payload(self) -> dict[str, Any]:
        """Return the stable ``sourceId``/``mode``/``numFound``/``docs`` mapping."""
        return {
            "sourceId": self.source_id,
            "mode": self.mode,
            "numFound": self.num_found,
            "docs": [doc.to_payload() for doc in self.docs],
        }
