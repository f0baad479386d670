"""Front-end adapters sharing one SimilarityService."""

from smlt.adapters.controller import PageContext, SimilarContentController, page_document_id
from smlt.adapters.template import SimilarContentHelper

__all__ = [
    "PageContext",
    "SimilarContentController",
    "SimilarContentHelper",
    "page_document_id",
]
