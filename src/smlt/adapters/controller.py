"""Page controller adapter.

Turns the page being rendered plus the content element's settings into a
similarity call and returns the variables the view needs.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from smlt.config.schema import QueryDefaultsConfig
from smlt.service.similarity import SimilarityService


@dataclass(frozen=True)
class PageContext:
    """What the CMS knows about the page being rendered."""

    page_uid: int
    site_root_page_id: int
    language_id: int = 0
    site_hash: str = ""


def page_document_id(
    site_hash: str,
    page_uid: int,
    type_num: int = 0,
    language_id: int = 0,
    access_groups: str = "0:-1",
) -> str:
    """Build the search document ID of a page as the indexer writes it."""
    return f"{site_hash}/pages/{page_uid}/{type_num}/{language_id}/{access_groups}"


def coerce_setting(value: Any, cast: Callable[[Any], Any], default: Any) -> Any:
    """Cast a loosely typed setting, using ``default`` when it is blank or unparsable."""
    if value is None or value == "":
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


class SimilarContentController:
    """Renders the "similar content" plugin for the current page."""

    def __init__(
        self,
        service: SimilarityService,
        defaults: Optional[QueryDefaultsConfig] = None,
        document_id_builder: Optional[Callable[[PageContext], str]] = None,
    ):
        self.service = service
        self.defaults = defaults or QueryDefaultsConfig()
        self.document_id_builder = document_id_builder or (
            lambda page: page_document_id(
                page.site_hash, page.page_uid, language_id=page.language_id
            )
        )

    def show(self, page: PageContext, settings: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Return the view variables for ``page``.

        Args:
            page: Page context
            settings: Plugin settings (count, mode, vectorWeight, mltWeight),
                usually strings from a form

        Returns:
            Mapping with ``result``, ``documents``, ``numFound``, ``sourceId``
            and ``mode``
        """
        settings = settings or {}
        document_id = self.document_id_builder(page)

        count = coerce_setting(settings.get("count"), int, self.defaults.count)
        mode = coerce_setting(settings.get("mode"), str, self.defaults.mode)
        vector_weight = coerce_setting(settings.get("vectorWeight"), float, self.defaults.vector_weight)
        mlt_weight = coerce_setting(settings.get("mltWeight"), float, self.defaults.mlt_weight)

        result = self.service.find_similar(
            document_id,
            page.site_root_page_id,
            page.language_id,
            count,
            mode,
            vector_weight,
            mlt_weight,
        )
        payload = result.to_payload()

        return {
            "result": payload,
            "documents": payload.get("docs") or [],
            "numFound": payload.get("numFound") or 0,
            "sourceId": payload.get("sourceId") or document_id,
            "mode": payload.get("mode") or mode,
        }
