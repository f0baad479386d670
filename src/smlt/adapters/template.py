"""Template helper adapter.

Lets a template render similar documents inline:

    helper = SimilarContentHelper(service)
    html = helper.render(
        lambda variables: "".join(
            f'<a href="{doc["url"]}">{doc["title"]}</a>'
            for doc in variables["docs"]
        ),
        document_id="page-42",
        site_root_page_id=1,
        count=3,
        as_="docs",
        class_="similar",
    )

The documents are exposed to the child renderer under the ``as_`` name and
the rendered children are wrapped in a ``<div>``.
"""

from html import escape
from typing import Any, Callable, Mapping, Optional

from smlt.adapters.controller import coerce_setting
from smlt.entities.request import (
    DEFAULT_COUNT,
    DEFAULT_MLT_WEIGHT,
    DEFAULT_MODE,
    DEFAULT_VECTOR_WEIGHT,
)
from smlt.service.similarity import SimilarityService

ChildRenderer = Callable[[Mapping[str, Any]], Optional[str]]

DEFAULT_VARIABLE_NAME = "similarDocuments"


def _attribute_name(name: str) -> str:
    # class_ -> class, data_foo -> data-foo
    return name.rstrip("_").replace("_", "-")


def render_tag(tag_name: str, content: str, attributes: Mapping[str, Any]) -> str:
    """Render ``content`` inside a tag; None/False attributes are dropped."""
    parts = [tag_name]
    for name, value in attributes.items():
        if value is None or value is False:
            continue
        attr = _attribute_name(name)
        if value is True:
            parts.append(attr)
        else:
            parts.append(f'{attr}="{escape(str(value), quote=True)}"')
    return f"<{' '.join(parts)}>{content}</{tag_name}>"


class SimilarContentHelper:
    """Renders child content with the similar documents of a source document."""

    tag_name = "div"

    def __init__(self, service: SimilarityService):
        self.service = service

    def render(
        self,
        render_children: ChildRenderer,
        document_id: str,
        site_root_page_id: int,
        language_id: int = 0,
        count: int = DEFAULT_COUNT,
        mode: str = DEFAULT_MODE,
        vector_weight: float = DEFAULT_VECTOR_WEIGHT,
        mlt_weight: float = DEFAULT_MLT_WEIGHT,
        as_: str = DEFAULT_VARIABLE_NAME,
        **attributes: Any,
    ) -> str:
        """Render the children with the similar documents in scope.

        Returns:
            The wrapped children, or an empty string when the child
            renderer produced nothing
        """
        # A missing document or site root ends in the service's empty result
        result = self.service.find_similar(
            "" if document_id is None else str(document_id),
            coerce_setting(site_root_page_id, int, None),
            coerce_setting(language_id, int, 0),
            coerce_setting(count, int, DEFAULT_COUNT),
            coerce_setting(mode, str, DEFAULT_MODE),
            coerce_setting(vector_weight, float, DEFAULT_VECTOR_WEIGHT),
            coerce_setting(mlt_weight, float, DEFAULT_MLT_WEIGHT),
        )

        variables = {as_: result.to_payload()["docs"]}
        content = render_children(variables)

        if content is None:
            return ""

        return render_tag(self.tag_name, content, attributes)
