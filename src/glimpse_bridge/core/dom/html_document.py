"""Outline document view over captured Workflowy HTML.

Workflowy renders each outline item as ``div[projectid]`` with direct child
regions::

    div[projectid]
      > .name  > .content > .innerContentContainer   (item text)
      > .notes > .content > .innerContentContainer   (note text)
      > .children > div[projectid] ...               (rendered children)

Collapsed items have no ``.children`` region, or an empty one.
"""

from collections.abc import Sequence

from bs4 import BeautifulSoup, Tag

NODE_TAG = "div"
NODE_ID_ATTR = "projectid"

NAME_SELECTOR = ":scope > .name > .content > .innerContentContainer"
NOTE_SELECTOR = ":scope > .notes > .content > .innerContentContainer"
CHILDREN_SELECTOR = ":scope > .children"
CHILD_NODES_SELECTOR = f":scope > {NODE_TAG}[{NODE_ID_ATTR}]"


class HtmlDocument:
    """Read-only DocumentProtocol implementation backed by BeautifulSoup."""

    def __init__(self, html: str, *, features: str = "html.parser") -> None:
        self.soup = BeautifulSoup(html, features)

    def find_node(self, node_id: str) -> Tag | None:
        return self.soup.find(NODE_TAG, attrs={NODE_ID_ATTR: node_id})

    def node_id(self, element: Tag) -> str | None:
        value = element.get(NODE_ID_ATTR)
        if isinstance(value, list):
            value = " ".join(value)
        return value

    def primary_text(self, element: Tag) -> str | None:
        region = element.select_one(NAME_SELECTOR)
        return region.get_text() if region is not None else None

    def secondary_text(self, element: Tag) -> str | None:
        region = element.select_one(NOTE_SELECTOR)
        return region.get_text() if region is not None else None

    def parent_node(self, element: Tag) -> Tag | None:
        return element.find_parent(NODE_TAG, attrs={NODE_ID_ATTR: True})

    def children_region(self, element: Tag) -> Tag | None:
        return element.select_one(CHILDREN_SELECTOR)

    def region_has_elements(self, region: Tag) -> bool:
        return region.find(True, recursive=False) is not None

    def direct_child_nodes(self, region: Tag) -> Sequence[Tag]:
        return region.select(CHILD_NODES_SELECTOR)
