"""
Text-based element locator.

Finds elements whose rendered text (or aria-label) contains a query and
synthesizes a CSS reference for each so it can be re-found later.
"""

import logging
from typing import Dict, List, Optional, Sequence

import soupsieve
from bs4 import BeautifulSoup
from bs4.element import Tag

from .config import DEFAULT_TAG_FILTER
from .document.base import DocumentContext
from .models import ElementMatch
from .text import iter_rendered, normalize, rendered_text

logger = logging.getLogger(__name__)


def build_reference(element: Tag) -> str:
    """
    Synthesize a selector that resolves to exactly this element.

    Priority: ``#id``, then ``tag.class1.class2``, then
    ``tag:nth-child(n)`` (1-based among element siblings), each used only
    when nothing earlier in the document also matches it. Otherwise the
    positional form is chained under the parent's reference
    (``div:nth-child(2) > span:nth-child(1)``). Positional references break
    as soon as the tree is restructured.
    """
    root = _root(element)
    positional = f"{element.name}:nth-child({_sibling_index(element)})"

    candidates = []
    element_id = (element.get("id") or "").strip()
    if element_id:
        candidates.append(f"#{soupsieve.escape(element_id)}")
    classes = [c for c in (element.get("class") or []) if c.strip()]
    if classes:
        candidates.append(element.name + "".join(f".{soupsieve.escape(c)}" for c in classes))
    candidates.append(positional)

    for candidate in candidates:
        if _resolves_to(candidate, root, element):
            return candidate

    parent = element.parent
    if parent is None or parent is root:
        return positional
    return f"{build_reference(parent)} > {positional}"


def _root(element: Tag) -> Tag:
    node = element
    while node.parent is not None:
        node = node.parent
    return node


def _resolves_to(selector: str, root: Tag, element: Tag) -> bool:
    """True when the first match of ``selector`` under ``root`` is ``element``."""
    first = soupsieve.select_one(selector, root)
    return first is element


def _sibling_index(element: Tag) -> int:
    parent = element.parent
    if parent is None:
        return 1
    index = 0
    for child in parent.children:
        if isinstance(child, Tag):
            index += 1
            if child is element:
                return index
    return 1


class ElementLocator:
    """
    Fuzzy text search over a document's candidate elements.

    Matches are grouped by tag in ``tag_filter`` order (buttons before generic
    containers by default) and kept in document order within a tag, so
    ``matches[0]`` is the most semantically primary hit.
    """

    def __init__(self, tag_filter: Sequence[str] = DEFAULT_TAG_FILTER):
        self.tag_filter = tuple(tag_filter)

    async def find(
        self,
        document: DocumentContext,
        query: str,
        tag_filter: Optional[Sequence[str]] = None,
    ) -> List[ElementMatch]:
        """
        Find elements matching ``query``. Never raises; failures yield [].
        """
        try:
            tree = await document.get_tree()
            matches = self.find_in_tree(tree, query, tag_filter)
        except Exception as e:
            logger.warning(f"Element lookup for {query!r} failed: {e}")
            return []

        logger.debug(f"Found {len(matches)} element(s) matching {query!r}")
        return matches

    def find_in_tree(
        self,
        tree: BeautifulSoup,
        query: str,
        tag_filter: Optional[Sequence[str]] = None,
    ) -> List[ElementMatch]:
        needle = normalize(query)
        if not needle:
            return []

        # One walk over rendered elements; hidden subtrees are never entered
        by_tag: Dict[str, List[ElementMatch]] = {name: [] for name in tag_filter or self.tag_filter}
        for element in iter_rendered(tree):
            if element.name not in by_tag:
                continue
            text = rendered_text(element)
            haystack = normalize(text)
            label = normalize(element.get("aria-label") or "")
            if needle in haystack or haystack == needle or (label and needle in label):
                by_tag[element.name].append(
                    ElementMatch(
                        text=" ".join(text.split()),
                        tag_name=element.name,
                        reference=build_reference(element),
                    )
                )
        return [match for matches in by_tag.values() for match in matches]
