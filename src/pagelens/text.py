"""
Rendered-text helpers over BeautifulSoup trees.

``rendered_text`` approximates the browser's ``innerText``: block-level
elements start and end lines, ``<br>`` breaks a line, runs of whitespace
inside a line collapse to one space, and non-rendered elements (scripts,
styles, templates, ``hidden`` nodes) contribute nothing.
"""

import re
from typing import Iterator, List, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "body", "caption", "dd",
    "details", "dialog", "div", "dl", "dt", "fieldset", "figcaption", "figure",
    "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr",
    "html", "legend", "li", "main", "nav", "ol", "p", "pre", "section",
    "summary", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
})

NON_RENDERED_TAGS = frozenset({
    "head", "link", "meta", "noscript", "script", "style", "template", "title",
})

_INLINE_WHITESPACE = re.compile(r"\s+")


def is_rendered(tag: Tag) -> bool:
    """False for elements a browser would not lay out."""
    if tag.name in NON_RENDERED_TAGS:
        return False
    if tag.has_attr("hidden"):
        return False
    style = (tag.get("style") or "").replace(" ", "").lower()
    return "display:none" not in style


def rendered_text(node: Union[Tag, BeautifulSoup, None]) -> str:
    """Rendered text of a node, one line per block, trimmed."""
    if node is None:
        return ""
    parts: List[str] = []
    _collect(node, parts)
    lines = (line.strip() for line in "".join(parts).split("\n"))
    return "\n".join(line for line in lines if line)


def _collect(node: Tag, parts: List[str]) -> None:
    for child in node.children:
        if isinstance(child, PreformattedString):
            # comments, doctype, CDATA
            continue
        if isinstance(child, NavigableString):
            parts.append(_INLINE_WHITESPACE.sub(" ", str(child)))
        elif isinstance(child, Tag):
            if not is_rendered(child):
                continue
            if child.name == "br":
                parts.append("\n")
                continue
            block = child.name in BLOCK_TAGS
            if block:
                parts.append("\n")
            _collect(child, parts)
            if block:
                parts.append("\n")


def normalize(text: str) -> str:
    """Lower-cased, trimmed form used for fuzzy text comparison."""
    return _INLINE_WHITESPACE.sub(" ", text).strip().lower()


def clean_content(text: str) -> str:
    """Collapse whitespace runs and blank lines, then trim."""
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"\n\s*\n", "\n", text)
    return text.strip()


def iter_rendered(node: Tag) -> Iterator[Tag]:
    """
    Rendered descendant elements of ``node`` in document order.

    A non-rendered element hides its whole subtree, which is skipped without
    being visited.
    """
    stack = [child for child in reversed(node.contents) if isinstance(child, Tag)]
    while stack:
        tag = stack.pop()
        if not is_rendered(tag):
            continue
        yield tag
        stack.extend(child for child in reversed(tag.contents) if isinstance(child, Tag))
