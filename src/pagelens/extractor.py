"""
Content extraction cascade.

Turns a document into a plain-text PageSnapshot by trying progressively
cheaper strategies, the first one yielding enough text wins:

1. Semantic landmarks (main, article, role=main, known content classes/ids)
2. Filtered body (body copy with navigation, ads, comments, scripts removed)
3. Cleanup pass over whichever of the above produced text
4. Paragraph aggregation (p, headings, list items)
5. Raw document text, or a fixed "no readable content" literal

The result is capped at ``max_length`` characters with an explicit marker.
"""

import copy
import logging
from typing import Optional, Tuple

from bs4 import BeautifulSoup

from .config import ExtractionConfig
from .document.base import DocumentContext
from .models import ContentSource, PageSnapshot
from .text import clean_content, rendered_text

logger = logging.getLogger(__name__)


class ContentExtractor:
    """Extracts readable text from a document. Never raises."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()

    async def extract(self, document: DocumentContext) -> PageSnapshot:
        """
        Extract a snapshot of the document's readable content.

        Failures of any kind are reported as ``success=False`` with
        ``content_source=error`` and a diagnostic ``error``.
        """
        title: Optional[str] = None
        url: Optional[str] = None
        try:
            title = (await document.get_title()) or self.config.default_title
            url = await document.get_url()
            tree = await document.get_tree()

            content, source, selector = self.extract_from_tree(tree)

            logger.info(
                f"Content extracted: source={source.value} length={len(content)} "
                f"title={title!r} url={url}"
            )
            return PageSnapshot(
                title=title,
                url=url,
                content=content,
                content_source=source,
                matched_selector=selector,
            )
        except Exception as e:
            logger.error(f"Error extracting page content: {e}")
            return PageSnapshot(
                title=title or "Error",
                url=url or await self._safe_url(document),
                content=self.config.error_text,
                content_source=ContentSource.ERROR,
                success=False,
                error=str(e),
            )

    def extract_from_tree(self, tree: BeautifulSoup) -> Tuple[str, ContentSource, Optional[str]]:
        """
        Run the cascade over a parsed tree.

        Returns:
            (content, source, matched landmark selector or None)
        """
        cfg = self.config

        content, selector = self._landmark_text(tree)
        source = ContentSource.SELECTOR_TAG

        if not content or len(content) < cfg.body_min_length:
            content = self._filtered_body_text(tree)
            source = ContentSource.BODY_FILTERED
            selector = None

        content = clean_content(content)

        if len(content) < cfg.paragraph_threshold:
            content = self._paragraph_text(tree)
            source = ContentSource.PARAGRAPHS

        if len(content) < cfg.raw_threshold:
            content = self._raw_text(tree)
            source = ContentSource.DOCUMENT_TEXT

        return self.truncate(content), source, selector

    def truncate(self, content: str) -> str:
        if len(content) > self.config.max_length:
            return content[: self.config.max_length] + self.config.truncation_marker
        return content

    def _landmark_text(self, tree: BeautifulSoup) -> Tuple[str, Optional[str]]:
        for selector in self.config.content_selectors:
            element = tree.select_one(selector)
            if element is None:
                continue
            text = rendered_text(element)
            if len(text) > self.config.landmark_min_length:
                return text, selector
        return "", None

    def _filtered_body_text(self, tree: BeautifulSoup) -> str:
        if tree.body is None:
            return ""
        body = copy.copy(tree.body)
        for selector in self.config.non_content_selectors:
            for element in body.select(selector):
                # nested matches die with their ancestor
                if not element.decomposed:
                    element.decompose()
        return rendered_text(body)

    def _paragraph_text(self, tree: BeautifulSoup) -> str:
        fragments = []
        for element in tree.select(", ".join(self.config.paragraph_selectors)):
            text = rendered_text(element)
            if len(text) > self.config.fragment_min_length:
                fragments.append(text)
        return "\n".join(fragments)

    def _raw_text(self, tree: BeautifulSoup) -> str:
        return rendered_text(tree.body) or rendered_text(tree) or self.config.no_content_text

    @staticmethod
    async def _safe_url(document: DocumentContext) -> str:
        try:
            return await document.get_url()
        except Exception:
            return ""
