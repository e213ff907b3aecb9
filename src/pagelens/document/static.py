"""
In-memory document backed by a BeautifulSoup tree.

StaticDocument behaves like a live page for the pipeline: its tree can be
mutated, clicks are dispatched to registered handlers (which may append or
remove nodes, or navigate), and navigation notifies subscribers. It is used
for offline HTML and throughout the test-suite.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional, Set, Tuple

import soupsieve
from bs4 import BeautifulSoup
from bs4.element import Tag

from ..exceptions import ElementNotFoundError, InteractionError
from ..text import rendered_text
from .base import DocumentContext, NavigationCallback

logger = logging.getLogger(__name__)

ClickHandler = Callable[["StaticDocument", Tag], Any]


class StaticDocument(DocumentContext):
    """
    A mutable, in-process document.

    Args:
        html: Initial markup
        url: URL reported for the document
        ready: When False, ``wait_until_ready`` blocks until ``mark_ready``
    """

    def __init__(self, html: str = "", url: str = "about:blank", ready: bool = True):
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")
        self._ready = asyncio.Event()
        if ready:
            self._ready.set()
        self._click_handlers: List[Tuple[str, ClickHandler]] = []
        self._navigation_callbacks: List[NavigationCallback] = []
        self._pending: Set[asyncio.Future] = set()

        # Interaction log, in dispatch order
        self.clicks: List[str] = []
        self.scrolled: List[str] = []

    # ------------------------------------------------------------------
    # DocumentContext
    # ------------------------------------------------------------------

    async def get_url(self) -> str:
        return self.url

    async def get_title(self) -> str:
        title = self.soup.title
        return title.get_text(strip=True) if title else ""

    async def get_html(self) -> str:
        return str(self.soup)

    async def get_body_text(self) -> str:
        return rendered_text(self.soup.body or self.soup)

    async def wait_until_ready(self) -> None:
        await self._ready.wait()

    async def element_text(self, reference: str) -> Optional[str]:
        element = self.soup.select_one(reference)
        if element is None:
            return None
        return rendered_text(element)

    async def scroll_into_view(self, reference: str) -> None:
        self._require(reference)
        self.scrolled.append(reference)

    async def dispatch_click(self, reference: str) -> None:
        element = self._require(reference)
        if element.has_attr("disabled"):
            raise InteractionError(f"element is disabled: `{reference}`", reference=reference)

        self.clicks.append(reference)
        logger.debug(f"Dispatching click on {reference}")

        # Snapshot the handler list; handlers may register new ones
        for selector, handler in list(self._click_handlers):
            if soupsieve.match(selector, element):
                outcome = handler(self, element)
                if inspect.isawaitable(outcome):
                    await outcome

    def on_navigation(self, callback: NavigationCallback) -> None:
        self._navigation_callbacks.append(callback)

    async def get_tree(self) -> BeautifulSoup:
        return BeautifulSoup(str(self.soup), "html.parser")

    # ------------------------------------------------------------------
    # Page scripting
    # ------------------------------------------------------------------

    def on_click(self, selector: str, handler: ClickHandler) -> None:
        """
        Run ``handler(document, element)`` whenever an element matching
        ``selector`` is clicked. Handlers may be plain functions or coroutines.
        """
        self._click_handlers.append((selector, handler))

    def mark_ready(self) -> None:
        self._ready.set()

    def set_html(self, html: str) -> None:
        """Replace the whole tree in place (single-page-app re-render)."""
        self.soup = BeautifulSoup(html, "html.parser")

    def fragment(self, html: str) -> Tag:
        """Parse a markup fragment into a node ready to insert into this tree."""
        fragment = BeautifulSoup(html, "html.parser")
        node = next(child for child in fragment.contents if isinstance(child, Tag))
        return node.extract()

    def append_html(self, parent_selector: str, html: str) -> Tag:
        """Append a markup fragment as the last child of the matched parent."""
        parent = self._require(parent_selector)
        node = self.fragment(html)
        parent.append(node)
        return node

    def remove(self, reference: str) -> None:
        self._require(reference).decompose()

    def navigate(self, url: str, html: Optional[str] = None) -> None:
        """
        Load a new URL (and optionally new markup), then notify listeners.

        Listeners run as tasks, like browser load events, so a click handler
        may navigate while the interaction that triggered it is still running.
        Await ``settle`` to wait for them.
        """
        self.url = url
        if html is not None:
            self.set_html(html)
        logger.debug(f"Navigated to {url}")
        for callback in list(self._navigation_callbacks):
            task = asyncio.ensure_future(callback())
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def settle(self) -> None:
        """Wait for every pending navigation notification to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _require(self, reference: str) -> Tag:
        element = self.soup.select_one(reference)
        if element is None:
            raise ElementNotFoundError(reference)
        return element
