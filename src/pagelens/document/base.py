"""
Document context interface.

A document context is the only way the pipeline touches a page. Every call is
a coroutine: against a live browser each one is a round trip to the page, and
the pipeline suspends on it.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from bs4 import BeautifulSoup

NavigationCallback = Callable[[], Awaitable[None]]


class DocumentContext(ABC):
    """
    Read, query and act on one loaded document.

    References passed to ``element_text``, ``scroll_into_view`` and
    ``dispatch_click`` are CSS selectors resolved with ``querySelector``
    semantics (first match in document order).
    """

    @abstractmethod
    async def get_url(self) -> str:
        """Current URL of the document."""

    @abstractmethod
    async def get_title(self) -> str:
        """Document title, empty when the page has none."""

    @abstractmethod
    async def get_html(self) -> str:
        """Serialized current document tree."""

    @abstractmethod
    async def get_body_text(self) -> str:
        """Rendered text of the body."""

    @abstractmethod
    async def wait_until_ready(self) -> None:
        """Return once the document finished loading."""

    @abstractmethod
    async def element_text(self, reference: str) -> Optional[str]:
        """Rendered text of the referenced element, or None when it is absent."""

    @abstractmethod
    async def scroll_into_view(self, reference: str) -> None:
        """
        Bring the referenced element into view.

        Raises:
            ElementNotFoundError: If the reference does not resolve
        """

    @abstractmethod
    async def dispatch_click(self, reference: str) -> None:
        """
        Click the referenced element.

        Raises:
            ElementNotFoundError: If the reference does not resolve
            InteractionError: If the element refused the click
        """

    @abstractmethod
    def on_navigation(self, callback: NavigationCallback) -> None:
        """Register a coroutine callback fired after navigation or page load completes."""

    async def get_tree(self) -> BeautifulSoup:
        """Parsed copy of the current document tree."""
        return BeautifulSoup(await self.get_html(), "html.parser")
