"""
PageSession: the caller-facing surface for one document context.

Wires extractor, detector, locator, executor and orchestrator around a single
lock and event bus, and exposes the request/response operations the chat
layer uses plus the "page content changed" event.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from .config import PageLensConfig
from .detector import ChangeDetector
from .document.base import DocumentContext
from .events import EventBus, Listener, PageContentChanged
from .executor import InteractionExecutor
from .extractor import ContentExtractor
from .locator import ElementLocator
from .models import ActionResult, ClickAllReport, ElementMatch, PageSnapshot
from .orchestrator import ActionOrchestrator
from .parser import ActionParser

logger = logging.getLogger(__name__)


class PageSession:
    """
    All pipeline operations for one document.

    Usage:
        async with PageSession(document) as session:
            snapshot = await session.get_snapshot()
            results = await session.execute_actions(assistant_reply)
    """

    def __init__(
        self,
        document: DocumentContext,
        config: Optional[PageLensConfig] = None,
        parser: Optional[ActionParser] = None,
        sleep=asyncio.sleep,
    ):
        self.document = document
        self.config = config or PageLensConfig()
        self._sleep = sleep

        # Single-flight per document: detector ticks and interactions never overlap
        self.lock = asyncio.Lock()
        self.event_bus = EventBus()

        self.extractor = ContentExtractor(self.config.extraction)
        self.locator = ElementLocator(self.config.interaction.tag_filter)
        self.executor = InteractionExecutor(self.locator, self.config.interaction, sleep=sleep)
        self.orchestrator = ActionOrchestrator(self.locator, self.executor, parser, lock=self.lock)
        self.detector = ChangeDetector(
            document,
            self.extractor,
            self.config.detector,
            event_bus=self.event_bus,
            lock=self.lock,
        )

        document.on_navigation(self._on_navigation)

    async def __aenter__(self) -> "PageSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def start(self) -> None:
        await self.detector.start()

    async def stop(self) -> None:
        await self.detector.stop()

    def subscribe(self, listener: Listener) -> None:
        """Receive PageContentChanged events."""
        self.event_bus.subscribe(PageContentChanged, listener)

    def unsubscribe(self, listener: Listener) -> None:
        self.event_bus.unsubscribe(PageContentChanged, listener)

    # ------------------------------------------------------------------
    # Request/response operations
    # ------------------------------------------------------------------

    async def get_snapshot(self) -> PageSnapshot:
        async with self.lock:
            return await self.extractor.extract(self.document)

    async def find_elements(self, query: str, tag_filter: Optional[Sequence[str]] = None) -> List[ElementMatch]:
        async with self.lock:
            return await self.locator.find(self.document, query, tag_filter)

    async def click(self, reference: str) -> ActionResult:
        async with self.lock:
            return await self.executor.click(self.document, reference)

    async def click_all(
        self,
        query: str,
        max_clicks: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ClickAllReport:
        async with self.lock:
            return await self.executor.click_all_matching(
                self.document, query, max_clicks=max_clicks, cancel_event=cancel_event
            )

    async def execute_actions(self, text: str) -> List[ActionResult]:
        """Parse assistant text and run the requested actions in order."""
        return await self.orchestrator.execute_text(self.document, text)

    # ------------------------------------------------------------------

    async def _on_navigation(self) -> None:
        # Give the new page a moment before reading it
        await self._sleep(self.config.navigation_refresh_delay)
        logger.info("Navigation detected, refreshing page context")
        try:
            await self.detector.reset()
        except Exception as e:
            logger.warning(f"Could not refresh page context after navigation: {e}")
            return
        await self.detector.check()
