"""
Live document backed by a Playwright page.
"""

import asyncio
import logging
from typing import List, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..exceptions import DocumentNotReadyError, ElementNotFoundError, InteractionError
from .base import DocumentContext, NavigationCallback

logger = logging.getLogger(__name__)

BODY_TEXT_JS = "() => (document.body ? document.body.innerText : '')"


class PlaywrightDocument(DocumentContext):
    """
    Document context for a page in a real browser.

    Wrap an existing ``Page`` directly, or use ``launch`` to have this object
    own the whole Playwright/browser/context lifecycle (closed by ``close``).

    Parameters:
        page (Page): The page to operate on.
        timeout_ms (int): Timeout for load waits, scrolling and clicks.
    """

    def __init__(
        self,
        page: Page,
        timeout_ms: int = 5000,
        playwright: Optional[Playwright] = None,
        browser: Optional[Browser] = None,
        context: Optional[BrowserContext] = None,
    ) -> None:
        self.page = page
        self.timeout_ms = timeout_ms
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self._navigation_callbacks: List[NavigationCallback] = []
        self._pending: set = set()

        self.page.on("load", self._on_load)

    @classmethod
    async def launch(
        cls,
        url: Optional[str] = None,
        headless: bool = True,
        browser_channel: Optional[str] = None,
        viewport_width: int = 1280,
        viewport_height: int = 720,
        timeout_ms: int = 5000,
    ) -> "PlaywrightDocument":
        """
        Start Playwright, open a Chromium page and optionally navigate to ``url``.

        Returns:
            PlaywrightDocument: A document owning its browser.
        """
        playwright = await async_playwright().start()
        launch_kwargs = {"headless": headless}
        if browser_channel:
            launch_kwargs["channel"] = browser_channel
        browser = await playwright.chromium.launch(**launch_kwargs)
        context = await browser.new_context(
            viewport={"width": viewport_width, "height": viewport_height}
        )
        page = await context.new_page()
        document = cls(page, timeout_ms=timeout_ms, playwright=playwright, browser=browser, context=context)

        if url:
            try:
                await document.goto(url)
            except DocumentNotReadyError:
                await document.close()
                raise
        return document

    async def goto(self, url: str) -> None:
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms * 6)
        except PlaywrightTimeoutError as e:
            raise DocumentNotReadyError(url=url, timeout=self.timeout_ms * 6 / 1000) from e

    async def close(self) -> None:
        """Close whatever this document owns."""
        for task in list(self._pending):
            task.cancel()
        if self.context is not None:
            await self.context.close()
        if self.browser is not None:
            await self.browser.close()
        if self.playwright is not None:
            await self.playwright.stop()

    # ------------------------------------------------------------------
    # DocumentContext
    # ------------------------------------------------------------------

    async def get_url(self) -> str:
        return self.page.url

    async def get_title(self) -> str:
        return await self.page.title()

    async def get_html(self) -> str:
        return await self.page.content()

    async def get_body_text(self) -> str:
        return await self.page.evaluate(BODY_TEXT_JS)

    async def wait_until_ready(self) -> None:
        try:
            await self.page.wait_for_load_state("domcontentloaded", timeout=self.timeout_ms)
        except PlaywrightTimeoutError as e:
            raise DocumentNotReadyError(url=self.page.url, timeout=self.timeout_ms / 1000) from e

    async def element_text(self, reference: str) -> Optional[str]:
        element = await self.page.query_selector(reference)
        if element is None:
            return None
        return (await element.inner_text()).strip()

    async def scroll_into_view(self, reference: str) -> None:
        element = await self._require(reference)
        try:
            await element.scroll_into_view_if_needed(timeout=self.timeout_ms)
        except PlaywrightError as e:
            raise InteractionError(f"could not scroll: {e.message}", reference=reference) from e

    async def dispatch_click(self, reference: str) -> None:
        element = await self._require(reference)
        try:
            await element.click(timeout=self.timeout_ms)
        except PlaywrightError as e:
            raise InteractionError(e.message, reference=reference) from e

    def on_navigation(self, callback: NavigationCallback) -> None:
        self._navigation_callbacks.append(callback)

    # ------------------------------------------------------------------

    async def _require(self, reference: str):
        element = await self.page.query_selector(reference)
        if element is None:
            raise ElementNotFoundError(reference)
        return element

    def _on_load(self, page: Page) -> None:
        logger.debug(f"Page load complete: {page.url}")
        for callback in list(self._navigation_callbacks):
            task = asyncio.ensure_future(callback())
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
