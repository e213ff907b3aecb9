"""
Bounded interaction executor.

``click`` performs one scroll-settle-click on a reference. ``click_all_matching``
repeats locate, click, and settle against the live tree until the matches run
out, a click fails, ``max_clicks`` is reached, or the caller cancels.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from .config import InteractionConfig
from .document.base import DocumentContext
from .exceptions import ElementNotFoundError
from .locator import ElementLocator
from .models import ActionResult, ClickAllReport, StopReason

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _preview(text: str, limit: int = 100) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[:limit] + "..."


class InteractionExecutor:
    """
    Clicks elements on a document. Never raises; failures are results.

    Parameters:
        locator (ElementLocator): Used by click-all to re-find targets each iteration.
        config (InteractionConfig): Delays and default click bound.
        sleep: Coroutine used for the settle delays.
    """

    def __init__(
        self,
        locator: Optional[ElementLocator] = None,
        config: Optional[InteractionConfig] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config or InteractionConfig()
        self.locator = locator or ElementLocator(self.config.tag_filter)
        self._sleep = sleep

    async def click(
        self,
        document: DocumentContext,
        reference: str,
        original_text: Optional[str] = None,
    ) -> ActionResult:
        """
        Scroll the referenced element into view, wait, and click it.

        Args:
            document: Document to act on
            reference: Selector from the locator
            original_text: Text to report the result under (defaults to the reference)
        """
        label = original_text if original_text is not None else reference
        try:
            text = await document.element_text(reference)
            if text is None:
                raise ElementNotFoundError(reference)

            await document.scroll_into_view(reference)
            await self._sleep(self.config.scroll_settle_delay)
            await document.dispatch_click(reference)
        except ElementNotFoundError:
            logger.warning(f"Click target vanished: {reference}")
            return ActionResult(original_text=label, message=f"element not found: `{reference}`", success=False)
        except Exception as e:
            logger.error(f"Click on {reference} failed: {e}")
            return ActionResult(
                original_text=label,
                message=f"click failed on `{reference}`: {e}",
                success=False,
            )

        logger.info(f"Clicked {reference}")
        return ActionResult(original_text=label, message=f'clicked: "{_preview(text)}"', success=True)

    async def click_all_matching(
        self,
        document: DocumentContext,
        query: str,
        max_clicks: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ClickAllReport:
        """
        Repeatedly click the top match for ``query`` until none remain.

        The tree is searched again on every iteration because each click may
        append new matches or remove the clicked one.

        Args:
            document: Document to act on
            query: Text to locate
            max_clicks: Upper bound on clicks (defaults to config.max_clicks)
            cancel_event: Checked at every iteration boundary
        """
        limit = self.config.max_clicks if max_clicks is None else max_clicks
        results: List[ActionResult] = []
        reason = StopReason.MAX_CLICKS

        while len(results) < limit:
            if cancel_event is not None and cancel_event.is_set():
                reason = StopReason.CANCELLED
                break

            matches = await self.locator.find(document, query)
            if not matches:
                reason = StopReason.EXHAUSTED
                break

            result = await self.click(document, matches[0].reference, original_text=query)
            results.append(result)
            if not result.success:
                reason = StopReason.FAILED
                break

            await self._sleep(self.config.click_settle_delay)

        logger.info(f"Click-all {query!r}: {len(results)} click(s), stopped: {reason.value}")
        return ClickAllReport(query=query, click_count=len(results), results=results, stopped_reason=reason)

    @staticmethod
    def aggregate(report: ClickAllReport, original_text: str) -> ActionResult:
        """Fold a click-all report into a single result."""
        if report.failed:
            last = report.results[-1]
            return ActionResult(
                original_text=original_text,
                message=f"stopped after {report.click_count} click(s): {last.message}",
                success=False,
            )
        if report.click_count == 0 and report.stopped_reason == StopReason.CANCELLED:
            return ActionResult(
                original_text=original_text,
                message=f"cancelled before clicking `{report.query}`",
                success=False,
            )
        if report.click_count == 0:
            return ActionResult(
                original_text=original_text,
                message=f"no elements found matching `{report.query}`",
                success=False,
            )
        return ActionResult(
            original_text=original_text,
            message=f"clicked {report.click_count} element(s) matching `{report.query}`",
            success=True,
        )
