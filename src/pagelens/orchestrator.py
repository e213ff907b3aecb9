"""
Serial execution of parsed actions.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from .document.base import DocumentContext
from .executor import InteractionExecutor
from .locator import ElementLocator
from .models import Action, ActionKind, ActionResult
from .parser import ActionParser

logger = logging.getLogger(__name__)


class ActionOrchestrator:
    """
    Runs actions one after another against a document.

    Actions never run concurrently: two interactions on the same tree could
    race on overlapping mutations. A failed action does not cancel the ones
    after it; the result list always has one entry per action, in order.
    """

    def __init__(
        self,
        locator: Optional[ElementLocator] = None,
        executor: Optional[InteractionExecutor] = None,
        parser: Optional[ActionParser] = None,
        lock: Optional[asyncio.Lock] = None,
    ):
        self.locator = locator or ElementLocator()
        self.executor = executor or InteractionExecutor(locator=self.locator)
        self.parser = parser or ActionParser()
        self._lock = lock or asyncio.Lock()

    async def execute(self, document: DocumentContext, actions: Sequence[Action]) -> List[ActionResult]:
        results: List[ActionResult] = []
        for index, action in enumerate(actions, start=1):
            logger.info(f"Action {index}/{len(actions)}: {action.kind.value} {action.target!r}")
            async with self._lock:
                try:
                    result = await self._execute_one(document, action)
                except Exception as e:
                    logger.error(f"Action {action.original_text!r} failed: {e}")
                    result = ActionResult(
                        original_text=action.original_text,
                        message=f"action failed: {e}",
                        success=False,
                    )
            results.append(result)
        return results

    async def execute_text(self, document: DocumentContext, text: str) -> List[ActionResult]:
        """Parse assistant text and execute whatever actions it requests."""
        actions = self.parser.parse(text)
        if not actions:
            logger.debug("No actions found in assistant text")
            return []
        return await self.execute(document, actions)

    async def _execute_one(self, document: DocumentContext, action: Action) -> ActionResult:
        if action.kind == ActionKind.CLICK_ALL:
            report = await self.executor.click_all_matching(document, action.target)
            return self.executor.aggregate(report, action.original_text)

        matches = await self.locator.find(document, action.target)
        if not matches:
            return ActionResult(
                original_text=action.original_text,
                message=f"no elements found matching `{action.target}`",
                success=False,
            )
        return await self.executor.click(document, matches[0].reference, original_text=action.original_text)
