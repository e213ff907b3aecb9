"""
Change detection for a single document context.

The detector polls the document on a fixed interval and compares a cheap
fingerprint (URL + leading body text) with the last one it saw. Extraction
only runs, and a PageContentChanged event is only emitted, when the
fingerprint differs. This catches in-place single-page-app updates that a
URL-only check would miss.
"""

import asyncio
import logging
from typing import Optional

from .config import DetectorConfig
from .document.base import DocumentContext
from .events import EventBus, Listener, PageContentChanged
from .extractor import ContentExtractor
from .models import ChangeFingerprint, PageSnapshot

logger = logging.getLogger(__name__)


class ChangeDetector:
    """
    Polls one document and emits PageContentChanged on real changes.

    The stored fingerprint is owned by this instance; run one detector per
    document context. Pass the same ``lock`` the interaction layer uses so a
    tick never interleaves with a multi-step click sequence.
    """

    def __init__(
        self,
        document: DocumentContext,
        extractor: Optional[ContentExtractor] = None,
        config: Optional[DetectorConfig] = None,
        event_bus: Optional[EventBus] = None,
        lock: Optional[asyncio.Lock] = None,
    ):
        self.document = document
        self.extractor = extractor or ContentExtractor()
        self.config = config or DetectorConfig()
        self.event_bus = event_bus or EventBus()
        self._lock = lock or asyncio.Lock()
        self._fingerprint: Optional[ChangeFingerprint] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def fingerprint(self) -> Optional[ChangeFingerprint]:
        return self._fingerprint

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, listener: Listener) -> None:
        self.event_bus.subscribe(PageContentChanged, listener)

    async def start(self) -> None:
        """Wait for the document to load, check once, then poll."""
        if self.running:
            return
        await self.document.wait_until_ready()
        await self.reset()
        await self.check()
        self._task = asyncio.create_task(self._poll())
        logger.debug(f"Change detector started (interval={self.config.poll_interval}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug("Change detector stopped")

    async def reset(self) -> None:
        """
        Re-initialise the fingerprint from the current URL with no content seen,
        so the next check reports the page as changed.
        """
        self._fingerprint = ChangeFingerprint(url=await self.document.get_url(), content_prefix="")

    async def compute_fingerprint(self) -> ChangeFingerprint:
        body_text = await self.document.get_body_text()
        return ChangeFingerprint(
            url=await self.document.get_url(),
            content_prefix=body_text[: self.config.prefix_length],
        )

    async def check(self) -> Optional[PageSnapshot]:
        """
        Compare the current fingerprint with the stored one.

        Returns:
            The fresh snapshot when a change was detected and emitted, else None.
        """
        async with self._lock:
            try:
                current = await self.compute_fingerprint()
            except Exception as e:
                logger.warning(f"Skipping change check, document unreadable: {e}")
                return None

            if current == self._fingerprint:
                return None

            self._fingerprint = current
            snapshot = await self.extractor.extract(self.document)

        logger.info(f"Page content changed: {current.url}")
        await self.event_bus.emit(PageContentChanged(snapshot=snapshot, fingerprint=current))
        return snapshot

    async def notify_mutation(self) -> Optional[PageSnapshot]:
        """Immediate check, for callers that observe mutations instead of polling."""
        return await self.check()

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.config.poll_interval)
            await self.check()
