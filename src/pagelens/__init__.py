"""
PageLens - page content extraction and bounded interaction for AI assistants

Extracts readable text from a live or static document, detects when it
changes, locates elements by fuzzy text, and executes click / click-all
actions parsed from assistant replies.
"""

__version__ = "0.1.0"

from .config import (
    DetectorConfig,
    ExtractionConfig,
    InteractionConfig,
    PageLensConfig,
)
from .detector import ChangeDetector
from .document import DocumentContext, PlaywrightDocument, StaticDocument
from .events import EventBus, PageContentChanged
from .executor import InteractionExecutor
from .extractor import ContentExtractor
from .locator import ElementLocator, build_reference
from .models import (
    Action,
    ActionKind,
    ActionResult,
    ChangeFingerprint,
    ClickAllReport,
    ContentSource,
    ElementMatch,
    PageSnapshot,
    StopReason,
)
from .orchestrator import ActionOrchestrator
from .parser import ActionParser, ActionPattern, parse_actions
from .session import PageSession

__all__ = [
    "__version__",
    # Configuration
    "DetectorConfig",
    "ExtractionConfig",
    "InteractionConfig",
    "PageLensConfig",
    # Documents
    "DocumentContext",
    "PlaywrightDocument",
    "StaticDocument",
    # Pipeline
    "ContentExtractor",
    "ChangeDetector",
    "ElementLocator",
    "build_reference",
    "InteractionExecutor",
    "ActionParser",
    "ActionPattern",
    "parse_actions",
    "ActionOrchestrator",
    "PageSession",
    # Events
    "EventBus",
    "PageContentChanged",
    # Models
    "Action",
    "ActionKind",
    "ActionResult",
    "ChangeFingerprint",
    "ClickAllReport",
    "ContentSource",
    "ElementMatch",
    "PageSnapshot",
    "StopReason",
]
