"""Document contexts: the page-facing side of the pipeline."""

from .base import DocumentContext, NavigationCallback
from .playwright_page import PlaywrightDocument
from .static import StaticDocument

__all__ = [
    "DocumentContext",
    "NavigationCallback",
    "PlaywrightDocument",
    "StaticDocument",
]
