"""
Value types exchanged between the pipeline components and their callers.

Snapshots, matches and results are immutable pydantic models; dumping them
with ``by_alias=True`` yields the camelCase shape the chat layer consumes
(``contentSource``, ``originalText`` ...).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContentSource(str, Enum):
    """Which extraction tier produced a snapshot's content."""
    SELECTOR_TAG = "selector-tag"
    BODY_FILTERED = "body-filtered"
    PARAGRAPHS = "paragraphs"
    DOCUMENT_TEXT = "document-text"
    ERROR = "error"


class ActionKind(str, Enum):
    """Single click on the best match, or repeated click-until-exhausted."""
    CLICK = "click"
    CLICK_ALL = "click-all"


class StopReason(str, Enum):
    """Why a click-all loop ended."""
    MAX_CLICKS = "max-clicks"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    CANCELLED = "cancelled"


class _ValueModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PageSnapshot(_ValueModel):
    """Plain-text snapshot of a page plus provenance."""

    title: str
    url: str
    content: str
    content_source: ContentSource
    timestamp: datetime = Field(default_factory=_utcnow)
    success: bool = True
    error: Optional[str] = None
    # Landmark selector that won the first tier, when it did
    matched_selector: Optional[str] = None


class ElementMatch(_ValueModel):
    """An element whose text matched a locator query."""

    text: str
    tag_name: str
    reference: str


class Action(_ValueModel):
    """An interaction requested in assistant text."""

    kind: ActionKind
    target: str
    original_text: str


class ActionResult(_ValueModel):
    """Outcome of one executed action."""

    original_text: str
    message: str
    success: bool


class ClickAllReport(_ValueModel):
    """Outcome of one click-all loop."""

    query: str
    click_count: int = 0
    results: List[ActionResult] = Field(default_factory=list)
    stopped_reason: StopReason = StopReason.EXHAUSTED

    @property
    def failed(self) -> bool:
        return self.stopped_reason == StopReason.FAILED


@dataclass(frozen=True)
class ChangeFingerprint:
    """Cheap summary used to decide whether a page changed."""
    url: str
    content_prefix: str
