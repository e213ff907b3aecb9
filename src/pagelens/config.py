"""
Configuration for the extraction, change detection and interaction pipeline.

All timing values are in seconds.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Tuple

from .exceptions import ConfigurationError


# Landmarks tried by the first extraction tier, most specific first
DEFAULT_CONTENT_SELECTORS = [
    "main",
    "article",
    '[role="main"]',
    ".content",
    ".main-content",
    "#content",
    "#main",
    ".post-content",
    ".entry-content",
    ".article-content",
    ".page-content",
]

# Regions stripped from the body copy in the filtered-body tier
DEFAULT_NON_CONTENT_SELECTORS = [
    "nav", "header", "footer", "aside",
    ".nav", ".navigation", ".header", ".footer", ".sidebar",
    ".menu", ".ads", ".advertisement", ".social-media",
    ".comments", ".comment-section", ".related-posts",
    "script", "style", "noscript", "iframe",
    '[role="banner"]', '[role="navigation"]', '[role="contentinfo"]',
    ".cookie-notice", ".popup", ".modal", ".overlay",
]

DEFAULT_PARAGRAPH_SELECTORS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li"]

DEFAULT_TAG_FILTER: Tuple[str, ...] = ("button", "a", "span", "div")

TRUNCATION_MARKER = "...[content truncated]"
NO_CONTENT_TEXT = "No readable content found"
EXTRACTION_ERROR_TEXT = (
    "Error: Could not extract page content. This might be a protected page "
    "or the content is dynamically loaded."
)


@dataclass
class ExtractionConfig:
    """Thresholds and selector sets for the content extraction cascade."""

    content_selectors: List[str] = field(default_factory=lambda: DEFAULT_CONTENT_SELECTORS.copy())
    non_content_selectors: List[str] = field(default_factory=lambda: DEFAULT_NON_CONTENT_SELECTORS.copy())
    paragraph_selectors: List[str] = field(default_factory=lambda: DEFAULT_PARAGRAPH_SELECTORS.copy())

    landmark_min_length: int = 100   # landmark text must be longer than this
    body_min_length: int = 100       # below this the filtered-body tier runs
    paragraph_threshold: int = 50    # below this, aggregate paragraphs
    fragment_min_length: int = 10    # paragraph fragments must be longer than this
    raw_threshold: int = 20          # below this, fall back to raw document text

    max_length: int = 4000
    truncation_marker: str = TRUNCATION_MARKER
    no_content_text: str = NO_CONTENT_TEXT
    error_text: str = EXTRACTION_ERROR_TEXT
    default_title: str = "Untitled Page"


@dataclass
class DetectorConfig:
    """Configuration for the polling change detector."""

    poll_interval: float = 2.0
    prefix_length: int = 1000


@dataclass
class InteractionConfig:
    """Delays and bounds for the interaction executor."""

    scroll_settle_delay: float = 0.5   # between scroll-into-view and click
    click_settle_delay: float = 2.0    # between iterations of click-all
    max_clicks: int = 10
    tag_filter: Tuple[str, ...] = DEFAULT_TAG_FILTER


@dataclass
class PageLensConfig:
    """Top-level configuration for a page session."""

    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)

    # Delay before refreshing the snapshot after a navigation notification
    navigation_refresh_delay: float = 0.5

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageLensConfig":
        """
        Build a configuration from a plain (e.g. YAML/JSON-loaded) mapping.

        Nested sections ``extraction``, ``detector`` and ``interaction`` map onto
        their dataclasses; any unknown key raises ConfigurationError.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}",
                field_name="<root>",
            )
        sections = {
            "extraction": ExtractionConfig,
            "detector": DetectorConfig,
            "interaction": InteractionConfig,
        }
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key in sections:
                kwargs[key] = _build_section(sections[key], key, value)
            elif key == "navigation_refresh_delay":
                kwargs[key] = float(value)
            else:
                raise ConfigurationError(f"Unknown configuration key: {key}", field_name=key)
        return cls(**kwargs)

    @classmethod
    def immediate(cls) -> "PageLensConfig":
        """Configuration with every delay set to zero (offline documents, tests)."""
        return cls(
            detector=DetectorConfig(poll_interval=0.01),
            interaction=InteractionConfig(scroll_settle_delay=0.0, click_settle_delay=0.0),
            navigation_refresh_delay=0.0,
        )


def _build_section(section_cls, section_name: str, value: Any):
    if isinstance(value, section_cls):
        return value
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"Section '{section_name}' must be a mapping, got {type(value).__name__}",
            field_name=section_name,
        )

    known = {f.name for f in fields(section_cls)}
    unknown = set(value) - known
    if unknown:
        name = sorted(unknown)[0]
        raise ConfigurationError(
            f"Unknown key '{name}' in section '{section_name}'",
            field_name=f"{section_name}.{name}",
        )

    kwargs = dict(value)
    if "tag_filter" in kwargs:
        kwargs["tag_filter"] = tuple(kwargs["tag_filter"])
    return section_cls(**kwargs)
