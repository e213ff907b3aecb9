"""
Tests for pagelens.config and pagelens.exceptions.
"""

import pytest

from pagelens.config import (
    DEFAULT_TAG_FILTER,
    DetectorConfig,
    ExtractionConfig,
    InteractionConfig,
    PageLensConfig,
)
from pagelens.exceptions import (
    ConfigurationError,
    DocumentError,
    DocumentNotReadyError,
    ElementNotFoundError,
    InteractionError,
    PageLensError,
)


# =============================================================================
# Configuration Tests
# =============================================================================

class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = PageLensConfig()

        assert config.detector.poll_interval == 2.0
        assert config.detector.prefix_length == 1000
        assert config.extraction.max_length == 4000
        assert config.extraction.content_selectors[0] == "main"
        assert config.interaction.max_clicks == 10
        assert config.interaction.scroll_settle_delay == 0.5
        assert config.interaction.click_settle_delay == 2.0
        assert config.interaction.tag_filter == DEFAULT_TAG_FILTER
        assert config.navigation_refresh_delay == 0.5

    def test_selector_lists_not_shared(self):
        """Test each config owns its selector lists."""
        first, second = ExtractionConfig(), ExtractionConfig()
        first.content_selectors.append(".story")

        assert ".story" not in second.content_selectors

    def test_immediate(self):
        config = PageLensConfig.immediate()

        assert config.interaction.scroll_settle_delay == 0.0
        assert config.interaction.click_settle_delay == 0.0
        assert config.navigation_refresh_delay == 0.0
        assert config.detector.poll_interval > 0


class TestFromDict:
    """Tests for PageLensConfig.from_dict."""

    def test_nested_sections(self):
        config = PageLensConfig.from_dict({
            "detector": {"poll_interval": 5},
            "interaction": {"max_clicks": 3, "tag_filter": ["button", "a"]},
            "extraction": {"max_length": 100},
            "navigation_refresh_delay": 1,
        })

        assert config.detector == DetectorConfig(poll_interval=5, prefix_length=1000)
        assert config.interaction.max_clicks == 3
        assert config.interaction.tag_filter == ("button", "a")
        assert config.extraction.max_length == 100
        assert config.navigation_refresh_delay == 1.0

    def test_empty_mapping(self):
        assert PageLensConfig.from_dict({}) == PageLensConfig()

    def test_unknown_top_level_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            PageLensConfig.from_dict({"polling": 1})

        assert exc_info.value.field_name == "polling"
        assert exc_info.value.error_code == "CONFIGURATION_ERROR"

    def test_unknown_section_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            PageLensConfig.from_dict({"interaction": {"max_click": 3}})

        assert exc_info.value.field_name == "interaction.max_click"

    def test_top_level_must_be_mapping(self):
        with pytest.raises(ConfigurationError) as exc_info:
            PageLensConfig.from_dict(["detector"])

        assert exc_info.value.field_name == "<root>"

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            PageLensConfig.from_dict({"detector": 2})

    def test_section_instance_accepted(self):
        section = InteractionConfig(max_clicks=1)

        assert PageLensConfig.from_dict({"interaction": section}).interaction is section


# =============================================================================
# Exception Tests
# =============================================================================

class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        assert issubclass(ConfigurationError, PageLensError)
        assert issubclass(DocumentNotReadyError, DocumentError)
        assert issubclass(ElementNotFoundError, DocumentError)
        assert issubclass(InteractionError, DocumentError)

    def test_element_not_found(self):
        error = ElementNotFoundError("#more")

        assert str(error) == "[ELEMENT_NOT_FOUND_ERROR] element not found: `#more`"
        assert error.reference == "#more"
        assert error.context == {"reference": "#more"}
        assert error.suggestion is not None

    def test_not_ready_context(self):
        error = DocumentNotReadyError(url="https://example.org", timeout=5)

        assert error.context == {"url": "https://example.org", "timeout": 5}
        assert error.user_message == "The page has not finished loading."

    def test_to_dict(self):
        data = InteractionError("element is disabled: `#go`", reference="#go").to_dict()

        assert data["error_type"] == "InteractionError"
        assert data["error_code"] == "INTERACTION_ERROR"
        assert data["message"] == "element is disabled: `#go`"
        assert data["context"] == {"reference": "#go"}
        assert "timestamp" in data

    def test_document_error_custom_code(self):
        error = DocumentError("lost", error_code="CUSTOM")

        assert error.error_code == "CUSTOM"
