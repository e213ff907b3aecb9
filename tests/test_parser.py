"""
Tests for pagelens.parser.

This module tests:
- The documented example sentences
- Pattern-table ordering and the absence of de-duplication
- Custom pattern tables
"""

import pytest

from pagelens.exceptions import ActionParseError
from pagelens.models import Action, ActionKind
from pagelens.parser import DEFAULT_PATTERNS, ActionParser, ActionPattern, parse_actions


class TestParseExamples:
    """Tests for representative assistant replies."""

    def test_quoted_click(self):
        """Test a quoted click target becomes one click action."""
        actions = parse_actions("I'll click the 'Show More' button to load content")

        assert actions == [
            Action(kind=ActionKind.CLICK, target="Show More", original_text="click the 'Show More'")
        ]

    def test_click_all(self):
        """Test 'click all' becomes one click-all action."""
        actions = parse_actions("Let me click all the pagination buttons")

        assert len(actions) == 1
        assert actions[0].kind == ActionKind.CLICK_ALL
        assert actions[0].target == "the pagination buttons"

    @pytest.mark.parametrize(
        "text, target",
        [
            ('Press "Next"', "Next"),
            ("tap on 'Accept cookies'", "Accept cookies"),
            ("CLICK ON THE “Subscribe” button", "Subscribe"),
        ],
    )
    def test_click_verbs(self, text, target):
        """Test every click verb and quote style."""
        actions = parse_actions(text)

        assert [(a.kind, a.target) for a in actions] == [(ActionKind.CLICK, target)]

    def test_find_is_a_click(self):
        """Test find/locate/look for produce click actions."""
        actions = parse_actions("Let me look for 'Pricing' and locate the \"FAQ\" section.")

        assert [(a.kind, a.target) for a in actions] == [
            (ActionKind.CLICK, "Pricing"),
            (ActionKind.CLICK, "FAQ"),
        ]

    @pytest.mark.parametrize("verb", ["show", "load", "expand", "click"])
    def test_click_all_verbs(self, verb):
        """Test every click-all verb, ending at sentence punctuation."""
        actions = parse_actions(f"I will {verb} all comments. Then summarize.")

        assert [(a.kind, a.target) for a in actions] == [(ActionKind.CLICK_ALL, "comments")]

    def test_click_all_quoted_target_unwrapped(self):
        """Test an entirely quoted click-all target loses its quotes."""
        actions = parse_actions("Now expand all 'Read more'")

        assert actions[-1].target == "Read more"

    def test_quoted_target_with_all_is_click_all(self):
        """Test the kind follows the word 'all' in the matched phrase."""
        actions = parse_actions("click 'Show all'")

        assert actions == [
            Action(kind=ActionKind.CLICK_ALL, target="Show all", original_text="click 'Show all'")
        ]

    def test_no_actions(self):
        """Test plain prose yields nothing."""
        assert parse_actions("This page describes the history of the city.") == []
        assert parse_actions("") == []


class TestOrdering:
    """Tests for pattern ordering and duplicates."""

    def test_pattern_order_before_text_order(self):
        """Test results are grouped by pattern, then by position."""
        actions = parse_actions("Show all replies. Then click 'Next'. Then find 'Footer'.")

        assert [(a.kind, a.target) for a in actions] == [
            (ActionKind.CLICK, "Next"),
            (ActionKind.CLICK, "Footer"),
            (ActionKind.CLICK_ALL, "replies"),
        ]

    def test_no_deduplication(self):
        """Test a phrase matched by two patterns yields two actions."""
        actions = parse_actions("click 'Next' then click 'Next' again")

        assert [a.target for a in actions] == ["Next", "Next"]

    def test_overlapping_patterns(self):
        """Test the same words may be picked up by two patterns."""
        actions = parse_actions("click all \"Load more\" and click \"Load more\"")

        assert [(a.kind, a.target) for a in actions] == [
            (ActionKind.CLICK, "Load more"),
            (ActionKind.CLICK_ALL, "\"Load more\" and click \"Load more\""),
        ]


class TestCustomPatterns:
    """Tests for pattern tables."""

    def test_default_table_names(self):
        assert [p.name for p in DEFAULT_PATTERNS] == ["click", "find", "click-all"]

    def test_extra_pattern(self):
        """Test a new row can be appended independently."""
        parser = ActionParser(DEFAULT_PATTERNS + (ActionPattern.compile("open", r"\bopen\s+'([^']+)'"),))

        actions = parser.parse("open 'Settings'")

        assert [(a.kind, a.target) for a in actions] == [(ActionKind.CLICK, "Settings")]

    def test_pattern_without_group_rejected(self):
        with pytest.raises(ActionParseError):
            ActionPattern.compile("broken", r"click")
