"""
Tests for pagelens.locator.

This module tests:
- Text / aria-label matching rules
- Ordering by tag filter, then document order
- Reference synthesis priority
"""

import pytest
from bs4 import BeautifulSoup

from pagelens.document import StaticDocument
from pagelens.locator import ElementLocator, build_reference


def element(html: str, selector: str):
    return BeautifulSoup(html, "html.parser").select_one(selector)


# =============================================================================
# Matching Tests
# =============================================================================

class TestMatching:
    """Tests for which elements match a query."""

    @pytest.mark.asyncio
    async def test_button_ranked_before_div(self):
        """Test tag-filter order decides the top match."""
        document = StaticDocument(
            "<body><div>Show more details</div><button>Show more</button></body>"
        )

        matches = await ElementLocator().find(document, "show more")

        assert [m.tag_name for m in matches] == ["button", "div"]
        assert matches[0].text == "Show more"
        assert matches[1].text == "Show more details"

    @pytest.mark.asyncio
    async def test_case_and_whitespace_insensitive(self):
        """Test query and text are normalized before comparison."""
        document = StaticDocument("<body><a href='#'>  LOAD   More  </a></body>")

        matches = await ElementLocator().find(document, "  load more ")

        assert len(matches) == 1
        assert matches[0].tag_name == "a"
        assert matches[0].text == "LOAD More"

    @pytest.mark.asyncio
    async def test_aria_label_match(self):
        """Test icon buttons are found by their accessible label."""
        document = StaticDocument('<body><button aria-label="Close dialog">×</button></body>')

        matches = await ElementLocator().find(document, "close")

        assert len(matches) == 1
        assert matches[0].reference == "button:nth-child(1)"

    @pytest.mark.asyncio
    async def test_document_order_within_tag(self):
        """Test matches of the same tag keep document order."""
        document = StaticDocument(
            '<body><button id="b1">Next page</button><button id="b2">Next</button></body>'
        )

        matches = await ElementLocator().find(document, "next")

        assert [m.reference for m in matches] == ["#b1", "#b2"]

    @pytest.mark.asyncio
    async def test_tags_outside_filter_ignored(self):
        """Test only filtered tags are searched."""
        document = StaticDocument("<body><p>Show more</p><li>Show more</li></body>")

        assert await ElementLocator().find(document, "show more") == []

    @pytest.mark.asyncio
    async def test_custom_tag_filter(self):
        """Test a per-call tag filter overrides the default."""
        document = StaticDocument("<body><li>Show more</li><button>Show more</button></body>")

        matches = await ElementLocator().find(document, "show more", tag_filter=["li"])

        assert [m.tag_name for m in matches] == ["li"]

    @pytest.mark.asyncio
    async def test_hidden_elements_skipped(self):
        """Test elements that are not rendered are not offered."""
        document = StaticDocument(
            '<body><div hidden><button>Show more</button></div>'
            '<button style="display: none">Show more</button></body>'
        )

        assert await ElementLocator().find(document, "show more") == []

    @pytest.mark.asyncio
    async def test_empty_query_matches_nothing(self):
        """Test a blank query yields no matches."""
        document = StaticDocument("<body><button>Anything</button></body>")

        assert await ElementLocator().find(document, "   ") == []

    @pytest.mark.asyncio
    async def test_lookup_failure_returns_empty(self, mocker):
        """Test locator errors never propagate."""
        document = StaticDocument("<body><button>Go</button></body>")
        mocker.patch.object(document, "get_tree", side_effect=RuntimeError("detached"))

        assert await ElementLocator().find(document, "go") == []


# =============================================================================
# Reference Tests
# =============================================================================

class TestBuildReference:
    """Tests for reference synthesis."""

    def test_id_wins(self):
        """Test an id always produces #id regardless of class or position."""
        el = element('<div><span></span><a id="more-1" class="btn primary">More</a></div>', "a")

        assert build_reference(el) == "#more-1"

    def test_classes(self):
        """Test class names produce a compound selector."""
        el = element('<div><button class="btn  load-more">More</button></div>', "button")

        assert build_reference(el) == "button.btn.load-more"

    def test_positional_fallback(self):
        """Test tag:nth-child(n) counts element siblings only."""
        el = element("<div>text<a>first</a> more text <span>second</span></div>", "span")

        assert build_reference(el) == "span:nth-child(2)"

    def test_empty_id_ignored(self):
        """Test a blank id falls through to the next rule."""
        el = element('<div><button id="" class="go">Go</button></div>', "button")

        assert build_reference(el) == "button.go"

    def test_special_characters_escaped(self):
        """Test ids that are not plain identifiers are CSS-escaped."""
        el = element('<div><button id="item:1">Go</button></div>', "button")

        reference = build_reference(el)

        assert reference == "#item\\:1"
        assert BeautifulSoup('<div><button id="item:1">Go</button></div>', "html.parser").select_one(reference) is not None

    @pytest.mark.asyncio
    async def test_reference_resolves_to_same_element(self):
        """Test a reference from find() resolves back on the live document."""
        document = StaticDocument(
            "<body><div><span>Intro</span><span>Read more</span></div></body>"
        )

        matches = await ElementLocator().find(document, "read more", tag_filter=["span"])

        assert matches[0].reference == "span:nth-child(2)"
        assert await document.element_text(matches[0].reference) == "Read more"

    def test_shared_class_falls_back_to_position(self):
        """Test a class reference is not used when an earlier element shares it."""
        tree = BeautifulSoup(
            '<body><div><button class="btn">Cancel</button><button class="btn">Show more</button></div></body>',
            "html.parser",
        )
        cancel, show_more = tree.find_all("button")

        assert build_reference(cancel) == "button.btn"
        assert build_reference(show_more) == "button:nth-child(2)"
        assert tree.select_one(build_reference(show_more)) is show_more

    def test_duplicate_id_not_trusted(self):
        """Test a repeated id only identifies its first owner."""
        tree = BeautifulSoup('<div><a id="x">One</a><a id="x">Two</a></div>', "html.parser")
        first, second = tree.find_all("a")

        assert build_reference(first) == "#x"
        assert build_reference(second) == "a:nth-child(2)"

    def test_ambiguous_position_chained_under_parent(self):
        """Test positional references climb the tree until they are unambiguous."""
        tree = BeautifulSoup(
            "<body><section><div><p>a</p></div></section>"
            "<section><div><p>b</p></div></section></body>",
            "html.parser",
        )
        second = tree.find_all("p")[1]

        reference = build_reference(second)

        assert reference == "section:nth-child(2) > div:nth-child(1) > p:nth-child(1)"
        assert tree.select_one(reference) is second

    def test_every_reference_resolves_to_its_element(self):
        """Test first-match resolution returns the same element for a whole page."""
        tree = BeautifulSoup(
            "<body><nav><a class='link'>Home</a><a class='link'>Docs</a></nav>"
            "<main><div><span>x</span><span>y</span></div><div><span>z</span></div>"
            "<ul><li><a>1</a></li><li><a>2</a></li></ul></main></body>",
            "html.parser",
        )

        for el in tree.find_all(True):
            assert tree.select_one(build_reference(el)) is el

    @pytest.mark.asyncio
    async def test_reference_for_repeated_structure(self):
        """Test the second of two identical containers gets its own reference."""
        document = StaticDocument(
            "<body><div><span>Intro</span></div><div><span>Read more</span></div></body>"
        )

        matches = await ElementLocator().find(document, "read more", tag_filter=["span"])

        assert matches[0].reference == "div:nth-child(2) > span:nth-child(1)"
        assert await document.element_text(matches[0].reference) == "Read more"
