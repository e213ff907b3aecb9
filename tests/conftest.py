"""
Shared fixtures for the pagelens test-suite.

Everything runs against StaticDocument with zero delays, so no browser is
needed.
"""

import pytest

from pagelens.config import PageLensConfig
from pagelens.document import StaticDocument


class RecordingSleep:
    """Sleep stand-in that records requested delays."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def config():
    return PageLensConfig.immediate()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def load_more_document():
    """
    Page with one "Load more" button; each click removes it and appends the
    next one, until five have been clicked.
    """
    document = StaticDocument(
        '<html><head><title>Feed</title></head><body>'
        '<div id="feed"><p>Item 1</p></div>'
        '<div id="controls"><button class="load-more">Load more</button></div>'
        '</body></html>',
        url="https://example.org/feed",
    )
    state = {"clicked": 0}

    def handler(doc, element):
        state["clicked"] += 1
        element.decompose()
        doc.append_html("#feed", f"<p>Item {state['clicked'] + 1}</p>")
        if state["clicked"] < 5:
            doc.append_html("#controls", '<button class="load-more">Load more</button>')

    document.on_click("button.load-more", handler)
    document.state = state
    return document
