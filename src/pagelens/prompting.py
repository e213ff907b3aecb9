"""
Helpers for the chat layer: deciding whether a snapshot is usable as page
context, composing the assistant's system prompt around it, and rendering
action results back into the conversation.
"""

from typing import Optional, Sequence

from .models import ActionResult, PageSnapshot

DEFAULT_BASE_PROMPT = "You are a helpful and friendly assistant."
MIN_USABLE_LENGTH = 50

PAGE_CONTEXT_TEMPLATE = """

Current webpage context:
Title: {title}
URL: {url}
Content: {content}

When answering questions, you can reference and analyze the content from this webpage. If the user asks about "this page" or similar references, they are referring to the webpage content provided above."""

PAGE_UNAVAILABLE_NOTE = """

Note: Page context is enabled, but the current webpage content is not available. Possible causes:
1. The page content could not be extracted
2. The page loads its content dynamically
3. The page could not be accessed
4. The page is a special browser page

If the user asks about the current page, explain that its content is not available and suggest they:
1. Reload the page
2. Wait until the page has finished loading
3. Try a different page
4. Turn off page context for general questions

General questions can still be answered normally."""


def snapshot_problem(snapshot: Optional[PageSnapshot], min_length: int = MIN_USABLE_LENGTH) -> Optional[str]:
    """
    Explain why a snapshot cannot serve as page context.

    Returns:
        None when the snapshot is usable, otherwise a user-facing reason.
    """
    if snapshot is None:
        return "Cannot access this page - content script may not be loaded"
    if snapshot.success and len(snapshot.content) > min_length:
        return None
    if snapshot.error:
        return snapshot.error
    if len(snapshot.content) <= min_length:
        return "Page content is too short or appears to be empty"
    return "Unable to extract content from this page"


def build_system_prompt(
    snapshot: Optional[PageSnapshot],
    base: str = DEFAULT_BASE_PROMPT,
    include_page_context: bool = True,
) -> str:
    """Base prompt plus the page context block (or the unavailable note)."""
    if not include_page_context:
        return base
    if snapshot is not None and snapshot.success and snapshot.content:
        return base + PAGE_CONTEXT_TEMPLATE.format(
            title=snapshot.title,
            url=snapshot.url,
            content=snapshot.content,
        )
    return base + PAGE_UNAVAILABLE_NOTE


def format_action_results(results: Sequence[ActionResult]) -> str:
    """Markdown bullet list of action outcomes."""
    if not results:
        return "No page actions were requested."
    lines = []
    for result in results:
        mark = "✅" if result.success else "❌"
        lines.append(f"- {mark} `{result.original_text}`: {result.message}")
    return "\n".join(lines)
