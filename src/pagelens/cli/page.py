"""
Page commands.

Each command opens a document (a headless Chromium page, or a local HTML file
with ``--html``), runs one pipeline operation and prints the outcome:

- snapshot: extract the page's readable content
- find: list elements matching a text query
- click: click one element by reference
- act: execute actions parsed from assistant text
- watch: print content-changed events for a while
"""

import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Tuple

import click
import yaml

from ..config import PageLensConfig
from ..document import DocumentContext, PlaywrightDocument, StaticDocument
from ..events import PageContentChanged
from ..exceptions import ConfigurationError, DocumentError, PageLensError
from ..prompting import format_action_results
from ..session import PageSession


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_config(config_path: Optional[str]) -> PageLensConfig:
    if not config_path:
        return PageLensConfig()
    try:
        data = yaml.safe_load(Path(config_path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {config_path}: {e}") from e
    try:
        return PageLensConfig.from_dict(data)
    except ConfigurationError as e:
        raise click.ClickException(f"{e.developer_message} ({config_path})") from e


@asynccontextmanager
async def _open_document(url: str, html_path: Optional[str], headed: bool) -> AsyncIterator[DocumentContext]:
    if html_path:
        yield StaticDocument(Path(html_path).read_text(encoding="utf-8"), url=url)
        return

    try:
        document = await PlaywrightDocument.launch(url, headless=not headed)
    except PageLensError:
        raise
    except Exception as e:
        raise DocumentError(
            f"Could not open {url}: {e}",
            suggestion="Install a browser with: playwright install chromium",
        ) from e
    try:
        yield document
    finally:
        await document.close()


def _run(coro):
    try:
        return asyncio.run(coro)
    except PageLensError as e:
        click.echo(f"Error: {e.user_message}", err=True)
        click.echo(str(e), err=True)
        if e.suggestion:
            click.echo(e.suggestion, err=True)
        sys.exit(1)


def document_options(func):
    """Options shared by every page command."""
    func = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")(func)
    func = click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
                        default=None, help="YAML/JSON configuration file")(func)
    func = click.option("--headed", is_flag=True, help="Show the browser window")(func)
    func = click.option("--html", "html_path", type=click.Path(exists=True, dir_okay=False),
                        default=None, help="Read markup from a local file instead of a browser")(func)
    return func


@click.group()
def page():
    """Extract content from pages and act on them.

    \b
    Examples:
        pagelens page snapshot https://example.org
        pagelens page find https://example.org "More information"
        pagelens page act https://example.org "Let me click all the 'Load more' buttons"
        pagelens page watch https://example.org --duration 30
    """
    pass


@page.command()
@click.argument("url")
@document_options
def snapshot(url: str, html_path: Optional[str], headed: bool, config_path: Optional[str], verbose: bool):
    """Print the page's extracted content as JSON."""
    _configure_logging(verbose)
    config = _load_config(config_path)

    async def run():
        async with _open_document(url, html_path, headed) as document:
            result = await PageSession(document, config).get_snapshot()
        click.echo(result.model_dump_json(by_alias=True, indent=2))

    _run(run())


@page.command()
@click.argument("url")
@click.argument("query")
@click.option("--tag", "tags", multiple=True, help="Restrict to these tags (repeatable, ordered)")
@document_options
def find(url: str, query: str, tags: Tuple[str, ...], html_path: Optional[str], headed: bool,
         config_path: Optional[str], verbose: bool):
    """List elements whose text matches QUERY, best match first."""
    _configure_logging(verbose)
    config = _load_config(config_path)

    async def run():
        async with _open_document(url, html_path, headed) as document:
            matches = await PageSession(document, config).find_elements(query, tags or None)
        click.echo(json.dumps([m.model_dump(by_alias=True) for m in matches], indent=2))

    _run(run())


@page.command()
@click.argument("url")
@click.argument("reference")
@document_options
def click_element(url: str, reference: str, html_path: Optional[str], headed: bool,
                  config_path: Optional[str], verbose: bool):
    """Click the element REFERENCE resolves to."""
    _configure_logging(verbose)
    config = _load_config(config_path)

    async def run():
        async with _open_document(url, html_path, headed) as document:
            result = await PageSession(document, config).click(reference)
        click.echo(format_action_results([result]))
        return result

    if not _run(run()).success:
        sys.exit(1)


page.add_command(click_element, name="click")


@page.command()
@click.argument("url")
@click.argument("text")
@click.option("--max-clicks", type=int, default=None, help="Upper bound for click-all actions")
@document_options
def act(url: str, text: str, max_clicks: Optional[int], html_path: Optional[str], headed: bool,
        config_path: Optional[str], verbose: bool):
    """Execute the actions requested in assistant TEXT."""
    _configure_logging(verbose)
    config = _load_config(config_path)
    if max_clicks is not None:
        config.interaction.max_clicks = max_clicks

    async def run():
        async with _open_document(url, html_path, headed) as document:
            results = await PageSession(document, config).execute_actions(text)
        click.echo(format_action_results(results))

    _run(run())


@page.command()
@click.argument("url")
@click.option("--duration", type=float, default=30.0, show_default=True, help="Seconds to watch")
@document_options
def watch(url: str, duration: float, html_path: Optional[str], headed: bool,
          config_path: Optional[str], verbose: bool):
    """Print a line every time the page content changes."""
    _configure_logging(verbose)
    config = _load_config(config_path)

    async def on_change(event: PageContentChanged):
        snap = event.snapshot
        click.echo(f"[{snap.timestamp:%H:%M:%S}] {snap.url} ({snap.content_source.value}, {len(snap.content)} chars)")

    async def run():
        async with _open_document(url, html_path, headed) as document:
            session = PageSession(document, config)
            session.subscribe(on_change)
            async with session:
                await asyncio.sleep(duration)

    _run(run())
