"""
PageLens CLI - inspect and act on pages from the command line.

Usage:
    pagelens --help
    pagelens page snapshot https://example.org
    pagelens page find https://example.org "more information"
    pagelens page act https://example.org "I'll click the 'More information' link"
"""

import click

from .page import page


@click.group()
@click.version_option(package_name="pagelens")
def main():
    """PageLens - page content extraction and bounded interaction."""
    pass


# Register command groups
main.add_command(page)


if __name__ == "__main__":
    main()
