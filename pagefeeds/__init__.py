"""
pagefeeds - generate RSS feeds from web pages.

Fetches configured pages, selects list items with CSS selectors and writes
each source out as an RSS channel.
"""

__version__ = "0.1.0"
__author__ = "pagefeeds Team"


def version() -> str:
    """Version of this package, used as a cache buster."""
    return __version__


def version_string() -> str:
    """Human readable version, also used as the feed generator tag."""
    return f"pagefeeds version {__version__}"


__all__ = ["__version__", "version", "version_string"]
