"""List extractors - turn the items of a list page into feed items.

Architecture:
    base: inclusive CSS selection helpers and href rewriting
    HTMLListExtractor: selector-driven extraction of FeedItem values

Usage:
    from bs4 import BeautifulSoup
    from pagefeeds.crawlers.list import HTMLListExtractor, rewrite_urls

    soup = BeautifulSoup(html, "lxml")
    rewrite_urls(soup, url)
    items = HTMLListExtractor(feed_config).extract(soup, url)
"""

from .base import compile_selector, rewrite_urls, select_all, select_first
from .html import HTMLListExtractor, guess_mime_type

__all__ = [
    "HTMLListExtractor",
    "compile_selector",
    "guess_mime_type",
    "rewrite_urls",
    "select_all",
    "select_first",
]
