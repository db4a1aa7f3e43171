"""
Crawler module for fetching source pages and extracting feed items.

Architecture:
    FETCHING (pagefeeds.crawlers.fetcher):
    - Fetcher: conditional HTTP(S) requests and file:// reads
    - create_session: the one HTTP session shared by all feeds

    LIST EXTRACTION (pagefeeds.crawlers.list):
    - rewrite_urls: make href attributes absolute
    - HTMLListExtractor: selector-driven item extraction

Usage:
    from pagefeeds.crawlers import Fetcher, HTMLListExtractor, create_session

    fetcher = Fetcher(create_session())
    result = await fetcher.fetch("https://example.com/news")
"""

from .fetcher import FetchResult, Fetcher, NotModified, create_session
from .list import HTMLListExtractor, rewrite_urls

__all__ = [
    "FetchResult",
    "Fetcher",
    "HTMLListExtractor",
    "NotModified",
    "create_session",
    "rewrite_urls",
]
