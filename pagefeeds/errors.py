"""
Exception hierarchy for pagefeeds.

Every error raised while processing a feed derives from PageFeedsError so
the orchestrator can tell feed-level failures apart from breakage of the
task machinery itself.
"""

from typing import Optional


class PageFeedsError(Exception):
    """Base class for all pagefeeds errors."""
    pass


class ConfigurationError(PageFeedsError):
    """Invalid selector, unparseable source URL or invalid output filename."""
    pass


class SchemeDisabledError(PageFeedsError):
    """A file:// source was configured while file URLs are disabled."""
    pass


class NetworkError(PageFeedsError):
    """Connection failure, timeout or non-2xx HTTP status."""

    def __init__(self, message: str, status: Optional[int] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.reason = reason


class ExtractionError(PageFeedsError):
    """A selector or attribute lookup failed for a single item."""
    pass


class CacheError(PageFeedsError):
    """Unreadable, unparseable or stale request cache (always recovered)."""
    pass


class FeedError(PageFeedsError):
    """Wraps any failure of one feed pipeline with the feed's source URL."""

    def __init__(self, url: str):
        super().__init__(f"error processing feed for {url}")
        self.url = url


__all__ = [
    "PageFeedsError",
    "ConfigurationError",
    "SchemeDisabledError",
    "NetworkError",
    "ExtractionError",
    "CacheError",
    "FeedError",
]
