"""
HTML list extractor - turns the items of an HTML list page into feed items.

This is the extractor used for every configured feed.
"""

import logging
import mimetypes
from typing import List, Optional
from urllib.parse import unquote, urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from ...config.constants import DEFAULT_MIME_TYPE, UNKNOWN_ENCLOSURE_LENGTH
from ...config.settings import FeedConfig
from ...errors import ConfigurationError, ExtractionError
from ...parsers.dates import DateParser
from ...parsers.schema import Enclosure, FeedItem, Guid
from .base import compile_selector, select_all, select_first

logger = logging.getLogger(__name__)


class HTMLListExtractor:
    """
    Extracts feed items from a parsed HTML page using a feed's selectors.

    Features:
    - CSS selectors for item, heading, link, summary, date and media
    - Per-item failure isolation: a bad item is logged and skipped
    - Summaries keep their markup, in selector order

    Returns:
        List of FeedItem
    """

    def __init__(self, config: FeedConfig):
        """
        Initialize extractor.

        Args:
            config: Selectors for one feed
        """
        self.config = config
        self.date_parser = DateParser(config.date) if config.date else None

    def extract(self, soup: BeautifulSoup, base_url: str) -> List[FeedItem]:
        """
        Extract items from a parsed document.

        ``href`` attributes are expected to have been made absolute already.

        Args:
            soup: Parsed document
            base_url: URL the document was fetched from

        Returns:
            Extracted items, in document order

        Raises:
            ConfigurationError: If the item or media selector is invalid
        """
        try:
            item_selector = compile_selector(self.config.item)
        except ExtractionError as e:
            raise ConfigurationError(f"invalid selector for item: {self.config.item}") from e

        if self.config.media is not None:
            try:
                compile_selector(self.config.media)
            except ExtractionError as e:
                raise ConfigurationError(f"invalid selector for media: {self.config.media}") from e

        if self.config.link is None:
            logger.info(
                f"no explicit link selector provided, falling back to heading selector: "
                f"{self.config.heading!r}"
            )

        items = []
        for node in item_selector.select(soup):
            try:
                items.append(self._extract_item(node, base_url))
            except ExtractionError as e:
                logger.warning(f"Error parsing item {self.config.item}: {e}")

        logger.info(f"HTML extraction: {len(items)} items")
        return items

    def _extract_item(self, node: Tag, base_url: str) -> FeedItem:
        """Extract data from a single item."""
        heading = select_first(node, self.config.heading)
        if heading is None:
            raise ExtractionError(f"heading selector matched nothing: {self.config.heading}")

        link_selector = self.config.link_selector
        link = select_first(node, link_selector)
        if link is None:
            raise ExtractionError(f"link selector matched nothing: {link_selector}")

        href = link.get("href")
        if not isinstance(href, str):
            raise ExtractionError("element selected as link has no 'href' attribute")

        try:
            link_url = urljoin(base_url, href)
        except ValueError as e:
            raise ExtractionError(f"link url invalid: {e}") from e
        title = heading.get_text()

        return FeedItem(
            title=title,
            link=link_url,
            guid=Guid(value=link_url, permalink=False),
            description=self._extract_description(node, title),
            pub_date=self._extract_pub_date(node),
            enclosure=self._extract_enclosure(node, base_url),
        )

    def _extract_description(self, node: Tag, title: str) -> Optional[str]:
        parts = []
        for selector in self.config.summary:
            try:
                matches = select_all(node, selector)
            except ExtractionError as e:
                logger.warning(f"{e}")
                continue

            if not matches:
                logger.warning(
                    f"summary selector {selector!r} for item with title '{title.strip()}' "
                    f"did not match anything"
                )
                continue

            parts.extend(str(match) for match in matches)

        if not parts:
            return None
        return "".join(parts)

    def _extract_pub_date(self, node: Tag):
        if self.date_parser is None:
            return None

        selector = self.date_parser.config.selector
        try:
            date_node = select_first(node, selector)
        except ExtractionError as e:
            logger.warning(f"{e}")
            return None

        if date_node is None:
            logger.debug(f"date selector {selector!r} did not match anything")
            return None

        return self.date_parser.parse_node(date_node)

    def _extract_enclosure(self, node: Tag, base_url: str) -> Optional[Enclosure]:
        if self.config.media is None:
            return None

        media = select_first(node, self.config.media)
        if media is None:
            raise ExtractionError(f"media selector matched nothing: {self.config.media}")

        media_url = media.get("src") or media.get("href")
        if not isinstance(media_url, str):
            raise ExtractionError("element selected as media has no 'src' or 'href' attribute")

        try:
            url = urljoin(base_url, media_url)
        except ValueError as e:
            raise ExtractionError(f"media enclosure url invalid: {e}") from e

        return Enclosure(
            url=url,
            mime_type=guess_mime_type(url),
            length=UNKNOWN_ENCLOSURE_LENGTH,
        )


def guess_mime_type(url: str) -> str:
    """Guess a MIME type from the last path segment of a URL."""
    path = urlparse(url).path
    filename = unquote(path.rsplit("/", 1)[-1])
    if not filename:
        return DEFAULT_MIME_TYPE
    mime_type, _ = mimetypes.guess_type(filename, strict=False)
    return mime_type or DEFAULT_MIME_TYPE


__all__ = ["HTMLListExtractor", "guess_mime_type"]
