"""
Publication date parsing.

Dates are parsed either free-form with dateparser or with an explicit
strptime format. Every result is a timezone-aware datetime; text without an
offset is taken to be UTC.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import dateparser
from bs4 import Tag

from ..config.settings import DateConfig

logger = logging.getLogger(__name__)

DATEPARSER_SETTINGS = {
    "TIMEZONE": "UTC",
    "RETURN_AS_TIMEZONE_AWARE": True,
}


def trim_date(s: str) -> str:
    """Trim non-alphanumeric characters from either side of the string."""
    start = 0
    end = len(s)
    while start < end and not s[start].isalnum():
        start += 1
    while end > start and not s[end - 1].isalnum():
        end -= 1
    return s[start:end]


def _assume_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class DateParser:
    """Parses date text according to one feed's date configuration."""

    def __init__(self, date_config: DateConfig):
        self.config = date_config

    def parse(self, text: str) -> Optional[datetime]:
        """
        Parse already trimmed date text.

        Returns:
            Aware datetime, or None if the text cannot be parsed
        """
        if self.config.format is None:
            return self._parse_freeform(text)
        return self._parse_with_format(text, self.config.format)

    def _parse_freeform(self, text: str) -> Optional[datetime]:
        if not text:
            return None
        dt = dateparser.parse(text, settings=DATEPARSER_SETTINGS)
        if dt is None:
            return None
        return _assume_utc(dt)

    def _parse_with_format(self, text: str, fmt: str) -> Optional[datetime]:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            return None

        if self.config.is_date:
            return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)

        # Formats with an offset directive give an aware value; anything else is UTC
        return _assume_utc(parsed)

    def parse_node(self, node: Tag) -> Optional[datetime]:
        """
        Parse the date held by a selected element.

        A ``<time>`` element's ``datetime`` attribute is preferred; the
        element's text is used when the attribute is absent or unparseable.
        """
        if node.name == "time":
            attr = node.get("datetime")
            if isinstance(attr, str):
                logger.debug("trying datetime attribute")
                dt = self.parse(trim_date(attr))
                if dt is not None:
                    logger.debug("using datetime attribute")
                    return dt

        text = trim_date(node.get_text())
        dt = self.parse(text)
        if dt is None:
            logger.warning(f"unable to parse date '{text}'")
        return dt


__all__ = ["DateParser", "trim_date"]
