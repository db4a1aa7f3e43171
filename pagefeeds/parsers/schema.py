"""
Feed data model shared by the extractor and the RSS serializer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..config.constants import UNKNOWN_ENCLOSURE_LENGTH


@dataclass
class Guid:
    """Per-item identifier. Items use their link, not marked as a permalink."""

    value: str
    permalink: bool = False


@dataclass
class Enclosure:
    """Media attached to an item."""

    url: str
    mime_type: str
    length: str = UNKNOWN_ENCLOSURE_LENGTH


@dataclass
class FeedItem:
    """One item extracted from a page."""

    title: str
    link: str
    guid: Guid
    description: Optional[str] = None
    pub_date: Optional[datetime] = None  # timezone aware
    enclosure: Optional[Enclosure] = None


@dataclass
class Channel:
    """An RSS channel built from one configured feed."""

    title: str
    link: str
    generator: str
    description: str = ""
    items: List[FeedItem] = field(default_factory=list)
