"""
Parsers module: feed data model and date parsing.
"""

from .dates import DateParser, trim_date
from .schema import Channel, Enclosure, FeedItem, Guid

__all__ = [
    "Channel",
    "DateParser",
    "Enclosure",
    "FeedItem",
    "Guid",
    "trim_date",
]
