"""
RSS 2.0 serialization of a Channel using lxml.
"""

from email.utils import format_datetime

from lxml import etree

from ..config.constants import RSS_VERSION
from ..parsers.schema import Channel, FeedItem


def _text_element(parent, tag: str, text: str):
    elem = etree.SubElement(parent, tag)
    elem.text = text
    return elem


def _item_element(parent, item: FeedItem) -> None:
    elem = etree.SubElement(parent, "item")
    _text_element(elem, "title", item.title)
    _text_element(elem, "link", item.link)
    if item.description is not None:
        _text_element(elem, "description", item.description)

    guid = _text_element(elem, "guid", item.guid.value)
    guid.set("isPermaLink", "true" if item.guid.permalink else "false")

    if item.pub_date is not None:
        _text_element(elem, "pubDate", format_datetime(item.pub_date))

    if item.enclosure is not None:
        enclosure = etree.SubElement(elem, "enclosure")
        enclosure.set("url", item.enclosure.url)
        enclosure.set("length", item.enclosure.length)
        enclosure.set("type", item.enclosure.mime_type)


def channel_to_element(channel: Channel):
    """Build the ``<rss>`` element tree for a channel."""
    rss = etree.Element("rss", version=RSS_VERSION)
    elem = etree.SubElement(rss, "channel")
    _text_element(elem, "title", channel.title)
    _text_element(elem, "link", channel.link)
    _text_element(elem, "description", channel.description)
    _text_element(elem, "generator", channel.generator)

    for item in channel.items:
        _item_element(elem, item)

    return rss


def channel_to_bytes(channel: Channel) -> bytes:
    """Serialize a channel as a UTF-8 RSS document."""
    return etree.tostring(
        channel_to_element(channel),
        xml_declaration=True,
        encoding="utf-8",
        pretty_print=True,
    )
