"""
Tests for RSS serialization and atomic file writes.
"""

from datetime import datetime, timedelta, timezone

from lxml import etree

from pagefeeds.parsers.schema import Channel, Enclosure, FeedItem, Guid
from pagefeeds.storage import channel_to_bytes, write_atomic, write_channel


def make_item(**kwargs):
    kwargs.setdefault("title", "First post")
    kwargs.setdefault("link", "https://example.com/posts/first")
    kwargs.setdefault("guid", Guid(kwargs["link"]))
    return FeedItem(**kwargs)


def parse(channel):
    return etree.fromstring(channel_to_bytes(channel))


class TestChannelToBytes:
    """Test the RSS document layout."""

    def test_channel_metadata(self):
        channel = Channel(title="Example", link="https://example.com/", generator="pagefeeds version 0.1.0")

        data = channel_to_bytes(channel)
        root = etree.fromstring(data)

        assert data.startswith(b"<?xml version='1.0' encoding='utf-8'?>")
        assert root.tag == "rss"
        assert root.get("version") == "2.0"
        assert root.findtext("channel/title") == "Example"
        assert root.findtext("channel/link") == "https://example.com/"
        assert root.findtext("channel/generator") == "pagefeeds version 0.1.0"
        assert root.findall("channel/item") == []

    def test_item_fields(self):
        item = make_item(
            description="<p>one</p>",
            pub_date=datetime(2021, 5, 20, tzinfo=timezone.utc),
            enclosure=Enclosure(url="https://example.com/a.png", mime_type="image/png"),
        )
        root = parse(Channel(title="t", link="l", generator="g", items=[item]))

        elem = root.find("channel/item")
        assert elem.findtext("title") == "First post"
        assert elem.findtext("link") == "https://example.com/posts/first"
        assert elem.findtext("description") == "<p>one</p>"
        assert elem.findtext("pubDate") == "Thu, 20 May 2021 00:00:00 +0000"

        guid = elem.find("guid")
        assert guid.text == "https://example.com/posts/first"
        assert guid.get("isPermaLink") == "false"

        enclosure = elem.find("enclosure")
        assert enclosure.attrib == {
            "url": "https://example.com/a.png",
            "length": "0",
            "type": "image/png",
        }

    def test_pub_date_keeps_offset(self):
        item = make_item(pub_date=datetime(2021, 5, 20, 10, 0, tzinfo=timezone(timedelta(hours=10))))

        root = parse(Channel(title="t", link="l", generator="g", items=[item]))

        assert root.findtext("channel/item/pubDate") == "Thu, 20 May 2021 10:00:00 +1000"

    def test_optional_fields_omitted(self):
        root = parse(Channel(title="t", link="l", generator="g", items=[make_item()]))

        elem = root.find("channel/item")
        assert elem.find("description") is None
        assert elem.find("pubDate") is None
        assert elem.find("enclosure") is None

    def test_items_in_order(self):
        items = [make_item(title=f"Post {i}", link=f"https://example.com/{i}") for i in range(3)]

        root = parse(Channel(title="t", link="l", generator="g", items=items))

        assert [e.text for e in root.findall("channel/item/title")] == ["Post 0", "Post 1", "Post 2"]


class TestWriteAtomic:
    """Test atomic file replacement."""

    def test_creates_and_overwrites(self, tmp_path):
        path = tmp_path / "feed.rss"

        write_atomic(path, b"first")
        write_atomic(path, b"second")

        assert path.read_bytes() == b"second"

    def test_no_temporary_files_left(self, tmp_path):
        path = tmp_path / "feed.rss"

        write_atomic(path, b"data")

        assert [p.name for p in tmp_path.iterdir()] == ["feed.rss"]

    def test_write_channel(self, tmp_path):
        path = tmp_path / "feed.rss"

        write_channel(Channel(title="Example", link="l", generator="g"), path)

        assert etree.parse(str(path)).getroot().findtext("channel/title") == "Example"
