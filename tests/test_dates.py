"""
Tests for publication date parsing.
"""

from datetime import datetime, timedelta, timezone

import pytest
from bs4 import BeautifulSoup

from pagefeeds.config.settings import DateConfig
from pagefeeds.parsers.dates import DateParser, trim_date


def node(html, tag):
    """Parse a fragment and return its first ``tag`` element."""
    return BeautifulSoup(html, "lxml").find(tag)


class TestTrimDate:
    """Test trimming of date text."""

    def test_trims_trailing_punctuation(self):
        assert trim_date("2021-05-20 —") == "2021-05-20"

    def test_leaves_timestamp_alone(self):
        assert trim_date("2022-04-20T06:38:27+10:00") == "2022-04-20T06:38:27+10:00"

    def test_trims_both_sides(self):
        assert trim_date("  (Posted: 20 May 2021)  ") == "Posted: 20 May 2021"

    def test_only_punctuation(self):
        assert trim_date(" -- ") == ""


class TestFreeformParsing:
    """Test parsing without an explicit format."""

    @pytest.fixture
    def parser(self):
        return DateParser(DateConfig(selector="time"))

    def test_parses_timestamp_with_offset(self, parser):
        """Test the offset in the text is honoured."""
        dt = parser.parse("2022-04-20T06:38:27+10:00")

        assert dt == datetime(2022, 4, 20, 6, 38, 27, tzinfo=timezone(timedelta(hours=10)))
        assert dt.tzinfo is not None

    def test_naive_text_is_utc(self, parser):
        """Test dates without an offset are taken as UTC."""
        dt = parser.parse("20 May 2021")

        assert dt == datetime(2021, 5, 20, tzinfo=timezone.utc)
        assert dt.utcoffset() == timedelta(0)

    def test_unparseable_text(self, parser):
        assert parser.parse("") is None


class TestExplicitFormat:
    """Test parsing with a strptime format."""

    def test_date_kind_is_midnight_utc(self):
        parser = DateParser(DateConfig(selector="span", format="%d/%m/%Y", kind="Date"))

        dt = parser.parse("20/05/2021")

        assert dt == datetime(2021, 5, 20, tzinfo=timezone.utc)
        assert dt.tzinfo is timezone.utc

    def test_datetime_with_offset(self):
        parser = DateParser(DateConfig(selector="span", format="%Y-%m-%d %H:%M %z"))

        dt = parser.parse("2021-05-20 10:00 +0200")

        assert dt.utcoffset() == timedelta(hours=2)
        assert dt == datetime(2021, 5, 20, 8, 0, tzinfo=timezone.utc)

    def test_naive_datetime_is_utc(self):
        parser = DateParser(DateConfig(selector="span", format="%Y-%m-%d %H:%M"))

        dt = parser.parse("2021-05-20 10:00")

        assert dt == datetime(2021, 5, 20, 10, 0, tzinfo=timezone.utc)

    def test_mismatched_format(self):
        parser = DateParser(DateConfig(selector="span", format="%Y-%m-%d", kind="Date"))

        assert parser.parse("May 20th") is None


class TestParseNode:
    """Test parsing dates out of elements."""

    def test_time_datetime_attribute_preferred(self):
        """Test the datetime attribute wins over the element text."""
        parser = DateParser(DateConfig(selector="time", format="%Y-%m-%d", kind="Date"))
        elem = node('<time datetime="2021-05-20">2020-01-01</time>', "time")

        assert parser.parse_node(elem) == datetime(2021, 5, 20, tzinfo=timezone.utc)

    def test_falls_back_to_text_when_attribute_unparseable(self):
        parser = DateParser(DateConfig(selector="time", format="%Y-%m-%d", kind="Date"))
        elem = node('<time datetime="soon">2021-05-20</time>', "time")

        assert parser.parse_node(elem) == datetime(2021, 5, 20, tzinfo=timezone.utc)

    def test_falls_back_to_text_without_attribute(self):
        parser = DateParser(DateConfig(selector="time", format="%Y-%m-%d", kind="Date"))
        elem = node("<time>2021-05-20</time>", "time")

        assert parser.parse_node(elem) == datetime(2021, 5, 20, tzinfo=timezone.utc)

    def test_datetime_attribute_ignored_on_other_elements(self):
        parser = DateParser(DateConfig(selector="span", format="%Y-%m-%d", kind="Date"))
        elem = node('<span datetime="2021-05-20">2022-01-02</span>', "span")

        assert parser.parse_node(elem) == datetime(2022, 1, 2, tzinfo=timezone.utc)

    def test_text_is_trimmed(self):
        parser = DateParser(DateConfig(selector="span", format="%Y-%m-%d", kind="Date"))
        elem = node("<span>2021-05-21 &mdash;</span>", "span")

        assert parser.parse_node(elem) == datetime(2021, 5, 21, tzinfo=timezone.utc)

    def test_unparseable_node(self):
        parser = DateParser(DateConfig(selector="span", format="%Y-%m-%d", kind="Date"))
        elem = node("<span>someday</span>", "span")

        assert parser.parse_node(elem) is None
