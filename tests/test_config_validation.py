"""
Tests for configuration loading, directories and path helpers.
"""

from pathlib import Path

import pytest

from pagefeeds.config import Config, DateConfig, Dirs, FeedConfig
from pagefeeds.errors import ConfigurationError
from pagefeeds.utils.helpers import calculate_hash, expand_tilde, file_name_of


CONFIG = b"""
pagefeeds:
  output: ~/feeds
  proxy: http://proxy.example:3128

feed:
  - title: Example Site
    filename: example.rss
    user_agent: pagefeeds-test
    config:
      url: https://example.com/
      item: article
      heading: h2
      link: h2 a
      summary: p.intro
      date:
        selector: time
        type: date
        format: "%Y-%m-%d"
      media: img
  - title: Nav
    filename: nav.rss
    config:
      url: https://example.com/
      item: nav a
      heading: a
      summary: [span, p]
      date: time
"""


class TestConfigLoading:
    """Test parsing of the feeds file."""

    def test_full_config(self):
        config = Config.from_bytes(CONFIG)

        assert config.pagefeeds.output == "~/feeds"
        assert config.pagefeeds.proxy == "http://proxy.example:3128"
        assert config.pagefeeds.file_urls is False
        assert len(config.feeds) == 2

        first = config.feeds[0]
        assert first.title == "Example Site"
        assert first.user_agent == "pagefeeds-test"
        assert first.config.link == "h2 a"
        assert first.config.summary == ["p.intro"]
        assert first.config.date == DateConfig(selector="time", format="%Y-%m-%d", kind="Date")
        assert first.config.media == "img"

    def test_date_as_plain_selector(self):
        config = Config.from_bytes(CONFIG)

        date = config.feeds[1].config.date
        assert date.selector == "time"
        assert date.format is None
        assert date.is_date is False

    def test_summary_list(self):
        config = Config.from_bytes(CONFIG)

        assert config.feeds[1].config.summary == ["span", "p"]

    def test_missing_sections(self):
        config = Config.from_bytes(b"")

        assert config.feeds == []
        assert config.pagefeeds.output is None

    def test_hash_tracks_raw_bytes(self):
        """Test any edit to the file changes the hash, even whitespace."""
        first = Config.from_bytes(CONFIG)
        second = Config.from_bytes(CONFIG + b"\n")

        assert first.hash == calculate_hash(CONFIG)
        assert first.hash != second.hash

    def test_missing_heading(self):
        raw = b"feed:\n- title: t\n  filename: f.rss\n  config:\n    url: https://e.com/\n    item: li\n"

        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_bytes(raw)

        assert "heading" in str(exc_info.value)

    def test_invalid_date_type(self):
        with pytest.raises(ConfigurationError):
            DateConfig.from_value({"selector": "time", "type": "Week"})

    def test_date_type_is_case_insensitive(self):
        assert DateConfig.from_value({"selector": "time", "type": "datetime"}).kind == "DateTime"

    def test_invalid_summary(self):
        with pytest.raises(ConfigurationError):
            FeedConfig.from_dict({"url": "u", "item": "li", "heading": "a", "summary": 3})

    def test_file_urls_must_be_boolean(self):
        with pytest.raises(ConfigurationError):
            Config.from_bytes(b"pagefeeds:\n  file_urls: yes please\n")

    def test_unparseable_yaml(self):
        with pytest.raises(ConfigurationError):
            Config.from_bytes(b"feed: [unterminated\n")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_file(tmp_path / "feeds.yaml")

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_from_file(self, tmp_path):
        path = tmp_path / "feeds.yaml"
        path.write_bytes(CONFIG)

        assert len(Config.from_file(path).feeds) == 2


class TestLinkSelector:
    """Test the link selector fallback."""

    def test_falls_back_to_heading(self):
        assert FeedConfig(url="u", item="li", heading="h2 a").link_selector == "h2 a"

    def test_explicit_link(self):
        assert FeedConfig(url="u", item="li", heading="h2", link="a.more").link_selector == "a.more"


class TestDirs:
    """Test directory resolution."""

    def test_xdg_variables(self, tmp_path):
        dirs = Dirs.from_env(
            {"XDG_CONFIG_HOME": str(tmp_path / "cfg"), "XDG_CACHE_HOME": str(tmp_path / "cache")}
        )

        assert dirs.place_config_file("feeds.yaml") == tmp_path / "cfg" / "pagefeeds" / "feeds.yaml"
        assert dirs.place_cache_file("a.yaml") == tmp_path / "cache" / "pagefeeds" / "a.yaml"

    def test_defaults_under_home(self, tmp_path):
        dirs = Dirs.from_env({}, home=tmp_path)

        assert dirs.config_dir == tmp_path / ".config" / "pagefeeds"
        assert dirs.cache_dir == tmp_path / ".cache" / "pagefeeds"

    def test_prepare_creates_cache_dir(self, tmp_path):
        dirs = Dirs.from_env({}, home=tmp_path).prepare()

        assert dirs.cache_dir.is_dir()
        assert not dirs.config_dir.exists()


class TestPathHelpers:
    """Test path helper functions."""

    def test_expand_tilde(self):
        home = Path("/home/reader")

        assert expand_tilde("~/feeds", home) == Path("/home/reader/feeds")
        assert expand_tilde("~", home) == home

    def test_expand_tilde_leaves_other_paths(self):
        home = Path("/home/reader")

        assert expand_tilde("/srv/feeds", home) == Path("/srv/feeds")
        assert expand_tilde("~other/feeds", home) == Path("~other/feeds")
        assert expand_tilde("feeds/~", home) == Path("feeds/~")

    def test_file_name_of(self):
        assert file_name_of("site.rss") == Path("site.rss")
        assert file_name_of("nested/site.rss") == Path("site.rss")

    def test_file_name_of_rejects_non_files(self):
        assert file_name_of("") is None
        assert file_name_of(".") is None
        assert file_name_of("..") is None
