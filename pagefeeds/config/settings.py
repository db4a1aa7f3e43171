"""
Configuration management for pagefeeds.

Handles loading and validation of the YAML feeds file. The raw file bytes
are hashed so that any configuration change busts the request cache.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv

from ..errors import ConfigurationError
from ..utils.helpers import calculate_hash
from .constants import (
    DATE_KIND_DATE,
    DATE_KIND_DATETIME,
    VALID_DATE_KINDS,
    is_valid_date_kind,
)

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _require(data: Dict[str, Any], key: str, context: str) -> str:
    """Fetch a required string value from a mapping."""
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{context}: '{key}' must be a non-empty string")
    return value


def _optional(data: Dict[str, Any], key: str, context: str) -> Optional[str]:
    """Fetch an optional string value from a mapping."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{context}: '{key}' must be a string")
    return value


@dataclass(frozen=True)
class DateConfig:
    """
    How to locate and parse the publication date of an item.

    Decoded from either a bare selector string or a mapping with
    ``selector``, ``type`` (Date or DateTime) and ``format`` keys.
    Without a format the date text is parsed free-form.
    """

    selector: str
    format: Optional[str] = None
    kind: str = DATE_KIND_DATETIME

    @property
    def is_date(self) -> bool:
        return self.kind == DATE_KIND_DATE

    @classmethod
    def from_value(cls, value: Union[str, Dict[str, Any]], context: str = "date") -> "DateConfig":
        if isinstance(value, str):
            return cls(selector=value)

        if not isinstance(value, dict):
            raise ConfigurationError(f"{context}: must be a selector string or a mapping")

        kind = value.get("type", DATE_KIND_DATETIME)
        if not isinstance(kind, str) or not is_valid_date_kind(kind):
            raise ConfigurationError(
                f"{context}: invalid type {kind!r}, expected one of {VALID_DATE_KINDS}"
            )
        kind = next(k for k in VALID_DATE_KINDS if k.lower() == kind.lower())

        return cls(
            selector=_require(value, "selector", context),
            format=_optional(value, "format", context),
            kind=kind,
        )


@dataclass(frozen=True)
class FeedConfig:
    """Selectors describing how to turn one page into feed items."""

    url: str
    item: str
    heading: str
    link: Optional[str] = None
    summary: List[str] = field(default_factory=list)
    date: Optional[DateConfig] = None
    media: Optional[str] = None

    @property
    def link_selector(self) -> str:
        """Link selector, falling back to the heading selector."""
        return self.link if self.link is not None else self.heading

    @classmethod
    def from_dict(cls, data: Dict[str, Any], context: str = "config") -> "FeedConfig":
        if not isinstance(data, dict):
            raise ConfigurationError(f"{context}: must be a mapping")

        summary = data.get("summary")
        if summary is None:
            summaries: List[str] = []
        elif isinstance(summary, str):
            summaries = [summary]
        elif isinstance(summary, list) and all(isinstance(s, str) for s in summary):
            summaries = list(summary)
        else:
            raise ConfigurationError(f"{context}: 'summary' must be a string or list of strings")

        date = data.get("date")

        return cls(
            url=_require(data, "url", context),
            item=_require(data, "item", context),
            heading=_require(data, "heading", context),
            link=_optional(data, "link", context),
            summary=summaries,
            date=DateConfig.from_value(date, f"{context}.date") if date is not None else None,
            media=_optional(data, "media", context),
        )


@dataclass(frozen=True)
class ChannelConfig:
    """One configured feed: channel metadata plus its selectors."""

    title: str
    filename: str
    config: FeedConfig
    user_agent: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "ChannelConfig":
        context = f"feed[{index}]"
        if not isinstance(data, dict):
            raise ConfigurationError(f"{context}: must be a mapping")

        return cls(
            title=_require(data, "title", context),
            filename=_require(data, "filename", context),
            config=FeedConfig.from_dict(data.get("config"), f"{context}.config"),
            user_agent=_optional(data, "user_agent", context),
        )


@dataclass(frozen=True)
class GlobalConfig:
    """Settings shared by all feeds."""

    output: Optional[str] = None
    proxy: Optional[str] = None
    file_urls: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GlobalConfig":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError("pagefeeds: must be a mapping")

        file_urls = data.get("file_urls", False)
        if not isinstance(file_urls, bool):
            raise ConfigurationError("pagefeeds: 'file_urls' must be true or false")

        return cls(
            output=_optional(data, "output", "pagefeeds"),
            proxy=_optional(data, "proxy", "pagefeeds"),
            file_urls=file_urls,
        )


@dataclass(frozen=True)
class Config:
    """Configuration class for pagefeeds settings."""

    pagefeeds: GlobalConfig = field(default_factory=GlobalConfig)
    feeds: List[ChannelConfig] = field(default_factory=list)
    hash: str = ""

    @classmethod
    def from_bytes(cls, raw: bytes, source: str = "<config>") -> "Config":
        """
        Parse configuration from raw YAML bytes.

        Args:
            raw: File contents
            source: Name used in error messages

        Returns:
            Config instance
        """
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"unable to parse configuration file: {source}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"unable to parse configuration file: {source}")

        feeds = data.get("feed") or []
        if not isinstance(feeds, list):
            raise ConfigurationError("'feed' must be a list of feeds")

        return cls(
            pagefeeds=GlobalConfig.from_dict(data.get("pagefeeds")),
            feeds=[ChannelConfig.from_dict(feed, i) for i, feed in enumerate(feeds)],
            hash=calculate_hash(raw),
        )

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Config instance
        """
        path = Path(config_path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ConfigurationError(f"unable to read configuration file: {path}") from e

        logger.debug(f"Loaded configuration from {path}")
        return cls.from_bytes(raw, str(path))

    def __repr__(self) -> str:
        """String representation of configuration."""
        return f"Config(feeds={len(self.feeds)}, hash={self.hash[:12]})"
