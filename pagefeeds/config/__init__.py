"""Configuration for pagefeeds."""

from .dirs import Dirs
from .settings import ChannelConfig, Config, DateConfig, FeedConfig, GlobalConfig

__all__ = [
    "ChannelConfig",
    "Config",
    "DateConfig",
    "Dirs",
    "FeedConfig",
    "GlobalConfig",
]
