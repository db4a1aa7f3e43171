"""
Per-feed pipeline: fetch, extract, build the channel and write it out.

State flow:
    FETCHING -> NOT_MODIFIED (done, nothing written)
    FETCHING -> FETCHED -> EXTRACTING -> BUILT -> WRITING_OUTPUT
             -> WRITING_CACHE -> DONE
    any state -> FAILED (raised as FeedError carrying the source URL)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup

from . import version, version_string
from .cache import RequestCache
from .config.constants import CACHE_SUFFIX
from .config.dirs import Dirs
from .config.settings import ChannelConfig
from .crawlers.fetcher import Fetcher, NotModified
from .crawlers.list import HTMLListExtractor, rewrite_urls
from .errors import ConfigurationError, FeedError
from .parsers.schema import Channel
from .storage import write_channel
from .utils.helpers import file_name_of

logger = logging.getLogger(__name__)


class PipelineState:
    """Feed pipeline states."""
    FETCHING = "fetching"
    NOT_MODIFIED = "not_modified"  # Terminal, nothing written
    FETCHED = "fetched"
    EXTRACTING = "extracting"
    BUILT = "built"
    WRITING_OUTPUT = "writing_output"
    WRITING_CACHE = "writing_cache"
    DONE = "done"  # Terminal, success
    FAILED = "failed"  # Terminal


@dataclass(frozen=True)
class PipelineContext:
    """Read-only values shared by every feed pipeline of one run."""

    fetcher: Fetcher
    dirs: Dirs
    output_dir: Path
    config_hash: str


class FeedPipeline:
    """
    Processes one configured feed.

    Example:
        pipeline = FeedPipeline(feed, context)
        state = await pipeline.run()
    """

    def __init__(self, feed: ChannelConfig, context: PipelineContext):
        """
        Initialize pipeline.

        Args:
            feed: Feed to process
            context: Shared run context
        """
        self.feed = feed
        self.context = context
        self.state: Optional[str] = None

    @property
    def url(self) -> str:
        return self.feed.config.url

    async def run(self) -> str:
        """
        Run the pipeline to a terminal state.

        Returns:
            PipelineState.DONE or PipelineState.NOT_MODIFIED

        Raises:
            FeedError: On any failure, chained from the underlying error
        """
        try:
            return await self._run()
        except Exception as e:
            logger.debug(f"feed {self.url} failed in state {self.state}")
            self.state = PipelineState.FAILED
            raise FeedError(self.url) from e

    async def _run(self) -> str:
        # Paths are resolved up front so errors surface before any request
        filename = file_name_of(self.feed.filename)
        if filename is None:
            raise ConfigurationError(f"{self.feed.filename} is not a valid file name")
        output_path = self.context.output_dir / filename
        cache_path = self.context.dirs.place_cache_file(filename.with_suffix(CACHE_SUFFIX))

        cached_headers = RequestCache.load(cache_path, version(), self.context.config_hash)

        logger.info(f"processing {self.url}")
        self._transition(PipelineState.FETCHING)
        result = await self.context.fetcher.fetch(
            self.url,
            cached_headers=cached_headers,
            user_agent=self.feed.user_agent,
        )
        if isinstance(result, NotModified):
            return self._transition(PipelineState.NOT_MODIFIED)

        self._transition(PipelineState.FETCHED)
        self._transition(PipelineState.EXTRACTING)
        channel = self.build_channel(result.body)
        self._transition(PipelineState.BUILT)

        self._transition(PipelineState.WRITING_OUTPUT)
        try:
            write_channel(channel, output_path)
        except OSError as e:
            raise OSError(f"unable to write output file: {output_path}") from e

        self._transition(PipelineState.WRITING_CACHE)
        if result.headers is not None:
            try:
                RequestCache.save(cache_path, result.headers, version(), self.context.config_hash)
            except OSError as e:
                logger.warning(f"unable to write to cache {cache_path}: {e}")

        return self._transition(PipelineState.DONE)

    def build_channel(self, html: str) -> Channel:
        """
        Parse a fetched page into a channel.

        Args:
            html: Page body

        Returns:
            Channel with the extracted items
        """
        soup = BeautifulSoup(html, "lxml")
        rewrite_urls(soup, self.url)
        items = HTMLListExtractor(self.feed.config).extract(soup, self.url)

        return Channel(
            title=self.feed.title,
            link=self.url,
            generator=version_string(),
            items=items,
        )

    def _transition(self, state: str) -> str:
        logger.debug(f"{self.url}: {self.state} -> {state}")
        self.state = state
        return state


__all__ = ["FeedPipeline", "PipelineContext", "PipelineState"]
