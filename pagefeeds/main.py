"""
Main execution logic for pagefeeds.

Runs one pipeline per configured feed concurrently. A failing feed is logged
and reported through the overall result; it never stops its siblings.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional

from .async_processor import gather_with_errors, run_async
from .config.dirs import Dirs
from .config.settings import ChannelConfig, Config
from .crawlers.fetcher import Fetcher, create_session
from .errors import PageFeedsError
from .pipeline import FeedPipeline, PipelineContext

logger = logging.getLogger(__name__)


def describe_error(exc: BaseException) -> str:
    """Render an exception and its chained causes on one line each."""
    lines = [str(exc) or exc.__class__.__name__]
    cause = exc.__cause__ or exc.__context__
    while cause is not None:
        lines.append(f"  caused by: {str(cause) or cause.__class__.__name__}")
        cause = cause.__cause__ or cause.__context__
    return "\n".join(lines)


async def _process(feed: ChannelConfig, context: PipelineContext) -> bool:
    try:
        await FeedPipeline(feed, context).run()
    except PageFeedsError as e:
        # Feed errors are reported here so the remaining feeds keep going
        logger.error(describe_error(e))
        logger.debug("feed failure details", exc_info=e)
        return False
    return True


async def run_feeds(feeds: Iterable[ChannelConfig], context: PipelineContext) -> bool:
    """
    Process all feeds concurrently.

    Args:
        feeds: Feeds to process
        context: Shared run context

    Returns:
        True if every feed succeeded (or was unmodified)

    Raises:
        BaseException: If a task fails outside of feed processing
    """
    tasks = [asyncio.create_task(_process(feed, context)) for feed in feeds]
    if not tasks:
        logger.info("no feeds configured")
        return True

    results: List = await gather_with_errors(*tasks)

    ok = True
    for result in results:
        if isinstance(result, BaseException):
            raise result
        ok = ok and result
    return ok


def run(config: Config, output_dir: Path, dirs: Optional[Dirs] = None) -> bool:
    """
    Main entry point for generating all configured feeds.

    Args:
        config: Loaded configuration
        output_dir: Directory that receives the feed files
        dirs: Directory provider (resolved from the environment if omitted)

    Returns:
        True if every feed succeeded
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"created output directory: {output_dir}")

    dirs = (dirs or Dirs.from_env()).prepare()

    session = create_session(config.pagefeeds.proxy)
    # One worker per feed: each feed has at most one blocking call in flight
    executor = ThreadPoolExecutor(max_workers=max(1, len(config.feeds)))
    try:
        context = PipelineContext(
            fetcher=Fetcher(session, file_urls=config.pagefeeds.file_urls, executor=executor),
            dirs=dirs,
            output_dir=output_dir,
            config_hash=config.hash,
        )
        return run_async(run_feeds(config.feeds, context))
    finally:
        executor.shutdown()
        session.close()


def main():
    """Main entry point for CLI usage."""
    from .cli import main as cli_main
    cli_main()


if __name__ == "__main__":
    main()
