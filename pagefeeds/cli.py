"""
Command-line interface for pagefeeds.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config.constants import CONFIG_FILENAME, DEFAULT_LOG_LEVEL, LOG_ENV_VAR, VALID_LOG_LEVELS
from .config.dirs import Dirs
from .config.settings import Config
from .errors import ConfigurationError
from .main import describe_error, run
from .utils.helpers import expand_tilde

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """
    Setup logging from the PAGEFEEDS_LOG environment variable.

    Args:
        verbose: If True, override log level to DEBUG
    """
    if verbose:
        log_level = logging.DEBUG
    else:
        level_name = os.environ.get(LOG_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
        if level_name not in VALID_LOG_LEVELS:
            level_name = DEFAULT_LOG_LEVEL.upper()
        log_level = getattr(logging, level_name)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def resolve_output_dir(cli_output: Optional[str], config: Config, home: Optional[Path] = None) -> Path:
    """
    Decide where feeds are written.

    The --output option wins over the configuration file's ``output``
    setting, which may start with ``~``.

    Raises:
        ConfigurationError: If neither is provided
    """
    if cli_output:
        return Path(cli_output)

    if config.pagefeeds.output:
        return expand_tilde(config.pagefeeds.output, home or Path.home())

    raise ConfigurationError(
        "output directory must be supplied via --output or be present in configuration file"
    )


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    help=f"Path to configuration file (default: $XDG_CONFIG_HOME/pagefeeds/{CONFIG_FILENAME})",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    help="Directory to write generated feeds to",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
@click.version_option(version=__version__, prog_name="pagefeeds")
def main(config_path: Optional[str], output: Optional[str], verbose: bool):
    """pagefeeds generates RSS feeds from web pages.

    Each configured feed is fetched, its items are selected with CSS
    selectors and the result is written as an RSS file to the output
    directory. Unchanged pages are skipped using cached HTTP validators.

    \b
    Environment:
      PAGEFEEDS_LOG    log level (debug, info, warning, error)
      http_proxy       proxy for http URLs when none is configured
      HTTPS_PROXY      proxy for https URLs when none is configured
    """
    _setup_logging(verbose)

    dirs = Dirs.from_env()
    path = Path(config_path) if config_path else dirs.place_config_file(CONFIG_FILENAME)
    logger.debug(f"using configuration file: {path}")

    try:
        cfg = Config.from_file(path)
        output_dir = resolve_output_dir(output, cfg)
    except ConfigurationError as e:
        raise click.ClickException(describe_error(e))

    try:
        ok = run(cfg, output_dir, dirs)
    except OSError as e:
        raise click.ClickException(f"unable to prepare directories: {e}")

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
