"""
Base directory resolution.

Directories follow the XDG base directory layout. A Dirs value is computed
and its cache directory created once at startup, before any feed task is
spawned, so tasks only ever read it.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from .constants import APP_NAME

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dirs:
    """Resolved configuration and cache directories."""

    config_dir: Path
    cache_dir: Path

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, home: Optional[Path] = None) -> "Dirs":
        """
        Resolve directories from XDG environment variables.

        Args:
            environ: Environment mapping (defaults to os.environ)
            home: Home directory (defaults to Path.home())
        """
        environ = os.environ if environ is None else environ
        home = home or Path.home()

        config_home = environ.get("XDG_CONFIG_HOME") or str(home / ".config")
        cache_home = environ.get("XDG_CACHE_HOME") or str(home / ".cache")

        return cls(
            config_dir=Path(config_home) / APP_NAME,
            cache_dir=Path(cache_home) / APP_NAME,
        )

    def prepare(self) -> "Dirs":
        """Create the cache directory if it does not exist yet."""
        if not self.cache_dir.exists():
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created cache directory: {self.cache_dir}")
        return self

    def place_config_file(self, name: Union[str, Path]) -> Path:
        """Path to a file inside the configuration directory."""
        return self.config_dir / name

    def place_cache_file(self, name: Union[str, Path]) -> Path:
        """Path to a file inside the cache directory."""
        return self.cache_dir / name
