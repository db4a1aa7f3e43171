"""
Request cache for pagefeeds.

Each feed keeps a small YAML record of the response headers from its last
successful fetch. The headers supply validators (ETag, Last-Modified) for
the next conditional request. A record is only reused when it was written by
the same pagefeeds version from the same configuration file; anything else
is treated as a cache miss.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

import yaml

from ..errors import CacheError
from ..storage import write_atomic

logger = logging.getLogger(__name__)

Headers = List[Tuple[str, str]]


@dataclass
class RequestCache:
    """Cached response headers plus the cache busters they were written with."""

    headers: Headers = field(default_factory=list)
    version: Optional[str] = None
    config_hash: Optional[str] = None

    @classmethod
    def from_yaml(cls, raw: Union[str, bytes]) -> "RequestCache":
        """
        Parse a cache record.

        ``version`` and ``config_hash`` may be missing in records written by
        older releases.

        Raises:
            CacheError: If the document is not a valid cache record
        """
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise CacheError(f"unable to parse cache: {e}") from e

        if not isinstance(data, dict):
            raise CacheError("cache is not a mapping")

        return cls(
            headers=_parse_headers(data.get("headers")),
            version=_optional_str(data, "version"),
            config_hash=_optional_str(data, "config_hash"),
        )

    def to_yaml(self) -> str:
        """Serialize the record."""
        data = {
            "headers": [[name, value] for name, value in self.headers],
            "version": self.version,
            "config_hash": self.config_hash,
        }
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    @classmethod
    def load(cls, path: Union[str, Path], expected_version: str, expected_config_hash: str) -> Optional[Headers]:
        """
        Load cached headers if the record is still valid.

        Args:
            path: Cache file
            expected_version: Version of the running tool
            expected_config_hash: Hash of the current configuration file

        Returns:
            Cached headers, or None on any read/parse failure or mismatch
        """
        path = Path(path)
        try:
            cache = cls.from_yaml(path.read_bytes())
        except (OSError, CacheError) as e:
            logger.debug(f"no usable cache at {path}: {e}")
            return None

        if cache.version != expected_version:
            logger.debug(
                f"cache version ({cache.version!r}) != this version ({expected_version!r}), "
                f"ignoring cache at: {path}"
            )
            return None

        if cache.config_hash != expected_config_hash:
            logger.debug(
                f"cache config hash mismatch ({cache.config_hash!r}) != ({expected_config_hash!r}), "
                f"ignoring cache at: {path}"
            )
            return None

        logger.debug(f"using cache at: {path}")
        return cache.headers

    @classmethod
    def save(cls, path: Union[str, Path], headers: Headers, version: str, config_hash: str) -> None:
        """
        Write a cache record, replacing any previous one.

        Raises:
            OSError: If the file cannot be written
        """
        cache = cls(headers=list(headers), version=version, config_hash=config_hash)
        logger.debug(f"write cache {path}")
        write_atomic(path, cache.to_yaml().encode("utf-8"))


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise CacheError(f"cache field '{key}' is not a string")
    return value


def _parse_headers(value: Any) -> Headers:
    if not isinstance(value, list):
        raise CacheError("cache headers are not a list")

    headers = []
    for pair in value:
        if (
            not isinstance(pair, (list, tuple))
            or len(pair) != 2
            or not all(isinstance(part, str) for part in pair)
        ):
            raise CacheError(f"invalid cached header: {pair!r}")
        headers.append((pair[0], pair[1]))
    return headers


def get_header(headers: Optional[Headers], name: str) -> Optional[str]:
    """Case-insensitive lookup of the first header called ``name``."""
    if not headers:
        return None
    name = name.lower()
    for key, value in headers:
        if key.lower() == name:
            return value
    return None


__all__ = ["Headers", "RequestCache", "get_header"]
