"""Storage module for pagefeeds - writes generated feeds and cache files.

Files are written to a temporary file next to the destination and then
renamed over it, so readers never see a partially written file.

Usage:
    from pagefeeds.storage import write_atomic, write_channel

    write_channel(channel, output_dir / "site.rss")
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .rss import channel_to_bytes

logger = logging.getLogger(__name__)


def write_atomic(path: Union[str, Path], data: bytes) -> None:
    """
    Atomically replace ``path`` with ``data``.

    Args:
        path: Destination file
        data: Complete file contents

    Raises:
        OSError: If the temporary file cannot be written or renamed
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def write_channel(channel, output_path: Union[str, Path]) -> None:
    """
    Serialize a channel as RSS and write it atomically.

    Args:
        channel: Channel to write
        output_path: Destination feed file
    """
    logger.info(f"write {output_path}")
    write_atomic(output_path, channel_to_bytes(channel))


__all__ = [
    "channel_to_bytes",
    "write_atomic",
    "write_channel",
]
