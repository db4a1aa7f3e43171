"""
Utility helper functions.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def calculate_hash(data: bytes) -> str:
    """
    Calculate BLAKE2b hash of raw bytes.

    Used to fingerprint the configuration file so that any edit to it
    invalidates previously cached request headers.

    Args:
        data: Bytes to hash

    Returns:
        Hex digest string
    """
    return hashlib.blake2b(data).hexdigest()


def expand_tilde(path: Union[str, Path], home: Path) -> Path:
    """
    Expand a leading ``~`` path component to the given home directory.

    Only a whole ``~`` component is expanded; ``~user`` forms are left alone.

    Args:
        path: Path that may start with ``~``
        home: Home directory to substitute

    Returns:
        Expanded path
    """
    path = Path(path)
    if path.parts and path.parts[0] == "~":
        return home.joinpath(*path.parts[1:])
    return path


def file_name_of(filename: str) -> Optional[Path]:
    """
    Return the final component of ``filename`` if it names a file.

    Args:
        filename: Configured output file name

    Returns:
        Bare file name, or None for empty, ``.`` or ``..`` names
    """
    name = Path(filename).name
    if name in ("", ".", ".."):
        return None
    return Path(name)

