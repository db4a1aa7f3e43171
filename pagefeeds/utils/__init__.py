"""Utility helpers for pagefeeds."""

from .helpers import (
    calculate_hash,
    expand_tilde,
    file_name_of,
)

__all__ = [
    "calculate_hash",
    "expand_tilde",
    "file_name_of",
]
