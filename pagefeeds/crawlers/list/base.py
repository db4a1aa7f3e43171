"""
Shared helpers for list extractors: CSS selection and URL rewriting.

Selectors are applied inclusively: an element is a candidate for a selector
applied to it as well as all of its descendants. An item selected with
``nav a`` can therefore use ``a`` as its heading selector.
"""

import logging
from typing import List, Optional
from urllib.parse import urljoin

import soupsieve
from bs4 import BeautifulSoup, Tag

from ...errors import ExtractionError

logger = logging.getLogger(__name__)


def compile_selector(selector: str):
    """
    Compile a CSS selector.

    Raises:
        ExtractionError: If the selector is invalid
    """
    try:
        return soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as e:
        raise ExtractionError(f"invalid selector: {selector}") from e


def select_first(node: Tag, selector: str) -> Optional[Tag]:
    """First element matching ``selector`` among ``node`` and its descendants."""
    compiled = compile_selector(selector)
    if compiled.match(node):
        return node
    return compiled.select_one(node)


def select_all(node: Tag, selector: str) -> List[Tag]:
    """All elements matching ``selector`` among ``node`` and its descendants, in document order."""
    compiled = compile_selector(selector)
    matches = compiled.select(node)
    if compiled.match(node):
        matches.insert(0, node)
    return matches


def rewrite_urls(soup: BeautifulSoup, base_url: str) -> None:
    """
    Make every ``href`` attribute in the document absolute, in place.

    Values that cannot be resolved against ``base_url`` are left untouched.
    Rewriting is idempotent.

    Args:
        soup: Parsed document
        base_url: URL the document was fetched from
    """
    for elem in soup.find_all(href=True):
        href = elem["href"]
        if not isinstance(href, str):
            continue
        try:
            elem["href"] = urljoin(base_url, href)
        except ValueError:
            logger.debug(f"unable to resolve href {href!r} against {base_url}")


__all__ = ["compile_selector", "rewrite_urls", "select_all", "select_first"]
