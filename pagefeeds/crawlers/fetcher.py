"""
Fetcher - conditional retrieval of a feed's source page.

HTTP(S) sources are requested through one shared requests.Session with the
validators from the previous response (ETag, Last-Modified). file:// sources
are read from disk when enabled in the configuration.
"""

import asyncio
import logging
import os
from concurrent.futures import Executor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from ..async_processor import run_blocking
from ..cache import Headers, get_header
from ..config.constants import (
    CONNECT_TIMEOUT,
    FILE_SCHEME,
    HTTP_PROXY_ENV_VAR,
    HTTP_SCHEMES,
    HTTPS_PROXY_ENV_VAR,
    REQUEST_TIMEOUT,
)
from ..errors import ConfigurationError, NetworkError, SchemeDisabledError

logger = logging.getLogger(__name__)


class NotModified:
    """The server answered 304: the page is unchanged since the cached response."""

    def __repr__(self) -> str:
        return "NotModified()"


@dataclass
class FetchResult:
    """A fetched page body plus the response headers to cache (None for files)."""

    body: str
    headers: Optional[Headers] = None


def create_session(proxy: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> requests.Session:
    """
    Create the HTTP session shared by all feeds.

    Args:
        proxy: Proxy URL for all requests, from the configuration file
        environ: Environment consulted when no proxy is configured

    Returns:
        Configured session
    """
    environ = os.environ if environ is None else environ
    session = requests.Session()

    if proxy:
        logger.debug(f"using proxy from configuration file: {proxy}")
        session.proxies.update({"http": proxy, "https": proxy})
        return session

    http_proxy = environ.get(HTTP_PROXY_ENV_VAR)
    if http_proxy:
        logger.debug(f"using http proxy from '{HTTP_PROXY_ENV_VAR}' env var: {http_proxy}")
        session.proxies["http"] = http_proxy

    https_proxy = environ.get(HTTPS_PROXY_ENV_VAR)
    if https_proxy:
        logger.debug(f"using https proxy from '{HTTPS_PROXY_ENV_VAR}' env var: {https_proxy}")
        session.proxies["https"] = https_proxy

    return session


def build_request_headers(cached_headers: Optional[Headers], user_agent: Optional[str]) -> Dict[str, str]:
    """
    Build the headers for a conditional request.

    Args:
        cached_headers: Response headers from the previous fetch
        user_agent: Per-feed User-Agent override

    Returns:
        Request headers
    """
    headers = {}
    if user_agent:
        logger.debug(f"add User-Agent: {user_agent!r}")
        headers["User-Agent"] = user_agent

    last_modified = get_header(cached_headers, "Last-Modified")
    if last_modified is not None:
        logger.debug(f"add If-Modified-Since: {last_modified!r}")
        headers["If-Modified-Since"] = last_modified

    etag = get_header(cached_headers, "ETag")
    if etag is not None:
        logger.debug(f"add If-None-Match: {etag!r}")
        headers["If-None-Match"] = etag

    return headers


def capture_headers(response: requests.Response) -> Headers:
    """
    Response headers whose values are valid UTF-8, in received order.

    Repeated headers are kept as separate entries when the underlying urllib3
    response is available; requests' own header mapping joins them.

    The HTTP stack decodes header bytes as latin-1; values are re-decoded as
    UTF-8 and dropped when that fails.
    """
    raw_headers = getattr(response.raw, "headers", None)
    iteritems = getattr(raw_headers, "iteritems", None)
    pairs = iteritems() if callable(iteritems) else response.headers.items()

    captured = []
    for name, value in pairs:
        try:
            captured.append((name, value.encode("latin-1").decode("utf-8")))
        except UnicodeError:
            logger.debug(f"skipping header {name} with non UTF-8 value")
    return captured


class Fetcher:
    """
    Fetches feed source pages.

    One instance is shared by all feed pipelines; it holds no per-feed state.
    """

    def __init__(
        self,
        session: requests.Session,
        file_urls: bool = False,
        connect_timeout: float = CONNECT_TIMEOUT,
        timeout: float = REQUEST_TIMEOUT,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize fetcher.

        Args:
            session: Shared HTTP session
            file_urls: Whether file:// sources may be read
            connect_timeout: Seconds allowed to establish a connection
            timeout: Seconds allowed for a whole request
            executor: Thread pool for blocking reads (the loop default if None)
        """
        self.session = session
        self.file_urls = file_urls
        self.connect_timeout = connect_timeout
        self.timeout = timeout
        self.executor = executor

    async def fetch(
        self,
        url: str,
        cached_headers: Optional[Headers] = None,
        user_agent: Optional[str] = None,
    ) -> Union[NotModified, FetchResult]:
        """
        Fetch a source page.

        Args:
            url: Source URL (http, https or file)
            cached_headers: Headers cached from the previous successful fetch
            user_agent: Optional User-Agent header

        Returns:
            NotModified on a 304 response, otherwise the fetched page

        Raises:
            ConfigurationError: If the URL cannot be parsed or has an unsupported scheme
            SchemeDisabledError: For file:// URLs while file URLs are disabled
            NetworkError: On connection failures, timeouts and non-2xx statuses
        """
        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ConfigurationError(f"unable to parse {url} as a URL") from e

        scheme = parsed.scheme.lower()
        if scheme in HTTP_SCHEMES:
            if not parsed.netloc:
                raise ConfigurationError(f"unable to parse {url} as a URL")
            headers = build_request_headers(cached_headers, user_agent)
            try:
                return await run_blocking(
                    self._fetch_http, url, headers, timeout=self.timeout, executor=self.executor
                )
            except asyncio.TimeoutError as e:
                raise NetworkError(f"unable to fetch {url}: timed out after {self.timeout}s") from e

        if scheme == FILE_SCHEME:
            if not self.file_urls:
                raise SchemeDisabledError(
                    f"unable to fetch {url}: file URLs are disabled, "
                    f"set file_urls: true in the configuration to enable them"
                )
            path = Path(url2pathname(parsed.path))
            return await run_blocking(self._read_file, path, url, executor=self.executor)

        raise ConfigurationError(f"unsupported URL scheme {parsed.scheme!r} in {url}")

    def _fetch_http(self, url: str, headers: Dict[str, str]) -> Union[NotModified, FetchResult]:
        """Blocking HTTP request; runs on a worker thread."""
        try:
            response = self.session.get(
                url,
                headers=headers,
                timeout=(self.connect_timeout, self.timeout),
            )
        except requests.RequestException as e:
            raise NetworkError(f"unable to fetch {url}") from e

        status = response.status_code
        if status == requests.codes.not_modified:
            logger.info(f"{url} is unmodified")
            return NotModified()

        if not 200 <= status < 300:
            reason = response.reason or "Unknown Status"
            raise NetworkError(f"failed to fetch {url}: {status} {reason}", status=status, reason=reason)

        # Ensure proper encoding when the server did not declare one
        if "charset" not in response.headers.get("Content-Type", "").lower():
            response.encoding = response.apparent_encoding

        try:
            body = response.text
        except (requests.RequestException, LookupError) as e:
            raise NetworkError(f"unable to read response body from {url}") from e

        return FetchResult(body=body, headers=capture_headers(response))

    @staticmethod
    def _read_file(path: Path, url: str) -> FetchResult:
        """Blocking file read; runs on a worker thread."""
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise NetworkError(f"unable to fetch {url}") from e
        return FetchResult(body=raw.decode("utf-8", errors="replace"), headers=None)


__all__ = [
    "FetchResult",
    "Fetcher",
    "NotModified",
    "build_request_headers",
    "capture_headers",
    "create_session",
]
