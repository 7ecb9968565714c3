"""
HTTP Fetcher - Retrieves raw page markup from the encyclopedia.

The crawl engine only depends on the Fetcher contract: `fetch(path)` returns
markup or raises FetchError. HTTPFetcher is the default implementation built on
a pooled requests Session with urllib3 retries.
"""

import logging
import time
from typing import Optional
from dataclasses import dataclass
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException, Timeout
from urllib3.util.retry import Retry

from ..errors import FetchError


DEFAULT_BASE_URL = "https://en.wikipedia.org"


@dataclass
class FetchConfig:
    """Configuration for the HTTP fetcher."""
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30
    max_retries: int = 3
    max_redirects: int = 5
    verify_ssl: bool = True
    user_agent: str = "WikiCrawler/1.0"
    max_content_size_mb: int = 10  # Skip pages larger than this

    # Request headers
    accept_language: str = "en-US,en;q=0.9"
    accept_encoding: str = "gzip, deflate"

    # Retry settings
    retry_backoff_factor: float = 0.5
    retry_on_status: list = None

    # Connection pooling
    pool_connections: int = 1
    pool_maxsize: int = 4

    def __post_init__(self):
        """Set default retry status codes."""
        if self.retry_on_status is None:
            self.retry_on_status = [429, 500, 502, 503, 504]


def create_session(config: FetchConfig) -> requests.Session:
    """
    Build a requests Session with retry policy and default headers.

    Shared by HTTPFetcher and RobotsSource so both hit the origin through the
    same connection pool.
    """
    session = requests.Session()
    retry_strategy = Retry(
        total=config.max_retries,
        backoff_factor=config.retry_backoff_factor,
        status_forcelist=config.retry_on_status,
        allowed_methods=["GET", "HEAD"],
        raise_on_status=False
    )
    adapter = HTTPAdapter(max_retries=retry_strategy,
                          pool_connections=config.pool_connections,
                          pool_maxsize=config.pool_maxsize)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.max_redirects = config.max_redirects
    session.headers.update({
        'User-Agent': config.user_agent,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': config.accept_language,
        'Accept-Encoding': config.accept_encoding,
    })
    return session


class Fetcher:
    """Collaborator contract: retrieve page markup for a path."""

    def fetch(self, path: str) -> str:
        """
        Return raw markup for path.

        Raises:
            FetchError: On network failure, non-success status or timeout
        """
        raise NotImplementedError

    def close(self):
        """Release any held resources."""
        pass


class HTTPFetcher(Fetcher):
    """Fetches pages relative to a base URL with a pooled requests Session."""

    def __init__(self, config: FetchConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or create_session(config)
        self.logger = logging.getLogger(self.__class__.__name__)

        self.stats = {
            'total_fetched': 0, 'successful': 0, 'failed': 0,
            'timeouts': 0, 'http_errors': {},
            'total_bytes': 0, 'total_response_time': 0.0,
        }

    def build_url(self, path: str) -> str:
        """Resolve a base-relative path; absolute URLs pass through unchanged."""
        return urljoin(self.config.base_url, path)

    def fetch(self, path: str) -> str:
        url = self.build_url(path)
        start_time = time.time()
        self.stats['total_fetched'] += 1

        try:
            markup = self._fetch_with_requests(path, url)
        except FetchError as e:
            self.stats['failed'] += 1
            if e.status_code:
                self.stats['http_errors'][e.status_code] = \
                    self.stats['http_errors'].get(e.status_code, 0) + 1
            raise
        finally:
            self.stats['total_response_time'] += time.time() - start_time

        self.stats['successful'] += 1
        self.stats['total_bytes'] += len(markup)
        self.logger.debug(f"Fetched: {url} ({len(markup)} chars, "
                          f"{time.time() - start_time:.2f}s)")
        return markup

    def _fetch_with_requests(self, path: str, url: str) -> str:
        max_bytes = self.config.max_content_size_mb * 1024 * 1024

        try:
            response = self.session.get(
                url, timeout=self.config.timeout_seconds,
                allow_redirects=True, verify=self.config.verify_ssl, stream=True
            )
        except Timeout:
            self.stats['timeouts'] += 1
            raise FetchError(path, f"Timeout after {self.config.timeout_seconds}s")
        except RequestException as e:
            raise FetchError(path, f"Request Error: {e}")

        try:
            if not 200 <= response.status_code < 300:
                raise FetchError(path, f"HTTP {response.status_code}",
                                 status_code=response.status_code)

            # Check content size
            content_length = response.headers.get('Content-Length')
            if content_length and content_length.isdigit() and int(content_length) > max_bytes:
                raise FetchError(path, "Content too large")

            content = b''
            try:
                for chunk in response.iter_content(chunk_size=8192):
                    content += chunk
                    if len(content) > max_bytes:
                        raise FetchError(path, "Content exceeded size limit")
            except Timeout:
                self.stats['timeouts'] += 1
                raise FetchError(path, f"Timeout after {self.config.timeout_seconds}s")
            except RequestException as e:
                raise FetchError(path, f"Request Error: {e}")

            encoding = response.encoding or 'utf-8'
            try:
                return content.decode(encoding, errors='replace')
            except LookupError:
                return content.decode('utf-8', errors='replace')
        finally:
            response.close()

    def get_stats(self) -> dict:
        """Get fetch statistics."""
        stats = dict(self.stats)
        stats['http_errors'] = dict(self.stats['http_errors'])
        if self.stats['total_fetched'] > 0:
            stats['avg_response_time'] = round(
                self.stats['total_response_time'] / self.stats['total_fetched'], 3
            )
        return stats

    def close(self):
        self.session.close()
        self.logger.debug("HTTP session closed")
