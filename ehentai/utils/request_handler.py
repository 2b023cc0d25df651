"""
Request Handler for the E-Hentai client

This module provides the HTTP transport shared by every search pager and
gallery object:
- Direct requests with browser-like headers over one pooled session
- Optional login cookies (ipb_member_id / ipb_pass_hash)
- Optional single HTTP/HTTPS proxy
- Content-warning ("Offensive For Everyone") interstitial bypass
- A fixed minimum interval between consecutive requests

There is no retry logic here: every failure is raised as a TransportError
and the caller decides what to do.

Usage:
    from ehentai.utils.request_handler import RequestHandler, RequestConfig

    handler = RequestHandler(config=RequestConfig(timeout=20))
    doc = handler.get_html('/g/1556174/cfe385099d/')
"""

import re
import threading
import time
import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from ehentai.errors import TransportError, UriError
from ehentai.parsers.common import parse_document
from ehentai.utils.masking import mask_full, mask_partial, mask_proxy_url

logger = logging.getLogger(__name__)

_INVALID_URL_CHARS = re.compile(r'[\s\x00-\x1f\x7f]')


@dataclass
class RequestConfig:
    """Configuration for request handler"""
    base_url: str = 'https://e-hentai.org'
    timeout: int = 30
    request_interval: float = 0.0
    member_id: Optional[str] = None
    pass_hash: Optional[str] = None
    skip_content_warning: bool = True
    proxy_http: Optional[str] = None
    proxy_https: Optional[str] = None


class RequestHandler:
    """
    HTTP transport for the E-Hentai client.

    One instance is shared by every object created from an Explorer; the
    underlying requests.Session pools connections and is safe to use from
    several objects in turn.
    """

    # These mimic a real Chrome browser on macOS
    BROWSER_HEADERS = {
        'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36',
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.9',
        'Accept-Encoding': 'gzip, deflate',
        'Connection': 'keep-alive',
        'Upgrade-Insecure-Requests': '1',
    }

    IMAGE_HEADERS = {
        'Accept': 'image/avif,image/webp,image/apng,image/*,*/*;q=0.8',
    }

    def __init__(self, config: Optional[RequestConfig] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize request handler.

        Args:
            config: RequestConfig instance with configuration settings
            session: Optional pre-built session (tests inject a mock here)
        """
        self.config = config or RequestConfig()
        self.session = session or requests.Session()
        self.session.headers.update(self.BROWSER_HEADERS)

        cookies = self._get_cookies()
        if cookies:
            self.session.cookies.update(cookies)
            logger.debug(f"Login cookies set for member {mask_partial(self.config.member_id)} "
                         f"(pass hash {mask_full(self.config.pass_hash)})")

        proxies = self._get_proxies()
        if proxies:
            self.session.proxies.update(proxies)
            logger.debug(f"Using proxies: { {k: mask_proxy_url(v) for k, v in proxies.items()} }")

        self._interval_lock = threading.Lock()
        self._last_request_at: Optional[float] = None

    def _get_cookies(self) -> Dict[str, str]:
        cookies = {}
        if self.config.member_id and self.config.pass_hash:
            cookies['ipb_member_id'] = self.config.member_id
            cookies['ipb_pass_hash'] = self.config.pass_hash
        return cookies

    def _get_proxies(self) -> Dict[str, str]:
        proxies = {}
        if self.config.proxy_http:
            proxies['http'] = self.config.proxy_http
        if self.config.proxy_https:
            proxies['https'] = self.config.proxy_https
        return proxies

    def build_url(self, locator: str) -> str:
        """
        Resolve a locator (absolute URL or site path) against the base URL.

        Raises:
            UriError: if the result is not an absolute http(s) URL or the
                locator carries characters that must have been encoded
        """
        if not isinstance(locator, str) or not locator:
            raise UriError(f'Invalid locator: {locator!r}')
        if _INVALID_URL_CHARS.search(locator):
            raise UriError(f'Locator contains unencoded characters: {locator!r}')

        url = urljoin(self.config.base_url + '/', locator)
        parsed = urlparse(url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise UriError(f'Locator does not resolve to an http(s) URL: {locator!r}')
        return url

    def _wait_for_interval(self):
        """Sleep until request_interval has passed since the previous request."""
        if self.config.request_interval <= 0:
            return
        with self._interval_lock:
            if self._last_request_at is not None:
                remaining = self._last_request_at + self.config.request_interval - time.monotonic()
                if remaining > 0:
                    logger.debug(f"Waiting {remaining:.2f}s before next request")
                    time.sleep(remaining)
            self._last_request_at = time.monotonic()

    def _do_request(self, url: str, headers: Optional[Dict] = None,
                    context_msg: str = 'GET') -> requests.Response:
        """Execute a single HTTP GET, raising TransportError on any failure."""
        self._wait_for_interval()
        try:
            logger.debug(f"[{context_msg}] Requesting: {url}")
            response = self.session.get(url, headers=headers, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"[{context_msg}] HTTP {status} for {url}")
            raise TransportError(f'HTTP {status} for {url}', url=url, status_code=status) from e
        except requests.RequestException as e:
            logger.error(f"[{context_msg}] Error: {e}")
            raise TransportError(f'Request to {url} failed: {e}', url=url) from e

        logger.debug(f"[{context_msg}] Response: HTTP {response.status_code}, "
                     f"Content-Length: {len(response.content)} bytes")
        return response

    def fetch(self, locator: str) -> bytes:
        """Fetch *locator* and return the raw response body."""
        url = self.build_url(locator)
        return self._do_request(url, context_msg='Fetch').content

    def get_image(self, locator: str) -> bytes:
        """Fetch image bytes (thumbnails, full images)."""
        url = self.build_url(locator)
        return self._do_request(url, headers=self.IMAGE_HEADERS, context_msg='Image').content

    def get_html(self, locator: str) -> BeautifulSoup:
        """Fetch and parse a page, passing through the content warning if needed."""
        url = self.build_url(locator)
        doc = parse_document(self._do_request(url, context_msg='HTML').content)
        return self._process_html(url, doc)

    def _process_html(self, url: str, doc: BeautifulSoup) -> BeautifulSoup:
        """Check for the content-warning interstitial and follow it once."""
        warning_link = self._find_content_warning(doc)
        if warning_link is None:
            return doc

        if not self.config.skip_content_warning:
            logger.warning(f"Content warning shown for {url} and bypass is disabled")
            return doc

        bypass_url = urljoin(url, warning_link)
        logger.debug(f"Content warning detected, continuing via {bypass_url}")
        doc = parse_document(self._do_request(bypass_url, context_msg='Content Warning').content)
        if self._find_content_warning(doc) is not None:
            logger.warning(f"Content warning still shown after bypass for {url}")
        return doc

    @staticmethod
    def _find_content_warning(doc: BeautifulSoup) -> Optional[str]:
        """Return the 'View Gallery' link of the interstitial, or None."""
        if doc.find('h1', id='gn') is not None:
            return None
        for link in doc.find_all('a', href=True):
            if 'nw=session' in link['href'] or 'nw=always' in link['href']:
                return link['href']
        return None

    def close(self):
        """Close the pooled session."""
        self.session.close()
