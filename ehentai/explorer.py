"""
Entry point of the E-Hentai client.

The ``Explorer`` owns one ``RequestHandler`` and hands it to every pager,
draft and article it creates, so they all share a single connection pool.

Usage::

    with Explorer.from_config() as explorer:
        pager = explorer.search('language:korean')
        for summary in pager.iter_results(max_pages=2):
            print(summary.title)

        article = explorer.article('/g/1556174/cfe385099d/')
        article.load_image_list()
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union
from urllib.parse import quote

from ehentai.article import Article, Draft
from ehentai.errors import UriError
from ehentai.models import ArticleKind, ResultSummary
from ehentai.parsers import article_metadata
from ehentai.search import SearchPager
from ehentai.utils.config_loader import load_request_config
from ehentai.utils.request_handler import RequestConfig, RequestHandler

logger = logging.getLogger(__name__)

# every category bit set: f_cats excludes the categories whose bit is set
_ALL_CATEGORIES_MASK = 1023


def percent_encode(text: str) -> str:
    """Percent-encode *text* for a query string.

    Only ``A-Z a-z 0-9 - _ . ~`` pass through; every other UTF-8 byte is
    written as uppercase ``%XX``.
    """
    if not isinstance(text, str):
        raise UriError(f'Query text must be a string, got {type(text).__name__}')
    try:
        return quote(text, safe='', encoding='utf-8', errors='strict')
    except UnicodeEncodeError as e:
        raise UriError(f'Query text is not encodable as UTF-8: {text!r}') from e


def build_search_query(keyword: str, categories: Optional[Iterable[ArticleKind]] = None) -> str:
    """Serialize a keyword (and optional category filter) into a query string.

    Args:
        keyword: Search text, e.g. ``'language:korean'``
        categories: Categories to include; None or empty means all
    """
    query = f'f_search={percent_encode(keyword)}'
    if categories:
        included = 0
        for kind in categories:
            included |= kind.bit
        query += f'&f_cats={_ALL_CATEGORIES_MASK & ~included}'
    return query


class Explorer:
    """Client for searching galleries and loading them."""

    def __init__(self, handler: Optional[RequestHandler] = None,
                 config: Optional[RequestConfig] = None):
        """
        Args:
            handler: Transport to share; built from *config* when omitted
            config: RequestConfig used when no handler is given
        """
        self.handler = handler or RequestHandler(config=config)

    @classmethod
    def from_config(cls) -> 'Explorer':
        """Build an Explorer from the settings in config.py."""
        return cls(config=load_request_config())

    def search(self, keyword: str, categories: Optional[Iterable[ArticleKind]] = None,
               start_page: int = 0) -> SearchPager:
        """Start a search.  No request is made until the pager is advanced."""
        query = build_search_query(keyword, categories)
        logger.debug(f"New search: {query}")
        return SearchPager(self.handler, query, start_page)

    def draft(self, summary: ResultSummary) -> Draft:
        """Wrap a search result so it can load its thumbnail or full gallery."""
        return Draft(self.handler, summary)

    def resolve_draft(self, href: str) -> Draft:
        """Build a Draft for a gallery that was not found through a search.

        Fetches the gallery page once to learn its list metadata.
        """
        doc = self.handler.get_html(href)
        return Draft(self.handler, article_metadata(doc, href).to_summary())

    def article(self, target: Union[str, ResultSummary]) -> Article:
        """Load a gallery from its URL/path or from a search result."""
        href = target.href if isinstance(target, ResultSummary) else target
        return Article.resolve(self.handler, href)

    def fetch_thumbnail(self, uri: str) -> bytes:
        return self.handler.get_image(uri)

    def close(self):
        self.handler.close()

    def __enter__(self) -> 'Explorer':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
