"""
Lazy, page-at-a-time search results.

A ``SearchPager`` turns "page N of the search results" into an iterator of
result batches: each ``next()`` fetches and parses exactly one results
page.  Nothing is fetched before the first ``next()``.

The pager never ends on its own.  An empty batch means the query is
exhausted; ``iter_batches`` applies that stopping rule (plus the known page
count) for callers that do not want to.
"""

from __future__ import annotations

import threading
import logging
from typing import Iterator, List, Optional

from ehentai.models import ResultSummary
from ehentai.paging import ARTICLES_PER_PAGE, pages_needed
from ehentai.parsers import result_list, search_result_count

logger = logging.getLogger(__name__)


class SearchPager:
    """
    Restartable, skippable sequence of search result pages.

    At most one page fetch is outstanding per pager.  A failed fetch or
    parse leaves the page counter where it was, so calling ``advance()``
    again retries the same page.

    Usage:
        pager = explorer.search('language:korean').skip(1)
        first = next(pager)          # fetches page 1
        print(pager.page_count)
    """

    def __init__(self, handler, query: str, start_page: int = 0):
        """
        Args:
            handler: Shared RequestHandler
            query: Serialized filter string (``f_search=...``)
            start_page: Zero-based page to start from
        """
        if start_page < 0:
            raise ValueError(f'start_page must not be negative: {start_page}')
        self.handler = handler
        self._query = query
        self._page = start_page
        self._result_count: Optional[int] = None
        self._in_flight = threading.Lock()

    @property
    def query(self) -> str:
        return self._query

    @property
    def page(self) -> int:
        """Zero-based page the next ``advance()`` fetches."""
        return self._page

    @property
    def result_count(self) -> Optional[int]:
        """Total number of results reported by the last fetched page."""
        return self._result_count

    @property
    def page_count(self) -> Optional[int]:
        """Number of result pages, once the result count is known."""
        if self._result_count is None:
            return None
        return pages_needed(self._result_count, ARTICLES_PER_PAGE)

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    @property
    def url(self) -> str:
        return f'/?page={self._page}&{self._query}'

    def skip(self, n: int) -> 'SearchPager':
        """Move the next page forward by *n* without any I/O."""
        if n < 0:
            raise ValueError(f'Cannot skip a negative number of pages: {n}')
        self._page += n
        return self

    def advance(self) -> Optional[List[ResultSummary]]:
        """
        Fetch and parse the next results page.

        Returns:
            The page's results ([] once the query is exhausted), or None
            when another fetch on this pager is still outstanding.

        Raises:
            TransportError, ParseError, UriError: the page is not consumed
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug(f"[Search] Page {self._page} fetch already in flight")
            return None

        try:
            page = self._page
            logger.debug(f"[Search] Fetching page {page}: {self._query}")
            doc = self.handler.get_html(self.url)
            count = search_result_count(doc)
            results = result_list(doc)
        finally:
            self._in_flight.release()

        self._page = page + 1
        if self._result_count is not None and self._result_count != count:
            logger.info(f"[Search] Result count changed from {self._result_count} to {count}")
        self._result_count = count

        logger.debug(f"[Search] Page {page}: {len(results)} results (total {count})")
        return results

    def __iter__(self) -> Iterator[Optional[List[ResultSummary]]]:
        return self

    def __next__(self) -> Optional[List[ResultSummary]]:
        return self.advance()

    def iter_batches(self, max_pages: Optional[int] = None) -> Iterator[List[ResultSummary]]:
        """
        Yield result batches until the query is exhausted.

        Stops on an empty batch, once the known page count is reached, or
        after *max_pages* batches.
        """
        fetched = 0
        while max_pages is None or fetched < max_pages:
            if self.page_count is not None and self._page >= self.page_count:
                return
            batch = self.advance()
            if batch is None:
                return
            fetched += 1
            if not batch:
                return
            yield batch

    def iter_results(self, max_pages: Optional[int] = None) -> Iterator[ResultSummary]:
        """Yield individual results across pages; see ``iter_batches``."""
        for batch in self.iter_batches(max_pages):
            yield from batch

    def __repr__(self) -> str:
        return (f'SearchPager(query={self._query!r}, page={self._page}, '
                f'result_count={self._result_count})')
