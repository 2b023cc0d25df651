"""
Galleries ("articles") and their lightweight search-list drafts.

An ``Article`` is built from a single fetch of the gallery page, which
gives the metadata, the first ``IMAGES_PER_PAGE`` image-viewer links and
the default comment page.  The rest is loaded on demand:

- ``load_image_list()`` appends the viewer links of the remaining
  thumbnail pages (``?p=1``, ``?p=2`` ...), resuming from whatever is
  already loaded;
- ``load_all_comments()`` replaces the comments with the full set
  (``?hc=1``), which the site returns in one response.

Thumbnail pages are fetched one after another by default to keep the load
on the site low and stay clear of its rate limiting.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional
from urllib.parse import urlencode

from ehentai.errors import ImageIndexError
from ehentai.models import ArticleMeta, Comment, ResultSummary
from ehentai.paging import IMAGES_PER_PAGE, pages_needed
from ehentai.parsers import article_metadata, comment_list, direct_image_url, image_page_list

logger = logging.getLogger(__name__)


def _with_query(href: str, **params) -> str:
    separator = '&' if '?' in href else '?'
    return f'{href}{separator}{urlencode(params)}'


class Draft:
    """A search-list entry that can be turned into a full Article.

    Holds the shared transport so the thumbnail and the full gallery can be
    loaded without another search.
    """

    def __init__(self, handler, meta: ResultSummary):
        self.handler = handler
        self._meta = meta

    @property
    def meta(self) -> ResultSummary:
        return self._meta

    def load_thumb(self) -> bytes:
        return self.handler.get_image(self._meta.thumb)

    def load_full(self) -> 'Article':
        return Article.resolve(self.handler, self._meta.href)

    def __repr__(self) -> str:
        return f'Draft(href={self._meta.href!r}, title={self._meta.title!r})'


class Article:
    """A gallery with its image-viewer links and comments.

    ``image_pages`` grows toward ``meta.length`` and never past it; once
    they are equal the gallery is fully loaded and ``load_image_list`` does
    nothing.
    """

    def __init__(self, handler, meta: ArticleMeta, image_pages: List[str],
                 comments: List[Comment]):
        self.handler = handler
        self._meta = meta
        self._image_pages = list(image_pages[:meta.length])
        self._comments = list(comments)

    @classmethod
    def resolve(cls, handler, href: str) -> 'Article':
        """
        Fetch a gallery page and build an Article from it.

        Raises:
            TransportError: the page could not be fetched
            ParseError: the page lacks the gallery header, thumbnails or
                comment section
        """
        doc = handler.get_html(href)
        article = cls(
            handler,
            article_metadata(doc, href),
            image_page_list(doc),
            comment_list(doc),
        )
        logger.info(f"Resolved gallery '{article.meta.title[:60]}' "
                    f"({len(article._image_pages)}/{article.meta.length} image links)")
        return article

    @property
    def meta(self) -> ArticleMeta:
        return self._meta

    @property
    def image_pages(self) -> List[str]:
        return list(self._image_pages)

    @property
    def comments(self) -> List[Comment]:
        return list(self._comments)

    @property
    def is_fully_loaded(self) -> bool:
        return len(self._image_pages) == self._meta.length

    def load_thumb(self) -> bytes:
        return self.handler.get_image(self._meta.thumb)

    # ------------------------------------------------------------------
    # Image list
    # ------------------------------------------------------------------

    def _missing_pages(self) -> range:
        """Thumbnail pages still to fetch, from the first incomplete one."""
        total = pages_needed(self._meta.length, IMAGES_PER_PAGE)
        return range(len(self._image_pages) // IMAGES_PER_PAGE, total)

    def _fetch_image_page(self, page: int) -> List[str]:
        return image_page_list(self.handler.get_html(_with_query(self._meta.href, p=page)))

    def _commit_image_page(self, page: int, links: List[str]):
        # slice assignment so a half-loaded page is replaced, not duplicated
        self._image_pages[page * IMAGES_PER_PAGE:] = links
        if len(self._image_pages) > self._meta.length:
            logger.warning(f"Page {page} of {self._meta.href} listed more images than the "
                           f"gallery length {self._meta.length}; extra links dropped")
            del self._image_pages[self._meta.length:]

    def load_image_list(self, max_workers: Optional[int] = None):
        """
        Load the viewer links of every thumbnail page not loaded yet.

        Pages are fetched sequentially unless *max_workers* > 1 is given, in
        which case they are fetched on a thread pool.  Either way they are
        appended in page order, and on failure the pages before the failed
        one stay loaded and the error is re-raised.  Safe to call again.
        """
        if self.is_fully_loaded:
            return

        pages = self._missing_pages()
        logger.debug(f"Loading thumbnail pages {list(pages)} of {self._meta.href}")

        if max_workers is not None and max_workers > 1 and len(pages) > 1:
            self._load_image_pages_concurrently(pages, max_workers)
            return

        for page in pages:
            self._commit_image_page(page, self._fetch_image_page(page))

    def _load_image_pages_concurrently(self, pages: range, max_workers: int):
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [(page, executor.submit(self._fetch_image_page, page)) for page in pages]
            try:
                for page, future in futures:
                    # result() re-raises the page's error; later pages are dropped
                    self._commit_image_page(page, future.result())
            finally:
                for _, future in futures:
                    future.cancel()

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def load_image(self, index: int) -> bytes:
        """
        Fetch the full image at *index*: viewer page first, then the image.

        Raises:
            ImageIndexError: *index* is outside the loaded image list; no
                request is made
        """
        if index < 0 or index >= len(self._image_pages):
            raise ImageIndexError(index, len(self._image_pages))

        viewer = self.handler.get_html(self._image_pages[index])
        return self.handler.get_image(direct_image_url(viewer))

    def iter_images(self) -> Iterator[bytes]:
        """Yield every loaded image in order, one fetch pair at a time."""
        for index in range(len(self._image_pages)):
            yield self.load_image(index)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def load_all_comments(self):
        """Replace the comments with the gallery's complete comment list."""
        doc = self.handler.get_html(_with_query(self._meta.href, hc=1))
        self._comments = comment_list(doc)
        logger.debug(f"Loaded {len(self._comments)} comments for {self._meta.href}")

    def __repr__(self) -> str:
        return (f'Article(href={self._meta.href!r}, images={len(self._image_pages)}/'
                f'{self._meta.length}, comments={len(self._comments)})')
