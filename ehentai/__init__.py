"""
E-Hentai client.

Searches galleries page by page, loads galleries lazily (image links and
comments on demand) and downloads images.

Quick start::

    from ehentai import Explorer

    with Explorer.from_config() as explorer:
        pager = explorer.search('language:korean').skip(1)
        batch = next(pager)
        article = explorer.article(batch[0])
        article.load_image_list()
        first_image = article.load_image(0)
"""

from ehentai.errors import (
    EhError,
    TransportError,
    ParseError,
    ImageIndexError,
    UriError,
)
from ehentai.models import (
    TagKind,
    TagMap,
    ArticleKind,
    ResultSummary,
    ArticleMeta,
    Vote,
    Comment,
)
from ehentai.paging import ARTICLES_PER_PAGE, IMAGES_PER_PAGE, pages_needed
from ehentai.search import SearchPager
from ehentai.article import Article, Draft
from ehentai.explorer import Explorer, build_search_query, percent_encode

__all__ = [
    # Errors
    'EhError',
    'TransportError',
    'ParseError',
    'ImageIndexError',
    'UriError',
    # Models
    'TagKind',
    'TagMap',
    'ArticleKind',
    'ResultSummary',
    'ArticleMeta',
    'Vote',
    'Comment',
    # Paging
    'ARTICLES_PER_PAGE',
    'IMAGES_PER_PAGE',
    'pages_needed',
    # Client
    'SearchPager',
    'Article',
    'Draft',
    'Explorer',
    'build_search_query',
    'percent_encode',
]
