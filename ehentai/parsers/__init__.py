"""
E-Hentai HTML parsers – public API.

Usage::

    from ehentai.parsers import parse_document, result_list
    doc = parse_document(html_bytes)
    entries = result_list(doc)
"""

from ehentai.parsers.common import parse_document
from ehentai.parsers.search_parser import search_result_count, result_list
from ehentai.parsers.gallery_parser import article_metadata, image_page_list, comment_list
from ehentai.parsers.viewer_parser import direct_image_url

__all__ = [
    'parse_document',
    'search_result_count',
    'result_list',
    'article_metadata',
    'image_page_list',
    'comment_list',
    'direct_image_url',
]
