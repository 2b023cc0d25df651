"""
Shared parsing utilities used by the search, gallery and viewer parsers.
"""

from __future__ import annotations

import re
import logging
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from ehentai.errors import ParseError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Document construction
# ---------------------------------------------------------------------------

def parse_document(content: Union[bytes, str]) -> BeautifulSoup:
    """Turn a fetched page into a queryable document.

    Raw bytes must be UTF-8; anything else is treated as a malformed
    response.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ParseError(f'Response is not valid UTF-8: {e}') from e
    return BeautifulSoup(content, 'html.parser')


# ---------------------------------------------------------------------------
# Element lookup
# ---------------------------------------------------------------------------

def require(parent: Tag, what: str, *args, **kwargs) -> Tag:
    """``parent.find(*args, **kwargs)`` that raises ParseError on a miss.

    *what* names the field for the error message.
    """
    found = parent.find(*args, **kwargs)
    if not isinstance(found, Tag):
        raise ParseError(f'Missing {what}')
    return found


def text_of(tag: Optional[Tag]) -> str:
    """Stripped text of *tag*, or empty string when the tag is absent."""
    if not tag:
        return ''
    return tag.get_text(strip=True)


def text_with_breaks(tag: Tag) -> str:
    """Text of *tag* with ``<br>`` turned into newlines."""
    parts = []
    for node in tag.descendants:
        if isinstance(node, NavigableString):
            parts.append(str(node))
        elif isinstance(node, Tag) and node.name == 'br':
            parts.append('\n')
    return ''.join(parts).strip()


# ---------------------------------------------------------------------------
# Value extraction
# ---------------------------------------------------------------------------

_INT_RE = re.compile(r'\d[\d,]*')
_STYLE_URL_RE = re.compile(r'url\((["\']?)(.+?)\1\)')


def extract_int(text: str) -> Optional[int]:
    """Return the first integer in *text* (``"1,234 times"`` → 1234)."""
    match = _INT_RE.search(text or '')
    if not match:
        return None
    return int(match.group(0).replace(',', ''))


def extract_style_url(style: str) -> str:
    """Extract the image URL out of an inline ``background: url(...)`` style."""
    match = _STYLE_URL_RE.search(style or '')
    return match.group(2) if match else ''


def extract_img_src(img: Optional[Tag]) -> str:
    """Image source, preferring the lazy-load attribute when present."""
    if not img:
        return ''
    return img.get('data-src', '') or img.get('src', '')
