"""
Search results page parser.

Extracts the total result count and every gallery row of a results page.
Works with the compact (``gltc``), minimal (``gltm``) and extended
(``glte``) list layouts since they share the relevant cell classes.  The
thumbnail layout (``gld``) is handled separately.
"""

from __future__ import annotations

import re
import logging
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ehentai.errors import ParseError
from ehentai.models import ArticleKind, ResultSummary, TagMap
from ehentai.parsers.common import extract_img_src, extract_int, text_of

logger = logging.getLogger(__name__)

_COUNT_PATTERNS = (
    re.compile(r'Found\s+(?:about\s+)?([\d,]+)\s+results?', re.IGNORECASE),
    re.compile(r'Showing\s+[\d,]+\s*[-–]\s*[\d,]+\s+of\s+([\d,]+)', re.IGNORECASE),
)
_NO_HITS_RE = re.compile(r'No (?:hits|unfiltered results) found', re.IGNORECASE)
_LENGTH_RE = re.compile(r'(\d+)\s+pages?')


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse_kind(cell: Optional[Tag]) -> Optional[ArticleKind]:
    label = text_of(cell)
    if not label:
        return None
    try:
        return ArticleKind.parse(label)
    except ValueError:
        logger.debug('Unrecognised category label: %s', label)
        return None


def _parse_tags(container: Tag) -> TagMap:
    tags = TagMap()
    for div in container.find_all('div', class_=['gt', 'gtl']):
        raw = div.get('title', '') or text_of(div)
        if raw:
            tags.add_raw(raw)
    return tags


def _parse_row(row: Tag) -> Optional[ResultSummary]:
    """Parse one ``<tr>`` of a list-layout results table.

    Returns None for header and advertisement rows.
    """
    name_cell = row.find('td', class_='gl3c') or row.find('td', class_='gl3e') \
        or row.find('td', class_='gl3m')
    if not name_cell:
        return None

    link = name_cell.find('a', href=True)
    if not link:
        # extended layout keeps the link around the whole cell
        link = row.find('a', href=re.compile(r'/g/\d+/'))
    if not link:
        return None

    title = text_of(link.find('div', class_='glink')) or text_of(link)

    thumb = ''
    thumb_div = row.find('div', class_='glthumb')
    if thumb_div:
        thumb = extract_img_src(thumb_div.find('img'))
    if not thumb:
        thumb = extract_img_src(row.find('img'))

    posted = text_of(row.find('div', id=re.compile(r'^posted_')))

    uploader = ''
    uploader_cell = row.find('td', class_='gl4c')
    if uploader_cell:
        uploader = text_of(uploader_cell.find('a'))

    length = None
    for div in row.find_all('div'):
        match = _LENGTH_RE.fullmatch(div.get_text(strip=True))
        if match:
            length = int(match.group(1))
            break

    return ResultSummary(
        href=link['href'],
        title=title,
        thumb=thumb,
        tags=_parse_tags(row),
        kind=_parse_kind(row.find('div', class_='cn') or row.find('div', class_='cs')),
        posted=posted,
        uploader=uploader,
        length=length,
    )


def _parse_thumbnail_item(item: Tag) -> Optional[ResultSummary]:
    """Parse one ``<div class="gl1t">`` of the thumbnail layout."""
    link = item.find('a', href=True)
    if not link:
        return None
    title = text_of(item.find('span', class_='glink')) or text_of(link)
    return ResultSummary(
        href=link['href'],
        title=title,
        thumb=extract_img_src(item.find('img')),
        tags=_parse_tags(item),
        kind=_parse_kind(item.find('div', class_='cs') or item.find('div', class_='cn')),
        posted=text_of(item.find('div', id=re.compile(r'^posted_'))),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def search_result_count(doc: BeautifulSoup) -> int:
    """Return the total number of results the page reports."""
    text = doc.get_text(' ', strip=True)
    for pattern in _COUNT_PATTERNS:
        match = pattern.search(text)
        if match:
            return extract_int(match.group(1))
    if _NO_HITS_RE.search(text):
        return 0
    raise ParseError('Missing search result count')


def result_list(doc: BeautifulSoup) -> List[ResultSummary]:
    """Return every gallery listed on a results page, in page order.

    A page without a results table (query exhausted, page past the end)
    yields an empty list.
    """
    results = []

    table = doc.find('table', class_='itg')
    if table:
        for row in table.find_all('tr'):
            entry = _parse_row(row)
            if entry is not None:
                results.append(entry)
    else:
        grid = doc.find('div', class_='itg')
        if grid:
            for item in grid.find_all('div', class_='gl1t'):
                entry = _parse_thumbnail_item(item)
                if entry is not None:
                    results.append(entry)

    logger.debug('Parsed %d search results', len(results))
    return results
