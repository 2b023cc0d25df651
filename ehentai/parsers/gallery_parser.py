"""
Gallery page parser.

Extracts the header metadata, the image-viewer links of the currently shown
thumbnail page, and the comment section.  A gallery page only lists
``IMAGES_PER_PAGE`` viewer links; the remaining ones live on ``?p=N``
sub-pages that share the same layout and go through ``image_page_list``
as well.
"""

from __future__ import annotations

import re
import logging
from typing import Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ehentai.errors import ParseError
from ehentai.models import ArticleKind, ArticleMeta, Comment, TagKind, TagMap, Vote
from ehentai.parsers.common import (
    extract_int,
    extract_style_url,
    extract_img_src,
    require,
    text_of,
    text_with_breaks,
)

logger = logging.getLogger(__name__)

_RATING_RE = re.compile(r'Average:\s*([\d.]+)')
_POSTED_RE = re.compile(r'Posted on\s+(.+?)\s+by:', re.DOTALL)
_EDITED_RE = re.compile(r'Last edited on\s+(.+?)\.?$', re.DOTALL)
_VOTER_RE = re.compile(r'^(.*\S)\s+([+-]\d+)$')
_OMITTED_RE = re.compile(r'and\s+(\d+)\s+more', re.IGNORECASE)
# "Korean TR" (translated) / "Japanese RW" (rewrite)
_TRANSLATED_RE = re.compile(r'\sTR$')
_LANGUAGE_MARK_RE = re.compile(r'\s+(?:TR|RW)$')


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _detail_fields(doc: BeautifulSoup) -> Dict[str, Tag]:
    """Map the ``#gdd`` labels (``"Posted"``, ``"Length"`` ...) to value cells."""
    gdd = require(doc, 'gallery details table', 'div', id='gdd')
    fields = {}
    for row in gdd.find_all('tr'):
        label = row.find('td', class_='gdt1')
        value = row.find('td', class_='gdt2')
        if label and value:
            fields[label.get_text(strip=True).rstrip(':')] = value
    return fields


def _require_field(fields: Dict[str, Tag], label: str) -> Tag:
    try:
        return fields[label]
    except KeyError:
        raise ParseError(f'Missing gallery detail: {label}') from None


def _parse_thumb(doc: BeautifulSoup) -> str:
    gd1 = doc.find('div', id='gd1')
    if not gd1:
        return ''
    inner = gd1.find('div', style=True)
    if inner:
        url = extract_style_url(inner['style'])
        if url:
            return url
    return extract_img_src(gd1.find('img'))


def _parse_favorited(cell: Optional[Tag]) -> int:
    text = text_of(cell)
    if not text or text.lower() == 'never':
        return 0
    if text.lower() == 'once':
        return 1
    return extract_int(text) or 0


def _parse_rating(doc: BeautifulSoup) -> tuple:
    rating_count = extract_int(text_of(doc.find(id='rating_count'))) or 0
    rating = 0.0
    match = _RATING_RE.search(text_of(doc.find(id='rating_label')))
    if match:
        try:
            rating = float(match.group(1))
        except ValueError:
            raise ParseError(f'Malformed rating: {match.group(1)!r}') from None
    return rating_count, rating


def _parse_taglist(doc: BeautifulSoup) -> TagMap:
    tags = TagMap()
    taglist = doc.find('div', id='taglist')
    if not taglist:
        return tags
    for row in taglist.find_all('tr'):
        namespace = row.find('td', class_='tc')
        kind = TagKind.parse(text_of(namespace)) if namespace else TagKind.OTHER
        for div in row.find_all('div', class_=['gt', 'gtl', 'gtw']):
            tags.add(kind, text_of(div.find('a')) or text_of(div))
    return tags


def _parse_vote(block: Tag) -> Vote:
    score_span = require(block, 'comment score', 'span', id=re.compile(r'^comment_score_'))
    score_text = score_span.get_text(strip=True)
    try:
        score = int(score_text)
    except ValueError:
        raise ParseError(f'Malformed comment score: {score_text!r}') from None

    voters = []
    omitted = 0
    votes_div = block.find('div', class_='c7')
    if votes_div:
        for span in votes_div.find_all('span'):
            match = _VOTER_RE.match(span.get_text(strip=True))
            if match:
                voters.append((match.group(1), int(match.group(2))))
        match = _OMITTED_RE.search(votes_div.get_text(' ', strip=True))
        if match:
            omitted = int(match.group(1))

    return Vote(score=score, voters=voters, omitted=omitted)


def _parse_comment(block: Tag) -> Comment:
    header = require(block, 'comment header', 'div', class_='c3')
    match = _POSTED_RE.search(header.get_text(' ', strip=True))
    if not match:
        raise ParseError('Missing comment posting time')

    author_link = header.find('a', href=True)
    author = text_of(author_link) if author_link else ''

    body = text_with_breaks(require(block, 'comment body', 'div', class_='c6'))

    edited = None
    edited_div = block.find('div', class_='c8')
    if edited_div:
        edited_match = _EDITED_RE.search(edited_div.get_text(' ', strip=True))
        if edited_match:
            edited = edited_match.group(1)

    # the uploader's comment has no score
    if block.find('a', attrs={'name': 'ulcomment'}):
        vote = None
    else:
        vote = _parse_vote(block)

    return Comment(
        posted=match.group(1),
        author=author,
        body=body,
        edited=edited,
        vote=vote,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def article_metadata(doc: BeautifulSoup, href: str) -> ArticleMeta:
    """Parse the gallery header into an *ArticleMeta*.

    Raises ParseError when the title, category or any of the detail rows the
    site always prints are missing.
    """
    title = text_of(require(doc, 'gallery title', 'h1', id='gn'))
    original_title = text_of(doc.find('h1', id='gj'))

    kind_div = require(doc, 'gallery category', 'div', id='gdc')
    try:
        kind = ArticleKind.parse(text_of(kind_div))
    except ValueError as e:
        raise ParseError(str(e)) from e

    uploader = ''
    gdn = doc.find('div', id='gdn')
    if gdn:
        # disowned galleries print a bare label instead of a profile link
        uploader = text_of(gdn.find('a')) or text_of(gdn)

    fields = _detail_fields(doc)

    parent_cell = _require_field(fields, 'Parent')
    parent_link = parent_cell.find('a', href=True)
    parent = parent_link['href'] if parent_link else None

    language_text = _require_field(fields, 'Language').get_text(' ', strip=True)
    translated = _TRANSLATED_RE.search(language_text) is not None
    language = _LANGUAGE_MARK_RE.sub('', language_text).strip()

    length = extract_int(text_of(_require_field(fields, 'Length')))
    if length is None:
        raise ParseError('Gallery length is not a number')

    rating_count, rating = _parse_rating(doc)

    meta = ArticleMeta(
        href=href,
        title=title,
        original_title=original_title,
        kind=kind,
        thumb=_parse_thumb(doc),
        uploader=uploader,
        posted=text_of(_require_field(fields, 'Posted')),
        parent=parent,
        visible=text_of(_require_field(fields, 'Visible')).lower().startswith('yes'),
        language=language,
        translated=translated,
        file_size=text_of(_require_field(fields, 'File Size')),
        length=length,
        favorited=_parse_favorited(fields.get('Favorited')),
        rating_count=rating_count,
        rating=rating,
        tags=_parse_taglist(doc),
    )

    logger.debug(
        'Parsed gallery: title=%s, length=%d, tags=%d',
        meta.title[:40],
        meta.length,
        len(meta.tags),
    )
    return meta


def image_page_list(doc: BeautifulSoup) -> List[str]:
    """Return the image-viewer links of the shown thumbnail page, in order."""
    gdt = require(doc, 'thumbnail grid', 'div', id='gdt')
    return [a['href'] for a in gdt.find_all('a', href=True)]


def comment_list(doc: BeautifulSoup) -> List[Comment]:
    """Return the comments shown on the page in site order.

    A gallery without comments has an empty ``#cdiv``; a page without the
    section at all is malformed.
    """
    cdiv = require(doc, 'comment section', 'div', id='cdiv')
    return [_parse_comment(block) for block in cdiv.find_all('div', class_='c1')]
