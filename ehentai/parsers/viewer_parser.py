"""
Image viewer page parser.

Each gallery image sits one hop behind a viewer page (``/s/<key>/<gid>-<n>``)
that embeds the actual image URL.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from ehentai.errors import ParseError
from ehentai.parsers.common import require

logger = logging.getLogger(__name__)


def direct_image_url(doc: BeautifulSoup) -> str:
    """Return the URL of the full image shown on a viewer page."""
    img = require(doc, 'viewer image', 'img', id='img')
    src = img.get('src', '')
    if not src:
        raise ParseError('Viewer image has no source')
    logger.debug('Viewer image: %s', src)
    return src
