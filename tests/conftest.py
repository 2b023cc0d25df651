"""
Pytest configuration and fixtures for the E-Hentai client tests.
"""
import os
import sys

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

import pytest

from ehentai.errors import TransportError
from ehentai.parsers import parse_document

GALLERY_HREF = 'https://e-hentai.org/g/1556174/cfe385099d/'


class FakeHandler:
    """Stand-in for RequestHandler serving canned pages by locator.

    Every requested locator is recorded in ``requests``; locators listed in
    ``failures`` (or not served at all) raise TransportError.
    """

    def __init__(self, pages=None, images=None, failures=None):
        self.pages = dict(pages or {})
        self.images = dict(images or {})
        self.failures = set(failures or ())
        self.requests = []
        self.closed = False

    def _lookup(self, table, locator):
        self.requests.append(locator)
        if locator in self.failures or locator not in table:
            raise TransportError(f'No response for {locator}', url=locator)
        return table[locator]

    def get_html(self, locator):
        return parse_document(self._lookup(self.pages, locator))

    def get_image(self, locator):
        return self._lookup(self.images, locator)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_handler():
    """Return a factory building FakeHandler instances."""
    return FakeHandler


# ---------------------------------------------------------------------------
# Search pages
# ---------------------------------------------------------------------------

def _search_row(gid, title, kind, thumb_attrs, tags, uploader, length):
    tag_divs = ''.join(
        f'<div class="{css}" title="{raw}">{raw.partition(":")[2]}</div>'
        for css, raw in tags
    )
    return f'''
    <tr>
        <td class="gl1c glcat"><div class="cn ct2">{kind}</div></td>
        <td class="gl2c">
            <div class="glthumb" id="it{gid}"><div><img alt="{title}" {thumb_attrs}></div></div>
            <div><div id="posted_{gid}">2020-01-12 13:41</div></div>
        </td>
        <td class="gl3c glname">
            <a href="https://e-hentai.org/g/{gid}/0123abcdef/">
                <div class="glink">{title}</div>
                <div>{tag_divs}</div>
            </a>
        </td>
        <td class="gl4c glhide">
            <div><a href="https://e-hentai.org/uploader/{uploader}">{uploader}</a></div>
            <div>{length} pages</div>
        </td>
    </tr>
    '''


@pytest.fixture
def search_page_html():
    """Return a factory for a compact-layout results page.

    Args of the factory:
        result_count: Total reported by the page
        rows: Number of gallery rows to list (at most 2 distinct rows are
            templated, further rows reuse the second template)
    """
    def build(result_count=30, rows=2):
        body = [
            _search_row(
                1556174, 'Nibun no Yuudou [Korean]', 'Doujinshi',
                'src="data:image/gif;base64,R0lGOD" data-src="https://ehgt.org/t/ab/cd/thumb1.jpg"',
                [('gt', 'language:korean'), ('gt', 'artist:chicke iii'), ('gtl', 'female:big breasts')],
                'teamedge', 24,
            ),
        ]
        for i in range(1, rows):
            body.append(_search_row(
                1556200 + i, f'Another Gallery {i}', 'Manga',
                'src="https://ehgt.org/t/ef/gh/thumb2.jpg"',
                [], 'someone', 41,
            ))
        rows_html = ''.join(body[:rows])
        return f'''
        <html>
        <head><title>E-Hentai Galleries</title></head>
        <body>
            <div class="ido">
                <div class="searchtext"><p>Found {result_count:,} results.</p></div>
                <table class="itg gltc">
                    <tr><th>Category</th><th>Published</th><th>Title</th><th>Uploader</th></tr>
                    {rows_html}
                </table>
            </div>
        </body>
        </html>
        '''
    return build


@pytest.fixture
def empty_search_html():
    """Return a results page for a query without hits."""
    return '''
    <html>
    <head><title>E-Hentai Galleries</title></head>
    <body>
        <div class="ido">
            <div class="searchtext"><p>No hits found</p></div>
        </div>
    </body>
    </html>
    '''


# ---------------------------------------------------------------------------
# Gallery pages
# ---------------------------------------------------------------------------

UPLOADER_COMMENT = '''
<a name="c0"></a>
<div class="c1">
    <div class="c2">
        <div class="c3">Posted on 12 January 2020, 13:41 by: &nbsp; <a href="https://e-hentai.org/uploader/teamedge">teamedge</a>&nbsp; &nbsp; <a name="ulcomment"></a></div>
        <div class="c4 nosel">Uploader Comment</div>
        <div class="c"></div>
    </div>
    <div class="c6" id="comment_0">Thanks for reading<br>Enjoy</div>
</div>
'''

READER_COMMENT = '''
<a name="c1"></a>
<div class="c1">
    <div class="c2">
        <div class="c3">Posted on 13 January 2020, 02:11 by: &nbsp; <a href="https://e-hentai.org/index.php?showuser=1">reader</a></div>
        <div class="c5 nosel"><span id="comment_score_123">+45</span></div>
        <div class="c"></div>
    </div>
    <div class="c6" id="comment_123">Great work</div>
    <div class="c8">Last edited on 13 January 2020, 03:00.</div>
    <div class="c7" id="cvotes_123" style="display:none">Base +3, <span>alice +10</span>, <span>bob -5</span>, and 3 more...</div>
</div>
'''

LATE_COMMENT = '''
<a name="c2"></a>
<div class="c1">
    <div class="c2">
        <div class="c3">Posted on 20 February 2020, 08:00 by: &nbsp; <a href="https://e-hentai.org/index.php?showuser=2">latecomer</a></div>
        <div class="c5 nosel"><span id="comment_score_456">-2</span></div>
        <div class="c"></div>
    </div>
    <div class="c6" id="comment_456">Late to the party</div>
</div>
'''


def viewer_link(index):
    return f'https://e-hentai.org/s/0a1b2c3d4e/1556174-{index}'


@pytest.fixture
def gallery_page_html():
    """Return a factory for a gallery page.

    Args of the factory:
        length: Page count printed in the details table
        first: 1-based number of the first listed image
        count: Number of viewer links on this thumbnail page
        comments: Raw HTML of the comment blocks
    """
    def build(length=41, first=1, count=40, comments=UPLOADER_COMMENT + READER_COMMENT):
        links = ''.join(
            f'<div class="gdtm"><div><a href="{viewer_link(i)}"><img alt="{i}"></a></div></div>'
            for i in range(first, first + count)
        )
        return f'''
        <html>
        <head><title>Nibun no Yuudou - E-Hentai Galleries</title></head>
        <body>
        <div class="gm">
            <div id="gleft"><div id="gd1"><div style="width:250px; height:354px; background:transparent url(https://ehgt.org/ab/cd/cover.jpg) 0 0 no-repeat"></div></div></div>
            <div id="gd2">
                <h1 id="gn">(C97) Nibun no Yuudou | 2등분의 유혹 [Korean]</h1>
                <h1 id="gj">(C97) 二分の誘惑</h1>
            </div>
            <div id="gmid">
                <div id="gd3">
                    <div id="gdc"><div class="cs ct2">Doujinshi</div></div>
                    <div id="gdn"><a href="https://e-hentai.org/uploader/teamedge">teamedge</a></div>
                    <div id="gdd"><table>
                        <tr><td class="gdt1">Posted:</td><td class="gdt2">2020-01-12 13:41</td></tr>
                        <tr><td class="gdt1">Parent:</td><td class="gdt2"><a href="https://e-hentai.org/g/1555000/0123456789/">1555000</a></td></tr>
                        <tr><td class="gdt1">Visible:</td><td class="gdt2">Yes</td></tr>
                        <tr><td class="gdt1">Language:</td><td class="gdt2">Korean &nbsp;<span class="halp" title="This gallery has been translated from the original language text.">TR</span></td></tr>
                        <tr><td class="gdt1">File Size:</td><td class="gdt2">52.43 MiB</td></tr>
                        <tr><td class="gdt1">Length:</td><td class="gdt2">{length} pages</td></tr>
                        <tr><td class="gdt1">Favorited:</td><td class="gdt2" id="favcount">1,234 times</td></tr>
                    </table></div>
                    <div id="gdr"><table>
                        <tr><td class="grt1">Rating:</td><td class="grt2"><div id="rating_image" class="ir"></div></td><td id="rating_count">456</td></tr>
                        <tr><td id="rating_label" colspan="3">Average: 4.52</td></tr>
                    </table></div>
                </div>
                <div id="taglist"><table>
                    <tr><td class="tc">language:</td><td>
                        <div id="td_language:korean" class="gt"><a id="ta_language:korean" href="https://e-hentai.org/tag/language:korean">korean</a></div>
                        <div id="td_language:translated" class="gt"><a href="https://e-hentai.org/tag/language:translated">translated</a></div>
                    </td></tr>
                    <tr><td class="tc">female:</td><td>
                        <div id="td_female:big_breasts" class="gt"><a href="https://e-hentai.org/tag/female:big+breasts">big breasts</a></div>
                    </td></tr>
                    <tr><td class="tc">misc:</td><td>
                        <div id="td_full_color" class="gtl"><a href="https://e-hentai.org/tag/full+color">full color</a></div>
                    </td></tr>
                </table></div>
            </div>
        </div>
        <div id="gdt">{links}<div class="c"></div></div>
        <div id="cdiv" class="gm">{comments}</div>
        </body>
        </html>
        '''
    return build


@pytest.fixture
def viewer_page_html():
    """Return a factory for an image viewer page."""
    def build(src='https://abc.hath.network/h/key/001.jpg'):
        return f'''
        <html>
        <body>
            <div id="i1">
                <h1>Nibun no Yuudou</h1>
                <div id="i3"><a href="{viewer_link(2)}"><img id="img" src="{src}" style="height:1280px;width:900px"></a></div>
            </div>
        </body>
        </html>
        '''
    return build


@pytest.fixture
def content_warning_html():
    """Return the 'Offensive For Everyone' interstitial."""
    return f'''
    <html>
    <body>
        <div class="d">
            <h1>Content Warning</h1>
            <p>This gallery has been flagged as <strong>Offensive For Everyone</strong>.</p>
            <p>[<a href="{GALLERY_HREF}?nw=session">View Gallery</a>] [<a href="https://e-hentai.org/">Get Me Outta Here</a>]</p>
        </div>
    </body>
    </html>
    '''


@pytest.fixture
def comment_html():
    """Return raw comment blocks keyed by who wrote them."""
    return {
        'uploader': UPLOADER_COMMENT,
        'reader': READER_COMMENT,
        'late': LATE_COMMENT,
    }
