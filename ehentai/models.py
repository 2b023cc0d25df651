"""
Data models for the E-Hentai client.

All models use dataclasses for lightweight internal usage and easy
serialisation to dicts / JSON.  Records parsed from the site are frozen:
the site does not change a gallery's metadata under a running session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

class TagKind(Enum):
    """Tag namespaces used by the site (``language:korean`` → LANGUAGE)."""
    LANGUAGE = 'language'
    PARODY = 'parody'
    CHARACTER = 'character'
    GROUP = 'group'
    ARTIST = 'artist'
    COSPLAYER = 'cosplayer'
    MALE = 'male'
    FEMALE = 'female'
    MIXED = 'mixed'
    OTHER = 'other'
    RECLASS = 'reclass'
    TEMP = 'temp'

    @classmethod
    def parse(cls, name: str) -> 'TagKind':
        """Look up a namespace by name.

        ``misc`` (the namespace's old name) and unknown namespaces fall back
        to OTHER.
        """
        key = name.strip().rstrip(':').lower()
        if key in ('', 'misc'):
            return cls.OTHER
        try:
            return cls(key)
        except ValueError:
            logger.debug("Unknown tag namespace %r, filed under 'other'", name)
            return cls.OTHER


class TagMap:
    """Categorised set of tags: ``TagKind -> {tag, ...}``."""

    def __init__(self, tags: Optional[Dict[TagKind, Iterable[str]]] = None):
        self._tags: Dict[TagKind, Set[str]] = {}
        for kind, values in (tags or {}).items():
            for value in values:
                self.add(kind, value)

    @classmethod
    def from_raw(cls, raw_tags: Iterable[str]) -> 'TagMap':
        """Build a map from ``namespace:tag`` strings."""
        tag_map = cls()
        for raw in raw_tags:
            tag_map.add_raw(raw)
        return tag_map

    def copy(self) -> 'TagMap':
        return TagMap(self._tags)

    def add(self, kind: TagKind, tag: str) -> None:
        tag = tag.strip()
        if tag:
            self._tags.setdefault(kind, set()).add(tag)

    def add_raw(self, raw: str) -> None:
        """Add a ``namespace:tag`` string; a bare tag goes under OTHER."""
        namespace, sep, tag = raw.partition(':')
        if not sep:
            self.add(TagKind.OTHER, namespace)
        else:
            self.add(TagKind.parse(namespace), tag)

    def get(self, kind: TagKind) -> Set[str]:
        return set(self._tags.get(kind, ()))

    def kinds(self) -> List[TagKind]:
        return [kind for kind in TagKind if self._tags.get(kind)]

    def __contains__(self, raw) -> bool:
        if not isinstance(raw, str):
            return False
        namespace, sep, tag = raw.partition(':')
        if not sep:
            kind, tag = TagKind.OTHER, namespace
        else:
            kind = TagKind.parse(namespace)
        return tag.strip() in self._tags.get(kind, ())

    def __iter__(self) -> Iterator[Tuple[TagKind, str]]:
        for kind in self.kinds():
            for tag in sorted(self._tags[kind]):
                yield kind, tag

    def __len__(self) -> int:
        return sum(len(values) for values in self._tags.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, TagMap):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f'TagMap({self.to_dict()!r})'

    def to_dict(self) -> Dict[str, List[str]]:
        """Return ``{namespace: [sorted tags]}`` for non-empty namespaces."""
        return {kind.value: sorted(self._tags[kind]) for kind in self.kinds()}


# ---------------------------------------------------------------------------
# Gallery category
# ---------------------------------------------------------------------------

class ArticleKind(Enum):
    """Gallery category.  ``bit`` is the category's flag in ``f_cats``."""
    MISC = ('Misc', 1)
    DOUJINSHI = ('Doujinshi', 2)
    MANGA = ('Manga', 4)
    ARTIST_CG = ('Artist CG', 8)
    GAME_CG = ('Game CG', 16)
    IMAGE_SET = ('Image Set', 32)
    COSPLAY = ('Cosplay', 64)
    ASIAN_PORN = ('Asian Porn', 128)
    NON_H = ('Non-H', 256)
    WESTERN = ('Western', 512)
    PRIVATE = ('Private', 0)

    def __init__(self, label: str, bit: int):
        self.label = label
        self.bit = bit

    @classmethod
    def parse(cls, label: str) -> 'ArticleKind':
        """Parse the site label (``"Artist CG"``, ``"artistcg"`` ...)."""
        key = label.strip().lower().replace(' ', '').replace('-', '')
        for kind in cls:
            if kind.label.lower().replace(' ', '').replace('-', '') == key:
                return kind
        raise ValueError(f'Unknown gallery category: {label!r}')


# ---------------------------------------------------------------------------
# Search result entry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResultSummary:
    """One gallery as it appears on a search results page."""
    href: str
    title: str
    thumb: str = ''
    tags: TagMap = field(default_factory=TagMap, hash=False)
    kind: Optional[ArticleKind] = None
    posted: str = ''
    uploader: str = ''
    length: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'href': self.href,
            'title': self.title,
            'thumb': self.thumb,
            'tags': self.tags.to_dict(),
            'kind': self.kind.label if self.kind else None,
            'posted': self.posted,
            'uploader': self.uploader,
            'length': self.length,
        }


# ---------------------------------------------------------------------------
# Gallery page metadata
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ArticleMeta:
    """All metadata extracted from a gallery page's header."""
    href: str
    title: str
    original_title: str
    kind: ArticleKind
    thumb: str
    uploader: str
    posted: str
    parent: Optional[str]
    visible: bool
    language: str
    translated: bool
    file_size: str
    length: int
    favorited: int
    rating_count: int
    rating: float
    tags: TagMap = field(default_factory=TagMap, hash=False)

    def to_summary(self) -> ResultSummary:
        """Return the search-list view of this gallery."""
        return ResultSummary(
            href=self.href,
            title=self.title,
            thumb=self.thumb,
            tags=self.tags.copy(),
            kind=self.kind,
            posted=self.posted,
            uploader=self.uploader,
            length=self.length,
        )

    def to_dict(self) -> dict:
        return {
            'href': self.href,
            'title': self.title,
            'original_title': self.original_title,
            'kind': self.kind.label,
            'thumb': self.thumb,
            'uploader': self.uploader,
            'posted': self.posted,
            'parent': self.parent,
            'visible': self.visible,
            'language': self.language,
            'translated': self.translated,
            'file_size': self.file_size,
            'length': self.length,
            'favorited': self.favorited,
            'rating_count': self.rating_count,
            'rating': self.rating,
            'tags': self.tags.to_dict(),
        }


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Vote:
    """Score of a comment together with the voters the page lists."""
    score: int
    voters: List[Tuple[str, int]] = field(default_factory=list, hash=False)
    omitted: int = 0


@dataclass(frozen=True)
class Comment:
    """A single gallery comment.

    Attributes:
        posted: Posting time as printed by the site.
        edited: Last edit time, or None if never edited.
        vote: None for the uploader's own comment, which carries no score.
        author: Display name of the commenter.
        body: Comment text with line breaks preserved.
    """
    posted: str
    author: str
    body: str
    edited: Optional[str] = None
    vote: Optional[Vote] = None

    @property
    def is_uploader(self) -> bool:
        return self.vote is None

    @property
    def score(self) -> Optional[int]:
        return self.vote.score if self.vote else None

    @property
    def voters(self) -> Optional[List[Tuple[str, int]]]:
        return list(self.vote.voters) if self.vote else None

    @property
    def omitted_voters(self) -> Optional[int]:
        return self.vote.omitted if self.vote else None

    def to_dict(self) -> dict:
        return {
            'posted': self.posted,
            'edited': self.edited,
            'author': self.author,
            'body': self.body,
            'score': self.score,
            'voters': [list(v) for v in self.vote.voters] if self.vote else None,
            'omitted_voters': self.omitted_voters,
        }
