"""Sort orders for article lists.

A sort order is written as a sequence of keys, each optionally prefixed by a
direction: ``<`` ascending (the default) or ``>`` descending, e.g.
``"<feed >date title"``. Earlier keys take precedence; later keys only break
ties.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Iterable, List, Mapping, Optional, Tuple

from feedterm.models import Article, Feed
from feedterm.query.errors import (
    DuplicateKeyFound,
    OrderDirectionOrKeyExpected,
    OrderKeyExpected,
)

logger = logging.getLogger(__name__)


class SortDirection(Enum):
    ASCENDING = "<"
    DESCENDING = ">"

    @property
    def symbol(self) -> str:
        return self.value

    def reversed(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING

    def apply(self, ordering: int) -> int:
        return -ordering if self is SortDirection.DESCENDING else ordering


class SortField(Enum):
    """Sortable article attributes, with help metadata."""

    FEED = ("feed", "sort by the label of the article's feed")
    DATE = ("date", "sort by publication date")
    SYNCED = ("synced", "sort by the time the article was synced")
    TITLE = ("title", "sort by title")
    AUTHOR = ("author", "sort by author")

    def __init__(self, keyword: str, detail: str):
        self.keyword = keyword
        self.detail = detail


_FIELDS_BY_KEYWORD = {field.keyword: field for field in SortField}
_DIRECTIONS_BY_SYMBOL = {direction.symbol: direction for direction in SortDirection}


def _cmp(left, right) -> int:
    # None sorts before any value
    if left is None or right is None:
        return (left is not None) - (right is not None)
    return (left > right) - (left < right)


def _upper(text: Optional[str]) -> Optional[str]:
    return text.upper() if text is not None else None


@dataclass(frozen=True)
class SortKey:
    field: SortField
    direction: SortDirection = SortDirection.ASCENDING

    def reversed(self) -> "SortKey":
        return SortKey(self.field, self.direction.reversed())

    def compare(self, article_1: Article, article_2: Article, feed_map: Mapping[str, Feed]) -> int:
        # Date and Synced are inverted after applying the direction:
        # an ascending date key lists the newest article first.
        if self.field is SortField.DATE:
            return -self.direction.apply(_cmp(article_1.date, article_2.date))
        if self.field is SortField.SYNCED:
            return -self.direction.apply(_cmp(article_1.synced, article_2.synced))
        if self.field is SortField.TITLE:
            return self.direction.apply(_cmp(_upper(article_1.title), _upper(article_2.title)))
        if self.field is SortField.AUTHOR:
            return self.direction.apply(_cmp(_upper(article_1.author), _upper(article_2.author)))

        feed_1 = feed_map.get(article_1.feed_id)
        feed_2 = feed_map.get(article_2.feed_id)
        label_1 = feed_1.label.upper() if feed_1 is not None else None
        label_2 = feed_2.label.upper() if feed_2 is not None else None
        return self.direction.apply(_cmp(label_1, label_2))

    def __str__(self) -> str:
        return f"{self.direction.symbol}{self.field.keyword}"


@dataclass(frozen=True)
class SortOrder:
    """An ordered list of sort keys without duplicate fields."""

    keys: Tuple[SortKey, ...] = ()

    @classmethod
    def from_str(cls, text: str) -> "SortOrder":
        return parse_sort_order(text)

    def is_empty(self) -> bool:
        return not self.keys

    def reversed(self) -> "SortOrder":
        return SortOrder(tuple(key.reversed() for key in reversed(self.keys)))

    def reverse(self, flag: bool) -> "SortOrder":
        return self.reversed() if flag else self

    def compare(self, article_1: Article, article_2: Article, feed_map: Mapping[str, Feed]) -> int:
        for key in self.keys:
            ordering = key.compare(article_1, article_2, feed_map)
            if ordering != 0:
                return ordering
        return 0

    def sort(self, articles: Iterable[Article], feed_map: Mapping[str, Feed]) -> List[Article]:
        """Return the articles sorted by this order (stable)."""
        articles = list(articles)
        if not self.keys:
            return articles
        return sorted(
            articles,
            key=cmp_to_key(lambda a, b: self.compare(a, b, feed_map)),
        )

    def __str__(self) -> str:
        return " ".join(str(key) for key in self.keys)


class _SortLexer:
    """Tokenizer for sort orders: direction symbols and field keywords."""

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.span = (0, 0)

    @property
    def slice(self) -> str:
        return self.source[self.span[0]:self.span[1]]

    def next(self):
        """Return the next token: a SortDirection, a SortField, ``False`` for
        an unrecognized character, or ``None`` at the end of input."""
        while self.position < len(self.source) and self.source[self.position] in " \t\n\f":
            self.position += 1

        start = self.position
        if start >= len(self.source):
            self.span = (start, start)
            return None

        char = self.source[start]
        if char in _DIRECTIONS_BY_SYMBOL:
            self.position = start + 1
            self.span = (start, self.position)
            return _DIRECTIONS_BY_SYMBOL[char]

        for keyword, field in _FIELDS_BY_KEYWORD.items():
            if self.source.startswith(keyword, start):
                self.position = start + len(keyword)
                self.span = (start, self.position)
                return field

        self.position = start + 1
        self.span = (start, self.position)
        return False


def parse_sort_order(text: str) -> SortOrder:
    """Parse a sort order such as ``"<feed >date"``.

    Raises:
        OrderDirectionOrKeyExpected: a clause starts with something else
        OrderKeyExpected: a direction is not followed by a key
        DuplicateKeyFound: a field appears twice, in either direction
    """
    keys: List[SortKey] = []
    lexer = _SortLexer(text)

    while True:
        token = lexer.next()
        if token is None:
            break

        if isinstance(token, SortDirection):
            direction = token
            token = lexer.next()
        elif isinstance(token, SortField):
            direction = SortDirection.ASCENDING
        else:
            raise OrderDirectionOrKeyExpected(lexer.span[0], lexer.slice)

        if not isinstance(token, SortField):
            raise OrderKeyExpected(lexer.span[0], lexer.slice)

        key = SortKey(token, direction)
        if any(existing.field is key.field for existing in keys):
            raise DuplicateKeyFound(lexer.span[0], lexer.slice)

        keys.append(key)

    sort_order = SortOrder(tuple(keys))
    logger.debug(f"sort order parsed: {sort_order}")
    return sort_order
