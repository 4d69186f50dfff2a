"""Tokenizer for the article query language.

Tokens are matched at the current position by longest match; on a tie a
keyword beats a bare word, so ``read`` is a keyword while ``reader`` is a word.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class QueryToken(Enum):
    """Token kinds of the query language.

    Each member carries its literal (``None`` for pattern tokens), a usage
    string and a detailed description used by the help layer.
    """

    NEGATE = ("~", "~", "negation ('not')")
    KEY_TRUE = ("*", "*", "matches all")
    KEY_READ = ("read", "read", "read articles")
    KEY_UNREAD = ("unread", "unread", "unread articles")
    KEY_MARKED = ("marked", "marked", "marked articles")
    KEY_UNMARKED = ("unmarked", "unmarked", "unmarked articles")
    KEY_TAGGED = ("tagged", "tagged", "articles with a tag")
    KEY_NEWER = ("newer:", "newer:<time>", "articles newer than the defined time")
    KEY_OLDER = ("older:", "older:<time>", "articles older than the defined time")
    KEY_TODAY = ("today", "today", "articles from today")
    KEY_LAST_SYNC = ("lastsync", "lastsync", "articles retrieved in the last sync operation")
    KEY_SYNCED_BEFORE = (
        "syncedbefore:",
        "syncedbefore:<time>",
        "articles synced before the defined time",
    )
    KEY_SYNCED_AFTER = (
        "syncedafter:",
        "syncedafter:<time>",
        "articles synced after the defined time",
    )
    KEY_FEED = ("feed:", "feed:<search term>", "articles with a feed matching the search term")
    KEY_TITLE = ("title:", "title:<search term>", "articles with a title matching the search term")
    KEY_SUMMARY = (
        "summary:",
        "summary:<search term>",
        "articles with a summary matching the search term",
    )
    KEY_AUTHOR = (
        "author:",
        "author:<search term>",
        "articles with an author matching the search term",
    )
    KEY_ALL = ("all:", "all:<search term>", "articles with any field containing the search term")
    KEY_FEED_URL = (
        "feedurl:",
        "feedurl:<search term>",
        "articles with a feed URL containing the search term",
    )
    KEY_FEED_WEB_URL = (
        "feedweburl:",
        "feedweburl:<search term>",
        "articles with a feed web URL containing the search term",
    )
    KEY_TAG = ("tag:", "tag:<tag list>", "articles carrying any of the listed tags")
    SORT = ("sort:", 'sort:"<sort order>"', "sorts the articles by the given sort order")

    QUOTED_STRING = (None, '"<text>"', "verbatim text")
    REGEX = (None, "/<regex>/", "regular expression")
    TAG_LIST = (None, "#tag1,#tag2", "list of tags")
    WORD = (None, "<word>", "word to search for in all fields")
    ERROR = (None, "<invalid>", "invalid token")

    def __init__(self, literal: Optional[str], usage: str, detail: str):
        self.literal = literal
        self.usage = usage
        self.detail = detail

    @property
    def is_keyword(self) -> bool:
        return self.literal is not None


KEYWORD_TOKENS: Tuple[QueryToken, ...] = tuple(token for token in QueryToken if token.is_keyword)

_WHITESPACE = re.compile(r"[ \t\n\f]+")

_PATTERN_TOKENS: Tuple[Tuple[QueryToken, "re.Pattern[str]"], ...] = (
    (QueryToken.QUOTED_STRING, re.compile(r'"[^"\n\r\\]*(?:\\.[^"\n\r\\]*)*"')),
    (QueryToken.REGEX, re.compile(r"/[^/\\]*(?:\\.[^/\\]*)*/")),
    (QueryToken.TAG_LIST, re.compile(r"#[a-zA-Z][a-zA-Z0-9]*(?:,#[a-zA-Z][a-zA-Z0-9]*)*")),
    (QueryToken.WORD, re.compile(r"\w+")),
)


@dataclass(frozen=True)
class Lexeme:
    """A token together with its position in the source string."""

    token: QueryToken
    start: int
    end: int
    text: str


class QueryLexer:
    """Pull-based tokenizer over a query string.

    ``span`` always refers to the last lexeme returned; after the input is
    exhausted it is the empty span at the end of the input.
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.span: Tuple[int, int] = (0, 0)

    @property
    def slice(self) -> str:
        return self.source[self.span[0]:self.span[1]]

    def remainder(self) -> str:
        return self.source[self.position:]

    def __iter__(self) -> Iterator[Lexeme]:
        while True:
            lexeme = self.next()
            if lexeme is None:
                return
            yield lexeme

    def next(self) -> Optional[Lexeme]:
        skipped = _WHITESPACE.match(self.source, self.position)
        if skipped:
            self.position = skipped.end()

        start = self.position
        if start >= len(self.source):
            self.span = (start, start)
            return None

        token, length = self._longest_match(start)
        if token is None:
            token, length = QueryToken.ERROR, 1

        end = start + length
        self.position = end
        self.span = (start, end)
        return Lexeme(token, start, end, self.source[start:end])

    def _longest_match(self, start: int) -> Tuple[Optional[QueryToken], int]:
        best: Optional[QueryToken] = None
        best_length = 0

        for token in KEYWORD_TOKENS:
            if self.source.startswith(token.literal, start) and len(token.literal) > best_length:
                best, best_length = token, len(token.literal)

        # pattern tokens only win when strictly longer than a keyword
        for token, pattern in _PATTERN_TOKENS:
            match = pattern.match(self.source, start)
            if match and match.end() - start > best_length:
                best, best_length = token, match.end() - start

        return best, best_length


def tokenize(source: str) -> List[Lexeme]:
    """Tokenize a complete query string."""
    return list(QueryLexer(source))


def strip_first_and_last(text: str) -> str:
    return text[1:-1]
