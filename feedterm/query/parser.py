"""Single-pass parser for the article query language.

Each atom is either absorbed into the caller's ``ArticleFilter`` (so the feed
service can evaluate it) or emitted as a clause of the residual query, never
both.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from feedterm.models import ArticleFilter, Marked, Read
from feedterm.query.article_query import ArticleQuery, AtomKind, QueryAtom, QueryClause
from feedterm.query.errors import (
    InvalidSortOrder,
    KeyAfterNegationExpected,
    KeyOrWordExpected,
    LexerError,
    MultipleSortOrdersFound,
    SearchTermExpected,
    SortOrderExpected,
    SortOrderParseError,
    TagListExpected,
    TimeOrRelativeTimeExpected,
)
from feedterm.query.lexer import Lexeme, QueryLexer, QueryToken, strip_first_and_last
from feedterm.query.search_term import SearchTerm, to_search_term
from feedterm.query.sort_order import SortOrder, parse_sort_order
from feedterm.query.timeexpr import parse_time

logger = logging.getLogger(__name__)

_FIELD_KEYS = {
    QueryToken.KEY_TITLE: AtomKind.TITLE,
    QueryToken.KEY_SUMMARY: AtomKind.SUMMARY,
    QueryToken.KEY_AUTHOR: AtomKind.AUTHOR,
    QueryToken.KEY_FEED: AtomKind.FEED,
    QueryToken.KEY_FEED_URL: AtomKind.FEED_URL,
    QueryToken.KEY_FEED_WEB_URL: AtomKind.FEED_WEB_URL,
    QueryToken.KEY_ALL: AtomKind.ALL,
}

_TIME_KEYS = {
    QueryToken.KEY_NEWER: AtomKind.NEWER,
    QueryToken.KEY_OLDER: AtomKind.OLDER,
    QueryToken.KEY_SYNCED_BEFORE: AtomKind.SYNCED_BEFORE,
    QueryToken.KEY_SYNCED_AFTER: AtomKind.SYNCED_AFTER,
}

_NEGATED_TIME_KINDS = {
    AtomKind.NEWER: AtomKind.OLDER,
    AtomKind.OLDER: AtomKind.NEWER,
    AtomKind.SYNCED_BEFORE: AtomKind.SYNCED_AFTER,
    AtomKind.SYNCED_AFTER: AtomKind.SYNCED_BEFORE,
}

# filter field and merge function per time comparison
_TIME_FILTER_FIELDS = {
    AtomKind.NEWER: ("newer_than", max),
    AtomKind.OLDER: ("older_than", min),
    AtomKind.SYNCED_AFTER: ("synced_after", max),
    AtomKind.SYNCED_BEFORE: ("synced_before", min),
}


class _QueryBuilder:
    """Mutable state of one parse: clauses, sort order and the filter accumulator."""

    def __init__(self, source: str, article_filter: Optional[ArticleFilter], now: datetime):
        self.lexer = QueryLexer(source)
        self.article_filter = article_filter
        self.now = now
        self.clauses: List[QueryClause] = []
        self.sort_order: Optional[SortOrder] = None

    def _error(self, error_class):
        return error_class(self.lexer.span[0], self.lexer.slice)

    def parse_atom(self, lexeme: Lexeme, negate: bool) -> Tuple[Optional[QueryAtom], bool]:
        """Parse the atom starting at ``lexeme``.

        Returns:
            the atom (``None`` if the token produced no atom) and whether the
            negation was already applied while building it
        """
        token = lexeme.token

        if token is QueryToken.KEY_TRUE:
            return QueryAtom(AtomKind.TRUE), False
        if token is QueryToken.KEY_READ:
            return self._read_state(Read.READ, negate)
        if token is QueryToken.KEY_UNREAD:
            return self._read_state(Read.UNREAD, negate)
        if token is QueryToken.KEY_MARKED:
            return self._marked_state(Marked.MARKED, negate)
        if token is QueryToken.KEY_UNMARKED:
            return self._marked_state(Marked.UNMARKED, negate)
        if token is QueryToken.KEY_TAGGED:
            return QueryAtom(AtomKind.TAGGED), False
        if token is QueryToken.KEY_LAST_SYNC:
            return QueryAtom(AtomKind.LAST_SYNC), False

        if token in _FIELD_KEYS:
            term_lexeme = self.lexer.next()
            if term_lexeme is None:
                raise self._error(SearchTermExpected)
            return QueryAtom(_FIELD_KEYS[token], to_search_term(term_lexeme)), False

        if token is QueryToken.KEY_TAG:
            tag_lexeme = self.lexer.next()
            if tag_lexeme is None or tag_lexeme.token is not QueryToken.TAG_LIST:
                raise self._error(TagListExpected)
            return self._tag_list(tag_lexeme.text), False
        if token is QueryToken.TAG_LIST:
            return self._tag_list(lexeme.text), False

        if token is QueryToken.KEY_TODAY:
            return self._time_bound(AtomKind.NEWER, self.now - timedelta(days=1), negate)
        if token in _TIME_KEYS:
            return self._time_bound(_TIME_KEYS[token], self._time_literal(), negate)

        if token is QueryToken.SORT:
            self._sort_clause()
            return None, False

        if token is QueryToken.WORD:
            return QueryAtom(AtomKind.ALL, SearchTerm.word(lexeme.text)), False

        if token is QueryToken.ERROR:
            raise LexerError(lexeme.start, lexeme.text)
        raise KeyOrWordExpected(lexeme.start, lexeme.text)

    def _read_state(self, state: Read, negate: bool) -> Tuple[Optional[QueryAtom], bool]:
        if self.article_filter is None:
            return QueryAtom(AtomKind.READ, state), False
        if negate:
            state = Read.UNREAD if state is Read.READ else Read.READ
        self.article_filter.unread = state
        return None, True

    def _marked_state(self, state: Marked, negate: bool) -> Tuple[Optional[QueryAtom], bool]:
        if self.article_filter is None:
            return QueryAtom(AtomKind.MARKED, state), False
        if negate:
            state = Marked.UNMARKED if state is Marked.MARKED else Marked.MARKED
        self.article_filter.marked = state
        return None, True

    @staticmethod
    def _tag_list(text: str) -> QueryAtom:
        return QueryAtom(AtomKind.TAG, tuple(tag[1:] for tag in text.split(",")))

    def _time_literal(self) -> datetime:
        lexeme = self.lexer.next()
        if lexeme is None or lexeme.token is not QueryToken.QUOTED_STRING:
            raise self._error(TimeOrRelativeTimeExpected)
        try:
            return parse_time(strip_first_and_last(lexeme.text), self.now)
        except ValueError as e:
            raise TimeOrRelativeTimeExpected(lexeme.start, lexeme.text) from e

    def _time_bound(
        self, kind: AtomKind, time: datetime, negate: bool
    ) -> Tuple[Optional[QueryAtom], bool]:
        if negate:
            kind = _NEGATED_TIME_KINDS[kind]

        if self.article_filter is None:
            return QueryAtom(kind, time), True

        field_name, merge = _TIME_FILTER_FIELDS[kind]
        current = getattr(self.article_filter, field_name)
        setattr(self.article_filter, field_name, time if current is None else merge(current, time))
        return None, True

    def _sort_clause(self) -> None:
        lexeme = self.lexer.next()
        if lexeme is None or lexeme.token is not QueryToken.QUOTED_STRING:
            raise self._error(SortOrderExpected)
        if self.sort_order is not None:
            raise MultipleSortOrdersFound(lexeme.start, lexeme.text)
        try:
            self.sort_order = parse_sort_order(strip_first_and_last(lexeme.text))
        except SortOrderParseError as e:
            raise InvalidSortOrder(lexeme.start, lexeme.text, e) from e


def parse_query(
    text: str,
    article_filter: Optional[ArticleFilter] = None,
    now: Optional[datetime] = None,
) -> ArticleQuery:
    """Parse a query string.

    Args:
        text: query text, e.g. ``'unread title:"release" ~tag:#work'``
        article_filter: accumulator receiving the read/marked state and time
            bounds; when ``None`` those atoms become clauses instead
        now: reference time for ``today`` and relative time literals

    Returns:
        the parsed query holding the residual clauses and sort order

    Raises:
        QueryParseError: with the offset and text of the offending token
    """
    if now is None:
        now = datetime.now(timezone.utc)

    builder = _QueryBuilder(text, article_filter, now)
    negate = False

    while True:
        lexeme = builder.lexer.next()
        if lexeme is None:
            break

        if lexeme.token is QueryToken.NEGATE:
            if negate:
                raise KeyAfterNegationExpected(lexeme.start, lexeme.text)
            negate = True
            continue

        atom, absorbed = builder.parse_atom(lexeme, negate)
        if atom is not None:
            builder.clauses.append(QueryClause(atom, negate and not absorbed))
        negate = False

    if negate:
        raise KeyAfterNegationExpected(len(text), "")

    query = ArticleQuery(text, tuple(builder.clauses), builder.sort_order)
    logger.debug(f"query parsed: {query.clauses} sort={query.sort_order}")
    return query
