"""Error taxonomy of the query and sort-order grammars.

Every error carries the offset of the offending text in the parsed string and
the offending text itself, so callers can point at the exact location.
"""

from typing import Optional


class SortOrderParseError(Exception):
    """Base class for sort-order parse failures."""

    message = "invalid sort order"

    def __init__(self, offset: int = 0, fragment: str = ""):
        self.offset = offset
        self.fragment = fragment
        super().__init__(f"{self.message} (got {fragment!r} at {offset})")


class OrderDirectionOrKeyExpected(SortOrderParseError):
    message = "order direction (< or >) or key expected"


class OrderKeyExpected(SortOrderParseError):
    message = "expecting order key (date, feed, etc.)"


class DuplicateKeyFound(SortOrderParseError):
    message = "duplicate key found"


class QueryParseError(Exception):
    """Base class for query parse failures."""

    message = "invalid query"

    def __init__(self, offset: int = 0, fragment: str = ""):
        self.offset = offset
        self.fragment = fragment
        super().__init__(f"{self.message} (got {fragment!r} at {offset})")


class LexerError(QueryParseError):
    message = "invalid token"


class KeyOrWordExpected(QueryParseError):
    message = "expecting key (title:, newer:, ...) or word to search"


class KeyAfterNegationExpected(QueryParseError):
    message = "expecting key after negation (~key:...)"


class SearchTermExpected(QueryParseError):
    message = "expecting search term (unquoted word, regex or quoted string)"


class TagListExpected(QueryParseError):
    message = "expecting tag list (#tag1,#tag2,#tag3,...)"


class SortOrderExpected(QueryParseError):
    message = 'expecting sort order (e.g., "date <feed")'


class MultipleSortOrdersFound(QueryParseError):
    message = "multiple sort orders found, only one sort order allowed"


class TimeOrRelativeTimeExpected(QueryParseError):
    message = "expecting time or relative time"


class InvalidRegularExpression(QueryParseError):
    message = "invalid regular expression"

    def __init__(self, offset: int = 0, fragment: str = "", reason: Optional[str] = None):
        self.reason = reason
        super().__init__(offset, fragment)


class InvalidSortOrder(QueryParseError):
    """Wraps the sort-order error raised inside a ``sort:"..."`` clause."""

    message = "invalid sort order"

    def __init__(self, offset: int, fragment: str, cause: SortOrderParseError):
        self.cause = cause
        super().__init__(offset, fragment)
