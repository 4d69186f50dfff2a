"""Search terms: the leaf values matched against article text."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from feedterm.query.errors import InvalidRegularExpression, SearchTermExpected
from feedterm.query.lexer import Lexeme, QueryLexer, QueryToken, strip_first_and_last


class SearchTermKind(Enum):
    VERBATIM = "verbatim"
    WORD = "word"
    REGEX = "regex"


@dataclass(frozen=True)
class SearchTerm:
    """A text-matching rule.

    ``VERBATIM`` is a case-sensitive substring match, ``WORD`` a
    case-insensitive substring match and ``REGEX`` a regular-expression search.
    """

    kind: SearchTermKind
    value: Union[str, "re.Pattern[str]"]

    @classmethod
    def verbatim(cls, text: str) -> "SearchTerm":
        return cls(SearchTermKind.VERBATIM, text)

    @classmethod
    def word(cls, text: str) -> "SearchTerm":
        return cls(SearchTermKind.WORD, text)

    @classmethod
    def regex(cls, pattern: str) -> "SearchTerm":
        return cls(SearchTermKind.REGEX, re.compile(pattern))

    @classmethod
    def from_str(cls, text: str) -> "SearchTerm":
        """Parse the first token of ``text`` as a search term."""
        lexer = QueryLexer(text)
        lexeme = lexer.next()
        if lexeme is None:
            raise SearchTermExpected(lexer.span[0], lexer.slice)
        return to_search_term(lexeme)

    def test(self, content: str) -> bool:
        if self.kind is SearchTermKind.REGEX:
            return self.value.search(content) is not None
        if self.kind is SearchTermKind.VERBATIM:
            return self.value in content
        return self.value.lower() in content.lower()

    def __str__(self) -> str:
        if self.kind is SearchTermKind.REGEX:
            return f"/{self.value.pattern}/"
        if self.kind is SearchTermKind.VERBATIM:
            return f'"{self.value}"'
        return self.value


def to_search_term(lexeme: Lexeme) -> SearchTerm:
    """Convert a lexed token into a search term.

    Raises:
        SearchTermExpected: if the token is not a quoted string, regex or word
        InvalidRegularExpression: if a ``/.../`` token does not compile
    """
    if lexeme.token is QueryToken.REGEX:
        pattern = strip_first_and_last(lexeme.text)
        try:
            return SearchTerm.regex(pattern)
        except (re.error, OverflowError, RecursionError) as e:
            raise InvalidRegularExpression(lexeme.start, lexeme.text, str(e)) from e

    if lexeme.token is QueryToken.QUOTED_STRING:
        return SearchTerm.verbatim(strip_first_and_last(lexeme.text))

    if lexeme.token is QueryToken.WORD:
        return SearchTerm.word(lexeme.text)

    raise SearchTermExpected(lexeme.start, lexeme.text)
