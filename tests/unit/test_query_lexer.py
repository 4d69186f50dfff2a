"""Unit tests for the query tokenizer and search terms."""

import re

import pytest

from feedterm.query import (
    InvalidRegularExpression,
    QueryLexer,
    QueryToken,
    SearchTerm,
    SearchTermExpected,
    SearchTermKind,
    tokenize,
)


def tokens(text):
    return [lexeme.token for lexeme in tokenize(text)]


class TestQueryLexer:
    """Tests for tokenizing query strings."""

    def test_keywords_and_values(self):
        """Test a typical query is split into keys and values."""
        assert tokens('~title:/rust/ read tag:#work,#later sort:"date"') == [
            QueryToken.NEGATE,
            QueryToken.KEY_TITLE,
            QueryToken.REGEX,
            QueryToken.KEY_READ,
            QueryToken.KEY_TAG,
            QueryToken.TAG_LIST,
            QueryToken.SORT,
            QueryToken.QUOTED_STRING,
        ]

    def test_keyword_wins_tie_with_word(self):
        """Test an exact keyword is not lexed as a word."""
        assert tokens("unread") == [QueryToken.KEY_UNREAD]
        assert tokens("today") == [QueryToken.KEY_TODAY]

    def test_longer_word_beats_keyword(self):
        """Test a word that merely starts with a keyword stays a word."""
        assert tokens("reader") == [QueryToken.WORD]
        assert tokens("markedly") == [QueryToken.WORD]

    def test_longest_keyword_wins(self):
        """Test feedurl: is not split into feed: and a word."""
        assert tokens("feedurl:x") == [QueryToken.KEY_FEED_URL, QueryToken.WORD]
        assert tokens("feedweburl:x") == [QueryToken.KEY_FEED_WEB_URL, QueryToken.WORD]

    def test_positions(self):
        """Test lexemes carry their offsets in the source."""
        lexemes = tokenize('title:  "a b"')
        assert [(l.start, l.end, l.text) for l in lexemes] == [
            (0, 6, "title:"),
            (8, 13, '"a b"'),
        ]

    def test_invalid_character_is_error_token(self):
        """Test an unknown character becomes a one-character error token."""
        lexemes = tokenize("$")
        assert lexemes[0].token is QueryToken.ERROR
        assert lexemes[0].text == "$"

    def test_span_at_end_of_input(self):
        """Test the span is empty at the end of the input once exhausted."""
        lexer = QueryLexer("title: ")
        lexer.next()
        assert lexer.next() is None
        assert lexer.span == (7, 7)
        assert lexer.slice == ""

    def test_remainder(self):
        """Test the unconsumed part of the input is available."""
        lexer = QueryLexer("rust async")
        lexer.next()
        assert lexer.remainder() == " async"


class TestSearchTerm:
    """Tests for search terms."""

    def test_word_is_case_insensitive(self):
        term = SearchTerm.from_str("RUST")
        assert term.kind is SearchTermKind.WORD
        assert term.test("Async rust in practice")

    def test_quoted_string_is_verbatim(self):
        """Test a quoted string matches case-sensitively and keeps spaces."""
        term = SearchTerm.from_str('"Async Rust"')
        assert term.kind is SearchTermKind.VERBATIM
        assert term.value == "Async Rust"
        assert term.test("Learning Async Rust")
        assert not term.test("learning async rust")

    def test_regex(self):
        term = SearchTerm.from_str("/^Re(lease|boot)/")
        assert term.kind is SearchTermKind.REGEX
        assert term.test("Release notes")
        assert not term.test("A Release")

    def test_invalid_regex(self):
        """Test a regex that does not compile is reported with its offset."""
        with pytest.raises(InvalidRegularExpression) as exc_info:
            SearchTerm.from_str("/(unclosed/")
        assert exc_info.value.offset == 0
        assert exc_info.value.reason

    def test_keyword_is_not_a_search_term(self):
        with pytest.raises(SearchTermExpected):
            SearchTerm.from_str("read")

    def test_empty_input(self):
        with pytest.raises(SearchTermExpected):
            SearchTerm.from_str("")

    def test_str(self):
        assert str(SearchTerm.word("rust")) == "rust"
        assert str(SearchTerm.verbatim("a b")) == '"a b"'
        assert str(SearchTerm.regex("r.st")) == "/r.st/"

    def test_regex_terms_compare_by_pattern(self):
        assert SearchTerm.regex("a+") == SearchTerm(SearchTermKind.REGEX, re.compile("a+"))
