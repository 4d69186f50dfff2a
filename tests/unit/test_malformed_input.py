"""Unit tests for malformed and extreme input.

The parsers must reject any input with their own error types; nothing else
may escape them.
"""

import pytest

from feedterm.commands import Command, CommandParseError
from feedterm.help import Hint, command_hint, hint_for
from feedterm.query import AugmentedArticleFilter, QueryParseError, SortOrder, SortOrderParseError

MALFORMED_QUERIES = [
    'newer:"1000000000 days ago"',
    'older:"99999999 hours"',
    'syncedafter:"100000 years"',
    'syncedbefore:"-1000000000 days"',
    "title:/a{4294967296}/",
    "summary:/" + "(" * 200 + ")" * 200 + "/",
    "title:/(/",
    "title:",
    "tag:",
    "tag:work",
    "~",
    "~~read",
    '"unterminated',
    "/unterminated",
    'sort:"date date"',
    "sort:",
    "$%^&",
    "über título:ü",
    "\x00",
    "x" * 5000,
    "read " * 200,
]

MALFORMED_SORT_ORDERS = ["date date", "<", "><date", "title >feed <title", "dates", "ü", "<" * 1000]

MALFORMED_COMMANDS = [
    "",
    "   ",
    "nosuchcommand",
    'read newer:"1000000000 days ago"',
    "read feeds title:/a{4294967296}/",
    "search /a{4294967296}/",
    "search /(/",
    "filter tag:",
    "sort date date",
    "feedadd http://[::1",
    "feedadd ftp://example.com/rss",
    "tagchangecolor #zzzzzz",
    "tagadd work notacolor",
    "in in in",
    "in nowhere quit",
    "confirm",
    "confirm confirm",
    "focus nowhere",
    "show feeds everything",
    "paste sideways",
    "LOGOUT later",
    "quit now",
]


class TestQueries:
    """Tests that query parsing fails only with query errors."""

    @pytest.mark.parametrize("text", MALFORMED_QUERIES)
    def test_only_query_errors(self, text):
        try:
            AugmentedArticleFilter.from_str(text)
        except QueryParseError:
            pass


class TestSortOrders:
    """Tests that sort order parsing fails only with sort order errors."""

    @pytest.mark.parametrize("text", MALFORMED_SORT_ORDERS)
    def test_only_sort_order_errors(self, text):
        with pytest.raises(SortOrderParseError):
            SortOrder.from_str(text)


class TestCommands:
    """Tests that command parsing fails only with command errors."""

    @pytest.mark.parametrize("text", MALFORMED_COMMANDS + MALFORMED_QUERIES)
    @pytest.mark.parametrize("eager", [True, False])
    def test_only_command_errors(self, text, eager):
        try:
            Command.parse(text, eager=eager)
        except CommandParseError:
            pass


class TestHints:
    """Tests that help never fails while typing."""

    @pytest.mark.parametrize("text", MALFORMED_COMMANDS)
    def test_hint_for_is_total(self, text):
        assert isinstance(hint_for(text), Hint)
        assert isinstance(hint_for(text + " x"), Hint)
        assert isinstance(hint_for(text + " "), Hint)

    @pytest.mark.parametrize("text", MALFORMED_COMMANDS)
    def test_command_hint_is_total(self, text):
        assert isinstance(command_hint(text), str)
