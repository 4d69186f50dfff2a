"""Unit tests for parsing article queries."""

from datetime import timedelta

import pytest

from feedterm.models import ArticleFilter, Marked, Read
from feedterm.query import (
    ArticleQuery,
    AtomKind,
    AugmentedArticleFilter,
    DuplicateKeyFound,
    InvalidRegularExpression,
    InvalidSortOrder,
    KeyAfterNegationExpected,
    KeyOrWordExpected,
    LexerError,
    MultipleSortOrdersFound,
    QueryAtom,
    QueryClause,
    SearchTerm,
    SearchTermExpected,
    SortOrder,
    SortOrderExpected,
    TagListExpected,
    TimeOrRelativeTimeExpected,
    parse_query,
)


class TestClauses:
    """Tests for the clauses produced by a plain query."""

    def test_empty_query(self):
        query = ArticleQuery.from_str("")
        assert query.is_empty()
        assert query.sort_order is None

    def test_bare_word_searches_all_fields(self):
        query = ArticleQuery.from_str("rust")
        assert query.clauses == (QueryClause(QueryAtom(AtomKind.ALL, SearchTerm.word("rust"))),)

    def test_field_keys(self):
        query = ArticleQuery.from_str('title:"Async Rust" author:ferris feed:/weekly/')
        kinds = [clause.atom.kind for clause in query.clauses]
        assert kinds == [AtomKind.TITLE, AtomKind.AUTHOR, AtomKind.FEED]
        assert query.clauses[0].atom.value == SearchTerm.verbatim("Async Rust")

    def test_state_keys_become_clauses_without_filter(self):
        query = ArticleQuery.from_str("unread marked")
        assert query.clauses == (
            QueryClause(QueryAtom(AtomKind.READ, Read.UNREAD)),
            QueryClause(QueryAtom(AtomKind.MARKED, Marked.MARKED)),
        )

    def test_negation(self):
        query = ArticleQuery.from_str("~title:rust")
        assert query.clauses == (
            QueryClause(QueryAtom(AtomKind.TITLE, SearchTerm.word("rust")), negated=True),
        )
        assert str(query.clauses[0]) == "~title:rust"

    def test_tag_lists(self):
        """Test tag: and a bare tag list produce the same atom."""
        expected = QueryAtom(AtomKind.TAG, ("foo", "bar"))
        assert ArticleQuery.from_str("tag:#foo,#bar").clauses == (QueryClause(expected),)
        assert ArticleQuery.from_str("#foo,#bar").clauses == (QueryClause(expected),)

    def test_negated_tag(self):
        query = ArticleQuery.from_str("~tag:#foo")
        assert query.clauses == (QueryClause(QueryAtom(AtomKind.TAG, ("foo",)), negated=True),)

    def test_query_string_is_kept(self):
        assert str(ArticleQuery.from_str("rust  unread")) == "rust  unread"

    def test_sort_clause(self):
        query = ArticleQuery.from_str('rust sort:"<feed >date"')
        assert query.sort_order == SortOrder.from_str("<feed >date")
        assert len(query.clauses) == 1


class TestTimeKeys:
    """Tests for time-based keys."""

    def test_relative_time(self, now):
        query = ArticleQuery.from_str('newer:"2 days ago"', now=now)
        assert query.clauses == (QueryClause(QueryAtom(AtomKind.NEWER, now - timedelta(days=2))),)

    def test_today(self, now):
        query = ArticleQuery.from_str("today", now=now)
        assert query.clauses == (QueryClause(QueryAtom(AtomKind.NEWER, now - timedelta(days=1))),)

    def test_negated_time_key_swaps_direction(self, now):
        """Test ~newer: becomes older: rather than a negated clause."""
        query = ArticleQuery.from_str('~newer:"1 week ago"', now=now)
        assert query.clauses == (QueryClause(QueryAtom(AtomKind.OLDER, now - timedelta(weeks=1))),)

    def test_negated_synced_keys_swap(self, now):
        query = ArticleQuery.from_str('~syncedbefore:"1 hour ago"', now=now)
        assert query.clauses[0].atom.kind is AtomKind.SYNCED_AFTER
        assert not query.clauses[0].negated

    def test_time_requires_quoted_string(self):
        with pytest.raises(TimeOrRelativeTimeExpected) as exc_info:
            ArticleQuery.from_str("older:yesterday")
        assert exc_info.value.offset == 6

    def test_unparseable_time(self):
        with pytest.raises(TimeOrRelativeTimeExpected) as exc_info:
            ArticleQuery.from_str('older:"whenever"')
        assert exc_info.value.fragment == '"whenever"'


class TestFilterFolding:
    """Tests for folding state and time keys into the service-side filter."""

    def test_state_keys_fold_into_filter(self):
        augmented = AugmentedArticleFilter.from_str("unread marked")
        assert augmented.article_filter == ArticleFilter(unread=Read.UNREAD, marked=Marked.MARKED)
        assert not augmented.is_augmented()
        assert augmented.defines_scope()

    def test_negated_state_flips_value(self):
        augmented = AugmentedArticleFilter.from_str("~read ~marked")
        assert augmented.article_filter == ArticleFilter(unread=Read.UNREAD, marked=Marked.UNMARKED)
        assert augmented.article_query.is_empty()

    def test_later_state_key_wins(self):
        augmented = AugmentedArticleFilter.from_str("read unread")
        assert augmented.article_filter.unread is Read.UNREAD

    def test_time_bounds_tighten(self, now):
        augmented = AugmentedArticleFilter.from_str(
            'newer:"5 days ago" newer:"2 days ago" older:"1 day ago" older:"3 hours ago"', now=now
        )
        assert augmented.article_filter.newer_than == now - timedelta(days=2)
        assert augmented.article_filter.older_than == now - timedelta(days=1)

    def test_mixed_query_is_augmented(self, now):
        augmented = AugmentedArticleFilter.from_str("today unread title:rust", now=now)
        assert augmented.article_filter == ArticleFilter(
            unread=Read.UNREAD, newer_than=now - timedelta(days=1)
        )
        assert augmented.is_augmented()
        assert [c.atom.kind for c in augmented.article_query.clauses] == [AtomKind.TITLE]

    def test_empty_filter_defines_no_scope(self):
        augmented = AugmentedArticleFilter.from_str("")
        assert not augmented.is_augmented()
        assert not augmented.defines_scope()

    def test_explicit_accumulator(self):
        article_filter = ArticleFilter()
        query = parse_query("unread rust", article_filter)
        assert article_filter.unread is Read.UNREAD
        assert len(query.clauses) == 1


class TestErrors:
    """Tests for query parse errors and their positions."""

    def test_missing_search_term(self):
        with pytest.raises(SearchTermExpected) as exc_info:
            ArticleQuery.from_str("title:")
        assert exc_info.value.offset == 6
        assert exc_info.value.fragment == ""

    def test_keyword_as_search_term(self):
        with pytest.raises(SearchTermExpected) as exc_info:
            ArticleQuery.from_str("title: read")
        assert exc_info.value.offset == 7

    def test_tag_requires_tag_list(self):
        with pytest.raises(TagListExpected):
            ArticleQuery.from_str("tag:work")

    def test_double_negation(self):
        with pytest.raises(KeyAfterNegationExpected) as exc_info:
            ArticleQuery.from_str("~~read")
        assert exc_info.value.offset == 1

    def test_trailing_negation(self):
        with pytest.raises(KeyAfterNegationExpected) as exc_info:
            ArticleQuery.from_str("rust ~")
        assert exc_info.value.offset == 6

    def test_invalid_token(self):
        with pytest.raises(LexerError) as exc_info:
            ArticleQuery.from_str("rust $")
        assert exc_info.value.offset == 5

    def test_value_without_key(self):
        with pytest.raises(KeyOrWordExpected):
            ArticleQuery.from_str('"quoted"')

    def test_sort_requires_quoted_string(self):
        with pytest.raises(SortOrderExpected):
            ArticleQuery.from_str("sort:date")

    def test_multiple_sort_orders(self):
        with pytest.raises(MultipleSortOrdersFound):
            ArticleQuery.from_str('sort:"date" sort:"feed"')

    def test_invalid_sort_order_keeps_cause(self):
        with pytest.raises(InvalidSortOrder) as exc_info:
            ArticleQuery.from_str('sort:"date >date"')
        assert exc_info.value.offset == 5
        assert isinstance(exc_info.value.cause, DuplicateKeyFound)

    def test_time_out_of_range(self):
        """Test a relative time beyond the datetime range is a time error."""
        with pytest.raises(TimeOrRelativeTimeExpected) as exc_info:
            ArticleQuery.from_str('newer:"1000000000 days ago"')
        assert exc_info.value.offset == 6

        with pytest.raises(TimeOrRelativeTimeExpected):
            AugmentedArticleFilter.from_str('unread older:"99999999 hours"')

    def test_regex_repetition_too_large(self):
        with pytest.raises(InvalidRegularExpression) as exc_info:
            ArticleQuery.from_str("title:/a{4294967296}/")
        assert exc_info.value.offset == 6

    def test_offsets_count_characters(self):
        """Test offsets index characters, not bytes, in non-ASCII queries."""
        with pytest.raises(SearchTermExpected) as exc_info:
            ArticleQuery.from_str("über title:")
        assert exc_info.value.offset == 11

        with pytest.raises(LexerError) as exc_info:
            ArticleQuery.from_str("ü $")
        assert exc_info.value.offset == 2
