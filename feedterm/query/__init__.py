from .article_query import (
    ArticleQuery,
    AtomKind,
    AugmentedArticleFilter,
    QueryAtom,
    QueryClause,
)
from .errors import (
    DuplicateKeyFound,
    InvalidRegularExpression,
    InvalidSortOrder,
    KeyAfterNegationExpected,
    KeyOrWordExpected,
    LexerError,
    MultipleSortOrdersFound,
    OrderDirectionOrKeyExpected,
    OrderKeyExpected,
    QueryParseError,
    SearchTermExpected,
    SortOrderExpected,
    SortOrderParseError,
    TagListExpected,
    TimeOrRelativeTimeExpected,
)
from .lexer import KEYWORD_TOKENS, Lexeme, QueryLexer, QueryToken, tokenize
from .parser import parse_query
from .search_term import SearchTerm, SearchTermKind
from .sort_order import SortDirection, SortField, SortKey, SortOrder, parse_sort_order
from .timeexpr import parse_time

__all__ = [
    "ArticleQuery",
    "AtomKind",
    "AugmentedArticleFilter",
    "QueryAtom",
    "QueryClause",
    "DuplicateKeyFound",
    "InvalidRegularExpression",
    "InvalidSortOrder",
    "KeyAfterNegationExpected",
    "KeyOrWordExpected",
    "LexerError",
    "MultipleSortOrdersFound",
    "OrderDirectionOrKeyExpected",
    "OrderKeyExpected",
    "QueryParseError",
    "SearchTermExpected",
    "SortOrderExpected",
    "SortOrderParseError",
    "TagListExpected",
    "TimeOrRelativeTimeExpected",
    "KEYWORD_TOKENS",
    "Lexeme",
    "QueryLexer",
    "QueryToken",
    "tokenize",
    "parse_query",
    "SearchTerm",
    "SearchTermKind",
    "SortDirection",
    "SortField",
    "SortKey",
    "SortOrder",
    "parse_sort_order",
    "parse_time",
]
