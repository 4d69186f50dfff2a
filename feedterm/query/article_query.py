"""Article queries and their evaluation against concrete articles.

A query is a conjunction of clauses. Each clause is a predicate (atom) with a
polarity that was resolved when the query was parsed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import AbstractSet, Any, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from feedterm.models import Article, ArticleFilter, Feed, Tag
from feedterm.query.search_term import SearchTerm
from feedterm.query.sort_order import SortOrder


class AtomKind(Enum):
    TRUE = "true"
    READ = "read"
    MARKED = "marked"
    FEED = "feed"
    TITLE = "title"
    SUMMARY = "summary"
    AUTHOR = "author"
    FEED_URL = "feedurl"
    FEED_WEB_URL = "feedweburl"
    ALL = "all"
    TAG = "tag"
    TAGGED = "tagged"
    LAST_SYNC = "lastsync"
    NEWER = "newer"
    OLDER = "older"
    SYNCED_BEFORE = "syncedbefore"
    SYNCED_AFTER = "syncedafter"


FIELD_KINDS = frozenset(
    {
        AtomKind.FEED,
        AtomKind.TITLE,
        AtomKind.SUMMARY,
        AtomKind.AUTHOR,
        AtomKind.FEED_URL,
        AtomKind.FEED_WEB_URL,
        AtomKind.ALL,
    }
)


@dataclass(frozen=True)
class QueryAtom:
    """A single predicate over an article.

    ``value`` depends on ``kind``: a ``Read``/``Marked`` state, a
    ``SearchTerm`` for field matches, a tuple of tag labels for ``TAG`` or a
    datetime for time comparisons.
    """

    kind: AtomKind
    value: Any = None

    def test(
        self,
        article: Article,
        feed: Optional[Feed],
        tags: Optional[AbstractSet[str]],
        last_sync: datetime,
    ) -> bool:
        kind = self.kind
        if kind is AtomKind.TRUE:
            return True
        if kind is AtomKind.READ:
            return article.unread == self.value
        if kind is AtomKind.MARKED:
            return article.marked == self.value
        if kind is AtomKind.TAGGED:
            return bool(tags)
        if kind in FIELD_KINDS:
            return self._test_string_match(article, feed)
        if kind is AtomKind.TAG:
            if tags is None:
                return False
            return any(tag in tags for tag in self.value)
        if kind is AtomKind.OLDER:
            return article.date < self.value
        if kind is AtomKind.NEWER:
            return article.date > self.value
        if kind is AtomKind.SYNCED_AFTER:
            return article.synced > self.value
        if kind is AtomKind.SYNCED_BEFORE:
            return article.synced < self.value
        if kind is AtomKind.LAST_SYNC:
            return article.synced >= last_sync
        raise AssertionError(f"unhandled query atom {kind}")

    def _content(self, article: Article, feed: Optional[Feed]) -> Optional[str]:
        kind = self.kind
        if kind is AtomKind.TITLE:
            return article.title
        if kind is AtomKind.SUMMARY:
            return article.summary
        if kind is AtomKind.AUTHOR:
            return article.author
        if kind is AtomKind.ALL:
            return " ".join(
                [
                    article.title or "",
                    article.summary or "",
                    article.author or "",
                    feed.label if feed is not None else "",
                    (feed.feed_url or "") if feed is not None else "",
                    (feed.website or "") if feed is not None else "",
                ]
            )

        if feed is None:
            return None
        if kind is AtomKind.FEED:
            return feed.label
        if kind is AtomKind.FEED_URL:
            return feed.feed_url
        return feed.website

    def _test_string_match(self, article: Article, feed: Optional[Feed]) -> bool:
        content = self._content(article, feed)
        if content is None:
            return False
        return self.value.test(content)

    def __str__(self) -> str:
        kind = self.kind
        if kind is AtomKind.TRUE:
            return "*"
        if kind in (AtomKind.READ, AtomKind.MARKED):
            return self.value.value
        if kind in (AtomKind.TAGGED, AtomKind.LAST_SYNC):
            return kind.value
        if kind in FIELD_KINDS:
            return f"{kind.value}:{self.value}"
        if kind is AtomKind.TAG:
            return "tag:" + ",".join(f"#{tag}" for tag in self.value)
        return f'{kind.value}:"{self.value.isoformat()}"'


@dataclass(frozen=True)
class QueryClause:
    atom: QueryAtom
    negated: bool = False

    def test(
        self,
        article: Article,
        feed: Optional[Feed],
        tags: Optional[AbstractSet[str]],
        last_sync: datetime,
    ) -> bool:
        result = self.atom.test(article, feed, tags, last_sync)
        return not result if self.negated else result

    def __str__(self) -> str:
        return f"~{self.atom}" if self.negated else str(self.atom)


def resolve_tag_labels(
    article: Article,
    tags_for_article: Mapping[str, Sequence[str]],
    tag_map: Mapping[str, Tag],
) -> Optional[Set[str]]:
    """Return the labels of the article's tags, or ``None`` if it has no entry."""
    tag_ids = tags_for_article.get(article.article_id)
    if tag_ids is None:
        return None
    return {tag_map[tag_id].label for tag_id in tag_ids if tag_id in tag_map}


@dataclass(frozen=True)
class ArticleQuery:
    """A parsed query: conjunctive clauses plus an optional sort order."""

    query_string: str = ""
    clauses: Tuple[QueryClause, ...] = ()
    sort_order: Optional[SortOrder] = None

    @classmethod
    def from_str(cls, text: str, now: Optional[datetime] = None) -> "ArticleQuery":
        from feedterm.query.parser import parse_query

        return parse_query(text, None, now)

    def is_empty(self) -> bool:
        return not self.clauses

    def test(
        self,
        article: Article,
        feed_map: Mapping[str, Feed],
        tags_for_article: Mapping[str, Sequence[str]],
        tag_map: Mapping[str, Tag],
        last_sync: datetime,
    ) -> bool:
        feed = feed_map.get(article.feed_id)
        tags = resolve_tag_labels(article, tags_for_article, tag_map)
        return all(clause.test(article, feed, tags, last_sync) for clause in self.clauses)

    def filter(
        self,
        articles: Iterable[Article],
        feed_map: Mapping[str, Feed],
        tags_for_article: Mapping[str, Sequence[str]],
        tag_map: Mapping[str, Tag],
        last_sync: datetime,
    ) -> List[Article]:
        """Return the matching articles in their original order."""
        return [
            article
            for article in articles
            if self.test(article, feed_map, tags_for_article, tag_map, last_sync)
        ]

    def __str__(self) -> str:
        return self.query_string


@dataclass(frozen=True)
class AugmentedArticleFilter:
    """A service-side filter plus the residual query it could not absorb."""

    article_filter: ArticleFilter = field(default_factory=ArticleFilter)
    article_query: ArticleQuery = field(default_factory=ArticleQuery)

    @classmethod
    def from_str(cls, text: str, now: Optional[datetime] = None) -> "AugmentedArticleFilter":
        from feedterm.query.parser import parse_query

        article_filter = ArticleFilter()
        article_query = parse_query(text, article_filter, now)
        return cls(article_filter, article_query)

    def is_augmented(self) -> bool:
        return not self.article_query.is_empty()

    def defines_scope(self) -> bool:
        return self.is_augmented() or not self.article_filter.is_empty()

    def filter(
        self,
        articles: Iterable[Article],
        feed_map: Mapping[str, Feed],
        tags_for_article: Mapping[str, Sequence[str]],
        tag_map: Mapping[str, Tag],
        last_sync: datetime,
    ) -> List[Article]:
        return self.article_query.filter(articles, feed_map, tags_for_article, tag_map, last_sync)
