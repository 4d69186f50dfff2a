"""Data models for feedterm.

This module defines the records owned by the feed service (articles, feeds,
tags) and the service-side filter that queries push down to it.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Read(Enum):
    """Read state of an article."""

    READ = "read"
    UNREAD = "unread"


class Marked(Enum):
    """Marked (starred) state of an article."""

    MARKED = "marked"
    UNMARKED = "unmarked"


@dataclass
class Feed:
    """Represents a subscribed feed."""

    feed_id: str
    label: str
    feed_url: Optional[str] = None
    website: Optional[str] = None


@dataclass
class Tag:
    """Represents a user-defined tag."""

    tag_id: str
    label: str
    color: Optional[str] = None


@dataclass
class Article:
    """Represents an article from a feed."""

    article_id: str
    feed_id: str
    date: datetime
    synced: datetime
    title: Optional[str] = None
    summary: Optional[str] = None
    author: Optional[str] = None
    url: Optional[str] = None
    unread: Read = Read.UNREAD
    marked: Marked = Marked.UNMARKED


@dataclass(frozen=True)
class FeedMapping:
    """Places a feed inside a category."""

    feed_id: str
    category_id: str


@dataclass(frozen=True)
class Tagging:
    """Attaches a tag to an article."""

    article_id: str
    tag_id: str


@dataclass
class ArticleFilter:
    """Filter the feed service can evaluate without materializing all articles.

    Every field is optional; an unset field does not constrain the result.
    Time bounds are strict comparisons.
    """

    unread: Optional[Read] = None
    marked: Optional[Marked] = None
    newer_than: Optional[datetime] = None
    older_than: Optional[datetime] = None
    synced_before: Optional[datetime] = None
    synced_after: Optional[datetime] = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.unread,
                self.marked,
                self.newer_than,
                self.older_than,
                self.synced_before,
                self.synced_after,
            )
        )

    def matches(self, article: Article) -> bool:
        if self.unread is not None and article.unread != self.unread:
            return False
        if self.marked is not None and article.marked != self.marked:
            return False
        if self.newer_than is not None and not article.date > self.newer_than:
            return False
        if self.older_than is not None and not article.date < self.older_than:
            return False
        if self.synced_before is not None and not article.synced < self.synced_before:
            return False
        if self.synced_after is not None and not article.synced > self.synced_after:
            return False
        return True


class ArticleScope(Enum):
    """Which articles a list panel shows."""

    ALL = ("all", "all", "all articles")
    UNREAD = ("unread", "unread", "only unread articles")
    MARKED = ("marked", "marked", "only marked articles")

    def __init__(self, keyword: str, label: str, detail: str):
        self.keyword = keyword
        self.label = label
        self.detail = detail

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["ArticleScope"]:
        for scope in cls:
            if scope.keyword == keyword:
                return scope
        return None

    def to_filter(self) -> ArticleFilter:
        if self is ArticleScope.UNREAD:
            return ArticleFilter(unread=Read.UNREAD)
        if self is ArticleScope.MARKED:
            return ArticleFilter(marked=Marked.MARKED)
        return ArticleFilter()
