"""Services that combine queries with the feed service."""

from .article_view import (
    ArticleListState,
    ArticleView,
    load_articles,
    resolve_scope,
    set_scope_read,
)
from .feed_service import FeedService, InMemoryFeedService, tags_by_article

__all__ = [
    "ArticleListState",
    "ArticleView",
    "FeedService",
    "InMemoryFeedService",
    "load_articles",
    "resolve_scope",
    "set_scope_read",
    "tags_by_article",
]
