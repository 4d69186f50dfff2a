"""Storage layer for feedterm."""

from .database import (
    get_database,
    init_database,
    close_database,
    add_feed,
    remove_feed,
    list_feeds,
    add_articles,
    get_articles,
    add_tag,
    tag_article,
    untag_article,
    list_tags,
    set_article_read,
    set_article_marked,
    get_last_sync,
    update_last_sync,
)
from .service import DatabaseFeedService

__all__ = [
    "get_database",
    "init_database",
    "close_database",
    "add_feed",
    "remove_feed",
    "list_feeds",
    "add_articles",
    "get_articles",
    "add_tag",
    "tag_article",
    "untag_article",
    "list_tags",
    "set_article_read",
    "set_article_marked",
    "get_last_sync",
    "update_last_sync",
    "DatabaseFeedService",
]
