"""Typed models used across feedterm."""

from .schemas import (
    Article,
    ArticleFilter,
    ArticleScope,
    Feed,
    FeedMapping,
    Marked,
    Read,
    Tag,
    Tagging,
)

__all__ = [
    "Article",
    "ArticleFilter",
    "ArticleScope",
    "Feed",
    "FeedMapping",
    "Marked",
    "Read",
    "Tag",
    "Tagging",
]
