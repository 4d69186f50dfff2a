"""Shared fixtures for feedterm tests."""

from datetime import datetime, timedelta, timezone

import pytest

from feedterm.models import Article, Feed, Marked, Read, Tag, Tagging


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def now():
    """Fixed reference time for relative time expressions."""
    return NOW


def _make_article(article_id: str, feed_id: str = "f1", days_old: float = 0, **kwargs) -> Article:
    """Build an article dated ``days_old`` days before NOW and synced at NOW."""
    defaults = dict(
        date=NOW - timedelta(days=days_old),
        synced=NOW,
        title=f"Article {article_id}",
    )
    defaults.update(kwargs)
    return Article(article_id=article_id, feed_id=feed_id, **defaults)


@pytest.fixture
def article_factory():
    return _make_article


@pytest.fixture
def feeds():
    return [
        Feed("f1", "Python Weekly", "https://python.example/rss", "https://python.example"),
        Feed("f2", "Rust Blog", "https://rust.example/feed.xml", "https://rust.example"),
    ]


@pytest.fixture
def tags():
    return [Tag("t1", "work", "red"), Tag("t2", "later")]


@pytest.fixture
def articles():
    return [
        _make_article("a1", "f1", days_old=0.5, title="Release of Python 3.13", author="Guido"),
        _make_article("a2", "f1", days_old=3, title="Typing tips", unread=Read.READ),
        _make_article("a3", "f2", days_old=1.5, title="Async Rust", marked=Marked.MARKED, author="Ferris"),
        _make_article("a4", "f2", days_old=10, title="Old news", summary="Nothing new here", unread=Read.READ),
    ]


@pytest.fixture
def taggings():
    return [Tagging("a1", "t1"), Tagging("a3", "t1"), Tagging("a3", "t2")]
