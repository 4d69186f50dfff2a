"""Unit tests for database operations.

Tests for the storage layer using in-memory SQLite.
"""

import pytest
import aiosqlite
from datetime import datetime, timedelta, timezone
from unittest.mock import patch, AsyncMock

from feedterm.models import ArticleFilter, Feed, FeedMapping, Marked, Read, Tag, Tagging
from feedterm.storage import DatabaseFeedService
from feedterm.storage.database import (
    init_database,
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
    to_timestamp,
    from_timestamp,
)


# Mark all tests as async
pytestmark = pytest.mark.anyio


@pytest.fixture
async def in_memory_db():
    """Create an in-memory database for testing."""
    db = await aiosqlite.connect(":memory:")
    db.row_factory = aiosqlite.Row
    await init_database(db)

    # Patch get_database to return our in-memory connection
    with patch("feedterm.storage.database.get_database", AsyncMock(return_value=db)):
        yield db

    await db.close()


@pytest.fixture
async def populated_db(in_memory_db, feeds, articles, tags, taggings):
    """In-memory database holding the shared sample data."""
    await add_feed(feeds[0], category_id="c1")
    await add_feed(feeds[1])
    await add_articles(articles)
    for tag in tags:
        await add_tag(tag)
    for tagging in taggings:
        await tag_article(tagging.article_id, tagging.tag_id)
    return in_memory_db


def ids(articles):
    return [article.article_id for article in articles]


class TestDatabaseInitialization:
    """Tests for database schema initialization."""

    async def test_init_creates_tables(self, in_memory_db):
        """Test that initialization creates the required tables."""
        cursor = await in_memory_db.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        )
        tables = [row[0] for row in await cursor.fetchall()]

        for table in ("feeds", "feed_mappings", "articles", "tags", "taggings", "sync_state"):
            assert table in tables

    async def test_init_creates_indexes(self, in_memory_db):
        """Test that initialization creates indexes."""
        cursor = await in_memory_db.execute(
            "SELECT name FROM sqlite_master WHERE type='index'"
        )
        indexes = [row[0] for row in await cursor.fetchall()]

        assert "idx_articles_feed_id" in indexes
        assert "idx_articles_unread" in indexes
        assert "idx_articles_date" in indexes

    async def test_init_is_idempotent(self, in_memory_db):
        """Test that calling init multiple times doesn't cause errors."""
        await init_database(in_memory_db)
        await init_database(in_memory_db)


class TestTimestamps:
    """Tests for the stored timestamp format."""

    def test_fixed_width_utc(self):
        value = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2)))
        assert to_timestamp(value) == "2024-01-02T01:04:05.000000"

    def test_naive_is_utc(self):
        assert to_timestamp(datetime(2024, 1, 2)) == "2024-01-02T00:00:00.000000"

    def test_round_trip_is_aware(self):
        value = datetime(2024, 1, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
        assert from_timestamp(to_timestamp(value)) == value

    def test_early_years_are_zero_padded(self):
        early = to_timestamp(datetime(999, 1, 1, tzinfo=timezone.utc))
        assert early == "0999-01-01T00:00:00.000000"
        assert early < to_timestamp(datetime(2024, 1, 1))
        assert from_timestamp(early) == datetime(999, 1, 1, tzinfo=timezone.utc)


class TestFeedOperations:
    """Tests for feed operations."""

    async def test_add_and_list(self, in_memory_db, feeds):
        await add_feed(feeds[1])
        await add_feed(feeds[0], category_id="c1")

        stored, mappings = await list_feeds()

        assert stored == feeds
        assert mappings == [FeedMapping("f1", "c1")]

    async def test_add_duplicate_id(self, in_memory_db, feeds):
        await add_feed(feeds[0])
        with pytest.raises(ValueError, match="already exists"):
            await add_feed(Feed("f1", "Other"))

    async def test_add_duplicate_url(self, in_memory_db, feeds):
        await add_feed(feeds[0])
        with pytest.raises(ValueError):
            await add_feed(Feed("f9", "Copy", feeds[0].feed_url))

    async def test_remove_feed(self, populated_db):
        success, count = await remove_feed("f2")

        assert success is True
        assert count == 2
        assert ids(await get_articles()) == ["a1", "a2"]
        _, taggings = await list_tags()
        assert taggings == [Tagging("a1", "t1")]

    async def test_remove_missing_feed(self, in_memory_db):
        assert await remove_feed("nope") == (False, 0)


class TestArticleOperations:
    """Tests for storing and filtering articles."""

    async def test_add_skips_duplicates(self, in_memory_db, feeds, articles):
        await add_feed(feeds[0])
        await add_feed(feeds[1])

        assert await add_articles(articles) == 4
        assert await add_articles(articles[:2]) == 0

    async def test_round_trip(self, populated_db, articles):
        stored = {article.article_id: article for article in await get_articles()}
        assert stored["a3"] == articles[2]
        assert stored["a4"].summary == "Nothing new here"

    async def test_newest_first(self, populated_db):
        assert ids(await get_articles()) == ["a1", "a3", "a2", "a4"]

    async def test_filter_read_state(self, populated_db):
        assert ids(await get_articles(ArticleFilter(unread=Read.UNREAD))) == ["a1", "a3"]
        assert ids(await get_articles(ArticleFilter(marked=Marked.MARKED))) == ["a3"]

    async def test_filter_time_bounds(self, populated_db, now):
        article_filter = ArticleFilter(
            newer_than=now - timedelta(days=7),
            older_than=now - timedelta(days=1),
        )
        assert ids(await get_articles(article_filter)) == ["a3", "a2"]

    async def test_time_bounds_are_strict(self, populated_db, now):
        assert await get_articles(ArticleFilter(synced_before=now)) == []
        assert await get_articles(ArticleFilter(synced_after=now)) == []
        assert len(await get_articles(ArticleFilter(synced_after=now - timedelta(seconds=1)))) == 4

    async def test_bound_before_year_1000(self, populated_db):
        article_filter = ArticleFilter(older_than=datetime(900, 1, 1, tzinfo=timezone.utc))
        assert await get_articles(article_filter) == []
        article_filter = ArticleFilter(newer_than=datetime(900, 1, 1, tzinfo=timezone.utc))
        assert len(await get_articles(article_filter)) == 4

    async def test_sql_agrees_with_in_memory_filter(self, populated_db, articles, now):
        """Test the SQL translation selects what ArticleFilter.matches selects."""
        article_filter = ArticleFilter(unread=Read.READ, older_than=now - timedelta(days=5))
        expected = [a.article_id for a in articles if article_filter.matches(a)]
        assert sorted(ids(await get_articles(article_filter))) == sorted(expected)

    async def test_set_read(self, populated_db):
        assert await set_article_read(["a1", "a3"], Read.READ) == 2
        assert await get_articles(ArticleFilter(unread=Read.UNREAD)) == []

    async def test_set_read_empty(self, populated_db):
        assert await set_article_read([], Read.READ) == 0

    async def test_set_marked(self, populated_db):
        await set_article_marked(["a3"], Marked.UNMARKED)
        await set_article_marked(["a4"], Marked.MARKED)
        assert ids(await get_articles(ArticleFilter(marked=Marked.MARKED))) == ["a4"]


class TestTagOperations:
    """Tests for tags and taggings."""

    async def test_list_tags(self, populated_db, tags):
        stored, taggings = await list_tags()
        assert stored == sorted(tags, key=lambda tag: tag.label)
        assert len(taggings) == 3

    async def test_duplicate_label(self, populated_db):
        with pytest.raises(ValueError):
            await add_tag(Tag("t9", "work"))

    async def test_tag_twice(self, populated_db):
        assert await tag_article("a2", "t2") is True
        assert await tag_article("a2", "t2") is False

    async def test_untag(self, populated_db):
        assert await untag_article("a3", "t2") is True
        assert await untag_article("a3", "t2") is False


class TestSyncState:
    """Tests for the last sync time."""

    async def test_never_synced(self, in_memory_db):
        assert await get_last_sync() is None

    async def test_update(self, in_memory_db, now):
        await update_last_sync(now - timedelta(hours=1))
        await update_last_sync(now)
        assert await get_last_sync() == now


class TestDatabaseFeedService:
    """Tests for the feed service over the database."""

    async def test_service(self, populated_db):
        service = DatabaseFeedService()

        articles = await service.get_articles(ArticleFilter(unread=Read.UNREAD))
        feeds, mappings = await service.get_feeds()
        tags, taggings = await service.get_tags()

        assert ids(articles) == ["a1", "a3"]
        assert [feed.feed_id for feed in feeds] == ["f1", "f2"]
        assert len(taggings) == 3

        await service.set_article_read(["a1"], Read.READ)
        assert ids(await service.get_articles(ArticleFilter(unread=Read.UNREAD))) == ["a3"]
