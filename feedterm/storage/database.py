"""Database storage for feedterm.

This module provides async SQLite operations for feeds, articles and tags.
Database location: ``db_path`` from the configuration, ~/.feedterm/feedterm.db
by default (or FEEDTERM_DB_PATH env var).

Timestamps are stored as fixed-width UTC strings so that SQL string
comparison orders them like the datetimes they represent. This lets the
time bounds of an ``ArticleFilter`` be evaluated in SQL.
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import aiosqlite

from feedterm.models import Article, ArticleFilter, Feed, FeedMapping, Marked, Read, Tag, Tagging

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"


def _get_db_path() -> Path:
    """Get the database path, respecting FEEDTERM_DB_PATH env var for testing."""
    env_path = os.environ.get("FEEDTERM_DB_PATH")
    if env_path:
        return Path(env_path)

    from feedterm.config import get_config

    return get_config().db_path


def to_timestamp(value: datetime) -> str:
    """Format a datetime for storage; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    # %Y does not zero-pad years before 1000 on every platform
    return f"{value.year:04d}-{value:%m-%dT%H:%M:%S.%f}"


def from_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


# Singleton connection
_db_connection: Optional[aiosqlite.Connection] = None


async def get_database(db_path: Optional[Path] = None) -> aiosqlite.Connection:
    """Get or create a singleton database connection.

    Args:
        db_path: Database file used when the connection is first opened
            (default: FEEDTERM_DB_PATH or the configured path)

    Returns:
        Active database connection
    """
    global _db_connection

    if _db_connection is None:
        if db_path is None:
            db_path = _get_db_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug(f"opening database {db_path}")
        _db_connection = await aiosqlite.connect(db_path)
        _db_connection.row_factory = aiosqlite.Row
        await init_database(_db_connection)

    return _db_connection


async def init_database(db: Optional[aiosqlite.Connection] = None) -> None:
    """Initialize database tables if they don't exist.

    Args:
        db: Optional database connection (uses singleton if not provided)
    """
    if db is None:
        db = await get_database()

    await db.execute("""
        CREATE TABLE IF NOT EXISTS feeds (
            feed_id TEXT PRIMARY KEY,
            label TEXT NOT NULL,
            feed_url TEXT UNIQUE,
            website TEXT
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS feed_mappings (
            feed_id TEXT NOT NULL,
            category_id TEXT NOT NULL,
            PRIMARY KEY (feed_id, category_id),
            FOREIGN KEY (feed_id) REFERENCES feeds(feed_id) ON DELETE CASCADE
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS articles (
            article_id TEXT PRIMARY KEY,
            feed_id TEXT NOT NULL,
            title TEXT,
            summary TEXT,
            author TEXT,
            url TEXT,
            date TEXT NOT NULL,
            synced TEXT NOT NULL,
            unread BOOLEAN DEFAULT TRUE,
            marked BOOLEAN DEFAULT FALSE,
            FOREIGN KEY (feed_id) REFERENCES feeds(feed_id) ON DELETE CASCADE
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS tags (
            tag_id TEXT PRIMARY KEY,
            label TEXT NOT NULL UNIQUE,
            color TEXT
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS taggings (
            article_id TEXT NOT NULL,
            tag_id TEXT NOT NULL,
            PRIMARY KEY (article_id, tag_id),
            FOREIGN KEY (article_id) REFERENCES articles(article_id) ON DELETE CASCADE,
            FOREIGN KEY (tag_id) REFERENCES tags(tag_id) ON DELETE CASCADE
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS sync_state (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            last_sync TEXT NOT NULL
        )
    """)

    await db.execute("CREATE INDEX IF NOT EXISTS idx_articles_feed_id ON articles(feed_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_articles_unread ON articles(unread)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_articles_date ON articles(date)")

    await db.commit()


def _row_to_feed(row: aiosqlite.Row) -> Feed:
    return Feed(
        feed_id=row["feed_id"],
        label=row["label"],
        feed_url=row["feed_url"],
        website=row["website"],
    )


def _row_to_article(row: aiosqlite.Row) -> Article:
    return Article(
        article_id=row["article_id"],
        feed_id=row["feed_id"],
        date=from_timestamp(row["date"]),
        synced=from_timestamp(row["synced"]),
        title=row["title"],
        summary=row["summary"],
        author=row["author"],
        url=row["url"],
        unread=Read.UNREAD if row["unread"] else Read.READ,
        marked=Marked.MARKED if row["marked"] else Marked.UNMARKED,
    )


async def add_feed(feed: Feed, category_id: Optional[str] = None) -> Feed:
    """Add a new feed to the database.

    Args:
        feed: Feed to store
        category_id: Optional category to place the feed in

    Returns:
        The stored feed

    Raises:
        ValueError: If a feed with the same id or feed URL already exists
    """
    db = await get_database()

    try:
        await db.execute(
            "INSERT INTO feeds (feed_id, label, feed_url, website) VALUES (?, ?, ?, ?)",
            (feed.feed_id, feed.label, feed.feed_url, feed.website),
        )
        if category_id is not None:
            await db.execute(
                "INSERT INTO feed_mappings (feed_id, category_id) VALUES (?, ?)",
                (feed.feed_id, category_id),
            )
        await db.commit()
    except aiosqlite.IntegrityError as e:
        await db.rollback()
        raise ValueError(f"Feed '{feed.feed_id}' or URL '{feed.feed_url}' already exists") from e

    logger.info(f"added feed {feed.label!r}")
    return feed


async def remove_feed(feed_id: str) -> Tuple[bool, int]:
    """Remove a feed with its articles, taggings and mappings.

    Args:
        feed_id: ID of the feed to remove

    Returns:
        Tuple of (success, article_count_deleted)
    """
    db = await get_database()

    cursor = await db.execute("SELECT feed_id FROM feeds WHERE feed_id = ?", (feed_id,))
    if await cursor.fetchone() is None:
        return (False, 0)

    cursor = await db.execute(
        "SELECT COUNT(*) AS count FROM articles WHERE feed_id = ?", (feed_id,)
    )
    article_count = (await cursor.fetchone())["count"]

    await db.execute(
        "DELETE FROM taggings WHERE article_id IN (SELECT article_id FROM articles WHERE feed_id = ?)",
        (feed_id,),
    )
    await db.execute("DELETE FROM articles WHERE feed_id = ?", (feed_id,))
    await db.execute("DELETE FROM feed_mappings WHERE feed_id = ?", (feed_id,))
    await db.execute("DELETE FROM feeds WHERE feed_id = ?", (feed_id,))
    await db.commit()

    logger.info(f"removed feed {feed_id} with {article_count} articles")
    return (True, article_count)


async def list_feeds() -> Tuple[List[Feed], List[FeedMapping]]:
    """List all feeds and their category mappings, ordered by label."""
    db = await get_database()

    cursor = await db.execute("SELECT * FROM feeds ORDER BY label")
    feeds = [_row_to_feed(row) async for row in cursor]

    cursor = await db.execute("SELECT feed_id, category_id FROM feed_mappings ORDER BY feed_id")
    mappings = [FeedMapping(row["feed_id"], row["category_id"]) async for row in cursor]

    return feeds, mappings


async def add_articles(articles: Iterable[Article]) -> int:
    """Add new articles to the database, skipping duplicates.

    Args:
        articles: Articles to store

    Returns:
        Number of articles actually added (excludes duplicates)
    """
    db = await get_database()
    added_count = 0

    for article in articles:
        try:
            await db.execute(
                """
                INSERT INTO articles
                    (article_id, feed_id, title, summary, author, url, date, synced, unread, marked)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    article.article_id,
                    article.feed_id,
                    article.title,
                    article.summary,
                    article.author,
                    article.url,
                    to_timestamp(article.date),
                    to_timestamp(article.synced),
                    article.unread is Read.UNREAD,
                    article.marked is Marked.MARKED,
                ),
            )
            added_count += 1
        except aiosqlite.IntegrityError:
            logger.debug(f"skipping duplicate article {article.article_id}")

    await db.commit()
    return added_count


def filter_clauses(article_filter: ArticleFilter) -> Tuple[str, List]:
    """Translate an ``ArticleFilter`` into a SQL condition and its parameters.

    Time bounds are strict, like ``ArticleFilter.matches``.
    """
    conditions = []
    params: List = []

    if article_filter.unread is not None:
        conditions.append("unread = ?")
        params.append(article_filter.unread is Read.UNREAD)
    if article_filter.marked is not None:
        conditions.append("marked = ?")
        params.append(article_filter.marked is Marked.MARKED)
    if article_filter.newer_than is not None:
        conditions.append("date > ?")
        params.append(to_timestamp(article_filter.newer_than))
    if article_filter.older_than is not None:
        conditions.append("date < ?")
        params.append(to_timestamp(article_filter.older_than))
    if article_filter.synced_after is not None:
        conditions.append("synced > ?")
        params.append(to_timestamp(article_filter.synced_after))
    if article_filter.synced_before is not None:
        conditions.append("synced < ?")
        params.append(to_timestamp(article_filter.synced_before))

    return " AND ".join(conditions) or "1=1", params


async def get_articles(article_filter: Optional[ArticleFilter] = None) -> List[Article]:
    """List the articles matching a filter, newest first.

    Args:
        article_filter: Optional filter evaluated in SQL (default: all articles)

    Returns:
        List of Article objects
    """
    db = await get_database()

    condition, params = filter_clauses(article_filter or ArticleFilter())
    cursor = await db.execute(
        f"SELECT * FROM articles WHERE {condition} ORDER BY date DESC, article_id",
        params,
    )
    return [_row_to_article(row) async for row in cursor]


async def add_tag(tag: Tag) -> Tag:
    """Add a new tag.

    Raises:
        ValueError: If a tag with the same id or label already exists
    """
    db = await get_database()

    try:
        await db.execute(
            "INSERT INTO tags (tag_id, label, color) VALUES (?, ?, ?)",
            (tag.tag_id, tag.label, tag.color),
        )
        await db.commit()
    except aiosqlite.IntegrityError as e:
        raise ValueError(f"Tag '{tag.tag_id}' or label '{tag.label}' already exists") from e

    return tag


async def tag_article(article_id: str, tag_id: str) -> bool:
    """Attach a tag to an article.

    Returns:
        True if the tagging was added, False if it already existed
    """
    db = await get_database()

    cursor = await db.execute(
        "INSERT OR IGNORE INTO taggings (article_id, tag_id) VALUES (?, ?)",
        (article_id, tag_id),
    )
    await db.commit()
    return cursor.rowcount > 0


async def untag_article(article_id: str, tag_id: str) -> bool:
    """Detach a tag from an article.

    Returns:
        True if a tagging was removed
    """
    db = await get_database()

    cursor = await db.execute(
        "DELETE FROM taggings WHERE article_id = ? AND tag_id = ?",
        (article_id, tag_id),
    )
    await db.commit()
    return cursor.rowcount > 0


async def list_tags() -> Tuple[List[Tag], List[Tagging]]:
    """List all tags (ordered by label) and all taggings."""
    db = await get_database()

    cursor = await db.execute("SELECT * FROM tags ORDER BY label")
    tags = [Tag(row["tag_id"], row["label"], row["color"]) async for row in cursor]

    cursor = await db.execute("SELECT article_id, tag_id FROM taggings ORDER BY article_id")
    taggings = [Tagging(row["article_id"], row["tag_id"]) async for row in cursor]

    return tags, taggings


async def _update_flag(column: str, article_ids: Sequence[str], value: bool) -> int:
    if not article_ids:
        return 0

    db = await get_database()

    placeholders = ",".join("?" * len(article_ids))
    cursor = await db.execute(
        f"UPDATE articles SET {column} = ? WHERE article_id IN ({placeholders})",
        [value] + list(article_ids),
    )
    await db.commit()
    return cursor.rowcount


async def set_article_read(article_ids: Sequence[str], read: Read) -> int:
    """Set the read state of articles.

    Returns:
        Number of articles updated
    """
    return await _update_flag("unread", article_ids, read is Read.UNREAD)


async def set_article_marked(article_ids: Sequence[str], marked: Marked) -> int:
    """Set the marked state of articles.

    Returns:
        Number of articles updated
    """
    return await _update_flag("marked", article_ids, marked is Marked.MARKED)


async def get_last_sync() -> Optional[datetime]:
    """Time of the last completed sync, or None if there never was one."""
    db = await get_database()

    cursor = await db.execute("SELECT last_sync FROM sync_state WHERE id = 1")
    row = await cursor.fetchone()
    return from_timestamp(row["last_sync"]) if row is not None else None


async def update_last_sync(when: Optional[datetime] = None) -> datetime:
    """Record a completed sync.

    Args:
        when: Time of the sync (default: now)

    Returns:
        The recorded time
    """
    if when is None:
        when = datetime.now(timezone.utc)

    db = await get_database()

    await db.execute(
        "INSERT OR REPLACE INTO sync_state (id, last_sync) VALUES (1, ?)",
        (to_timestamp(when),),
    )
    await db.commit()
    return from_timestamp(to_timestamp(when))


async def close_database() -> None:
    """Close the database connection."""
    global _db_connection

    if _db_connection is not None:
        await _db_connection.close()
        _db_connection = None
