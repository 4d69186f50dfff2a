"""Feed service backed by the SQLite store."""

from typing import List, Sequence, Tuple

from feedterm.models import Article, ArticleFilter, Feed, FeedMapping, Read, Tag, Tagging
from feedterm.storage import database


class DatabaseFeedService:
    """Serves the query layer from the local database.

    The ``ArticleFilter`` is evaluated in SQL; everything else a query asks
    for is evaluated by the caller on the returned articles.
    """

    async def get_articles(self, article_filter: ArticleFilter) -> List[Article]:
        return await database.get_articles(article_filter)

    async def get_feeds(self) -> Tuple[List[Feed], List[FeedMapping]]:
        return await database.list_feeds()

    async def get_tags(self) -> Tuple[List[Tag], List[Tagging]]:
        return await database.list_tags()

    async def set_article_read(self, article_ids: Sequence[str], read: Read) -> None:
        await database.set_article_read(article_ids, read)
