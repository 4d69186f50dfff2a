"""Boundary to the feed-management service.

The query layer needs four operations from whatever stores articles, feeds
and tags. ``InMemoryFeedService`` implements them over plain lists and is
used by tests and by tools that already hold the data.
"""

import logging
from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from feedterm.models import Article, ArticleFilter, Feed, FeedMapping, Read, Tag, Tagging

logger = logging.getLogger(__name__)


class FeedService(Protocol):
    """Operations the query layer consumes from the feed service."""

    async def get_articles(self, article_filter: ArticleFilter) -> List[Article]:
        ...

    async def get_feeds(self) -> Tuple[List[Feed], List[FeedMapping]]:
        ...

    async def get_tags(self) -> Tuple[List[Tag], List[Tagging]]:
        ...

    async def set_article_read(self, article_ids: Sequence[str], read: Read) -> None:
        ...


def tags_by_article(taggings: Iterable[Tagging]) -> Dict[str, List[str]]:
    """Group tag ids by article id."""
    grouped: Dict[str, List[str]] = defaultdict(list)
    for tagging in taggings:
        grouped[tagging.article_id].append(tagging.tag_id)
    return dict(grouped)


class InMemoryFeedService:
    """Feed service over in-memory records."""

    def __init__(
        self,
        articles: Optional[Iterable[Article]] = None,
        feeds: Optional[Iterable[Feed]] = None,
        feed_mappings: Optional[Iterable[FeedMapping]] = None,
        tags: Optional[Iterable[Tag]] = None,
        taggings: Optional[Iterable[Tagging]] = None,
    ):
        self.articles: Dict[str, Article] = {a.article_id: a for a in articles or ()}
        self.feeds = list(feeds or ())
        self.feed_mappings = list(feed_mappings or ())
        self.tags = list(tags or ())
        self.taggings = list(taggings or ())

    async def get_articles(self, article_filter: ArticleFilter) -> List[Article]:
        articles = [a for a in self.articles.values() if article_filter.matches(a)]
        logger.debug(f"{len(articles)} of {len(self.articles)} articles match {article_filter}")
        return articles

    async def get_feeds(self) -> Tuple[List[Feed], List[FeedMapping]]:
        return list(self.feeds), list(self.feed_mappings)

    async def get_tags(self) -> Tuple[List[Tag], List[Tagging]]:
        return list(self.tags), list(self.taggings)

    async def set_article_read(self, article_ids: Sequence[str], read: Read) -> None:
        for article_id in article_ids:
            article = self.articles.get(article_id)
            if article is None:
                logger.warning(f"cannot set read state of unknown article {article_id}")
                continue
            self.articles[article_id] = replace(article, unread=read)
