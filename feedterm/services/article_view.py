"""Loading the article list for a filter, and acting on article scopes.

The article list combines several sources of filtering and ordering: the
filter selected in the feed list, the list's article scope (all, unread,
marked), an ad hoc query typed by the user and the sort orders. This module
resolves them and asks the feed service only for what it can evaluate.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from feedterm.commands import ActionScope, ActionScopeKind, ActionTarget, Command, CommandKind, Panel
from feedterm.models import Article, ArticleFilter, ArticleScope, Feed, Marked, Read, Tag
from feedterm.query import ArticleQuery, AugmentedArticleFilter, SortOrder
from feedterm.services.feed_service import FeedService, tags_by_article

logger = logging.getLogger(__name__)


@dataclass
class ArticleView:
    """Articles as shown in the list, with the lookups needed to evaluate queries."""

    articles: List[Article]
    feed_map: Dict[str, Feed] = field(default_factory=dict)
    tags_for_article: Dict[str, List[str]] = field(default_factory=dict)
    tag_map: Dict[str, Tag] = field(default_factory=dict)

    @property
    def article_ids(self) -> List[str]:
        return [article.article_id for article in self.articles]


@dataclass
class ArticleListState:
    """Filter and sort state of the article list.

    Attributes:
        default_sort_order: used when nothing else defines an order
        article_scope: which articles to show unless the filter defines it
        augmented_filter: filter selected in the feed list
        adhoc_filter: query set with ``filter``, active after ``filterapply``
        adhoc_sort_order: order set with ``sort``
        reverse_sort_order: toggled with ``sortreverse``
    """

    default_sort_order: SortOrder = field(default_factory=SortOrder)
    article_scope: ArticleScope = ArticleScope.ALL
    augmented_filter: Optional[AugmentedArticleFilter] = None
    adhoc_filter: Optional[ArticleQuery] = None
    adhoc_sort_order: Optional[SortOrder] = None
    reverse_sort_order: bool = False
    apply_adhoc_filter: bool = False

    def effective_filter(self) -> ArticleFilter:
        """Service-side filter: the selected filter plus the article scope.

        The scope only applies if the selected filter does not already
        constrain the articles itself.
        """
        if self.augmented_filter is None:
            return self.article_scope.to_filter()

        article_filter = replace(self.augmented_filter.article_filter)
        if not self.augmented_filter.defines_scope():
            if self.article_scope is ArticleScope.UNREAD:
                article_filter.unread = Read.UNREAD
                article_filter.marked = None
            elif self.article_scope is ArticleScope.MARKED:
                article_filter.marked = Marked.MARKED
                article_filter.unread = None
        return article_filter

    def effective_scope(self) -> Optional[ArticleScope]:
        """The article scope in effect, or ``None`` if the filter defines it."""
        if self.augmented_filter is not None and self.augmented_filter.defines_scope():
            return None
        return self.article_scope

    def uses_default_sort_order(self) -> bool:
        return (
            self.adhoc_sort_order is None
            and (self.augmented_filter is None or self.augmented_filter.article_query.sort_order is None)
            and not self.reverse_sort_order
        )

    def effective_sort_order(self) -> SortOrder:
        """Ad hoc order, else the ad hoc filter's, else the selected filter's, else the default."""
        candidates = [
            self.adhoc_sort_order,
            self.adhoc_filter.sort_order if self.adhoc_filter is not None else None,
            self.augmented_filter.article_query.sort_order if self.augmented_filter is not None else None,
        ]
        sort_order = next((order for order in candidates if order is not None), self.default_sort_order)
        return sort_order.reverse(self.reverse_sort_order)

    def on_new_article_filter(self, augmented_filter: AugmentedArticleFilter) -> None:
        self.augmented_filter = augmented_filter
        self.apply_adhoc_filter = False

    def on_new_adhoc_filter(self, query: ArticleQuery) -> None:
        self.adhoc_filter = query
        self.apply_adhoc_filter = True

    def clear_sort_order(self) -> None:
        self.adhoc_sort_order = None
        self.reverse_sort_order = False

    def apply(self, command: Command) -> bool:
        """Apply an article-list command to this state.

        Returns:
            True if the command changed the state, False if it does not
            concern the article list filter or ordering
        """
        command = command.unwrap_in(Panel.ARTICLE_LIST)
        if command is None:
            return False

        kind = command.kind
        if kind is CommandKind.ARTICLE_LIST_SORT:
            self.adhoc_sort_order = command.args[0]
        elif kind is CommandKind.ARTICLE_LIST_SORT_REVERSE:
            self.reverse_sort_order = not self.reverse_sort_order
        elif kind is CommandKind.ARTICLE_LIST_SORT_CLEAR:
            self.clear_sort_order()
        elif kind is CommandKind.ARTICLE_LIST_FILTER_SET:
            self.on_new_adhoc_filter(command.args[0])
        elif kind is CommandKind.ARTICLE_LIST_FILTER_APPLY:
            self.apply_adhoc_filter = self.adhoc_filter is not None
        elif kind is CommandKind.ARTICLE_LIST_FILTER_CLEAR:
            self.adhoc_filter = None
            self.apply_adhoc_filter = False
        elif kind is CommandKind.ARTICLE_LIST_QUERY:
            self.on_new_article_filter(AugmentedArticleFilter.from_str(command.args[0].query_string))
        elif kind is CommandKind.SHOW and command.args[0] is not ActionTarget.FEED_LIST:
            self.article_scope = command.args[1]
        else:
            return False

        logger.debug(f"article list state after {command.to_text()!r}: {self}")
        return True


async def load_articles(
    service: FeedService,
    state: ArticleListState,
    last_sync: datetime,
) -> ArticleView:
    """Fetch, filter and sort the articles for the article list.

    The service evaluates the effective ``ArticleFilter``; residual clauses of
    the selected filter and, if applied, the ad hoc filter are evaluated here.

    Args:
        service: feed service to query
        state: current filter and sort state
        last_sync: time of the last sync, for ``lastsync`` clauses

    Returns:
        the filtered and sorted articles with their lookups
    """
    articles = await service.get_articles(state.effective_filter())
    feeds, _ = await service.get_feeds()
    tags, taggings = await service.get_tags()

    view = ArticleView(
        articles=articles,
        feed_map={feed.feed_id: feed for feed in feeds},
        tags_for_article=tags_by_article(taggings),
        tag_map={tag.tag_id: tag for tag in tags},
    )

    if state.augmented_filter is not None and state.augmented_filter.is_augmented():
        view.articles = state.augmented_filter.filter(
            view.articles, view.feed_map, view.tags_for_article, view.tag_map, last_sync
        )
    if state.apply_adhoc_filter and state.adhoc_filter is not None:
        view.articles = state.adhoc_filter.filter(
            view.articles, view.feed_map, view.tags_for_article, view.tag_map, last_sync
        )

    view.articles = state.effective_sort_order().sort(view.articles, view.feed_map)
    logger.debug(f"loaded {len(view.articles)} articles")
    return view


def resolve_scope(
    view: ArticleView,
    scope: ActionScope,
    current_article_id: Optional[str],
    last_sync: datetime,
) -> List[str]:
    """Resolve an action scope to article ids within the loaded list.

    Returns:
        ``[current_article_id]`` for the current scope (empty if nothing is
        selected), all listed ids for ``%``, or the ids matching the query
    """
    if scope.kind is ActionScopeKind.CURRENT:
        return [current_article_id] if current_article_id is not None else []
    if scope.kind is ActionScopeKind.ALL:
        return view.article_ids
    matching = scope.query.filter(
        view.articles, view.feed_map, view.tags_for_article, view.tag_map, last_sync
    )
    return [article.article_id for article in matching]


async def set_scope_read(
    service: FeedService,
    view: ArticleView,
    scope: ActionScope,
    read: Read,
    current_article_id: Optional[str],
    last_sync: datetime,
) -> List[str]:
    """Set the read state of all articles in the scope.

    Returns:
        ids of the articles that were updated
    """
    article_ids: Sequence[str] = resolve_scope(view, scope, current_article_id, last_sync)
    if article_ids:
        await service.set_article_read(list(article_ids), read)
    logger.info(f"set {len(article_ids)} articles to {read.value} ({scope})")
    return list(article_ids)
