"""Parser for command lines such as ``in articles read %`` or ``tag work unread``.

The first word selects a ``CommandKind``; the rest of the line is consumed
according to the kind's argument shape. Query and sort-order arguments are
handed to their own grammars.

Two modes share one code path: in eager mode (on submit and for
configuration) text left over after the last argument is an error, in lenient
mode (while typing) it is ignored.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

import httpx
from rich.color import Color, ColorParseError

from feedterm.commands.errors import (
    ArticleQueryExpected,
    ArticleScopeExpected,
    ColorExpected,
    CommandExpected,
    CommandNameExpected,
    CommandParseError,
    ConfirmationExpected,
    FilePathExpected,
    NothingExpected,
    PanelExpected,
    PositionExpected,
    SearchTermExpected,
    ShareTargetExpected,
    SomethingExpected,
    SortOrderExpected,
    TagExpected,
    TargetOrArticleScopeExpected,
    UrlExpected,
)
from feedterm.commands.model import (
    ActionScope,
    ActionTarget,
    ArgShape,
    Command,
    CommandKind,
    Panel,
    PastePosition,
)
from feedterm.models import ArticleScope
from feedterm.query import (
    ArticleQuery,
    KeyOrWordExpected,
    OrderDirectionOrKeyExpected,
    QueryLexer,
    QueryParseError,
    SortOrder,
    SortOrderParseError,
)
from feedterm.query.search_term import to_search_term

logger = logging.getLogger(__name__)

__all__ = ["parse_command", "split_first", "CommandParseError"]


def split_first(text: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split off the first word.

    Returns:
        the first word (``None`` for blank input) and the trimmed rest
        (``None`` if nothing follows)
    """
    if text is None:
        return None, None
    parts = text.strip().split(None, 1)
    if not parts:
        return None, None
    rest = parts[1].strip() if len(parts) > 1 else ""
    return parts[0], rest or None


def _expect_nothing(rest: Optional[str], eager: bool) -> None:
    if eager and rest:
        raise NothingExpected(rest)


def _scope(text: Optional[str]) -> ActionScope:
    if text is None:
        return ActionScope.current()
    try:
        return ActionScope.from_str(text)
    except QueryParseError as e:
        raise ArticleQueryExpected(e) from e


def _url(word: str) -> httpx.URL:
    try:
        url = httpx.URL(word)
    except httpx.InvalidURL as e:
        raise UrlExpected(word) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise UrlExpected(word)
    return url


def _color(word: str) -> Color:
    try:
        return Color.parse(word)
    except ColorParseError as e:
        raise ColorExpected(word) from e


def _panel(rest: Optional[str]) -> Tuple[Panel, Optional[str]]:
    word, rest = split_first(rest)
    panel = Panel.from_keyword(word) if word is not None else None
    if panel is None:
        raise PanelExpected(word)
    return panel, rest


def _no_arguments(kind, rest, eager):
    _expect_nothing(rest, eager)
    return ()


def _panel_argument(kind, rest, eager):
    panel, rest = _panel(rest)
    _expect_nothing(rest, eager)
    return (panel,)


def _in_arguments(kind, rest, eager):
    panel, rest = _panel(rest)
    if rest is None:
        raise CommandExpected()
    return (panel, parse_command(rest, eager))


def _confirm_arguments(kind, rest, eager):
    if rest is None:
        raise CommandExpected()
    return (parse_command(rest, eager),)


def _target_scope_arguments(kind, rest, eager):
    # a leading target word is optional; anything else belongs to the scope
    word, tail = split_first(rest)
    target = ActionTarget.from_keyword(word) if word is not None else None
    if target is None:
        return (ActionTarget.CURRENT, _scope(rest))
    return (target, _scope(tail))


def _scope_argument(kind, rest, eager):
    return (_scope(rest),)


def _tag_scope_arguments(kind, rest, eager):
    tag, tail = split_first(rest)
    if tag is None:
        raise TagExpected()
    return (tag, _scope(tail))


def _url_name_arguments(kind, rest, eager):
    word, name = split_first(rest)
    if word is None:
        raise UrlExpected()
    return (_url(word), name)


def _url_argument(kind, rest, eager):
    word, rest = split_first(rest)
    if word is None:
        raise UrlExpected()
    url = _url(word)
    _expect_nothing(rest, eager)
    return (url,)


def _position_argument(kind, rest, eager):
    word, rest = split_first(rest)
    position = PastePosition.from_keyword(word) if word is not None else None
    if position is None:
        raise PositionExpected(word)
    _expect_nothing(rest, eager)
    return (position,)


def _text_argument(kind, rest, eager):
    if rest is None:
        raise SomethingExpected(kind.usage)
    return (rest,)


def _color_argument(kind, rest, eager):
    word, rest = split_first(rest)
    if word is None:
        raise ColorExpected()
    color = _color(word)
    _expect_nothing(rest, eager)
    return (color,)


def _tag_color_arguments(kind, rest, eager):
    tag, rest = split_first(rest)
    if tag is None:
        raise TagExpected()
    word, rest = split_first(rest)
    color = _color(word) if word is not None else None
    _expect_nothing(rest, eager)
    return (tag, color)


def _article_scope(rest: Optional[str], eager: bool) -> ArticleScope:
    word, rest = split_first(rest)
    scope = ArticleScope.from_keyword(word) if word is not None else None
    if scope is None:
        raise ArticleScopeExpected(word)
    _expect_nothing(rest, eager)
    return scope


def _article_scope_argument(kind, rest, eager):
    return (_article_scope(rest, eager),)


def _target_article_scope_arguments(kind, rest, eager):
    word, tail = split_first(rest)
    if word is None:
        raise TargetOrArticleScopeExpected()
    target = ActionTarget.from_keyword(word)
    if target is None:
        return (ActionTarget.CURRENT, _article_scope(rest, eager))
    return (target, _article_scope(tail, eager))


def _query_argument(kind, rest, eager):
    if rest is None:
        raise ArticleQueryExpected(KeyOrWordExpected(0, ""))
    try:
        return (ArticleQuery.from_str(rest),)
    except QueryParseError as e:
        raise ArticleQueryExpected(e) from e


def _search_term_argument(kind, rest, eager):
    if rest is None:
        raise SearchTermExpected()
    lexer = QueryLexer(rest)
    lexeme = lexer.next()
    if lexeme is None:
        raise SearchTermExpected()
    try:
        term = to_search_term(lexeme)
    except QueryParseError as e:
        raise SearchTermExpected(e) from e
    _expect_nothing(lexer.remainder().strip(), eager)
    return (term,)


def _sort_order_argument(kind, rest, eager):
    if rest is None:
        raise SortOrderExpected(OrderDirectionOrKeyExpected(0, ""))
    try:
        return (SortOrder.from_str(rest),)
    except SortOrderParseError as e:
        raise SortOrderExpected(e) from e


def _share_argument(kind, rest, eager):
    word, rest = split_first(rest)
    if word is None:
        raise ShareTargetExpected()
    _expect_nothing(rest, eager)
    return (word,)


def _path_argument(kind, rest, eager):
    if rest is None:
        raise FilePathExpected()
    return (rest,)


def _confirmation_argument(kind, rest, eager):
    word, rest = split_first(rest)
    if word is None:
        raise ConfirmationExpected()
    _expect_nothing(rest, eager)
    return (word,)


def _optional_text_argument(kind, rest, eager):
    return (rest,)


_ARGUMENT_PARSERS: Dict[ArgShape, Callable[[CommandKind, Optional[str], bool], Tuple[Any, ...]]] = {
    ArgShape.NONE: _no_arguments,
    ArgShape.PANEL: _panel_argument,
    ArgShape.IN: _in_arguments,
    ArgShape.CONFIRM: _confirm_arguments,
    ArgShape.TARGET_SCOPE: _target_scope_arguments,
    ArgShape.SCOPE: _scope_argument,
    ArgShape.TAG_SCOPE: _tag_scope_arguments,
    ArgShape.URL_NAME: _url_name_arguments,
    ArgShape.URL: _url_argument,
    ArgShape.POSITION: _position_argument,
    ArgShape.TEXT: _text_argument,
    ArgShape.COLOR: _color_argument,
    ArgShape.TAG_COLOR: _tag_color_arguments,
    ArgShape.ARTICLE_SCOPE: _article_scope_argument,
    ArgShape.TARGET_ARTICLE_SCOPE: _target_article_scope_arguments,
    ArgShape.QUERY: _query_argument,
    ArgShape.SEARCH_TERM: _search_term_argument,
    ArgShape.SORT_ORDER: _sort_order_argument,
    ArgShape.SHARE: _share_argument,
    ArgShape.PATH: _path_argument,
    ArgShape.CONFIRMATION: _confirmation_argument,
    ArgShape.OPTIONAL_TEXT: _optional_text_argument,
}


def parse_command(text: str, eager: bool = True) -> Command:
    """Parse a command line.

    Args:
        text: command line, e.g. ``"confirm read feeds %"``
        eager: reject text left over after the last argument

    Returns:
        the parsed command

    Raises:
        CommandParseError: naming the argument that was expected
    """
    keyword, rest = split_first(text)
    if keyword is None:
        raise CommandNameExpected("")

    kind = CommandKind.from_keyword(keyword)
    if kind is None:
        raise CommandNameExpected(keyword)

    command = Command(kind, _ARGUMENT_PARSERS[kind.shape](kind, rest, eager))
    logger.debug(f"command parsed: {command.to_text()!r} (eager={eager})")
    return command
