"""Contextual help and tab completion for the command line.

While the user types, the text before the word under the cursor is parsed in
lenient mode. The kind of error (or the parsed command) tells which values may
follow, and those are offered as help entries and completion candidates.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from feedterm.commands import (
    ActionScopeKind,
    ActionTarget,
    ArgShape,
    ArticleQueryExpected,
    ArticleScopeExpected,
    ColorExpected,
    CommandExpected,
    CommandKind,
    CommandNameExpected,
    CommandParseError,
    ConfirmationExpected,
    Panel,
    PanelExpected,
    PastePosition,
    PositionExpected,
    SearchTermExpected,
    ShareTargetExpected,
    SortOrderExpected,
    TagExpected,
    TargetOrArticleScopeExpected,
    UrlExpected,
    parse_command,
    split_first,
)
from feedterm.models import ArticleScope, Tag
from feedterm.query import KEYWORD_TOKENS, QueryToken, SortDirection, SortField

logger = logging.getLogger(__name__)

COLOR_NAMES = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
    "bright_black",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
    "bright_white",
)


@dataclass(frozen=True)
class HelpEntry:
    keyword: str
    usage: str
    detail: str


@dataclass(frozen=True)
class Hint:
    """What may follow the text typed so far.

    Attributes:
        title: heading of the help panel, empty if there is nothing to show
        entries: help entries to display
        completions: candidates for tab completion of the current word
    """

    title: str = ""
    entries: Tuple[HelpEntry, ...] = ()
    completions: Tuple[str, ...] = field(default_factory=tuple)


def command_entries() -> List[HelpEntry]:
    return [HelpEntry(kind.keyword, kind.usage, kind.detail) for kind in CommandKind]


def query_token_entries() -> List[HelpEntry]:
    return [HelpEntry(token.literal, token.usage, token.detail) for token in KEYWORD_TOKENS]


def search_term_entries() -> List[HelpEntry]:
    return [
        HelpEntry(token.usage, token.usage, token.detail)
        for token in (QueryToken.WORD, QueryToken.QUOTED_STRING, QueryToken.REGEX)
    ]


def sort_token_entries() -> List[HelpEntry]:
    entries = [
        HelpEntry(SortDirection.ASCENDING.symbol, "<key", "ascending order"),
        HelpEntry(SortDirection.DESCENDING.symbol, ">key", "descending order"),
    ]
    entries.extend(HelpEntry(f.keyword, f.keyword, f.detail) for f in SortField)
    return entries


def panel_entries() -> List[HelpEntry]:
    return [HelpEntry(panel.keyword, panel.label, panel.detail) for panel in Panel]


def target_entries() -> List[HelpEntry]:
    return [HelpEntry(target.keyword, target.keyword, target.detail) for target in ActionTarget]


def action_scope_entries() -> List[HelpEntry]:
    return [HelpEntry(kind.keyword, kind.keyword, kind.detail) for kind in ActionScopeKind]


def article_scope_entries() -> List[HelpEntry]:
    return [HelpEntry(scope.keyword, scope.label, scope.detail) for scope in ArticleScope]


def paste_position_entries() -> List[HelpEntry]:
    return [HelpEntry(p.keyword, p.keyword, p.detail) for p in PastePosition]


def color_entries() -> List[HelpEntry]:
    entries = [HelpEntry(name, name, "standard color") for name in COLOR_NAMES]
    entries.append(HelpEntry("#ffffff", "#rrggbb", "hex color"))
    return entries


def tag_entries(tags: Iterable[Tag]) -> List[HelpEntry]:
    return [HelpEntry(tag.label, f"#{tag.label}", tag.color or "") for tag in tags]


def _completable(entries: Iterable[HelpEntry]) -> Tuple[str, ...]:
    # placeholders such as "<query>" cannot be inserted literally
    return tuple(entry.keyword for entry in entries if not entry.keyword.startswith("<"))


def _hint(title: str, entries: Sequence[HelpEntry]) -> Hint:
    return Hint(title, tuple(entries), _completable(entries))


def split_current_word(text: str) -> Tuple[str, str]:
    """Split the input into the completed part and the word being typed."""
    for index in range(len(text) - 1, -1, -1):
        if text[index].isspace():
            return text[:index], text[index + 1:]
    return "", text


def _innermost(prefix: str) -> Tuple[Optional[CommandKind], List[str]]:
    """Resolve ``confirm``/``in`` wrappers of an already parsed prefix.

    Returns the kind of the innermost command and the words typed after its
    keyword.
    """
    keyword, rest = split_first(prefix)
    kind = CommandKind.from_keyword(keyword) if keyword is not None else None
    if kind is CommandKind.CONFIRM:
        return _innermost(rest or "")
    if kind is CommandKind.IN:
        _, rest = split_first(rest)
        return _innermost(rest or "")
    return kind, (rest or "").split()


def _continuation(kind: CommandKind, words: List[str]) -> Optional[Hint]:
    """Hint for an optional argument that may follow a complete command."""
    shape = kind.shape
    if shape is ArgShape.TARGET_SCOPE and not words:
        return _hint("Target or Scope", target_entries() + action_scope_entries())
    if shape is ArgShape.TARGET_SCOPE and len(words) == 1 and ActionTarget.from_keyword(words[0]):
        return _hint("Scope", action_scope_entries())
    if shape is ArgShape.SCOPE and not words:
        return _hint("Scope", action_scope_entries())
    if shape is ArgShape.TAG_SCOPE and len(words) == 1:
        return _hint("Scope", action_scope_entries())
    if shape is ArgShape.TAG_COLOR and len(words) == 1:
        return _hint("Color", color_entries())
    if shape is ArgShape.SEARCH_TERM and not words:
        return _hint("Search Term", search_term_entries())
    return None


def hint_for(
    text: str,
    tags: Iterable[Tag] = (),
    share_targets: Iterable[str] = (),
) -> Hint:
    """Compute the help shown for a partially typed command line.

    Args:
        text: command line up to the cursor
        tags: known tags, offered where a tag name is expected
        share_targets: configured share targets

    Returns:
        the hint for the word under the cursor
    """
    prefix, current_word = split_current_word(text)

    try:
        command = parse_command(prefix, eager=False)
    except CommandNameExpected:
        commands = command_entries()
        matching = [entry for entry in commands if entry.keyword.startswith(current_word)]
        return Hint("Command", tuple(matching), _completable(commands))
    except CommandExpected:
        return _hint("Command", command_entries())
    except PanelExpected:
        return _hint("Panel", panel_entries())
    except TagExpected:
        return _hint("Tag", tag_entries(tags))
    except TargetOrArticleScopeExpected:
        return _hint("Target or Article Scope", target_entries() + article_scope_entries())
    except ArticleScopeExpected:
        return _hint("Article Scope", article_scope_entries())
    except ArticleQueryExpected:
        return _hint("Query", query_token_entries())
    except UrlExpected:
        return Hint(
            "URL",
            (HelpEntry("", "URL expected", "e.g., https://www.feedprovider.com/rss"),),
        )
    except ColorExpected:
        return _hint("Color", color_entries())
    except ShareTargetExpected:
        return _hint("Share Targets", [HelpEntry(t, t, "share target") for t in share_targets])
    except PositionExpected:
        return _hint("Paste Position", paste_position_entries())
    except SortOrderExpected:
        return _hint("Sort Order", sort_token_entries())
    except SearchTermExpected:
        return _hint("Search Term", search_term_entries())
    except ConfirmationExpected:
        return _hint("Confirmation", [HelpEntry("NOW", "NOW", "confirm logout")])
    except CommandParseError as e:
        logger.debug(f"no hint for {prefix!r}: {e}")
        return Hint()

    kind, words = _innermost(prefix)
    continuation = _continuation(kind, words) if kind is not None else None
    if continuation is not None:
        return continuation

    logger.debug(f"complete command typed: {command.to_text()!r}")
    return Hint()


def command_hint(text: str) -> str:
    """One-line summary of the command being typed."""
    try:
        command = parse_command(text, eager=False)
    except CommandParseError:
        keyword, _ = split_first(text)
        kind = CommandKind.from_keyword(keyword) if keyword is not None else None
        if kind is None:
            return "Press <TAB> for help."
        return f"{kind.usage}  {kind.detail}"
    return f"{command.describe()} ({command.kind.usage})"


def cycle_completion(
    current_word: str,
    completions: Sequence[str],
    prefix: str,
    forward: bool = True,
) -> str:
    """Pick the next completion for the word under the cursor.

    Candidates are the completions starting with ``prefix`` (the word as
    typed before cycling started). If the current word is one of them, the
    next (or previous) one is returned, otherwise the first.
    """
    candidates = [candidate for candidate in completions if candidate.startswith(prefix)]
    if not candidates:
        return current_word
    if current_word not in candidates:
        return candidates[0]
    index = candidates.index(current_word)
    step = 1 if forward else -1
    return candidates[(index + step) % len(candidates)]
