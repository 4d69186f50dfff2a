"""Command catalog and command values.

``CommandKind`` is the one table describing every command: its keyword, its
usage string, its help text and the shape of its arguments. The parser, the
help layer and the rendering below all read from it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from rich.color import Color

from feedterm.models import ArticleScope
from feedterm.query import ArticleQuery


class ArgShape(Enum):
    """Argument layout of a command."""

    NONE = "none"
    PANEL = "panel"
    IN = "in"
    CONFIRM = "confirm"
    TARGET_SCOPE = "target_scope"
    SCOPE = "scope"
    TAG_SCOPE = "tag_scope"
    URL_NAME = "url_name"
    URL = "url"
    POSITION = "position"
    TEXT = "text"
    COLOR = "color"
    TAG_COLOR = "tag_color"
    ARTICLE_SCOPE = "article_scope"
    TARGET_ARTICLE_SCOPE = "target_article_scope"
    QUERY = "query"
    SEARCH_TERM = "search_term"
    SORT_ORDER = "sort_order"
    SHARE = "share"
    PATH = "path"
    CONFIRMATION = "confirmation"
    OPTIONAL_TEXT = "optional_text"


class CommandKind(Enum):
    """All commands with their keyword, usage, help text and argument shape."""

    NO_OPERATION = ("nop", "nop", "no operation (for unmapping key bindings)", ArgShape.NONE)

    NAVIGATE_UP = ("up", "up", "navigates up in the current context (all)", ArgShape.NONE)
    NAVIGATE_DOWN = ("down", "down", "navigates down in the current context (all)", ArgShape.NONE)
    NAVIGATE_PAGE_UP = ("pageup", "pageup", "navigates up by several items (all)", ArgShape.NONE)
    NAVIGATE_PAGE_DOWN = (
        "pagedown",
        "pagedown",
        "navigates down by several items (all)",
        ArgShape.NONE,
    )
    NAVIGATE_FIRST = ("gotofirst", "gotofirst", "navigate to first element (all)", ArgShape.NONE)
    NAVIGATE_LAST = ("gotolast", "gotolast", "navigate to last element (all)", ArgShape.NONE)
    NAVIGATE_LEFT = ("left", "left", "navigate left in the current context (all)", ArgShape.NONE)
    NAVIGATE_RIGHT = (
        "right",
        "right",
        "navigate right in the current context (all)",
        ArgShape.NONE,
    )

    INPUT_SEARCH = ("_search", "_search", "open prompt to search", ArgShape.NONE)
    INPUT_ABORT = ("_abort", "abort", "abort current dialog", ArgShape.NONE)
    INPUT_SUBMIT = ("_submit", "submit", "submit current input", ArgShape.NONE)
    INPUT_CLEAR = ("_clear", "clear", "clear current input", ArgShape.NONE)

    PANEL_FOCUS_NEXT = (
        "next",
        "next",
        "focus next panel until article content (all)",
        ArgShape.NONE,
    )
    PANEL_FOCUS_PREVIOUS = (
        "prev",
        "prev",
        "focus previous panel until feed list (all)",
        ArgShape.NONE,
    )
    PANEL_FOCUS_NEXT_CYCLIC = (
        "nextc",
        "nextc",
        "focus next panel, cycling back to feed list (all)",
        ArgShape.NONE,
    )
    PANEL_FOCUS_PREVIOUS_CYCLIC = (
        "prevc",
        "prevc",
        "focus previous panel, cycling back to article content (all)",
        ArgShape.NONE,
    )
    PANEL_FOCUS = ("focus", "focus <panel>", "focuses the given panel (all)", ArgShape.PANEL)
    TOGGLE_DISTRACTION_FREE = (
        "zen",
        "zen",
        "toggle distraction-free mode (article content)",
        ArgShape.NONE,
    )

    FEED_LIST_SYNC = ("sync", "sync", "sync all feeds (feed list)", ArgShape.NONE)
    FEED_LIST_CATEGORY_ADD = (
        "categoryadd",
        "categoryadd <category name>",
        "add a new category with the given name (feed list)",
        ArgShape.TEXT,
    )
    FEED_LIST_FEED_ADD = (
        "feedadd",
        "feedadd <feed URL> [<name>]",
        "add a new feed with the given URL and optional name (feed list)",
        ArgShape.URL_NAME,
    )
    FEED_LIST_TAG_CHANGE_COLOR = (
        "tagchangecolor",
        "tagchangecolor <color>",
        "change the color of the selected tag (feed list)",
        ArgShape.COLOR,
    )
    FEED_LIST_RENAME = (
        "rename",
        "rename <new name>",
        "rename the selected item (feed list)",
        ArgShape.TEXT,
    )
    FEED_LIST_REMOVE = (
        "remove",
        "remove",
        "remove the selected childless item (feed list)",
        ArgShape.NONE,
    )
    FEED_LIST_REMOVE_WITH_CHILDREN = (
        "removeall",
        "removeall",
        "remove the selected item with children (feed list)",
        ArgShape.NONE,
    )
    FEED_LIST_FEED_CHANGE_URL = (
        "feedchangeurl",
        "feedchangeurl <feed URL>",
        "change URL of the selected feed (feed list)",
        ArgShape.URL,
    )
    FEED_LIST_YANK = (
        "yank",
        "yank",
        "yank the selected item (feed or category) for moving (feed list)",
        ArgShape.NONE,
    )
    FEED_LIST_PASTE = (
        "paste",
        "paste <paste position>",
        "paste the yanked item before/after selected item (feed list)",
        ArgShape.POSITION,
    )
    FEED_LIST_TOGGLE_EXPAND = (
        "toggle",
        "toggle",
        "toggle selected item open/closed (feed list)",
        ArgShape.NONE,
    )
    FEED_LIST_EXPAND_CATEGORIES = (
        "expandcategories",
        "expandcategories <article scope>",
        "expands all categories containing articles of the scope (feed list)",
        ArgShape.ARTICLE_SCOPE,
    )
    FEED_LIST_EXPAND = ("expand", "expand", "expands current selected item (feed list)", ArgShape.NONE)
    FEED_LIST_COLLAPSE = (
        "collapse",
        "collapse",
        "collapses the currently selected item (feed list)",
        ArgShape.NONE,
    )
    FEED_LIST_COLLAPSE_ALL = ("collapseall", "collapseall", "collapses all items (feed list)", ArgShape.NONE)

    ACTION_SET_READ = (
        "read",
        "read [[<target>] <scope>]",
        "set all articles matching the scope in the target to read (feed list, article list)",
        ArgShape.TARGET_SCOPE,
    )
    ACTION_SET_UNREAD = (
        "unread",
        "unread [<scope>]",
        "set all articles matching the scope to unread (feed list, article list)",
        ArgShape.SCOPE,
    )
    ACTION_SET_MARKED = (
        "mark",
        "mark [<scope>]",
        "marks all articles matching the scope (article list)",
        ArgShape.SCOPE,
    )
    ACTION_SET_UNMARKED = (
        "unmark",
        "unmark [<scope>]",
        "unmarks all articles matching the scope (article list)",
        ArgShape.SCOPE,
    )
    ACTION_OPEN_IN_BROWSER = (
        "open",
        "open [<scope>]",
        "opens all articles matching the scope in the web browser (article list)",
        ArgShape.SCOPE,
    )
    ACTION_TAG_ARTICLES = (
        "tag",
        "tag <tag name> [<scope>]",
        "adds the tag to all articles matching the scope (article list)",
        ArgShape.TAG_SCOPE,
    )
    ACTION_UNTAG_ARTICLES = (
        "untag",
        "untag <tag name> [<scope>]",
        "removes the tag from all articles matching the scope (article list)",
        ArgShape.TAG_SCOPE,
    )
    TAG_ADD = (
        "tagadd",
        "tagadd <tag name> [<color>]",
        "adds a new tag with the given name and optional color (feed list)",
        ArgShape.TAG_COLOR,
    )

    ARTICLE_LIST_SELECT_NEXT_UNREAD = (
        "nextunread",
        "nextunread",
        "select next unread item (article list)",
        ArgShape.NONE,
    )
    SHOW = (
        "show",
        "show [<target>] <article scope>",
        "show only articles in the article scope (feed list, article list)",
        ArgShape.TARGET_ARTICLE_SCOPE,
    )
    ARTICLE_SCRAPE = (
        "scrape",
        "scrape",
        "scrape the current article (article list, article content)",
        ArgShape.NONE,
    )

    ARTICLE_LIST_SEARCH = (
        "searcharticles",
        "searcharticles <article query>",
        "search for articles matching the query (article list)",
        ArgShape.QUERY,
    )
    SEARCH = (
        "search",
        "search [<search term>]",
        "search current panel by search term; empty search term to clear search (all)",
        ArgShape.SEARCH_TERM,
    )
    SEARCH_NEXT = ("searchnext", "searchnext", "search next matching item (all)", ArgShape.NONE)
    SEARCH_PREVIOUS = (
        "searchprev",
        "searchprev",
        "search previous matching item (all)",
        ArgShape.NONE,
    )
    ARTICLE_LIST_FILTER_SET = (
        "filter",
        "filter <article query>",
        "filter articles by query (article list)",
        ArgShape.QUERY,
    )
    ARTICLE_LIST_FILTER_APPLY = (
        "filterapply",
        "filterapply",
        "apply current filter (article list)",
        ArgShape.NONE,
    )
    ARTICLE_LIST_FILTER_CLEAR = (
        "filterclear",
        "filterclear",
        "clear current filter (article list)",
        ArgShape.NONE,
    )
    ARTICLE_LIST_SORT = (
        "sort",
        "sort <sort order>",
        "sort articles according to sort order (article list)",
        ArgShape.SORT_ORDER,
    )
    ARTICLE_LIST_SORT_REVERSE = (
        "sortreverse",
        "sortreverse",
        "reverse the current sort order (article list)",
        ArgShape.NONE,
    )
    ARTICLE_LIST_SORT_CLEAR = (
        "sortclear",
        "sortclear",
        "clear the current sort order (article list)",
        ArgShape.NONE,
    )
    ARTICLE_LIST_QUERY = (
        "query",
        "query <article query>",
        "executes a query on all articles (article list)",
        ArgShape.QUERY,
    )
    ARTICLE_SHARE = (
        "share",
        "share <target>",
        "shares title and url with target (article list, article content)",
        ArgShape.SHARE,
    )
    IMPORT_OPML = (
        "importopml",
        "importopml <path>",
        "imports an OPML file from the given path (all)",
        ArgShape.PATH,
    )
    EXPORT_OPML = (
        "exportopml",
        "exportopml <path>",
        "exports an OPML file to the given path (all)",
        ArgShape.PATH,
    )

    APPLICATION_QUIT = ("quit", "quit", "quit feedterm (all)", ArgShape.NONE)
    COMMAND_LINE_OPEN = (
        "cmd",
        "cmd [<command line content>]",
        "open command line with optional content (all)",
        ArgShape.OPTIONAL_TEXT,
    )
    LOGOUT = (
        "LOGOUT",
        "LOGOUT <confirmation>",
        "logout, NOTE: this will remove ALL LOCAL DATA! Pass `NOW` as parameter to confirm.",
        ArgShape.CONFIRMATION,
    )
    HELP_INPUT = ("helpinput", "helpinput", "show help on input mappings (all)", ArgShape.NONE)
    CONFIRM = (
        "confirm",
        "confirm <command>",
        "ask user for confirmation and, if positive, execute command (all)",
        ArgShape.CONFIRM,
    )
    IN = ("in", "in <panel> <command>", "execute command in the panel", ArgShape.IN)

    REDRAW = ("redraw", "redraw", "redraw screen (all)", ArgShape.NONE)
    REFRESH = (
        "refresh",
        "refresh",
        "refreshes contents of all panels according to selections (all)",
        ArgShape.NONE,
    )

    def __init__(self, keyword: str, usage: str, detail: str, shape: ArgShape):
        self.keyword = keyword
        self.usage = usage
        self.detail = detail
        self.shape = shape

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["CommandKind"]:
        return _KINDS_BY_KEYWORD.get(keyword)


_KINDS_BY_KEYWORD = {kind.keyword: kind for kind in CommandKind}


class Panel(Enum):
    FEED_LIST = ("feeds", "feed list", "panel with tree of feeds, categories, tags, etc.")
    ARTICLE_LIST = ("articles", "article list", "panel with the list of articles")
    ARTICLE_CONTENT = ("content", "article content", "content of the selected article")

    def __init__(self, keyword: str, label: str, detail: str):
        self.keyword = keyword
        self.label = label
        self.detail = detail

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["Panel"]:
        for panel in cls:
            if panel.keyword == keyword:
                return panel
        return None

    def __str__(self) -> str:
        return self.label


class ActionTarget(Enum):
    CURRENT = (".", "currently selected panel")
    FEED_LIST = ("feeds", "feed list")
    ARTICLE_LIST = ("articles", "article list")

    def __init__(self, keyword: str, detail: str):
        self.keyword = keyword
        self.detail = detail

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["ActionTarget"]:
        for target in cls:
            if target.keyword == keyword:
                return target
        return None

    def __str__(self) -> str:
        return self.keyword


class PastePosition(Enum):
    AFTER = ("after", "position after the current element")
    BEFORE = ("before", "position before the current element")

    def __init__(self, keyword: str, detail: str):
        self.keyword = keyword
        self.detail = detail

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["PastePosition"]:
        for position in cls:
            if position.keyword == keyword:
                return position
        return None

    def __str__(self) -> str:
        return self.keyword


class ActionScopeKind(Enum):
    CURRENT = (".", "currently selected item")
    ALL = ("%", "all items")
    QUERY = ("<query>", "all articles defined by a query")

    def __init__(self, keyword: str, detail: str):
        self.keyword = keyword
        self.detail = detail


@dataclass(frozen=True)
class ActionScope:
    """Which articles a command acts on: the current one, all, or a query."""

    kind: ActionScopeKind = ActionScopeKind.CURRENT
    query: Optional[ArticleQuery] = None

    @classmethod
    def current(cls) -> "ActionScope":
        return cls(ActionScopeKind.CURRENT)

    @classmethod
    def all(cls) -> "ActionScope":
        return cls(ActionScopeKind.ALL)

    @classmethod
    def from_query(cls, query: ArticleQuery) -> "ActionScope":
        return cls(ActionScopeKind.QUERY, query)

    @classmethod
    def from_str(cls, text: str) -> "ActionScope":
        """Parse ``.`` (current), ``%`` (all) or an article query.

        Raises:
            QueryParseError: if the text is neither and not a valid query
        """
        if text == ActionScopeKind.CURRENT.keyword:
            return cls.current()
        if text == ActionScopeKind.ALL.keyword:
            return cls.all()
        return cls.from_query(ArticleQuery.from_str(text))

    def to_text(self) -> str:
        if self.kind is ActionScopeKind.QUERY:
            return self.query.query_string
        return self.kind.keyword

    def __str__(self) -> str:
        if self.kind is ActionScopeKind.CURRENT:
            return "current article"
        if self.kind is ActionScopeKind.ALL:
            return "all articles"
        return f"all articles matching {self.query.query_string}"


def _describe_show(target: ActionTarget, scope: ArticleScope) -> str:
    if scope is ArticleScope.MARKED:
        return f"show only marked in {target}"
    if scope is ArticleScope.UNREAD:
        return f"show only unread in {target}"
    return f"show all in {target}"


def _describe_expand_categories(scope: ArticleScope) -> str:
    if scope is ArticleScope.UNREAD:
        return "expand all categories with unread items"
    if scope is ArticleScope.MARKED:
        return "expand all categories with marked items"
    return "expand all nodes"


_FIXED_DESCRIPTIONS = {
    CommandKind.NO_OPERATION: "no operation",
    CommandKind.NAVIGATE_UP: "up",
    CommandKind.NAVIGATE_DOWN: "down",
    CommandKind.NAVIGATE_PAGE_UP: "page up",
    CommandKind.NAVIGATE_PAGE_DOWN: "page down",
    CommandKind.NAVIGATE_FIRST: "to first",
    CommandKind.NAVIGATE_LAST: "to last",
    CommandKind.NAVIGATE_LEFT: "left",
    CommandKind.NAVIGATE_RIGHT: "right",
    CommandKind.INPUT_SEARCH: "open find prompt",
    CommandKind.INPUT_ABORT: "abort current input",
    CommandKind.INPUT_SUBMIT: "submit current input",
    CommandKind.INPUT_CLEAR: "clear current input",
    CommandKind.PANEL_FOCUS_NEXT: "focus next",
    CommandKind.PANEL_FOCUS_PREVIOUS: "focus previous",
    CommandKind.PANEL_FOCUS_NEXT_CYCLIC: "focus next (wrapping)",
    CommandKind.PANEL_FOCUS_PREVIOUS_CYCLIC: "focus previous (wrapping)",
    CommandKind.TOGGLE_DISTRACTION_FREE: "distraction free mode",
    CommandKind.FEED_LIST_SYNC: "sync all",
    CommandKind.FEED_LIST_REMOVE: "remove selected",
    CommandKind.FEED_LIST_REMOVE_WITH_CHILDREN: "remove selected and its children",
    CommandKind.FEED_LIST_YANK: "yank selected feed or category",
    CommandKind.FEED_LIST_TOGGLE_EXPAND: "toggle selected node",
    CommandKind.FEED_LIST_EXPAND: "expand the selected node",
    CommandKind.FEED_LIST_COLLAPSE: "collapse the selected node",
    CommandKind.FEED_LIST_COLLAPSE_ALL: "collapse all nodes",
    CommandKind.ARTICLE_LIST_SELECT_NEXT_UNREAD: "select next unread",
    CommandKind.ARTICLE_SCRAPE: "scrape content",
    CommandKind.SEARCH_NEXT: "article search next",
    CommandKind.SEARCH_PREVIOUS: "article search previous",
    CommandKind.ARTICLE_LIST_FILTER_APPLY: "apply current article filter",
    CommandKind.ARTICLE_LIST_FILTER_CLEAR: "clear article filter",
    CommandKind.ARTICLE_LIST_SORT_REVERSE: "reverse current sort order",
    CommandKind.ARTICLE_LIST_SORT_CLEAR: "clear current sort order",
    CommandKind.APPLICATION_QUIT: "quit application",
    CommandKind.LOGOUT: "logout from provider, NOTE: this will remove ALL LOCAL DATA!",
    CommandKind.HELP_INPUT: "show help on input mappings",
    CommandKind.REDRAW: "redraw UI",
    CommandKind.REFRESH: "refresh UI",
}


def _arg_text(value: Any) -> str:
    if isinstance(value, (Command, ActionScope)):
        return value.to_text()
    if isinstance(value, (Panel, ActionTarget, PastePosition, ArticleScope)):
        return value.keyword
    if isinstance(value, ArticleQuery):
        return value.query_string
    if isinstance(value, Color):
        return value.name
    return str(value)


@dataclass(frozen=True)
class Command:
    """A parsed command: its kind and its positional arguments.

    The arguments follow the kind's ``ArgShape``:

    * ``PANEL``: ``(Panel,)``; ``IN``: ``(Panel, Command)``; ``CONFIRM``: ``(Command,)``
    * ``TARGET_SCOPE``: ``(ActionTarget, ActionScope)``; ``SCOPE``: ``(ActionScope,)``
    * ``TAG_SCOPE``: ``(tag, ActionScope)``; ``TAG_COLOR``: ``(tag, Color or None)``
    * ``URL_NAME``: ``(httpx.URL, name or None)``; ``URL``: ``(httpx.URL,)``
    * ``COLOR``: ``(Color,)``; ``POSITION``: ``(PastePosition,)``
    * ``ARTICLE_SCOPE``: ``(ArticleScope,)``;
      ``TARGET_ARTICLE_SCOPE``: ``(ActionTarget, ArticleScope)``
    * ``QUERY``: ``(ArticleQuery,)``; ``SEARCH_TERM``: ``(SearchTerm or None,)``;
      ``SORT_ORDER``: ``(SortOrder,)``
    * ``TEXT``, ``SHARE``, ``PATH``, ``CONFIRMATION``: ``(str,)``;
      ``OPTIONAL_TEXT``: ``(str or None,)``
    """

    kind: CommandKind
    args: Tuple[Any, ...] = ()

    @classmethod
    def parse(cls, text: str, eager: bool = True) -> "Command":
        from feedterm.commands.parser import parse_command

        return parse_command(text, eager)

    @property
    def keyword(self) -> str:
        return self.kind.keyword

    def unwrap_in(self, panel: Panel) -> Optional["Command"]:
        """Resolve an ``in`` wrapper for the given panel.

        Returns the wrapped command if this command targets ``panel``, ``None``
        if it targets another panel and the command itself otherwise.
        """
        if self.kind is not CommandKind.IN:
            return self
        target_panel, command = self.args
        return command if target_panel is panel else None

    def to_text(self) -> str:
        """Render a command line that parses back to an equal command."""
        parts = [self.kind.keyword]
        for value in self.args:
            if value is None:
                continue
            parts.append(_arg_text(value))
        return " ".join(parts)

    def describe(self) -> str:
        kind = self.kind
        if kind in _FIXED_DESCRIPTIONS:
            return _FIXED_DESCRIPTIONS[kind]

        args = self.args
        if kind is CommandKind.PANEL_FOCUS:
            return f"focus {args[0]}"
        if kind is CommandKind.FEED_LIST_EXPAND_CATEGORIES:
            return _describe_expand_categories(args[0])
        if kind is CommandKind.FEED_LIST_CATEGORY_ADD:
            return f"add category {args[0]}"
        if kind is CommandKind.FEED_LIST_FEED_ADD:
            url, name = args
            if name is not None:
                return f"add feed {name} with url {url}"
            return f"add feed with url {url}"
        if kind is CommandKind.FEED_LIST_RENAME:
            return f"rename selected to {args[0]}"
        if kind is CommandKind.FEED_LIST_FEED_CHANGE_URL:
            return f"change url of selected feed to {args[0]}"
        if kind is CommandKind.FEED_LIST_PASTE:
            return f"paste yanked feed or category {args[0]} selected element"
        if kind is CommandKind.FEED_LIST_TAG_CHANGE_COLOR:
            return f"change color of tag to {_arg_text(args[0])}"
        if kind is CommandKind.SHOW:
            return _describe_show(*args)
        if kind is CommandKind.ARTICLE_SHARE:
            return f"share article to {args[0]}"
        if kind is CommandKind.IMPORT_OPML:
            return f"import OPML file from {args[0]}"
        if kind is CommandKind.EXPORT_OPML:
            return f"export OPML file to {args[0]}"
        if kind is CommandKind.COMMAND_LINE_OPEN:
            return f":{args[0] or ''}"
        if kind is CommandKind.ARTICLE_LIST_SEARCH:
            return f"search article by query: {args[0].query_string}"
        if kind is CommandKind.SEARCH:
            return f"search for {args[0]}" if args[0] is not None else "clear search"
        if kind is CommandKind.ARTICLE_LIST_FILTER_SET:
            return f"filter article list by query: {args[0].query_string}"
        if kind is CommandKind.ARTICLE_LIST_QUERY:
            return f"query all articles by: {args[0].query_string}"
        if kind is CommandKind.ARTICLE_LIST_SORT:
            return f"sort article list by {args[0]}"
        if kind is CommandKind.ACTION_SET_READ:
            target, scope = args
            return f"mark {scope} as read in {target.detail}"
        if kind is CommandKind.ACTION_SET_UNREAD:
            return f"mark {args[0]} as unread"
        if kind is CommandKind.ACTION_SET_MARKED:
            return f"mark {args[0]}"
        if kind is CommandKind.ACTION_SET_UNMARKED:
            return f"unmark {args[0]}"
        if kind is CommandKind.ACTION_OPEN_IN_BROWSER:
            return f"open {args[0]} in browser"
        if kind is CommandKind.ACTION_TAG_ARTICLES:
            return f"add #{args[0]} to {args[1]}"
        if kind is CommandKind.ACTION_UNTAG_ARTICLES:
            return f"remove #{args[0]} from {args[1]}"
        if kind is CommandKind.TAG_ADD:
            return f"add tag #{args[0]}"
        if kind is CommandKind.CONFIRM:
            return f"{args[0].describe()}?"
        if kind is CommandKind.IN:
            panel, command = args
            return f"{command.describe()} in {panel}"
        raise AssertionError(f"unhandled command {kind}")

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class CommandSequence:
    """Commands bound to a single key, executed in order."""

    commands: Tuple[Command, ...] = ()

    @classmethod
    def parse(cls, texts: Iterable[str], eager: bool = True) -> "CommandSequence":
        return cls(tuple(Command.parse(text, eager) for text in texts))

    def __iter__(self):
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def __str__(self) -> str:
        return ",".join(command.describe() for command in self.commands)
