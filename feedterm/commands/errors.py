"""Errors raised while parsing command lines.

Command arguments are consumed word by word, so these errors describe which
argument was expected rather than an offset. Errors of the embedded query and
sort-order grammars are kept as ``cause``.
"""

from typing import Optional

from feedterm.query.errors import QueryParseError, SortOrderParseError


class CommandParseError(Exception):
    """Base class for command parse failures."""

    message = "invalid command"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        text = self.message if detail is None else f"{self.message}: {detail}"
        super().__init__(text)


class CommandExpected(CommandParseError):
    message = "expecting command"


class CommandNameExpected(CommandParseError):
    message = "expecting command name"

    def __init__(self, keyword: str = ""):
        self.keyword = keyword
        super().__init__(repr(keyword) if keyword else None)


class TagExpected(CommandParseError):
    message = "expecting tag"


class ArticleScopeExpected(CommandParseError):
    message = "expecting article scope"


class TargetOrArticleScopeExpected(CommandParseError):
    message = "expecting target or article scope"


class ColorExpected(CommandParseError):
    message = "expecting color"


class UrlExpected(CommandParseError):
    message = "expecting URL"


class PanelExpected(CommandParseError):
    message = "expecting panel"


class PositionExpected(CommandParseError):
    message = "expecting position"


class ArticleQueryExpected(CommandParseError):
    message = "expecting article search query"

    def __init__(self, cause: QueryParseError):
        self.cause = cause
        super().__init__(str(cause))


class ShareTargetExpected(CommandParseError):
    message = "expecting share target"


class FilePathExpected(CommandParseError):
    message = "expecting file path"


class SortOrderExpected(CommandParseError):
    message = "sort order expected"

    def __init__(self, cause: SortOrderParseError):
        self.cause = cause
        super().__init__(str(cause))


class ConfirmationExpected(CommandParseError):
    message = "expecting `NOW` as parameter for confirmation"


class SearchTermExpected(CommandParseError):
    message = "search term expected (quoted string, regex or single word)"

    def __init__(self, cause: Optional[QueryParseError] = None):
        self.cause = cause
        super().__init__(str(cause) if cause is not None else None)


class SomethingExpected(CommandParseError):
    message = "expecting something"


class NothingExpected(CommandParseError):
    message = "unexpected"
