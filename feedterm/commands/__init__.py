from .errors import (
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
from .model import (
    ActionScope,
    ActionScopeKind,
    ActionTarget,
    ArgShape,
    Command,
    CommandKind,
    CommandSequence,
    Panel,
    PastePosition,
)
from .parser import parse_command, split_first

__all__ = [
    "ArticleQueryExpected",
    "ArticleScopeExpected",
    "ColorExpected",
    "CommandExpected",
    "CommandNameExpected",
    "CommandParseError",
    "ConfirmationExpected",
    "FilePathExpected",
    "NothingExpected",
    "PanelExpected",
    "PositionExpected",
    "SearchTermExpected",
    "ShareTargetExpected",
    "SomethingExpected",
    "SortOrderExpected",
    "TagExpected",
    "TargetOrArticleScopeExpected",
    "UrlExpected",
    "ActionScope",
    "ActionScopeKind",
    "ActionTarget",
    "ArgShape",
    "Command",
    "CommandKind",
    "CommandSequence",
    "Panel",
    "PastePosition",
    "parse_command",
    "split_first",
]
