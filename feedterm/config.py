"""Configuration for feedterm.

Settings are read from a YAML file (``FEEDTERM_CONFIG`` or
``~/.config/feedterm/config.yaml``). A missing file means defaults. Command
strings in the configuration are parsed eagerly when it is loaded, so a broken
startup command is reported before anything runs.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from feedterm.commands import Command, CommandParseError, CommandSequence
from feedterm.models import ArticleScope
from feedterm.query import AugmentedArticleFilter, QueryParseError, SortOrder, SortOrderParseError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "feedterm" / "config.yaml"
DEFAULT_DB_PATH = Path.home() / ".feedterm" / "feedterm.db"
DEFAULT_SORT_ORDER = "<date"

DEFAULT_KEY_BINDINGS: Dict[str, List[str]] = {
    "j": ["down"],
    "k": ["up"],
    "h": ["left"],
    "l": ["right"],
    "C-f": ["pagedown"],
    "C-b": ["pageup"],
    "g g": ["gotofirst"],
    "G": ["gotolast"],
    "q": ["confirm quit"],
    "r": ["sync"],
    "s": ["scrape"],
    "g f": ["focus feeds"],
    "g a": ["focus articles"],
    "g c": ["focus content"],
    ":": ["cmd"],
    "/": ["_search"],
    "esc": ["_abort"],
    "enter": ["_submit"],
    "space": ["next"],
    "backspace": ["prev"],
    "tab": ["nextc"],
    "backtab": ["prevc"],
    "o": ["open", "read", "nextunread"],
    "n": ["read", "nextunread"],
    "u": ["unread"],
    "m": ["mark"],
    "M": ["unmark"],
    "a": ["confirm in articles read %"],
    "1": ["show articles all"],
    "2": ["show articles unread"],
    "3": ["show articles marked"],
    "z": ["zen"],
    "?": ["helpinput"],
    "C-l": ["redraw"],
}

_ARTICLE_SCOPE_KEYS = ("article_scope", "feed_list_scope")


class ConfigError(Exception):
    """Raised when the configuration file is invalid."""


@dataclass(frozen=True)
class LabeledQuery:
    """A saved query shown as an entry of the feed list."""

    label: str
    query: str

    @property
    def article_filter(self) -> AugmentedArticleFilter:
        return AugmentedArticleFilter.from_str(self.query)


def _default_feed_list() -> List[LabeledQuery]:
    return [
        LabeledQuery("Today Unread", "today unread"),
        LabeledQuery("Today Marked", "today marked"),
    ]


def parse_key_bindings(raw: Mapping[str, Any]) -> Dict[str, CommandSequence]:
    """Parse key bindings into command sequences.

    Each value is a command string or a list of command strings. A binding
    whose commands do not parse is dropped with a warning; the remaining
    bindings are kept.
    """
    bindings: Dict[str, CommandSequence] = {}
    for key, value in raw.items():
        texts = [value] if isinstance(value, str) else value
        if not isinstance(texts, list) or not all(isinstance(text, str) for text in texts):
            logger.warning(f"dropping key binding {key!r}: expected a command or a list of commands")
            continue
        try:
            bindings[str(key)] = CommandSequence.parse(texts, eager=True)
        except CommandParseError as e:
            logger.warning(f"dropping key binding {key!r}: {e}")
    return bindings


def default_key_bindings() -> Dict[str, CommandSequence]:
    return {key: CommandSequence.parse(texts) for key, texts in DEFAULT_KEY_BINDINGS.items()}


def merge_key_bindings(user_bindings: Mapping[str, CommandSequence]) -> Dict[str, CommandSequence]:
    """Merge user bindings over the defaults; an empty sequence unbinds a key."""
    merged = default_key_bindings()
    merged.update(user_bindings)
    return {key: sequence for key, sequence in merged.items() if len(sequence) > 0}


@dataclass
class AppConfig:
    """Application configuration with defaults for every setting."""

    log_level: str = "WARNING"
    log_file: Optional[str] = None
    db_path: Path = DEFAULT_DB_PATH
    default_sort_order: SortOrder = field(default_factory=lambda: SortOrder.from_str(DEFAULT_SORT_ORDER))
    article_scope: ArticleScope = ArticleScope.UNREAD
    feed_list_scope: ArticleScope = ArticleScope.ALL
    sync_every_minutes: Optional[int] = None
    startup_commands: List[Command] = field(default_factory=list)
    after_sync_commands: List[Command] = field(default_factory=list)
    key_bindings: Dict[str, CommandSequence] = field(default_factory=default_key_bindings)
    feed_list: List[LabeledQuery] = field(default_factory=_default_feed_list)
    share_targets: List[str] = field(default_factory=lambda: ["clipboard"])


_KNOWN_KEYS = {f.name for f in fields(AppConfig)}


def _parse_commands(key: str, value: Any) -> List[Command]:
    if not isinstance(value, list) or not all(isinstance(text, str) for text in value):
        raise ConfigError(f"'{key}' must be a list of command strings")
    commands = []
    for text in value:
        try:
            commands.append(Command.parse(text, eager=True))
        except CommandParseError as e:
            raise ConfigError(f"invalid command {text!r} in '{key}': {e}") from e
    return commands


def _parse_article_scope(key: str, value: Any) -> ArticleScope:
    scope = ArticleScope.from_keyword(value) if isinstance(value, str) else None
    if scope is None:
        allowed = ", ".join(s.keyword for s in ArticleScope)
        raise ConfigError(f"'{key}' must be one of: {allowed}")
    return scope


def _parse_feed_list(value: Any) -> List[LabeledQuery]:
    if not isinstance(value, list):
        raise ConfigError("'feed_list' must be a list of {label, query} mappings")
    entries = []
    for item in value:
        if not isinstance(item, dict) or set(item) != {"label", "query"}:
            raise ConfigError(f"feed list entry must have exactly 'label' and 'query', got: {item}")
        entry = LabeledQuery(str(item["label"]), str(item["query"]))
        try:
            AugmentedArticleFilter.from_str(entry.query)
        except QueryParseError as e:
            raise ConfigError(f"invalid query {entry.query!r} for feed list entry {entry.label!r}: {e}") from e
        entries.append(entry)
    return entries


def config_from_dict(data: Mapping[str, Any]) -> AppConfig:
    """Build and validate a configuration from parsed YAML.

    Raises:
        ConfigError: on unknown keys or invalid values
    """
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

    config = AppConfig()

    if "log_level" in data:
        level = str(data["log_level"]).upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Invalid log_level '{data['log_level']}'")
        config.log_level = level
    if data.get("log_file") is not None:
        config.log_file = str(data["log_file"])
    if data.get("db_path") is not None:
        config.db_path = Path(str(data["db_path"])).expanduser()

    if "default_sort_order" in data:
        try:
            config.default_sort_order = SortOrder.from_str(str(data["default_sort_order"]))
        except SortOrderParseError as e:
            raise ConfigError(f"invalid default_sort_order: {e}") from e

    for key in _ARTICLE_SCOPE_KEYS:
        if key in data:
            setattr(config, key, _parse_article_scope(key, data[key]))

    if data.get("sync_every_minutes") is not None:
        minutes = data["sync_every_minutes"]
        if not isinstance(minutes, int) or isinstance(minutes, bool) or minutes < 1:
            raise ConfigError("sync_every_minutes must at least be 1")
        config.sync_every_minutes = minutes

    if "startup_commands" in data:
        config.startup_commands = _parse_commands("startup_commands", data["startup_commands"])
    if "after_sync_commands" in data:
        config.after_sync_commands = _parse_commands("after_sync_commands", data["after_sync_commands"])

    if "key_bindings" in data:
        raw_bindings = data["key_bindings"] or {}
        if not isinstance(raw_bindings, dict):
            raise ConfigError("'key_bindings' must be a mapping of key sequences to commands")
        config.key_bindings = merge_key_bindings(parse_key_bindings(raw_bindings))

    if "feed_list" in data:
        config.feed_list = _parse_feed_list(data["feed_list"])

    if "share_targets" in data:
        targets = data["share_targets"]
        if not isinstance(targets, list) or not all(isinstance(t, str) and t.split() == [t] for t in targets):
            raise ConfigError("'share_targets' must be a list of single words")
        config.share_targets = list(targets)

    return config


def load_config(path: Union[str, Path, None] = None) -> AppConfig:
    """Load the configuration file, falling back to defaults if it is missing.

    Args:
        path: configuration file (default: ``FEEDTERM_CONFIG`` or
            ``~/.config/feedterm/config.yaml``)

    Raises:
        ConfigError: if the file cannot be parsed or holds invalid settings
    """
    if path is None:
        path = os.environ.get("FEEDTERM_CONFIG") or DEFAULT_CONFIG_PATH
    config_path = Path(path).expanduser()

    if not config_path.exists():
        logger.info(f"No config file found at {config_path}, using defaults")
        config = AppConfig()
    else:
        logger.info(f"Loading config from {config_path}")
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file {config_path} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        config = config_from_dict(data)

    env_db_path = os.environ.get("FEEDTERM_DB_PATH")
    if env_db_path:
        config.db_path = Path(env_db_path)

    return config


_config: Optional[AppConfig] = None


def get_config(reload: bool = False) -> AppConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None or reload:
        _config = load_config()
    return _config
