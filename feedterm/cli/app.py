"""feedterm command line.

Front end to the query and command languages: parse and explain queries, sort
orders and command lines, show the contextual help for partial input and list
stored articles through a query.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from feedterm.commands import ActionScope, Command, CommandParseError
from feedterm.config import AppConfig, ConfigError, load_config
from feedterm.help import command_entries, command_hint, hint_for
from feedterm.logging_config import logger, setup_logging
from feedterm.models import ArticleScope, Read
from feedterm.query import AugmentedArticleFilter, QueryParseError, SortOrder, SortOrderParseError
from feedterm.services import ArticleListState, load_articles, set_scope_read
from feedterm.storage import DatabaseFeedService, close_database, get_database, get_last_sync

console = Console()


def _format_value(value) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return value.value


def _pointer(text: str, offset: int) -> str:
    return f"  {text}\n  {' ' * offset}^"


def _parse_filter(text: str) -> AugmentedArticleFilter:
    try:
        return AugmentedArticleFilter.from_str(text)
    except QueryParseError as e:
        raise click.ClickException(f"{e}\n{_pointer(text, e.offset)}")


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: FEEDTERM_CONFIG or ~/.config/feedterm/config.yaml)",
)
@click.option("--log-level", default=None, help="Log level (overrides the configuration)")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], log_level: Optional[str]) -> None:
    """Query and command languages of the feedterm feed reader."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))
    setup_logging(config, level=log_level)
    ctx.obj = config


@main.command()
@click.argument("text")
def query(text: str) -> None:
    """Parse a query and show how it is evaluated."""
    augmented = _parse_filter(text)
    article_filter = augmented.article_filter

    table = Table(title="Service filter")
    table.add_column("Field")
    table.add_column("Value")
    for name in ("unread", "marked", "newer_than", "older_than", "synced_before", "synced_after"):
        value = getattr(article_filter, name)
        if value is not None:
            table.add_row(name, _format_value(value))
    console.print(table)

    clauses = Table(title="Residual clauses")
    clauses.add_column("Clause")
    for clause in augmented.article_query.clauses:
        clauses.add_row(str(clause))
    console.print(clauses)

    if augmented.article_query.sort_order is not None:
        console.print(f"sort order: {augmented.article_query.sort_order}")
    console.print(f"defines scope: {augmented.defines_scope()}")


@main.command()
@click.argument("text")
@click.option("--reverse", is_flag=True, help="Show the reversed order")
def sort(text: str, reverse: bool) -> None:
    """Parse a sort order and print it normalized."""
    try:
        sort_order = SortOrder.from_str(text)
    except SortOrderParseError as e:
        raise click.ClickException(f"{e}\n{_pointer(text, e.offset)}")
    click.echo(str(sort_order.reverse(reverse)))


@main.command()
@click.argument("text")
@click.option("--lenient", is_flag=True, help="Accept trailing text after a complete command")
def command(text: str, lenient: bool) -> None:
    """Parse a command line and describe it."""
    try:
        parsed = Command.parse(text, eager=not lenient)
    except CommandParseError as e:
        raise click.ClickException(str(e))
    click.echo(parsed.to_text())
    click.echo(parsed.describe())


@main.command()
@click.argument("text", default="")
@click.pass_obj
def hint(config: AppConfig, text: str) -> None:
    """Show the help offered while TEXT is being typed."""
    console.print(command_hint(text))
    result = hint_for(text, share_targets=config.share_targets)
    if not result.entries:
        return

    table = Table(title=result.title)
    table.add_column("Usage")
    table.add_column("Description")
    for entry in result.entries:
        table.add_row(entry.usage, entry.detail)
    console.print(table)


@main.command(name="commands")
def list_commands() -> None:
    """List all commands."""
    table = Table(title="Commands")
    table.add_column("Command")
    table.add_column("Usage")
    table.add_column("Description")
    for entry in command_entries():
        table.add_row(entry.keyword, entry.usage, entry.detail)
    console.print(table)


@main.command()
@click.argument("text", default="")
@click.option("--db", "db_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Database file")
@click.option(
    "--scope",
    type=click.Choice([scope.keyword for scope in ArticleScope]),
    default=None,
    help="Article scope (default: from the configuration)",
)
@click.option("--sort", "sort_text", default=None, help="Sort order overriding the query's")
@click.option("--mark-read", is_flag=True, help="Mark all listed articles as read")
@click.pass_obj
def articles(
    config: AppConfig,
    text: str,
    db_path: Optional[Path],
    scope: Optional[str],
    sort_text: Optional[str],
    mark_read: bool,
) -> None:
    """List stored articles matching the query TEXT."""
    state = ArticleListState(
        default_sort_order=config.default_sort_order,
        article_scope=ArticleScope.from_keyword(scope) if scope else config.article_scope,
    )
    if text:
        state.on_new_article_filter(_parse_filter(text))
    if sort_text:
        try:
            state.adhoc_sort_order = SortOrder.from_str(sort_text)
        except SortOrderParseError as e:
            raise click.ClickException(str(e))

    if db_path is not None:
        config.db_path = db_path

    async def run():
        await get_database(config.db_path)
        try:
            service = DatabaseFeedService()
            last_sync = await get_last_sync() or datetime.fromtimestamp(0, timezone.utc)
            view = await load_articles(service, state, last_sync)
            if mark_read:
                await set_scope_read(service, view, ActionScope.all(), Read.READ, None, last_sync)
            return view
        finally:
            await close_database()

    view = asyncio.run(run())

    table = Table(title=f"Articles ({state.effective_sort_order()})")
    table.add_column("Date")
    table.add_column("Feed")
    table.add_column("Title")
    table.add_column("State")
    for article in view.articles:
        feed = view.feed_map.get(article.feed_id)
        table.add_row(
            article.date.strftime("%Y-%m-%d %H:%M"),
            feed.label if feed else article.feed_id,
            article.title or "",
            article.unread.value,
        )
    console.print(table)
    logger.info(f"listed {len(view.articles)} articles")


@main.command(name="check-config")
@click.pass_obj
def check_config(config: AppConfig) -> None:
    """Validate the configuration and summarize it."""
    click.echo(f"database: {config.db_path}")
    click.echo(f"default sort order: {config.default_sort_order}")
    click.echo(f"article scope: {config.article_scope.keyword}")
    click.echo(f"feed list scope: {config.feed_list_scope.keyword}")
    click.echo(f"key bindings: {len(config.key_bindings)}")
    for entry in config.feed_list:
        click.echo(f"feed list: {entry.label} = {entry.query}")
    click.echo("configuration OK")


if __name__ == "__main__":
    main()
