"""Command line integration tests.

These run the click commands end to end, including configuration loading and
an on-disk SQLite database.
"""

import asyncio

import pytest
from click.testing import CliRunner

from feedterm.cli.app import main
from feedterm.storage import add_articles, add_feed, close_database, get_database


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("FEEDTERM_CONFIG", str(tmp_path / "config.yaml"))
    monkeypatch.setenv("FEEDTERM_DB_PATH", str(tmp_path / "feedterm.db"))
    monkeypatch.delenv("FEEDTERM_LOG_LEVEL", raising=False)
    monkeypatch.delenv("FEEDTERM_LOG_FILE", raising=False)
    return CliRunner()


@pytest.fixture
def database(tmp_path, feeds, articles):
    """On-disk database holding the shared sample data."""
    path = tmp_path / "feedterm.db"

    async def populate():
        await get_database(path)
        try:
            for feed in feeds:
                await add_feed(feed)
            await add_articles(articles)
        finally:
            await close_database()

    asyncio.run(populate())
    return path


class TestParsingCommands:
    """Tests for the query, sort and command subcommands."""

    def test_query(self, runner):
        result = runner.invoke(main, ["query", "unread title:rust"])
        assert result.exit_code == 0, result.output
        assert "unread" in result.output
        assert "title:rust" in result.output
        assert "defines scope: True" in result.output

    def test_query_error(self, runner):
        result = runner.invoke(main, ["query", "title:"])
        assert result.exit_code == 1
        assert "expecting search term" in result.output

    def test_sort(self, runner):
        result = runner.invoke(main, ["sort", "feed >date"])
        assert result.exit_code == 0
        assert result.output.strip() == "<feed >date"

    def test_sort_reverse(self, runner):
        result = runner.invoke(main, ["sort", "--reverse", "<title"])
        assert result.output.strip() == ">title"

    def test_sort_error(self, runner):
        result = runner.invoke(main, ["sort", "date date"])
        assert result.exit_code == 1
        assert "duplicate key found" in result.output

    def test_command(self, runner):
        result = runner.invoke(main, ["command", "confirm quit"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["confirm quit", "quit application?"]

    def test_command_eager_and_lenient(self, runner):
        assert runner.invoke(main, ["command", "quit now"]).exit_code == 1
        result = runner.invoke(main, ["command", "--lenient", "quit now"])
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "quit"


class TestHelpCommands:
    """Tests for hint and commands."""

    def test_hint(self, runner):
        result = runner.invoke(main, ["hint", "focus "])
        assert result.exit_code == 0
        assert "Panel" in result.output
        assert "feeds" in result.output

    def test_hint_for_empty_input(self, runner):
        result = runner.invoke(main, ["hint"])
        assert result.exit_code == 0
        assert "Press <TAB> for help." in result.output

    def test_commands(self, runner):
        result = runner.invoke(main, ["commands"])
        assert result.exit_code == 0
        assert "quit" in result.output


class TestConfiguration:
    """Tests for configuration handling."""

    def test_check_config_defaults(self, runner):
        result = runner.invoke(main, ["check-config"])
        assert result.exit_code == 0
        assert "default sort order: <date" in result.output
        assert "configuration OK" in result.output

    def test_check_config_file(self, runner, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("article_scope: marked\n", encoding="utf-8")
        result = runner.invoke(main, ["--config", str(path), "check-config"])
        assert result.exit_code == 0
        assert "article scope: marked" in result.output

    def test_invalid_config(self, runner, tmp_path):
        (tmp_path / "config.yaml").write_text("colour: red\n", encoding="utf-8")
        result = runner.invoke(main, ["check-config"])
        assert result.exit_code == 1
        assert "Unknown configuration keys" in result.output


class TestArticles:
    """Tests for listing stored articles."""

    def test_list_with_query(self, runner, database):
        result = runner.invoke(main, ["articles", "--scope", "all", "feed:rust"])
        assert result.exit_code == 0, result.output
        assert "Async Rust" in result.output
        assert "Old news" in result.output
        assert "Typing tips" not in result.output

    def test_default_scope_is_unread(self, runner, database):
        result = runner.invoke(main, ["articles"])
        assert result.exit_code == 0, result.output
        assert "Async Rust" in result.output
        assert "Old news" not in result.output

    def test_mark_read(self, runner, database):
        result = runner.invoke(main, ["articles", "--mark-read", "unread"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(main, ["articles", "--scope", "unread"])
        assert "Async Rust" not in result.output

    def test_invalid_query(self, runner, database):
        result = runner.invoke(main, ["articles", "~"])
        assert result.exit_code == 1
        assert "expecting key after negation" in result.output
