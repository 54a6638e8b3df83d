"""CLI integration tests using Click's CliRunner."""

from __future__ import annotations

import json
import re
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from blogdesk.cli import cli
from blogdesk.content.screenshots import create_screenshot
from blogdesk.llm.client import CallbackClient
from blogdesk.storage.database import Database
from blogdesk.storage.repository import KeywordRepository

ANSI = re.compile(r"\x1b\[[0-9;]*m")

RESPONSE = (
    "---TITLE---\nCards That Get Kept\n\n"
    "---EXCERPT---\nMake a card people hold on to.\n\n"
    "---META_DESCRIPTION---\nCard design tips.\n\n"
    "---CONTENT---\n" + "Pick a sturdy stock and a clear layout. " * 5 + "\n"
)


def _plain(result) -> str:
    return ANSI.sub("", result.output)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Isolated database path and a clean environment."""
    for name in ("ANTHROPIC_API_KEY", "BLOGDESK_DB_PATH", "BLOGDESK_FEATURES_FILE"):
        monkeypatch.delenv(name, raising=False)
    db_path = tmp_path / "data" / "blogdesk.db"
    return ["--db", str(db_path)], db_path


@pytest.fixture
def imported(runner, cli_env, planner_csv, tmp_path):
    args, db_path = cli_env
    csv_path = tmp_path / "planner.csv"
    csv_path.write_text(planner_csv)
    result = runner.invoke(cli, [*args, "import", str(csv_path)])
    assert result.exit_code == 0, result.output
    return args, db_path


class TestHelpCommands:
    def test_main_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "BlogDesk" in result.output

    def test_keywords_help(self, runner):
        result = runner.invoke(cli, ["keywords", "--help"])
        assert result.exit_code == 0
        assert "--questions" in result.output


class TestInit:
    def test_creates_database(self, runner, cli_env):
        args, db_path = cli_env
        result = runner.invoke(cli, [*args, "init"])
        assert result.exit_code == 0
        assert "Database ready" in _plain(result)
        assert db_path.exists()


class TestImport:
    def test_imports_rows(self, imported):
        _, db_path = imported
        with Database(db_path) as db:
            repo = KeywordRepository(db)
            assert repo.count() == 3
            assert repo.find_by_text("vistaprint business cards").monthly_searches == 12100

    def test_reimport_skips(self, runner, imported, tmp_path):
        args, _ = imported
        result = runner.invoke(cli, [*args, "import", str(tmp_path / "planner.csv")])
        assert result.exit_code == 0
        assert "Imported 0 keywords, skipped 3" in _plain(result)

    def test_file_without_header(self, runner, cli_env, tmp_path):
        args, _ = cli_env
        bad = tmp_path / "bad.csv"
        bad.write_text("nothing,useful\n1,2\n")
        result = runner.invoke(cli, [*args, "import", str(bad)])
        assert result.exit_code == 1
        assert "Import failed: Could not find header row" in _plain(result)


class TestKeywords:
    def test_lists(self, runner, imported):
        args, _ = imported
        result = runner.invoke(cli, [*args, "keywords"])
        assert result.exit_code == 0
        assert "Keywords (3)" in _plain(result)

    def test_filter(self, runner, imported):
        args, _ = imported
        result = runner.invoke(cli, [*args, "keywords", "--category", "printing"])
        assert result.exit_code == 0
        assert "Keywords (1)" in _plain(result)

    def test_questions(self, runner, imported):
        args, _ = imported
        result = runner.invoke(cli, [*args, "keywords", "--questions"])
        assert "Keywords (1)" in _plain(result)

    def test_no_results(self, runner, imported):
        args, _ = imported
        result = runner.invoke(cli, [*args, "keywords", "--search", "zzz"])
        assert "No keywords found" in _plain(result)

    def test_invalid_choice(self, runner, imported):
        args, _ = imported
        result = runner.invoke(cli, [*args, "keywords", "--category", "poetry"])
        assert result.exit_code != 0


class TestClassify:
    def test_breakdown(self, runner):
        result = runner.invoke(cli, [
            "classify", "how to network effectively",
            "--searches", "1000", "--competition-index", "45",
        ])
        assert result.exit_code == 0
        output = _plain(result)
        assert "Category: networking" in output
        assert "Intent: informational" in output
        assert "Audience: networking_focused" in output
        assert "Question: True" in output
        assert "Blog score: 75" in output

    def test_low_value(self, runner):
        result = runner.invoke(cli, ["classify", "business card holder"])
        assert "Low value: True" in _plain(result)


class TestStatsAndTopics:
    def test_stats(self, runner, imported):
        args, _ = imported
        result = runner.invoke(cli, [*args, "stats"])
        assert result.exit_code == 0
        output = _plain(result)
        assert "Total keywords: 3" in output
        assert "Total monthly searches: 18,100" in output
        assert "By Category" in output

    def test_stats_without_database(self, runner, cli_env):
        args, _ = cli_env
        result = runner.invoke(cli, [*args, "stats"])
        assert "No database found" in _plain(result)

    def test_topics(self, runner, imported):
        args, _ = imported
        result = runner.invoke(cli, [*args, "topics"])
        assert result.exit_code == 0
        assert "Blog Topics" in _plain(result)

    def test_topics_empty(self, runner, cli_env):
        args, _ = cli_env
        result = runner.invoke(cli, [*args, "topics", "--by-audience"])
        assert "No blog topics found" in _plain(result)

    def test_recalculate(self, runner, imported):
        args, _ = imported
        result = runner.invoke(cli, [*args, "recalculate"])
        assert result.exit_code == 0
        assert "0 keywords changed" in _plain(result)


class TestExport:
    def test_export(self, runner, imported, tmp_path):
        args, _ = imported
        out = tmp_path / "out"
        result = runner.invoke(cli, [*args, "export", "-o", str(out)])
        assert result.exit_code == 0
        assert "Exported 3 keywords" in _plain(result)
        assert len(json.loads((out / "full_export.json").read_text())) == 3


class TestFeatures:
    def test_list(self, runner, cli_env, features_file):
        args, db_path = cli_env
        with Database(db_path) as db:
            create_screenshot(db, "qr_generator", url="https://img/1.png", storage_key="k1")
        result = runner.invoke(cli, [*args, "features", "--file", str(features_file)])
        assert result.exit_code == 0
        assert "qr_generator" in _plain(result)

    def test_show(self, runner, cli_env, features_file):
        args, _ = cli_env
        result = runner.invoke(cli, [*args, "features", "--file", str(features_file), "--show", "qr_generator"])
        assert result.exit_code == 0
        assert "Suggested CTA: Create your QR code" in _plain(result)

    def test_show_unknown(self, runner, cli_env, features_file):
        args, _ = cli_env
        result = runner.invoke(cli, [*args, "features", "--file", str(features_file), "--show", "nope"])
        assert result.exit_code == 1
        assert "Unknown feature: nope" in _plain(result)

    def test_missing_file(self, runner, cli_env, tmp_path):
        args, _ = cli_env
        result = runner.invoke(cli, [*args, "features", "--file", str(tmp_path / "none.json")])
        assert "No features defined" in _plain(result)


class TestGenerate:
    def test_without_api_key(self, runner, cli_env):
        args, _ = cli_env
        result = runner.invoke(cli, [*args, "generate", "--topic", "cards"])
        assert result.exit_code == 1
        assert "Anthropic API key not configured" in _plain(result)

    def test_generates_and_saves(self, runner, cli_env, tmp_path):
        args, _ = cli_env
        out = tmp_path / "post.md"
        client = CallbackClient(lambda system, user: RESPONSE)
        with patch("blogdesk.llm.client.create_client", return_value=client):
            result = runner.invoke(cli, [
                *args, "generate", "--topic", "card design", "--template", "tips_list",
                "--save", str(out),
            ])
        assert result.exit_code == 0, result.output
        assert "Cards That Get Kept" in _plain(result)
        assert out.read_text().startswith("# Cards That Get Kept\n\n")
