"""CLI tests (Click CliRunner)."""

import sqlite3

from click.testing import CliRunner

from fitgoals.cli.main import cli


def test_init_db_creates_tables(tmp_path):
    db_file = tmp_path / "fitgoals.db"
    result = CliRunner().invoke(
        cli, ["init-db", "--database-url", f"sqlite+aiosqlite:///{db_file}"]
    )
    assert result.exit_code == 0, result.output
    assert "Tables created." in result.output

    with sqlite3.connect(db_file) as conn:
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
    assert {"users", "goals"} <= tables


def test_init_db_is_idempotent(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'again.db'}"
    runner = CliRunner()
    assert runner.invoke(cli, ["init-db", "--database-url", url]).exit_code == 0
    assert runner.invoke(cli, ["init-db", "--database-url", url]).exit_code == 0


def test_serve_help():
    result = CliRunner().invoke(cli, ["serve", "--help"])
    assert result.exit_code == 0
    assert "--port" in result.output
