"""Tests for the db-table-diff CLI.

Runs main() against SQLite databases configured through a temporary
dbdiff.toml and checks output and exit codes.
"""

import textwrap
from pathlib import Path

import pytest

from db_table_diff.cli import EXIT_DIFFERENCES, EXIT_ERROR, EXIT_OK, main


@pytest.fixture
def config_file(tmp_path: Path, make_sqlite_db) -> Path:
    baseline = make_sqlite_db(
        "initial",
        ["CREATE TABLE users (id INTEGER, name TEXT)", "CREATE TABLE orders (id INTEGER)"],
    )
    migrated = make_sqlite_db(
        "migrated",
        ["CREATE TABLE users (id INTEGER, name TEXT, email TEXT)", "CREATE TABLE products (sku TEXT)"],
    )
    path = tmp_path / "dbdiff.toml"
    path.write_text(textwrap.dedent(f"""\
        [databases.initial_db]
        driver = "sqlite"
        dbname = "{baseline.as_posix()}"

        [databases.migrated_db]
        driver = "sqlite"
        dbname = "{migrated.as_posix()}"
        user = "ignored"
    """))
    return path


class TestCompare:
    def test_text_output_and_exit_code(self, config_file: Path, capsys) -> None:
        code = main(["--config", str(config_file), "compare", "--format", "text"])

        out = capsys.readouterr().out
        assert code == EXIT_DIFFERENCES
        assert "'migrated_db' tables compared to 'initial_db' tables" in out
        assert "- orders" in out
        assert "+ products" in out
        assert "+ email" in out

    def test_html_output(self, config_file: Path, capsys) -> None:
        main(["--config", str(config_file), "compare", "--format", "html"])

        out = capsys.readouterr().out
        assert '<div style="color: darkgreen">+ products</div>' in out

    def test_tables_only(self, config_file: Path, capsys) -> None:
        main(["--config", str(config_file), "compare", "--format", "text", "--tables-only"])

        out = capsys.readouterr().out
        assert "columns compared" not in out

    def test_no_differences_exit_ok(
        self, tmp_path: Path, make_sqlite_db, capsys
    ) -> None:
        a = make_sqlite_db("a", ["CREATE TABLE t (x INTEGER)"])
        b = make_sqlite_db("b", ["CREATE TABLE t (x INTEGER)"])
        path = tmp_path / "same.toml"
        path.write_text(textwrap.dedent(f"""\
            [databases.a]
            driver = "sqlite"
            dbname = "{a.as_posix()}"

            [databases.b]
            driver = "sqlite"
            dbname = "{b.as_posix()}"
        """))

        assert main(["--config", str(path), "compare"]) == EXIT_OK

    def test_unknown_baseline_is_error(self, config_file: Path) -> None:
        code = main(["--config", str(config_file), "compare", "--baseline", "nope"])
        assert code == EXIT_ERROR

    def test_invalid_config_is_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[databases.x]\ndriver = "mysql"\ndbname = "app"\n')

        assert main(["--config", str(path), "compare"]) == EXIT_ERROR

    def test_missing_config_is_error(self, tmp_path: Path) -> None:
        assert main(["--config", str(tmp_path / "none.toml"), "compare"]) == EXIT_ERROR


class TestDatabases:
    def test_lists_labels(self, config_file: Path, capsys) -> None:
        code = main(["--config", str(config_file), "databases"])

        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "initial_db" in out
        assert "migrated_db" in out
