"""Tests for report aggregation and the end-to-end pipeline."""

from pathlib import Path

import pytest

from db_table_diff.config.models import DatabaseSettings, DiffConfig, EngineKind
from db_table_diff.errors import DatabaseConnectionError, QueryError, UnknownLabelError
from db_table_diff.pipeline import compare, compare_databases, generate_report
from db_table_diff.registry import ConnectionRegistry
from db_table_diff.schema.context import RunContext
from db_table_diff.schema.models import ColumnDiff, ComparisonReport, TableDiff
from db_table_diff.schema.queries import tables_query
from db_table_diff.schema.report import build_report


def _table_diff(other: str, **kwargs) -> TableDiff:
    return TableDiff(baseline_label="base", other_label=other, **kwargs)


class TestBuildReport:
    """build_report() pairs diffs per database in configuration order."""

    def test_order_follows_mapping_and_skips_baseline(self) -> None:
        table_diffs = {
            "zeta": _table_diff("zeta"),
            "base": _table_diff("base"),
            "alpha": _table_diff("alpha", only_in_other=["x"]),
        }
        column_diffs = {
            "zeta": [],
            "alpha": [ColumnDiff(table_name="t", only_in_other=["c"])],
        }

        report = build_report("base", table_diffs, column_diffs)

        assert report.labels == ["zeta", "alpha"]
        assert report.entry_for("alpha").column_diffs[0].table_name == "t"
        assert report.entry_for("zeta").column_diffs == ()
        assert report.columns_compared is True

    def test_tables_only(self) -> None:
        report = build_report("base", {"other": _table_diff("other")})

        assert report.columns_compared is False
        assert report.entries[0].column_diffs == ()

    def test_common_tables_sorted(self) -> None:
        report = build_report(
            "base",
            {"other": _table_diff("other")},
            {"other": []},
            {"other": ["users", "accounts"]},
        )
        assert report.entries[0].common_tables == ("accounts", "users")

    def test_entry_for_unknown_label(self) -> None:
        report = build_report("base", {"other": _table_diff("other")})
        with pytest.raises(UnknownLabelError):
            report.entry_for("base")

    def test_report_is_read_only(self) -> None:
        report = build_report("base", {"other": _table_diff("other")})
        with pytest.raises(Exception):
            report.baseline_label = "changed"  # type: ignore[misc]


class TestGenerateReportSQLite:
    """Full pipeline against SQLite files."""

    def _registry(self, paths: dict[str, Path]) -> ConnectionRegistry:
        registry = ConnectionRegistry()
        for label, path in paths.items():
            registry.register(label, {"driver": "sqlite", "dbname": str(path)})
        return registry

    def test_added_and_removed_tables(self, make_sqlite_db) -> None:
        baseline = make_sqlite_db(
            "baseline",
            [
                "CREATE TABLE users (id INTEGER, name TEXT)",
                "CREATE TABLE orders (id INTEGER)",
            ],
        )
        other = make_sqlite_db(
            "other",
            [
                "CREATE TABLE users (id INTEGER, name TEXT, email TEXT)",
                "CREATE TABLE products (sku TEXT)",
            ],
        )

        report = generate_report(self._registry({"baseline": baseline, "other": other}))

        entry = report.entry_for("other")
        assert entry.table_diff.only_in_baseline == ("orders",)
        assert entry.table_diff.only_in_other == ("products",)
        assert entry.column_diffs == (
            ColumnDiff(table_name="users", only_in_baseline=(), only_in_other=("email",)),
        )
        assert entry.common_tables == ("users",)
        assert report.has_differences is True

    def test_identical_databases(self, make_sqlite_db) -> None:
        ddl = [
            "CREATE TABLE users (id INTEGER, name TEXT)",
            "CREATE TABLE orders (id INTEGER, total REAL)",
        ]
        a = make_sqlite_db("a", ddl)
        b = make_sqlite_db("b", ddl)

        report = generate_report(self._registry({"a": a, "b": b}))

        entry = report.entry_for("b")
        assert entry.table_diff.only_in_baseline == ()
        assert entry.table_diff.only_in_other == ()
        assert entry.column_diffs == ()
        assert entry.common_tables == ("orders", "users")
        assert report.has_differences is False

    def test_tables_only_skips_column_fetch(self, make_sqlite_db) -> None:
        a = make_sqlite_db("a", ["CREATE TABLE t (x INTEGER)"])
        b = make_sqlite_db("b", ["CREATE TABLE t (y INTEGER)"])

        report = generate_report(self._registry({"a": a, "b": b}), include_columns=False)

        assert report.columns_compared is False
        assert report.has_differences is False

    def test_explicit_baseline_and_order(self, make_sqlite_db) -> None:
        a = make_sqlite_db("a", ["CREATE TABLE t (x INTEGER)"])
        b = make_sqlite_db("b", ["CREATE TABLE t (x INTEGER)", "CREATE TABLE u (x INTEGER)"])
        c = make_sqlite_db("c", [])
        registry = self._registry({"a": a, "b": b, "c": c})
        registry.designate_baseline("b")

        report = generate_report(registry)

        assert report.baseline_label == "b"
        assert report.labels == ["a", "c"]
        assert report.entry_for("a").table_diff.only_in_baseline == ("u",)
        assert report.entry_for("c").table_diff.only_in_baseline == ("t", "u")

    def test_mistyped_sqlite_path_fails_run(self, make_sqlite_db, tmp_path: Path) -> None:
        base = make_sqlite_db("base", ["CREATE TABLE users (id INTEGER)"])
        typo = tmp_path / "typo.db"

        with pytest.raises(DatabaseConnectionError) as exc_info:
            generate_report(self._registry({"base": base, "other": typo}))

        assert exc_info.value.label == "other"
        assert not typo.exists()

    def test_compare_databases_from_config(self, make_sqlite_db) -> None:
        a = make_sqlite_db("a", ["CREATE TABLE t (x INTEGER)"])
        b = make_sqlite_db("b", ["CREATE TABLE t (x INTEGER, y INTEGER)"])
        config = DiffConfig(
            databases={
                "a": DatabaseSettings(driver="sqlite", dbname=str(a)),
                "b": DatabaseSettings(driver="sqlite", dbname=str(b)),
            },
            include_columns=False,
        )

        assert compare_databases(config).has_differences is False
        report = compare_databases(config, baseline="b", include_columns=True)
        assert report.entry_for("a").column_diffs[0].only_in_baseline == ("y",)


class TestPipelineWithInjectedRunners:
    """Determinism and error propagation without live databases."""

    SCHEMAS = {
        "base": {"users": ["id", "name"], "orders": ["id", "total"]},
        "stage": {"users": ["id", "name", "email"], "products": ["sku"]},
        "prod": {"orders": ["total", "id"], "users": ["name", "id"]},
    }

    def _registry(self) -> ConnectionRegistry:
        registry = ConnectionRegistry()
        for label in self.SCHEMAS:
            registry.register(label, {"driver": "sqlite", "dbname": f"{label}.db"})
        return registry

    def _runners(self, fake_runner, **kwargs) -> dict:
        return {
            label: fake_runner(label, EngineKind.SQLITE, schema, **kwargs.get(label, {}))
            for label, schema in self.SCHEMAS.items()
        }

    def test_deterministic(self, fake_runner) -> None:
        registry = self._registry()

        first = compare(RunContext(registry, connections=self._runners(fake_runner)))
        second = compare(RunContext(registry, connections=self._runners(fake_runner)))

        assert isinstance(first, ComparisonReport)
        assert first.model_dump_json() == second.model_dump_json()
        assert first.labels == ["stage", "prod"]

    def test_second_compare_on_same_context_issues_no_queries(self, fake_runner) -> None:
        runners = self._runners(fake_runner)
        context = RunContext(self._registry(), connections=runners)

        first = compare(context)
        calls = sum(len(r.calls) for r in runners.values())
        second = compare(context)

        assert first == second
        assert sum(len(r.calls) for r in runners.values()) == calls

    def test_query_error_closes_connections(self, fake_runner, monkeypatch) -> None:
        runners = self._runners(
            fake_runner,
            stage={"fail_on": {tables_query(EngineKind.SQLITE)}},
        )
        registry = self._registry()
        monkeypatch.setattr(registry, "connect", lambda handle: runners[handle.label])

        with pytest.raises(QueryError) as exc_info:
            generate_report(registry)

        assert exc_info.value.label == "stage"
        assert all(r.closed for r in runners.values())
