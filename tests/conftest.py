"""Shared fixtures: SQLite database files and fake query runners."""

import sqlite3
from collections.abc import Callable
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

from db_table_diff.config.models import EngineKind
from db_table_diff.schema.queries import columns_query, tables_query


class FakeRunner:
    """In-memory ``QueryRunner`` answering the resolver's queries.

    Args:
        label: Database label.
        engine: Engine whose query text is expected.
        schema: Dict mapping table name to column names.
        fail_on: Query texts that raise ``OperationalError``.
    """

    def __init__(
        self,
        label: str,
        engine: EngineKind,
        schema: dict[str, list[str]],
        fail_on: set[str] | None = None,
        schema_name: str | None = None,
    ) -> None:
        self.label = label
        self.calls: list[str] = []
        self.closed = False
        self.fail_on = fail_on or set()
        self.responses: dict[str, list[str]] = {
            tables_query(engine, schema_name): list(schema),
        }
        for table_name, columns in schema.items():
            self.responses[columns_query(engine, table_name)] = list(columns)

    def fetch_column(self, sql: str) -> list[str]:
        self.calls.append(sql)
        if sql in self.fail_on:
            raise OperationalError(sql, {}, Exception("permission denied"))
        return list(self.responses[sql])

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_runner() -> type[FakeRunner]:
    """The ``FakeRunner`` class, for building injected connections."""
    return FakeRunner


@pytest.fixture
def make_sqlite_db(tmp_path: Path) -> Callable[[str, list[str]], Path]:
    """Factory creating a SQLite file under tmp_path from DDL statements."""

    def _make(name: str, statements: list[str]) -> Path:
        path = tmp_path / f"{name}.db"
        conn = sqlite3.connect(path)
        try:
            for statement in statements:
                conn.execute(statement)
            conn.commit()
        finally:
            conn.close()
        return path

    return _make
