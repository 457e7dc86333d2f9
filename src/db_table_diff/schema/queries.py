"""Metadata query resolver.

Produces the introspection query text for "list tables" and "list columns of
table T" on each supported engine.  Every query returns the wanted names in
its first result column.

The resolver is pure: identical inputs always yield identical query text,
so queries can be asserted on without a live database.

Usage:
    from db_table_diff.config.models import EngineKind
    from db_table_diff.schema.queries import columns_query, tables_query

    tables_query(EngineKind.POSTGRES, "reporting")
    columns_query(EngineKind.SQLITE, "users")
"""

from db_table_diff.config.models import EngineKind
from db_table_diff.errors import ConfigError

DEFAULT_POSTGRES_SCHEMA = "public"


def quote_literal(value: str) -> str:
    """Quote *value* as a SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def quote_backtick(name: str) -> str:
    """Quote *name* as a MySQL identifier."""
    return "`" + name.replace("`", "``") + "`"


# ============================================================================
# Engine variants
# ============================================================================


class MetadataQueries:
    """Base class for per-engine metadata queries."""

    def tables_query(self, schema_name: str | None = None) -> str:
        raise NotImplementedError

    def columns_query(self, table_name: str) -> str:
        raise NotImplementedError


class MySQLQueries(MetadataQueries):
    """Base tables and columns of the current database (``DATABASE()``)."""

    def tables_query(self, schema_name: str | None = None) -> str:
        return (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = DATABASE() AND table_type = 'BASE TABLE'"
        )

    def columns_query(self, table_name: str) -> str:
        return (
            "SELECT column_name FROM information_schema.columns "
            f"WHERE table_schema = DATABASE() AND table_name = {quote_literal(table_name)} "
            "ORDER BY ordinal_position"
        )


class GenericSQLQueries(MetadataQueries):
    """``SHOW`` statements understood by MySQL-compatible servers."""

    def tables_query(self, schema_name: str | None = None) -> str:
        # First column is the table name, second the table type
        return "SHOW FULL TABLES WHERE Table_type = 'BASE TABLE'"

    def columns_query(self, table_name: str) -> str:
        # First column of SHOW COLUMNS is the field name
        return f"SHOW COLUMNS FROM {quote_backtick(table_name)}"


class PostgresQueries(MetadataQueries):
    """Base tables of one schema (default ``public``).

    Column listing is not schema-scoped: same-named tables in different
    schemas contribute to one column set.
    """

    def tables_query(self, schema_name: str | None = None) -> str:
        schema = schema_name or DEFAULT_POSTGRES_SCHEMA
        return (
            "SELECT table_name FROM information_schema.tables "
            f"WHERE table_type = 'BASE TABLE' AND table_schema = {quote_literal(schema)}"
        )

    def columns_query(self, table_name: str) -> str:
        return (
            "SELECT column_name FROM information_schema.columns "
            f"WHERE table_name = {quote_literal(table_name)} "
            "ORDER BY ordinal_position"
        )


class SQLiteQueries(MetadataQueries):
    """Tables from ``sqlite_master``, columns from ``pragma_table_info``.

    SQLite's internal ``sqlite_*`` tables (e.g. ``sqlite_sequence``) are
    excluded.
    """

    def tables_query(self, schema_name: str | None = None) -> str:
        return (
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\'"
        )

    def columns_query(self, table_name: str) -> str:
        return f"SELECT name FROM pragma_table_info({quote_literal(table_name)})"


QUERIES: dict[EngineKind, MetadataQueries] = {
    EngineKind.MYSQL: MySQLQueries(),
    EngineKind.POSTGRES: PostgresQueries(),
    EngineKind.SQLITE: SQLiteQueries(),
    EngineKind.GENERIC_SQL: GenericSQLQueries(),
}


# ============================================================================
# Resolver
# ============================================================================


def _queries_for(engine: EngineKind) -> MetadataQueries:
    try:
        return QUERIES[engine]
    except KeyError:
        raise ConfigError(f"no metadata queries for engine '{engine}'") from None


def tables_query(engine: EngineKind, schema_name: str | None = None) -> str:
    """Return the query listing base tables for *engine*.

    Args:
        engine: Target engine.
        schema_name: Schema to list (PostgreSQL only; ignored elsewhere).

    Raises:
        ConfigError: If *engine* has no registered queries.
    """
    return _queries_for(engine).tables_query(schema_name)


def columns_query(engine: EngineKind, table_name: str) -> str:
    """Return the query listing column names of *table_name* for *engine*.

    Raises:
        ConfigError: If *engine* has no registered queries.
    """
    return _queries_for(engine).columns_query(table_name)
