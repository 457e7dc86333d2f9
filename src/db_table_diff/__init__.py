"""db-table-diff: compare table and column sets across relational databases.

Connects to several databases (MySQL, PostgreSQL, SQLite, or MySQL-compatible
servers), lists their tables and columns, and reports what differs from a
baseline database.

Usage:
    from db_table_diff import compare_databases, load_diff_config
    from db_table_diff import ConnectionRegistry, generate_report
    from db_table_diff import diff_tables, diff_columns, build_report
"""

__version__ = "0.1.0"

# Config
from db_table_diff.config.loader import load_diff_config
from db_table_diff.config.models import DatabaseSettings, DiffConfig, EngineKind

# Errors
from db_table_diff.errors import (
    ConfigError,
    DatabaseConnectionError,
    QueryError,
    TableDiffError,
    UnknownLabelError,
)

# Registry
from db_table_diff.registry import ConnectionRegistry, DatabaseHandle

# Schema
from db_table_diff.schema.comparator import diff_columns, diff_tables
from db_table_diff.schema.models import (
    ColumnDiff,
    ColumnSet,
    ComparisonEntry,
    ComparisonReport,
    TableDiff,
    TableSet,
)
from db_table_diff.schema.report import build_report

# Pipeline
from db_table_diff.pipeline import compare_databases, generate_report

__all__ = [
    # Config
    "load_diff_config",
    "DatabaseSettings",
    "DiffConfig",
    "EngineKind",
    # Errors
    "TableDiffError",
    "ConfigError",
    "DatabaseConnectionError",
    "QueryError",
    "UnknownLabelError",
    # Registry
    "ConnectionRegistry",
    "DatabaseHandle",
    # Schema
    "diff_tables",
    "diff_columns",
    "build_report",
    "TableSet",
    "ColumnSet",
    "TableDiff",
    "ColumnDiff",
    "ComparisonEntry",
    "ComparisonReport",
    # Pipeline
    "generate_report",
    "compare_databases",
]
