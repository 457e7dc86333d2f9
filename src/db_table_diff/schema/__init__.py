"""Schema introspection, comparison, and report aggregation.

Provides the metadata query resolver (``tables_query``, ``columns_query``),
the schema fetcher (``fetch_tables``, ``fetch_all_tables`` ...), the diff
engine (``diff_tables``, ``diff_columns``) and ``build_report``.

Usage:
    from db_table_diff.schema import diff_tables, diff_columns, build_report
    from db_table_diff.schema import RunContext, fetch_all_tables
"""

from db_table_diff.schema.comparator import diff_columns, diff_tables
from db_table_diff.schema.context import RunContext
from db_table_diff.schema.introspector import (
    fetch_all_columns,
    fetch_all_tables,
    fetch_columns,
    fetch_tables,
)
from db_table_diff.schema.models import (
    ColumnDiff,
    ColumnSet,
    ComparisonEntry,
    ComparisonReport,
    TableDiff,
    TableSet,
)
from db_table_diff.schema.queries import columns_query, tables_query
from db_table_diff.schema.report import build_report

__all__ = [
    "tables_query",
    "columns_query",
    "RunContext",
    "fetch_tables",
    "fetch_columns",
    "fetch_all_tables",
    "fetch_all_columns",
    "diff_tables",
    "diff_columns",
    "build_report",
    "TableSet",
    "ColumnSet",
    "TableDiff",
    "ColumnDiff",
    "ComparisonEntry",
    "ComparisonReport",
]
