"""Schema fetcher: table and column listing via metadata queries.

Runs the resolver's queries against live connections and returns sorted,
de-duplicated ``TableSet``/``ColumnSet`` values.  Fetches are sequential, in
configuration order, one database and one table at a time.  The first failure
aborts the fetch; there are no retries.

Every call takes its target handle and connection explicitly.

Usage:
    from db_table_diff.schema.introspector import fetch_all_columns, fetch_all_tables

    with RunContext(registry) as context:
        tables = fetch_all_tables(context)
        columns = fetch_all_columns(context, tables)
"""

import logging
from collections.abc import Mapping

from sqlalchemy.exc import SQLAlchemyError

from db_table_diff.adapters.base import QueryRunner
from db_table_diff.errors import QueryError, driver_message
from db_table_diff.registry import DatabaseHandle
from db_table_diff.schema.context import RunContext
from db_table_diff.schema.models import ColumnSet, TableSet
from db_table_diff.schema.queries import columns_query, tables_query

logger = logging.getLogger(__name__)


def fetch_tables(handle: DatabaseHandle, connection: QueryRunner) -> TableSet:
    """List the base tables of one database.

    Args:
        handle: Database to inspect.
        connection: Open connection to that database.

    Returns:
        TableSet with names sorted ascending

    Raises:
        QueryError: If the query fails (dropped connection, syntax rejected,
            permission denied).
    """
    sql = tables_query(handle.engine, handle.schema_name)
    try:
        names = connection.fetch_column(sql)
    except SQLAlchemyError as e:
        raise QueryError(handle.label, driver_message(e)) from e
    return TableSet(label=handle.label, names=names)


def fetch_columns(
    handle: DatabaseHandle, connection: QueryRunner, table_name: str
) -> ColumnSet:
    """List the column names of one table.

    Assumes *table_name* exists; callers pass names from ``fetch_tables``.

    Raises:
        QueryError: If the query fails; names the table being inspected.
    """
    sql = columns_query(handle.engine, table_name)
    try:
        names = connection.fetch_column(sql)
    except SQLAlchemyError as e:
        raise QueryError(handle.label, driver_message(e), table_name=table_name) from e
    return ColumnSet(label=handle.label, table_name=table_name, names=names)


def fetch_all_tables(context: RunContext) -> dict[str, TableSet]:
    """Fetch the TableSet of every registered database, in configuration order.

    The result is cached on *context*; repeated calls do not re-query.

    Returns:
        Dict mapping label to TableSet
    """
    if context.tables is not None:
        return context.tables

    result: dict[str, TableSet] = {}
    for handle in context.registry.handles:
        table_set = fetch_tables(handle, context.connection(handle))
        logger.info(f"[{handle.label}] {len(table_set)} table(s)")
        result[handle.label] = table_set

    context.tables = result
    return result


def fetch_all_columns(
    context: RunContext, all_tables: Mapping[str, TableSet]
) -> dict[str, dict[str, ColumnSet]]:
    """Fetch the ColumnSet of every table in every database.

    One round trip per table.  The result is cached on *context*.

    Args:
        context: Open run context.
        all_tables: Output of ``fetch_all_tables``.

    Returns:
        Dict mapping label to a dict mapping table name to ColumnSet
    """
    if context.columns is not None:
        return context.columns

    result: dict[str, dict[str, ColumnSet]] = {}
    for handle in context.registry.handles:
        connection = context.connection(handle)
        by_table: dict[str, ColumnSet] = {}
        for table_name in all_tables[handle.label].names:
            by_table[table_name] = fetch_columns(handle, connection, table_name)
        logger.info(f"[{handle.label}] columns fetched for {len(by_table)} table(s)")
        result[handle.label] = by_table

    context.columns = result
    return result
