"""End-to-end comparison pipeline.

Connection Registry -> Metadata Query Resolver -> Schema Fetcher ->
Diff Engine -> Report Aggregator.

Usage:
    from db_table_diff import compare_databases, load_diff_config

    report = compare_databases(load_diff_config())
    for entry in report.entries:
        print(entry.other_label, entry.table_diff.only_in_other)
"""

import logging

from db_table_diff.config.models import DiffConfig
from db_table_diff.registry import ConnectionRegistry
from db_table_diff.schema.comparator import diff_columns, diff_tables
from db_table_diff.schema.context import RunContext
from db_table_diff.schema.introspector import fetch_all_columns, fetch_all_tables
from db_table_diff.schema.models import ColumnDiff, ComparisonReport, TableDiff
from db_table_diff.schema.report import build_report

logger = logging.getLogger(__name__)


def compare(context: RunContext, include_columns: bool = True) -> ComparisonReport:
    """Diff every database in *context* against the registry's baseline.

    Uses the context's caches, so calling this twice on one context issues
    no additional queries.

    Args:
        context: Open run context.
        include_columns: Also compare columns of tables both sides have.

    Returns:
        ComparisonReport in configuration order
    """
    registry = context.registry
    baseline = registry.baseline
    others = registry.others

    all_tables = fetch_all_tables(context)
    baseline_tables = all_tables[baseline.label]

    table_diffs: dict[str, TableDiff] = {}
    for handle in others:
        table_diffs[handle.label] = diff_tables(baseline_tables, all_tables[handle.label])

    if not include_columns:
        return build_report(baseline.label, table_diffs)

    all_columns = fetch_all_columns(context, all_tables)
    baseline_columns = all_columns[baseline.label]

    column_diffs: dict[str, list[ColumnDiff]] = {}
    common_tables: dict[str, list[str]] = {}
    for handle in others:
        column_diffs[handle.label] = diff_columns(baseline_columns, all_columns[handle.label])
        common_tables[handle.label] = sorted(
            set(baseline_tables.names) & set(all_tables[handle.label].names)
        )

    return build_report(baseline.label, table_diffs, column_diffs, common_tables)


def generate_report(
    registry: ConnectionRegistry, include_columns: bool = True
) -> ComparisonReport:
    """Connect to every database, fetch schemas, and build the diff report.

    Connections are closed when the run ends, including on error.

    Raises:
        ConfigError: If the registry is empty.
        DatabaseConnectionError: If any database cannot be reached.
        QueryError: If any metadata query fails.
    """
    baseline = registry.baseline
    if not registry.others:
        logger.warning(f"Only '{baseline.label}' is configured; nothing to compare")

    logger.info(
        f"Comparing {len(registry) - 1} database(s) against baseline '{baseline.label}'"
    )
    with RunContext(registry) as context:
        return compare(context, include_columns=include_columns)


def compare_databases(
    config: DiffConfig,
    baseline: str | None = None,
    include_columns: bool | None = None,
) -> ComparisonReport:
    """Validate *config*, then run the full comparison.

    Args:
        config: Loaded configuration.
        baseline: Overrides ``config.baseline`` when given.
        include_columns: Overrides ``config.include_columns`` when given.

    Raises:
        ConfigError: If any database entry is invalid (before any I/O).
        UnknownLabelError: If the baseline label is not configured.
    """
    registry = ConnectionRegistry.from_config(config)
    if baseline is not None:
        registry.designate_baseline(baseline)
    if include_columns is None:
        include_columns = config.include_columns
    return generate_report(registry, include_columns=include_columns)
