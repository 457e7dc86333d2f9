"""Schema comparison using set operations.

Compares a baseline database's tables and columns against another
database's.  Pure logic -- no I/O, no database connections.

Usage:
    from db_table_diff.schema.comparator import diff_columns, diff_tables

    table_diff = diff_tables(tables["prod"], tables["staging"])
    column_diffs = diff_columns(columns["prod"], columns["staging"])
"""

from collections.abc import Iterable, Mapping

from db_table_diff.schema.models import ColumnDiff, ColumnSet, TableDiff, TableSet


def _names(value: ColumnSet | Iterable[str]) -> set[str]:
    if isinstance(value, ColumnSet):
        return set(value.names)
    return set(value)


def diff_tables(baseline_tables: TableSet, other_tables: TableSet) -> TableDiff:
    """Compare two databases' table sets.

    Names match exactly (case-sensitive).

    Args:
        baseline_tables: Tables of the baseline database.
        other_tables: Tables of the database compared against it.

    Returns:
        ``TableDiff`` with:

        - ``only_in_baseline``: baseline tables minus other tables
        - ``only_in_other``: other tables minus baseline tables

    Examples:
        >>> diff = diff_tables(
        ...     TableSet(label="a", names=["users", "orders"]),
        ...     TableSet(label="b", names=["users", "products"]),
        ... )
        >>> diff.only_in_baseline, diff.only_in_other
        (('orders',), ('products',))
    """
    baseline: set[str] = set(baseline_tables.names)
    other: set[str] = set(other_tables.names)

    return TableDiff(
        baseline_label=baseline_tables.label,
        other_label=other_tables.label,
        only_in_baseline=baseline - other,
        only_in_other=other - baseline,
    )


def diff_columns(
    baseline_columns_by_table: Mapping[str, ColumnSet | Iterable[str]],
    other_columns_by_table: Mapping[str, ColumnSet | Iterable[str]],
) -> list[ColumnDiff]:
    """Compare column sets of the tables both databases have.

    Tables missing from either side are skipped; they are already reported
    by ``diff_tables``.  Tables with identical columns produce no entry, so
    a missing entry means "no difference", not "not compared".

    Args:
        baseline_columns_by_table: Dict mapping table name to the baseline's
            columns (``ColumnSet`` or any iterable of names).
        other_columns_by_table: Same, for the other database.

    Returns:
        One ``ColumnDiff`` per differing common table, by ascending table name.

    Examples:
        >>> diff_columns({"users": {"id", "name"}}, {"users": {"id", "name", "email"}})
        [ColumnDiff(table_name='users', only_in_baseline=(), only_in_other=('email',))]

        >>> diff_columns({"users": {"id"}}, {"users": {"id"}})
        []
    """
    common_tables: set[str] = set(baseline_columns_by_table) & set(other_columns_by_table)

    diffs: list[ColumnDiff] = []
    for table_name in sorted(common_tables):
        baseline_cols = _names(baseline_columns_by_table[table_name])
        other_cols = _names(other_columns_by_table[table_name])

        only_in_baseline = baseline_cols - other_cols
        only_in_other = other_cols - baseline_cols

        if only_in_baseline or only_in_other:
            diffs.append(
                ColumnDiff(
                    table_name=table_name,
                    only_in_baseline=only_in_baseline,
                    only_in_other=only_in_other,
                )
            )

    return diffs
