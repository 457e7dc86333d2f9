"""Report aggregation.

Pairs each non-baseline database's ``TableDiff`` with its ``ColumnDiff``
sequence, in configuration order.  No formatting happens here; see
``db_table_diff.cli.render`` for text, HTML and console output.
"""

from collections.abc import Mapping, Sequence

from db_table_diff.schema.models import (
    ColumnDiff,
    ComparisonEntry,
    ComparisonReport,
    TableDiff,
)


def build_report(
    baseline_label: str,
    table_diffs: Mapping[str, TableDiff],
    column_diffs: Mapping[str, Sequence[ColumnDiff]] | None = None,
    common_tables: Mapping[str, Sequence[str]] | None = None,
) -> ComparisonReport:
    """Assemble per-database diffs into one ``ComparisonReport``.

    Args:
        baseline_label: Label every other database was compared against.
        table_diffs: Dict mapping other label to its ``TableDiff``, in
            configuration order.  A baseline entry, if present, is skipped.
        column_diffs: Dict mapping other label to its ``ColumnDiff``
            sequence.  ``None`` means columns were not compared.
        common_tables: Dict mapping other label to the tables it shares
            with the baseline, i.e. the tables compared at column level.

    Returns:
        ComparisonReport with one entry per non-baseline database
    """
    entries: list[ComparisonEntry] = []

    for label, table_diff in table_diffs.items():
        if label == baseline_label:
            continue

        if column_diffs is None:
            entries.append(ComparisonEntry(table_diff=table_diff))
            continue

        entries.append(
            ComparisonEntry(
                table_diff=table_diff,
                column_diffs=tuple(column_diffs.get(label, ())),
                common_tables=tuple(sorted((common_tables or {}).get(label, ()))),
            )
        )

    return ComparisonReport(
        baseline_label=baseline_label,
        entries=tuple(entries),
        columns_compared=column_diffs is not None,
    )
