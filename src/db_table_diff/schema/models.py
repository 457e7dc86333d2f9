"""Pydantic models for fetched schema metadata and diff results.

All models are frozen: fetch results and diffs are never mutated after
creation.
"""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from db_table_diff.errors import UnknownLabelError


def _sorted_unique(names: Iterable[str]) -> tuple[str, ...]:
    return tuple(sorted(set(names)))


# ============================================================================
# Fetch Results
# ============================================================================


class TableSet(BaseModel):
    """Table names present in one database at fetch time.

    Names are case-sensitive, unique, and sorted ascending.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    names: tuple[str, ...] = ()

    @field_validator("names", mode="before")
    @classmethod
    def _normalize(cls, value: Iterable[str]) -> tuple[str, ...]:
        return _sorted_unique(value)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names


class ColumnSet(BaseModel):
    """Column names present in one table at fetch time.

    Same uniqueness and ordering invariant as ``TableSet``.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    table_name: str
    names: tuple[str, ...] = ()

    @field_validator("names", mode="before")
    @classmethod
    def _normalize(cls, value: Iterable[str]) -> tuple[str, ...]:
        return _sorted_unique(value)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names


# ============================================================================
# Diff Results
# ============================================================================


class TableDiff(BaseModel):
    """Table-level differences between the baseline and one other database."""

    model_config = ConfigDict(frozen=True)

    baseline_label: str
    other_label: str
    only_in_baseline: tuple[str, ...] = ()
    only_in_other: tuple[str, ...] = ()

    @field_validator("only_in_baseline", "only_in_other", mode="before")
    @classmethod
    def _normalize(cls, value: Iterable[str]) -> tuple[str, ...]:
        return _sorted_unique(value)

    @property
    def has_differences(self) -> bool:
        return bool(self.only_in_baseline or self.only_in_other)


class ColumnDiff(BaseModel):
    """Column-level differences for one table present in both databases."""

    model_config = ConfigDict(frozen=True)

    table_name: str
    only_in_baseline: tuple[str, ...] = ()
    only_in_other: tuple[str, ...] = ()

    @field_validator("only_in_baseline", "only_in_other", mode="before")
    @classmethod
    def _normalize(cls, value: Iterable[str]) -> tuple[str, ...]:
        return _sorted_unique(value)

    @property
    def has_differences(self) -> bool:
        return bool(self.only_in_baseline or self.only_in_other)


# ============================================================================
# Report
# ============================================================================


class ComparisonEntry(BaseModel):
    """One non-baseline database's table diff and (sparse) column diffs.

    ``common_tables`` lists the tables that were compared at column level;
    a common table with no ``ColumnDiff`` had identical columns.
    """

    model_config = ConfigDict(frozen=True)

    table_diff: TableDiff
    column_diffs: tuple[ColumnDiff, ...] = ()
    common_tables: tuple[str, ...] = ()

    @property
    def other_label(self) -> str:
        return self.table_diff.other_label

    @property
    def has_differences(self) -> bool:
        return self.table_diff.has_differences or bool(self.column_diffs)

    def column_diff_for(self, table_name: str) -> ColumnDiff | None:
        """Return the ``ColumnDiff`` for *table_name*, or ``None`` if identical."""
        for diff in self.column_diffs:
            if diff.table_name == table_name:
                return diff
        return None


class ComparisonReport(BaseModel):
    """Every comparison against the baseline, in configuration order.

    Read-only structure consumed by renderers; performs no formatting.
    """

    model_config = ConfigDict(frozen=True)

    baseline_label: str
    entries: tuple[ComparisonEntry, ...] = Field(default_factory=tuple)
    columns_compared: bool = True

    @property
    def labels(self) -> list[str]:
        """Other-database labels, in configuration order."""
        return [entry.other_label for entry in self.entries]

    @property
    def has_differences(self) -> bool:
        return any(entry.has_differences for entry in self.entries)

    def entry_for(self, label: str) -> ComparisonEntry:
        """Return the entry comparing *label* against the baseline.

        Raises:
            UnknownLabelError: If *label* is not a compared database.
        """
        for entry in self.entries:
            if entry.other_label == label:
                return entry
        raise UnknownLabelError(label, self.labels)
