"""Query runner protocol definition.

Defines the ``QueryRunner`` Protocol that every live connection implements.
The schema fetcher only needs one capability from the driver layer: run a
read-only metadata query and return the first column of every row as text.

Usage:
    from db_table_diff.adapters.base import QueryRunner

    def list_names(runner: QueryRunner, sql: str) -> list[str]:
        return runner.fetch_column(sql)
"""

from typing import Protocol


class QueryRunner(Protocol):
    """Blocking, read-only query execution against one database.

    Implementations are not assumed to be thread-safe; each runner is used by
    at most one operation at a time.
    """

    label: str

    def fetch_column(self, sql: str) -> list[str]:
        """Execute a query and return the first column of each row as text.

        Args:
            sql: Complete query text (no bind parameters).

        Returns:
            One string per result row, in the order the engine returned them.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the engine rejects or fails
                the query.
        """
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...
