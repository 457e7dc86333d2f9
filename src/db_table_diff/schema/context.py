"""Per-run comparison context.

A ``RunContext`` owns the live connections for one report-generation call
and caches what has been fetched through them, so no table or column list
is fetched twice within a run.  A fresh context starts with empty caches.

Usage:
    from db_table_diff.schema.context import RunContext

    with RunContext(registry) as context:
        tables = fetch_all_tables(context)
        columns = fetch_all_columns(context, tables)
"""

import logging
from collections.abc import Mapping

from db_table_diff.adapters.base import QueryRunner
from db_table_diff.registry import ConnectionRegistry, DatabaseHandle
from db_table_diff.schema.models import ColumnSet, TableSet

logger = logging.getLogger(__name__)


class RunContext:
    """Connections and fetch caches for a single comparison run.

    Args:
        registry: Registry whose databases take part in the run.
        connections: Pre-opened runners keyed by label.  ``open()`` only
            connects labels that are missing here.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        connections: Mapping[str, QueryRunner] | None = None,
    ) -> None:
        self.registry = registry
        self._connections: dict[str, QueryRunner] = dict(connections or {})
        self.tables: dict[str, TableSet] | None = None
        self.columns: dict[str, dict[str, ColumnSet]] | None = None

    def __enter__(self) -> "RunContext":
        """Context manager entry - opens every connection."""
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes every connection."""
        self.close()

    def open(self) -> "RunContext":
        """Connect to every registered database, in configuration order.

        The first failure closes whatever was already opened and propagates.

        Raises:
            DatabaseConnectionError: If any database cannot be reached.
        """
        try:
            for handle in self.registry.handles:
                if handle.label not in self._connections:
                    self._connections[handle.label] = self.registry.connect(handle)
        except Exception:
            self.close()
            raise
        return self

    def connection(self, handle: DatabaseHandle) -> QueryRunner:
        """Return the open connection for *handle*.

        Raises:
            UnknownLabelError: If *handle* is not part of the registry.
            RuntimeError: If the context has not connected *handle*.
        """
        self.registry.get(handle.label)
        try:
            return self._connections[handle.label]
        except KeyError:
            raise RuntimeError(
                f"No open connection for '{handle.label}'. Use 'with RunContext(...)'."
            ) from None

    def close(self) -> None:
        """Close every connection, continuing past individual close failures."""
        while self._connections:
            label, conn = self._connections.popitem()
            try:
                conn.close()
            except Exception as e:
                logger.warning(f"[{label}] error while closing connection: {e}")
