"""SQLAlchemy-backed live connection.

Provides ``LiveConnection``, a synchronous implementation of the
``QueryRunner`` protocol on top of SQLAlchemy Core.  One instance holds
exactly one DBAPI connection for the lifetime of a comparison run.

Usage:
    from db_table_diff.adapters.connection import LiveConnection

    conn = LiveConnection.open("baseline", "sqlite:///app.db", connect_args={})
    names = conn.fetch_column("SELECT name FROM sqlite_master")
    conn.close()
"""

import logging
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)


def create_engine_unpooled(database_url: URL | str, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine without connection pooling.

    A comparison run opens one connection per database and closes it at
    the end, so pooling only delays the release of server resources.

    Args:
        database_url: SQLAlchemy URL (``mysql+pymysql://``,
            ``postgresql+psycopg://``, ``sqlite:///`` ...).
        **kwargs: Additional keyword arguments forwarded to ``create_engine``.

    Returns:
        Configured ``Engine``.
    """
    defaults: dict[str, Any] = {
        "poolclass": NullPool,
        "echo": False,
    }
    # Caller kwargs override defaults
    merged = {**defaults, **kwargs}

    return create_engine(database_url, **merged)


class LiveConnection:
    """One open database connection, labeled with its configuration key.

    Args:
        label: Database label from configuration.
        engine: Engine the connection was checked out from.
        connection: Open SQLAlchemy connection.
    """

    def __init__(self, label: str, engine: Engine, connection: Connection) -> None:
        self.label = label
        self._engine = engine
        self._conn: Connection | None = connection

    @classmethod
    def open(
        cls,
        label: str,
        database_url: URL | str,
        connect_args: dict[str, Any] | None = None,
    ) -> "LiveConnection":
        """Create an engine and open a single connection.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the connection fails.
            ImportError: If the DBAPI driver for the URL is not installed.
        """
        engine = create_engine_unpooled(database_url, connect_args=connect_args or {})
        try:
            connection = engine.connect()
        except Exception:
            engine.dispose()
            raise
        return cls(label, engine, connection)

    @property
    def closed(self) -> bool:
        return self._conn is None

    def fetch_column(self, sql: str) -> list[str]:
        """Run *sql* and return the first column of every row as text.

        Uses ``exec_driver_sql`` so that identifiers containing ``:`` are not
        mistaken for bind parameters.  The statement reaches the DBAPI with no
        parameter collection, so ``%`` in a quoted name is never treated as a
        format placeholder by PyMySQL or psycopg.
        """
        if self._conn is None:
            raise RuntimeError(f"Connection '{self.label}' is closed.")

        logger.debug(f"[{self.label}] {' '.join(sql.split())}")
        result = self._conn.exec_driver_sql(
            sql, execution_options={"no_parameters": True}
        )
        values = [str(row[0]) for row in result]
        logger.debug(f"[{self.label}] {len(values)} row(s)")
        return values

    def close(self) -> None:
        """Close the connection and dispose of the engine. Safe to call twice."""
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None
                self._engine.dispose()
                logger.debug(f"[{self.label}] connection closed")
