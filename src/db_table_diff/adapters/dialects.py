"""Per-engine connection parameters.

Each supported engine has one ``Dialect`` variant that knows how to turn a
``DatabaseSettings`` record into a SQLAlchemy URL and which ``connect_args``
bound the time a single query may take.

Usage:
    from db_table_diff.adapters.dialects import dialect_for
    from db_table_diff.config.models import EngineKind

    dialect = dialect_for(EngineKind.POSTGRES)
    url = dialect.build_url(settings)
    engine = create_engine(url, connect_args=dialect.connect_args(30.0))
"""

import math
from typing import Any
from urllib.parse import quote

from sqlalchemy.engine import URL, make_url

from db_table_diff.config.models import DatabaseSettings, EngineKind

MEMORY_DATABASE = ":memory:"


class Dialect:
    """Base connection dialect.

    Subclasses set ``drivername`` and override the hooks that differ.
    """

    drivername: str = ""

    def build_url(self, settings: DatabaseSettings) -> URL:
        """Build the SQLAlchemy URL for *settings*.

        An explicit ``connection_string`` always wins and is used verbatim.
        """
        if settings.connection_string:
            return make_url(settings.connection_string)

        return URL.create(
            self.drivername,
            username=settings.user,
            password=settings.password,
            host=settings.host,
            port=settings.port,
            database=settings.dbname,
            query=self.socket_query(settings),
        )

    def socket_query(self, settings: DatabaseSettings) -> dict[str, str]:
        """URL query parameters that select a unix socket, if configured."""
        return {}

    def connect_args(self, timeout: float) -> dict[str, Any]:
        """DBAPI ``connect()`` keyword arguments enforcing *timeout* seconds."""
        return {}


class MySQLDialect(Dialect):
    drivername = "mysql+pymysql"

    def socket_query(self, settings: DatabaseSettings) -> dict[str, str]:
        if settings.unix_socket:
            return {"unix_socket": settings.unix_socket}
        return {}

    def connect_args(self, timeout: float) -> dict[str, Any]:
        seconds = max(1, math.ceil(timeout))
        return {"connect_timeout": seconds, "read_timeout": seconds}


class GenericSQLDialect(MySQLDialect):
    """MySQL-protocol servers (MariaDB, TiDB, ...) that answer ``SHOW`` statements.

    Anything else must supply a full ``connection_string``.
    """

    pass


class PostgresDialect(Dialect):
    drivername = "postgresql+psycopg"

    def socket_query(self, settings: DatabaseSettings) -> dict[str, str]:
        # libpq treats a directory passed as host as the socket location
        if settings.unix_socket:
            return {"host": settings.unix_socket}
        return {}

    def connect_args(self, timeout: float) -> dict[str, Any]:
        return {
            "connect_timeout": max(1, math.ceil(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }


class SQLiteDialect(Dialect):
    """Opens database files read-only through a SQLite URI filename.

    A missing file is a connection error instead of a new empty database.
    """

    drivername = "sqlite"

    def build_url(self, settings: DatabaseSettings) -> URL:
        if settings.connection_string:
            return make_url(settings.connection_string)
        if settings.dbname == MEMORY_DATABASE:
            return URL.create(self.drivername, database=MEMORY_DATABASE)
        return URL.create(
            self.drivername,
            database=f"file:{quote(settings.dbname)}?mode=ro",
            query={"uri": "true"},
        )

    def connect_args(self, timeout: float) -> dict[str, Any]:
        # Busy timeout: how long to wait on a locked database file
        return {"timeout": timeout}


DIALECTS: dict[EngineKind, Dialect] = {
    EngineKind.MYSQL: MySQLDialect(),
    EngineKind.POSTGRES: PostgresDialect(),
    EngineKind.SQLITE: SQLiteDialect(),
    EngineKind.GENERIC_SQL: GenericSQLDialect(),
}


def dialect_for(engine: EngineKind) -> Dialect:
    """Return the connection dialect for *engine*."""
    return DIALECTS[engine]
