"""Connection registry.

Holds one labeled ``DatabaseHandle`` per configured database, validates each
configuration before any connection attempt, and opens live connections on
request.  Registration order is configuration order; the first registered
label is the implicit baseline.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from sqlalchemy.engine import URL
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from db_table_diff.adapters.connection import LiveConnection
from db_table_diff.adapters.dialects import dialect_for
from db_table_diff.config.models import DatabaseSettings, DiffConfig, EngineKind
from db_table_diff.errors import (
    ConfigError,
    DatabaseConnectionError,
    UnknownLabelError,
    driver_message,
)

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TIMEOUT = 30.0


# ============================================================================
# Handles
# ============================================================================


class DatabaseHandle(BaseModel):
    """A validated, labeled database configuration.

    Created once by ``ConnectionRegistry.register()`` and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    engine: EngineKind
    settings: DatabaseSettings

    @property
    def schema_name(self) -> str | None:
        """Schema to list tables from (PostgreSQL only)."""
        return self.settings.schema_name

    def url(self) -> URL:
        """SQLAlchemy URL for this database."""
        return dialect_for(self.engine).build_url(self.settings)

    def display_url(self) -> str:
        """URL with the password masked, safe for logs and output."""
        return self.url().render_as_string(hide_password=True)


# ============================================================================
# Registry
# ============================================================================


class ConnectionRegistry:
    """Ordered collection of labeled database handles.

    Args:
        query_timeout: Upper bound, in seconds, for connecting and for each
            metadata query.

    Example:
        >>> registry = ConnectionRegistry()
        >>> _ = registry.register("dev", {"driver": "sqlite", "dbname": "dev.db"})
        >>> _ = registry.register("prod", {"driver": "sqlite", "dbname": "prod.db"})
        >>> registry.baseline.label
        'dev'
    """

    def __init__(self, query_timeout: float = DEFAULT_QUERY_TIMEOUT) -> None:
        self.query_timeout = query_timeout
        self._handles: dict[str, DatabaseHandle] = {}
        self._baseline_label: str | None = None

    @classmethod
    def from_config(cls, config: DiffConfig) -> "ConnectionRegistry":
        """Build a registry from a loaded ``DiffConfig``.

        Every database is validated before this returns, so a bad entry
        aborts the run before any connection is attempted.

        Raises:
            ConfigError: If any database entry is invalid.
            UnknownLabelError: If ``config.baseline`` names no database.
        """
        registry = cls(query_timeout=config.query_timeout)
        for label, settings in config.databases.items():
            registry.register(label, settings)
        if config.baseline is not None:
            registry.designate_baseline(config.baseline)
        return registry

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self, label: str, config: DatabaseSettings | Mapping[str, Any]
    ) -> DatabaseHandle:
        """Validate *config* and register it under *label*.

        SQLite configurations have ``user``/``pass`` cleared rather than
        rejected.

        Returns:
            The new ``DatabaseHandle``.

        Raises:
            ConfigError: If the label is taken, ``driver`` is missing or
                unsupported, ``dbname`` is missing, or (non-SQLite) ``user``
                or every one of ``connection_string``/``host``/``unix_socket``
                is missing.
        """
        if not label:
            raise ConfigError("database label must be a non-empty string")
        if label in self._handles:
            raise ConfigError("label is already registered", label=label)

        if isinstance(config, DatabaseSettings):
            settings = config
        else:
            try:
                settings = DatabaseSettings(**config)
            except ValidationError as e:
                raise ConfigError(str(e), label=label) from e

        if not settings.driver:
            raise ConfigError("'driver' key is mandatory", label=label)

        engine = EngineKind.from_driver(settings.driver)
        if engine is None:
            supported = ", ".join(kind.value for kind in EngineKind)
            raise ConfigError(
                f"driver '{settings.driver}' is not supported (supported: {supported})",
                label=label,
            )

        if not settings.dbname:
            raise ConfigError("'dbname' key is mandatory", label=label)

        if engine is EngineKind.SQLITE:
            # SQLite doesn't need credentials
            if settings.user or settings.password:
                logger.debug(f"[{label}] clearing user/pass for sqlite database")
            settings = settings.model_copy(update={"user": None, "password": None})
        else:
            if not settings.user:
                raise ConfigError("'user' key is mandatory", label=label)
            if not (settings.connection_string or settings.host or settings.unix_socket):
                raise ConfigError(
                    "missing one of 'connection_string', 'unix_socket' or 'host'",
                    label=label,
                )

        try:
            dialect_for(engine).build_url(settings)
        except (ArgumentError, ValueError) as e:
            raise ConfigError(f"invalid connection string: {e}", label=label) from e

        handle = DatabaseHandle(label=label, engine=engine, settings=settings)
        self._handles[label] = handle
        logger.debug(f"[{label}] registered {engine.value} database")
        return handle

    def designate_baseline(self, label: str) -> DatabaseHandle:
        """Make *label* the baseline all other databases are compared against."""
        handle = self.get(label)
        self._baseline_label = label
        return handle

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, label: str) -> DatabaseHandle:
        """Return the handle registered under *label*.

        Raises:
            UnknownLabelError: If no database is registered under *label*.
        """
        try:
            return self._handles[label]
        except KeyError:
            raise UnknownLabelError(label, self.labels) from None

    @property
    def labels(self) -> list[str]:
        return list(self._handles)

    @property
    def handles(self) -> list[DatabaseHandle]:
        """All handles in registration order."""
        return list(self._handles.values())

    @property
    def baseline(self) -> DatabaseHandle:
        """The explicitly designated baseline, else the first registered database.

        Raises:
            ConfigError: If no databases are registered.
        """
        if not self._handles:
            raise ConfigError("no databases configured")
        if self._baseline_label is not None:
            return self._handles[self._baseline_label]
        return next(iter(self._handles.values()))

    @property
    def others(self) -> list[DatabaseHandle]:
        """Every non-baseline handle, in registration order."""
        baseline_label = self.baseline.label
        return [h for h in self._handles.values() if h.label != baseline_label]

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, label: object) -> bool:
        return label in self._handles

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def connect(self, handle: DatabaseHandle) -> LiveConnection:
        """Open a live connection for *handle*.

        Raises:
            DatabaseConnectionError: If the driver cannot connect; wraps the
                driver error and names the handle's label.
        """
        dialect = dialect_for(handle.engine)
        logger.info(f"Connecting to '{handle.label}' ({handle.display_url()})")
        try:
            return LiveConnection.open(
                handle.label,
                dialect.build_url(handle.settings),
                connect_args=dialect.connect_args(self.query_timeout),
            )
        except (SQLAlchemyError, ImportError) as e:
            raise DatabaseConnectionError(handle.label, driver_message(e)) from e
