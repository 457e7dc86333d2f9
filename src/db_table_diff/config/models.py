"""Pydantic models for database diff configuration."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Engines
# ============================================================================


class EngineKind(str, Enum):
    """Supported database engines, keyed by their ``driver`` config value."""

    MYSQL = "mysql"
    POSTGRES = "pgsql"
    SQLITE = "sqlite"
    GENERIC_SQL = "sql"

    @classmethod
    def from_driver(cls, driver: str) -> "EngineKind | None":
        """Resolve a ``driver`` config value (or alias) to an engine.

        Returns:
            Matching ``EngineKind``, or ``None`` if the driver is unsupported.
        """
        value = _DRIVER_ALIASES.get(driver.strip().lower(), driver.strip().lower())
        try:
            return cls(value)
        except ValueError:
            return None


_DRIVER_ALIASES = {
    "postgres": "pgsql",
    "postgresql": "pgsql",
}


# ============================================================================
# Configuration Models
# ============================================================================


class DatabaseSettings(BaseModel):
    """One ``[databases.<label>]`` entry from dbdiff.toml.

    All fields are optional at parse time; completeness is checked by
    ``ConnectionRegistry.register()`` so that errors name the offending label.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    driver: str | None = None
    host: str | None = None
    unix_socket: str | None = None
    connection_string: str | None = None
    port: int | None = None
    dbname: str | None = None
    user: str | None = None
    password: str | None = Field(default=None, alias="pass")
    schema_name: str | None = Field(default=None, alias="schema")  # pgsql only

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        """Treat empty strings (e.g. ``port = ""``) as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class DiffConfig(BaseModel):
    """Complete comparison configuration from dbdiff.toml.

    ``databases`` preserves declaration order; the first entry is the
    implicit baseline unless ``baseline`` names another label.
    """

    databases: dict[str, DatabaseSettings] = Field(default_factory=dict)
    baseline: str | None = None
    query_timeout: float = 30.0
    include_columns: bool = True
