"""Configuration loading for db-table-diff."""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from db_table_diff.config.models import DatabaseSettings, DiffConfig
from db_table_diff.errors import ConfigError


def load_diff_config(config_path: Path | None = None) -> DiffConfig:
    """Load database diff configuration from a TOML file.

    Args:
        config_path: Path to dbdiff.toml (default: ``Path.cwd() / "dbdiff.toml"``)

    Returns:
        DiffConfig with all databases in declaration order

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the TOML is malformed or an entry has unknown keys
    """
    if config_path is None:
        config_path = Path.cwd() / "dbdiff.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Diff config not found: {config_path}\n"
            f"Create a dbdiff.toml with one [databases.<label>] table per database."
        )

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Malformed TOML in {config_path.name}: {e}") from e

    # Parse databases (tomllib keeps declaration order)
    databases = {}
    for label, db_data in data.get("databases", {}).items():
        if not isinstance(db_data, dict):
            raise ConfigError("expected a table of connection settings", label=label)
        try:
            databases[label] = DatabaseSettings(**db_data)
        except ValidationError as e:
            raise ConfigError(str(e), label=label) from e

    settings = data.get("settings", {})

    try:
        return DiffConfig(
            databases=databases,
            baseline=data.get("baseline"),
            query_timeout=settings.get("query_timeout", 30.0),
            include_columns=settings.get("include_columns", True),
        )
    except ValidationError as e:
        raise ConfigError(str(e)) from e
