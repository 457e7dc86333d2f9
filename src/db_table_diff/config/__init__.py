"""Configuration management: TOML loading and config models.

Usage:
    >>> from db_table_diff.config import load_diff_config, DatabaseSettings, DiffConfig
"""

from db_table_diff.config.loader import load_diff_config
from db_table_diff.config.models import DatabaseSettings, DiffConfig, EngineKind

__all__ = ["load_diff_config", "DatabaseSettings", "DiffConfig", "EngineKind"]
