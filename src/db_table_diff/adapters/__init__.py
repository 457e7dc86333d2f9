"""Database adapters package.

Provides the ``QueryRunner`` Protocol, the SQLAlchemy-backed
``LiveConnection``, and the per-engine connection ``Dialect`` variants.

Usage:
    from db_table_diff.adapters import LiveConnection, QueryRunner, dialect_for
"""

from db_table_diff.adapters.base import QueryRunner
from db_table_diff.adapters.connection import LiveConnection
from db_table_diff.adapters.dialects import Dialect, dialect_for

__all__ = [
    "QueryRunner",
    "LiveConnection",
    "Dialect",
    "dialect_for",
]
