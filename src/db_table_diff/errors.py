"""Exception hierarchy for db-table-diff.

Every failure is fatal to a comparison run: there are no retries and no
partial-results mode, because a partial schema report could be mistaken for
a complete one.

Usage:
    from db_table_diff.errors import TableDiffError

    try:
        report = generate_report(registry)
    except TableDiffError as e:
        print(f"Comparison aborted: {e}")
"""


def driver_message(exc: BaseException) -> str:
    """Extract the underlying driver message from a (possibly wrapped) error.

    SQLAlchemy wraps DBAPI exceptions and keeps the original on ``.orig``;
    the original's message is what the user needs to see.
    """
    orig = getattr(exc, "orig", None)
    message = str(orig if orig is not None else exc).strip()
    return message or type(exc).__name__


class TableDiffError(Exception):
    """Base class for all db-table-diff errors."""

    pass


class ConfigError(TableDiffError):
    """Raised when a database configuration is invalid or incomplete.

    Always raised before any connection attempt.

    Args:
        message: Human-readable description of the problem.
        label: Offending database label, if known.
    """

    def __init__(self, message: str, label: str | None = None) -> None:
        self.label = label
        if label is not None:
            message = f"Invalid configuration for database '{label}': {message}"
        super().__init__(message)


class DatabaseConnectionError(TableDiffError):
    """Raised when a connection to a configured database cannot be established.

    Args:
        label: Label of the database that failed to connect.
        reason: Underlying driver error message.
    """

    def __init__(self, label: str, reason: str) -> None:
        self.label = label
        self.reason = reason
        super().__init__(f"Could not connect to database '{label}': {reason}")


class QueryError(TableDiffError):
    """Raised when a metadata query fails after a successful connection.

    Args:
        label: Label of the database the query ran against.
        reason: Underlying driver error message.
        table_name: Table being inspected (column queries only).
    """

    def __init__(self, label: str, reason: str, table_name: str | None = None) -> None:
        self.label = label
        self.reason = reason
        self.table_name = table_name
        if table_name is not None:
            message = (
                f"Column query for table '{table_name}' failed on "
                f"database '{label}': {reason}"
            )
        else:
            message = f"Table query failed on database '{label}': {reason}"
        super().__init__(message)


class UnknownLabelError(TableDiffError, KeyError):
    """Raised when an operation references a database label not in configuration."""

    def __init__(self, label: str, available: list[str] | None = None) -> None:
        self.label = label
        message = f"Unknown database label '{label}'"
        if available:
            message += f". Available: {', '.join(available)}"
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.message
