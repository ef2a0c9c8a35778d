"""Recipient directory exceptions.

All directory exceptions inherit from PersistenceError so callers can catch
every database failure with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all database errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the database cannot be initialized or reached.

    Examples:
    - Invalid database URL
    - Database server unreachable
    - Database not initialized before use
    """

    pass


class DirectoryError(PersistenceError):
    """Raised when looking up recipients in the user directory fails."""

    pass
