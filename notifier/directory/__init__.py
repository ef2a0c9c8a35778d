"""User directory used to resolve emergency-alert recipients.

Public API:
    # Database initialization and session management
    - init_database(database_url: str, create_tables: bool = True) -> sessionmaker
    - get_session(session_factory) -> ContextManager[Session]
    - close_database(session_factory) -> None

    # Repository
    - UserRepository: read-only lookups of users and their email addresses

    # Exceptions
    - PersistenceError: Base exception for all database errors
    - DatabaseConnectionError: Database connection/initialization failures
    - DirectoryError: Recipient lookup failures

Example usage:
    >>> from notifier.directory import init_database, get_session, UserRepository
    >>>
    >>> session_factory = init_database("sqlite:///./data/amayalert.db")
    >>>
    >>> with get_session(session_factory) as session:
    ...     emails = UserRepository(session).get_emails(["user-1", "user-2"])
"""

from .database import close_database, get_session, init_database
from .exceptions import DatabaseConnectionError, DirectoryError, PersistenceError
from .models import DirectoryUser
from .repositories import UserRepository
from .schema import Base, UserModel, create_schema

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "create_schema",
    # Models
    "Base",
    "UserModel",
    "DirectoryUser",
    # Repository
    "UserRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "DirectoryError",
]
