"""Persistence layer exceptions.

Every store failure surfaces as a PersistenceError subclass so callers can
decide with a single except clause whether to degrade or propagate.
"""


class PersistenceError(Exception):
    """Base exception for all store failures (the systemic error category)."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the database cannot be initialised or reached.

    Examples:
    - Empty or malformed DATABASE_URL
    - SQLite file directory not writable
    - get_session() called before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised by update operations whose target row does not exist.

    Plain lookups return None instead.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised on constraint violations (duplicate primary key, NOT NULL)."""

    pass
