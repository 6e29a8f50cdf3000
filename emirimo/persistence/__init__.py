"""Persistence layer for profiles, jobs, notifications and alert records.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repositories (bound to one session)
    - SeekerRepository, JobRepository, NotificationRepository,
      RecommendationAlertRepository

    # Stores (open a session per call; injected into ranker and services)
    - SqlProfileStore, SqlJobStore, SqlNotificationStore, SqlAlertStore

    # Exceptions
    - PersistenceError and its subclasses

Example usage:
    >>> from emirimo.persistence import init_database, get_session, JobRepository
    >>> init_database("sqlite:///./data/emirimo.db")
    >>> with get_session() as session:
    ...     jobs = JobRepository(session).list_active()
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import (
    JobRepository,
    NotificationRepository,
    RecommendationAlertRepository,
    SeekerRepository,
)
from .stores import SqlAlertStore, SqlJobStore, SqlNotificationStore, SqlProfileStore

__all__ = [
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    "SeekerRepository",
    "JobRepository",
    "NotificationRepository",
    "RecommendationAlertRepository",
    "SqlProfileStore",
    "SqlJobStore",
    "SqlNotificationStore",
    "SqlAlertStore",
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
