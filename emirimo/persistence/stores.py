"""Session-per-call stores handed to the ranker and services.

Each call opens its own session through get_session(), so the stores can be
shared across threads and long-lived services without holding a session.
"""

from datetime import datetime
from typing import List, Optional

from emirimo.domain.models import JobPosting, Notification, SeekerProfile

from .database import get_session
from .repositories import (
    JobRepository,
    NotificationRepository,
    RecommendationAlertRepository,
    SeekerRepository,
)


class SqlProfileStore:
    """Profile store backed by the users table."""

    def get_by_id(self, user_id: str) -> Optional[SeekerProfile]:
        with get_session() as session:
            return SeekerRepository(session).get_by_id(user_id)

    def list_active_seekers(self) -> List[SeekerProfile]:
        with get_session() as session:
            return SeekerRepository(session).list_active_seekers()

    def list_inactive_seekers(self, since: datetime) -> List[SeekerProfile]:
        with get_session() as session:
            return SeekerRepository(session).list_inactive_seekers(since)

    def upsert(self, profile: SeekerProfile) -> SeekerProfile:
        with get_session() as session:
            return SeekerRepository(session).upsert(profile)


class SqlJobStore:
    """Job store backed by the jobs table."""

    def get_by_id(self, job_id: str) -> Optional[JobPosting]:
        with get_session() as session:
            return JobRepository(session).get_by_id(job_id)

    def list_active(self) -> List[JobPosting]:
        with get_session() as session:
            return JobRepository(session).list_active()

    def upsert(self, job: JobPosting) -> JobPosting:
        with get_session() as session:
            return JobRepository(session).upsert(job)

    def set_active(self, job_id: str, is_active: bool) -> None:
        with get_session() as session:
            JobRepository(session).set_active(job_id, is_active)


class SqlNotificationStore:
    """Notification store backed by the notifications table."""

    def create(self, notification: Notification) -> Notification:
        with get_session() as session:
            return NotificationRepository(session).create(notification)

    def list_for_user(self, user_id: str, unread_only: bool = False) -> List[Notification]:
        with get_session() as session:
            return NotificationRepository(session).list_for_user(user_id, unread_only=unread_only)

    def mark_read(self, notification_id: int, user_id: str) -> None:
        with get_session() as session:
            NotificationRepository(session).mark_read(notification_id, user_id)

    def unread_count(self, user_id: str) -> int:
        with get_session() as session:
            return NotificationRepository(session).unread_count(user_id)


class SqlAlertStore:
    """Dedupe store for recommendation emails."""

    def has_been_sent(self, user_id: str, job_id: str) -> bool:
        with get_session() as session:
            return RecommendationAlertRepository(session).has_been_sent(user_id, job_id)

    def record_alert(self, user_id: str, job_id: str, score: int, sent_at: datetime) -> None:
        with get_session() as session:
            RecommendationAlertRepository(session).record_alert(user_id, job_id, score, sent_at)
