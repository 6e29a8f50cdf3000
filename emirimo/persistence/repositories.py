"""Data access layer (repositories) for persistence operations.

Repositories wrap a SQLAlchemy session and return domain models, never ORM
rows. SQLAlchemy failures are re-raised as PersistenceError subclasses.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from emirimo.domain.models import JobPosting, Notification, SeekerProfile
from emirimo.utils.timestamps import format_timestamp

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import JobModel, NotificationModel, RecommendationAlertModel, UserModel

logger = logging.getLogger(__name__)


class SeekerRepository:
    """Repository for user profiles (the profile store)."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, user_id: str) -> Optional[SeekerProfile]:
        """Retrieve a user profile by id.

        Args:
            user_id: User identifier

        Returns:
            SeekerProfile if found (any role), None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            user_model = self.session.get(UserModel, user_id)
            if user_model is None:
                return None
            return user_model.to_domain()

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve user: {e}") from e

    def list_active_seekers(self) -> List[SeekerProfile]:
        """All active users with the seeker role, ordered by id.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(UserModel)
                .where(UserModel.role == "seeker", UserModel.status == "active")
                .order_by(UserModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing active seekers: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list seekers: {e}") from e

    def list_inactive_seekers(self, since: datetime) -> List[SeekerProfile]:
        """Active seekers who have not signed in since the cutoff.

        Seekers who never signed in are included.

        Args:
            since: Cutoff; seekers with last_login before this are returned

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            cutoff = format_timestamp(since)
            stmt = (
                select(UserModel)
                .where(
                    UserModel.role == "seeker",
                    UserModel.status == "active",
                    or_(UserModel.last_login.is_(None), UserModel.last_login < cutoff),
                )
                .order_by(UserModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing inactive seekers: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list inactive seekers: {e}") from e

    def upsert(self, profile: SeekerProfile) -> SeekerProfile:
        """Insert a new profile or overwrite the existing one.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(UserModel, profile.id)
            if existing:
                existing.apply(profile)
                self.session.flush()
                return existing.to_domain()

            user_model = UserModel.from_domain(profile)
            self.session.add(user_model)
            self.session.flush()
            return user_model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting user {profile.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert user due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting user {profile.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert user: {e}") from e


class JobRepository:
    """Repository for job postings (the job store)."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, job_id: str) -> Optional[JobPosting]:
        """Retrieve a job posting by id, active or not.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            job_model = self.session.get(JobModel, job_id)
            if job_model is None:
                return None
            return job_model.to_domain()

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e

    def list_active(self) -> List[JobPosting]:
        """All active job postings, newest first (ties by id).

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(JobModel)
                .where(JobModel.is_active.is_(True))
                .order_by(JobModel.posted_at.desc(), JobModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing active jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list active jobs: {e}") from e

    def upsert(self, job: JobPosting) -> JobPosting:
        """Insert a new posting or overwrite the existing one.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(JobModel, job.id)
            if existing:
                existing.apply(job)
                self.session.flush()
                return existing.to_domain()

            job_model = JobModel.from_domain(job)
            self.session.add(job_model)
            self.session.flush()
            return job_model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting job {job.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert job due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting job {job.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert job: {e}") from e

    def set_active(self, job_id: str, is_active: bool) -> None:
        """Flip a posting's active flag.

        Raises:
            RecordNotFoundError: If job_id doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            stmt = update(JobModel).where(JobModel.id == job_id).values(is_active=is_active)
            result = self.session.execute(stmt)
            self.session.flush()

            if result.rowcount == 0:
                raise RecordNotFoundError(f"Job with id {job_id} not found")

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating active flag for job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update job: {e}") from e


class NotificationRepository:
    """Repository for in-app notifications."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, notification: Notification) -> Notification:
        """Insert a notification and return it with its assigned id.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = NotificationModel.from_domain(notification)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except SQLAlchemyError as e:
            logger.error(
                f"Error creating notification for user {notification.user_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to create notification: {e}") from e

    def list_for_user(
        self, user_id: str, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        """A user's notifications, newest first.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(NotificationModel).where(NotificationModel.user_id == user_id)
            if unread_only:
                stmt = stmt.where(NotificationModel.read_status.is_(False))
            stmt = stmt.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            ).limit(limit)
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing notifications for user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list notifications: {e}") from e

    def mark_read(self, notification_id: int, user_id: str) -> None:
        """Mark one of the user's notifications as read.

        Raises:
            RecordNotFoundError: If no such notification belongs to the user
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                update(NotificationModel)
                .where(
                    NotificationModel.id == notification_id,
                    NotificationModel.user_id == user_id,
                )
                .values(read_status=True)
            )
            result = self.session.execute(stmt)
            self.session.flush()

            if result.rowcount == 0:
                raise RecordNotFoundError(
                    f"Notification {notification_id} not found for user {user_id}"
                )

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error marking notification {notification_id} read: {e}", exc_info=True)
            raise PersistenceError(f"Failed to mark notification read: {e}") from e

    def unread_count(self, user_id: str) -> int:
        try:
            stmt = select(func.count()).select_from(NotificationModel).where(
                NotificationModel.user_id == user_id,
                NotificationModel.read_status.is_(False),
            )
            return self.session.execute(stmt).scalar_one()

        except SQLAlchemyError as e:
            logger.error(f"Error counting unread notifications for {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count notifications: {e}") from e


class RecommendationAlertRepository:
    """Repository tracking which recommendation emails were already sent."""

    def __init__(self, session: Session):
        self.session = session

    def has_been_sent(self, user_id: str, job_id: str) -> bool:
        """Check whether this seeker was already alerted about this job.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(
                RecommendationAlertModel, {"user_id": user_id, "job_id": job_id}
            )
            return existing is not None

        except SQLAlchemyError as e:
            logger.error(
                f"Error checking alert status for user {user_id}, job {job_id}: {e}",
                exc_info=True,
            )
            raise PersistenceError(f"Failed to check alert status: {e}") from e

    def record_alert(self, user_id: str, job_id: str, score: int, sent_at: datetime) -> None:
        """Record a sent alert. Recording the same pair twice is a no-op.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(
                RecommendationAlertModel, {"user_id": user_id, "job_id": job_id}
            )
            if existing:
                logger.debug(f"Alert already recorded for user {user_id}, job {job_id}")
                return

            self.session.add(
                RecommendationAlertModel(
                    user_id=user_id,
                    job_id=job_id,
                    score=score,
                    sent_at=format_timestamp(sent_at),
                )
            )
            self.session.flush()

        except SQLAlchemyError as e:
            logger.error(
                f"Error recording alert for user {user_id}, job {job_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to record alert: {e}") from e
