"""Database schema definition and ORM models.

This module defines the SQLAlchemy ORM models backing the profile, job,
notification and alert stores, plus conversions to and from domain models.
List and nested profile fields are stored in JSON columns; timestamps are
stored as ISO 8601 strings with a Z suffix.
"""

import logging

from sqlalchemy import JSON, Boolean, Column, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from emirimo.domain.models import JobPosting, Notification, SeekerProfile
from emirimo.utils.timestamps import format_timestamp, parse_iso_datetime

logger = logging.getLogger(__name__)

Base = declarative_base()


class UserModel(Base):
    """ORM model for users table (seekers, employers and admins)."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True, nullable=False)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default="seeker")
    status = Column(String(20), nullable=False, default="active")

    # Profile attributes used by matching
    skills = Column(JSON, nullable=False, default=list)
    education = Column(JSON, nullable=False, default=list)
    work_experience = Column(JSON, nullable=False, default=list)
    job_preferences = Column(JSON, nullable=False, default=dict)

    last_login = Column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_users_role_status", "role", "status"),
        Index("idx_users_last_login", "last_login"),
    )

    def to_domain(self) -> SeekerProfile:
        return SeekerProfile(
            id=self.id,
            name=self.name or "",
            email=self.email,
            role=self.role,
            status=self.status,
            skills=self.skills,
            education=self.education,
            work_experience=self.work_experience,
            job_preferences=self.job_preferences,
            last_login=parse_iso_datetime(self.last_login),
        )

    @classmethod
    def from_domain(cls, profile: SeekerProfile) -> "UserModel":
        model = cls(id=profile.id)
        model.apply(profile)
        return model

    def apply(self, profile: SeekerProfile) -> None:
        """Copy every column from a domain profile onto this row."""
        data = profile.model_dump(mode="json")
        self.name = data["name"]
        self.email = data["email"]
        self.role = data["role"]
        self.status = data["status"]
        self.skills = data["skills"]
        self.education = data["education"]
        self.work_experience = data["work_experience"]
        self.job_preferences = data["job_preferences"]
        self.last_login = format_timestamp(profile.last_login)


class JobModel(Base):
    """ORM model for jobs table."""

    __tablename__ = "jobs"

    id = Column(String(64), primary_key=True, nullable=False)
    title = Column(Text, nullable=False)
    employer_name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    experience_level = Column(String(20), nullable=False, default="mid")
    type = Column(String(20), nullable=False, default="remote")
    location = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    posted_at = Column(String(50), nullable=True)

    __table_args__ = (Index("idx_jobs_active", "is_active"),)

    def to_domain(self) -> JobPosting:
        return JobPosting(
            id=self.id,
            title=self.title,
            employer_name=self.employer_name,
            description=self.description,
            skills=self.skills,
            experience_level=self.experience_level,
            type=self.type,
            location=self.location,
            is_active=self.is_active,
            posted_at=parse_iso_datetime(self.posted_at),
        )

    @classmethod
    def from_domain(cls, job: JobPosting) -> "JobModel":
        model = cls(id=job.id)
        model.apply(job)
        return model

    def apply(self, job: JobPosting) -> None:
        """Copy every column from a domain posting onto this row."""
        self.title = job.title
        self.employer_name = job.employer_name
        self.description = job.description
        self.skills = list(job.skills)
        self.experience_level = job.experience_level
        self.type = job.type
        self.location = job.location
        self.is_active = job.is_active
        self.posted_at = format_timestamp(job.posted_at)


class NotificationModel(Base):
    """ORM model for notifications table (in-app notifications)."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False)
    message = Column(Text, nullable=False)
    title = Column(String(255), nullable=True)
    type = Column(String(50), nullable=False, default="system")
    priority = Column(String(10), nullable=False, default="medium")
    data = Column(JSON, nullable=False, default=dict)
    action_url = Column(Text, nullable=True)
    read_status = Column(Boolean, nullable=False, default=False)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_notifications_user_created", "user_id", "created_at"),
        Index("idx_notifications_user_read", "user_id", "read_status"),
    )

    def to_domain(self) -> Notification:
        return Notification(
            id=self.id,
            user_id=self.user_id,
            message=self.message,
            title=self.title,
            type=self.type,
            priority=self.priority,
            data=self.data or {},
            action_url=self.action_url,
            read_status=self.read_status,
            created_at=parse_iso_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationModel":
        return cls(
            user_id=notification.user_id,
            message=notification.message,
            title=notification.title,
            type=notification.type,
            priority=notification.priority,
            data=notification.data,
            action_url=notification.action_url,
            read_status=notification.read_status,
            created_at=format_timestamp(notification.created_at),
        )


class RecommendationAlertModel(Base):
    """ORM model for recommendation_alerts table.

    One row per (seeker, job) recommendation email already sent, so a job
    posted twice or re-activated does not email the same seeker again.
    """

    __tablename__ = "recommendation_alerts"

    user_id = Column(String(64), primary_key=True, nullable=False)
    job_id = Column(String(64), primary_key=True, nullable=False)
    score = Column(Integer, nullable=False)
    sent_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_recommendation_alerts_sent_at", "sent_at"),)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
