"""Domain models for seekers, job postings and notifications."""

from .models import (
    EducationEntry,
    ExperienceLevel,
    JobPosting,
    JobPreferences,
    Notification,
    NotificationPriority,
    NotificationType,
    RemotePreference,
    Role,
    SeekerProfile,
    UserStatus,
    WorkExperience,
)

__all__ = [
    "SeekerProfile",
    "EducationEntry",
    "WorkExperience",
    "JobPreferences",
    "JobPosting",
    "Notification",
    "Role",
    "UserStatus",
    "RemotePreference",
    "ExperienceLevel",
    "NotificationType",
    "NotificationPriority",
]
