"""Core domain models for seekers, job postings and in-app notifications.

This module defines the records the matching engine reads and the
notification fan-out writes:
- SeekerProfile: job seeker attributes (skills, education, work history, preferences)
- JobPosting: an employer's advertisement with its requirements
- Notification: an in-app notification delivered to a user

Validators normalise loose input (None lists, blank strings, skill objects)
into the documented defaults so scoring never has to guard against them.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from emirimo.utils.timestamps import ensure_utc, utc_now


class Role(str, Enum):
    """User roles."""

    SEEKER = "seeker"
    EMPLOYER = "employer"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """Account status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    SUSPENDED = "suspended"


class RemotePreference(str, Enum):
    """Where a seeker prefers to work."""

    REMOTE = "remote"
    ONSITE = "onsite"
    HYBRID = "hybrid"
    FLEXIBLE = "flexible"


class ExperienceLevel(str, Enum):
    """Seniority a posting asks for."""

    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"


class NotificationType(str, Enum):
    """In-app notification categories."""

    JOB_APPLICATION = "job_application"
    APPLICATION_STATUS_CHANGE = "application_status_change"
    JOB_RECOMMENDATION = "job_recommendation"
    COURSE_RECOMMENDATION = "course_recommendation"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    OFFER_RECEIVED = "offer_received"
    JOB_POSTED = "job_posted"
    SYSTEM = "system"


class NotificationPriority(str, Enum):
    """In-app notification priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _clean_strings(values: Any) -> List[str]:
    """Strip each entry and drop blanks; None becomes an empty list."""
    if values is None:
        return []
    cleaned = []
    for value in values:
        if value is None:
            continue
        stripped = str(value).strip()
        if stripped:
            cleaned.append(stripped)
    return cleaned


class EducationEntry(BaseModel):
    """One education record of a seeker."""

    degree: Optional[str] = Field(None, description="Degree name, e.g. 'Bachelor of Science'")
    field_of_study: Optional[str] = Field(None, description="Field of study")
    institution: Optional[str] = Field(None, description="School or university")


class WorkExperience(BaseModel):
    """One work history entry.

    A current position never carries an end date; its duration runs to today.
    """

    title: Optional[str] = Field(None, description="Position title")
    company: Optional[str] = Field(None, description="Employer name")
    start_date: date = Field(..., description="First day in the position")
    end_date: Optional[date] = Field(None, description="Last day (None while current)")
    current: bool = Field(False, description="Whether this is the seeker's current position")

    @model_validator(mode="after")
    def drop_end_date_when_current(self):
        if self.current:
            self.end_date = None
        return self


class JobPreferences(BaseModel):
    """What kind of work a seeker is looking for."""

    job_types: List[str] = Field(default_factory=list, description="Accepted job types")
    work_locations: List[str] = Field(default_factory=list, description="Preferred locations")
    remote_preference: Optional[RemotePreference] = Field(
        None, description="remote, onsite, hybrid or flexible"
    )

    @field_validator("job_types", "work_locations", mode="before")
    @classmethod
    def clean_lists(cls, v: Any) -> List[str]:
        return _clean_strings(v)

    @field_validator("remote_preference", mode="before")
    @classmethod
    def normalize_remote_preference(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str):
            stripped = v.strip().lower()
            return stripped or None
        return v

    model_config = {"use_enum_values": True}


class SeekerProfile(BaseModel):
    """A platform user as seen by the matching engine.

    Only users with role 'seeker' receive job recommendations; the other
    roles are kept so lookups can tell "not found" from "not a seeker".
    """

    id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field("", description="Display name")
    email: Optional[str] = Field(None, description="Contact email address")
    role: Role = Field(Role.SEEKER, description="seeker, employer or admin")
    status: UserStatus = Field(UserStatus.ACTIVE, description="Account status")
    skills: List[str] = Field(default_factory=list, description="Free-text skill names")
    education: List[EducationEntry] = Field(default_factory=list)
    work_experience: List[WorkExperience] = Field(default_factory=list)
    job_preferences: JobPreferences = Field(default_factory=JobPreferences)
    last_login: Optional[datetime] = Field(None, description="Last sign-in (UTC)")

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, v: Any) -> List[str]:
        """Accept plain strings or skill objects carrying a 'name' key."""
        if v is None:
            return []
        names = []
        for skill in v:
            if isinstance(skill, dict):
                skill = skill.get("name")
            names.append(skill)
        return _clean_strings(names)

    @field_validator("education", "work_experience", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("job_preferences", mode="before")
    @classmethod
    def none_to_default_preferences(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip().lower()
        return stripped or None

    @field_validator("last_login")
    @classmethod
    def ensure_last_login_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @property
    def is_seeker(self) -> bool:
        return self.role == Role.SEEKER

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    model_config = {
        "use_enum_values": True,
        "json_schema_extra": {
            "example": {
                "id": "u-1001",
                "name": "Aline Uwase",
                "email": "aline@example.rw",
                "role": "seeker",
                "skills": ["Python", "Data Analysis"],
                "education": [{"degree": "Bachelor", "field_of_study": "Computer Science"}],
                "work_experience": [{"start_date": "2021-01-01", "current": True}],
                "job_preferences": {
                    "job_types": ["remote"],
                    "work_locations": ["Kigali"],
                    "remote_preference": "hybrid",
                },
            }
        },
    }


class JobPosting(BaseModel):
    """An employer's job advertisement.

    experience_level defaults to 'mid'; type and location default to the
    values new postings get on the platform ('remote', 'Remote').
    """

    id: str = Field(..., min_length=1, description="Job identifier")
    title: str = Field(..., min_length=1, description="Job title")
    employer_name: Optional[str] = Field(None, description="Hiring company")
    description: Optional[str] = Field(None, description="Job description")
    skills: List[str] = Field(default_factory=list, description="Required skills, in posting order")
    experience_level: str = Field(ExperienceLevel.MID.value, description="entry, mid or senior")
    type: str = Field("remote", description="onsite, remote or hybrid")
    location: Optional[str] = Field("Remote", description="Free-text location")
    is_active: bool = Field(True, description="Only active postings are matched")
    posted_at: Optional[datetime] = Field(None, description="When the job was posted (UTC)")

    @field_validator("skills", mode="before")
    @classmethod
    def clean_skills(cls, v: Any) -> List[str]:
        return _clean_strings(v)

    @field_validator("experience_level", mode="before")
    @classmethod
    def default_experience_level(cls, v: Any) -> str:
        if v is None:
            return ExperienceLevel.MID.value
        if isinstance(v, Enum):
            v = v.value
        stripped = str(v).strip().lower()
        return stripped or ExperienceLevel.MID.value

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return "remote"
        return str(v).strip()

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("posted_at")
    @classmethod
    def ensure_posted_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    model_config = {"json_schema_extra": {"example": {
        "id": "job-42",
        "title": "Junior Data Analyst",
        "employer_name": "Kigali Analytics Ltd",
        "skills": ["SQL", "Python", "Excel"],
        "experience_level": "entry",
        "type": "hybrid",
        "location": "Kigali, Rwanda",
        "is_active": True,
    }}}


class Notification(BaseModel):
    """An in-app notification addressed to one user."""

    id: Optional[int] = Field(None, description="Store-assigned identifier")
    user_id: str = Field(..., min_length=1, description="Recipient user id")
    message: str = Field(..., min_length=1, description="Notification text")
    title: Optional[str] = Field(None, description="Short heading")
    type: NotificationType = Field(NotificationType.SYSTEM)
    priority: NotificationPriority = Field(NotificationPriority.MEDIUM)
    data: Dict[str, Any] = Field(default_factory=dict, description="Structured payload")
    action_url: Optional[str] = Field(None, description="Where the client navigates on click")
    read_status: bool = Field(False)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at")
    @classmethod
    def ensure_created_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    model_config = {"use_enum_values": True}
