"""Domain events published when job postings change."""

from dataclasses import dataclass, field
from datetime import datetime

from emirimo.utils.timestamps import utc_now


@dataclass(frozen=True)
class JobPosted:
    """A new, active job posting was stored."""

    job_id: str
    occurred_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class JobActivated:
    """An existing job posting became active."""

    job_id: str
    occurred_at: datetime = field(default_factory=utc_now)
