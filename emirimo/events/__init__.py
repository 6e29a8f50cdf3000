"""In-process domain events for job postings."""

from .bus import EventBus
from .events import JobActivated, JobPosted

__all__ = ["EventBus", "JobPosted", "JobActivated"]
