"""Job posting use cases.

Creating or activating a posting publishes a domain event; listeners such
as the recommendation fan-out subscribe on the EventBus.
"""

from typing import Optional

from emirimo.domain.models import JobPosting
from emirimo.events.bus import EventBus
from emirimo.events.events import JobActivated, JobPosted
from emirimo.logging import get_logger
from emirimo.persistence.exceptions import RecordNotFoundError

logger = get_logger(__name__, component="jobs")


class JobPostingService:
    """Stores job postings and announces them."""

    def __init__(self, job_store, event_bus: Optional[EventBus] = None):
        self.job_store = job_store
        self.event_bus = event_bus or EventBus()

    def create_job(self, posting: JobPosting, publish: bool = True) -> JobPosting:
        """Store a posting; publish JobPosted when it is new and active.

        Re-saving an existing posting never publishes.

        Args:
            posting: Posting to store
            publish: Set False to store without announcing (bulk imports)

        Returns:
            The stored posting
        """
        is_new = self.job_store.get_by_id(posting.id) is None
        stored = self.job_store.upsert(posting)

        logger.info(
            f"Stored job {stored.id}: {stored.title}",
            extra={
                "event": "jobs.stored",
                "job_id": stored.id,
                "is_new": is_new,
                "is_active": stored.is_active,
            },
        )

        if publish and is_new and stored.is_active:
            self.event_bus.publish(JobPosted(job_id=stored.id))

        return stored

    def activate_job(self, job_id: str) -> JobPosting:
        """Mark a posting active and publish JobActivated.

        Activating an already active posting publishes again, matching the
        behaviour of an explicit re-activation by the employer; duplicate
        emails are suppressed by the alert store.

        Raises:
            RecordNotFoundError: If the posting does not exist
        """
        self.job_store.set_active(job_id, True)
        job = self.job_store.get_by_id(job_id)
        if job is None:
            raise RecordNotFoundError(f"Job with id {job_id} not found")

        logger.info(
            f"Activated job {job_id}",
            extra={"event": "jobs.activated", "job_id": job_id},
        )

        self.event_bus.publish(JobActivated(job_id=job_id))
        return job

    def deactivate_job(self, job_id: str) -> None:
        """Mark a posting inactive; no event is published."""
        self.job_store.set_active(job_id, False)
        logger.info(
            f"Deactivated job {job_id}",
            extra={"event": "jobs.deactivated", "job_id": job_id},
        )
