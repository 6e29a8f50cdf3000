"""Data models and exceptions for the notification fan-out.

Result types record what happened for each recipient so batch callers can
report counts without inspecting logs.
"""

from dataclasses import dataclass, field
from typing import List, Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class SMTPDeliveryError(NotificationError):
    """Raised when SMTP delivery fails after all retry attempts."""

    pass


@dataclass
class NotificationResult:
    """Outcome of notifying one seeker.

    Attributes:
        user_id: Recipient seeker id
        kind: What was sent (job_recommendation, weekly_digest, application_reminder)
        status: sent, skipped, duplicate or failed
        attempts: SMTP attempts made (0 when email was not attempted)
        email_sent: Whether the email went out
        in_app_created: Whether the in-app notification was stored
        job_id: Job the notification is about (single-job alerts only)
        score: Match score behind the notification, if any
        error: Error message when status is failed
    """

    user_id: str
    kind: str
    status: str  # "sent", "skipped", "duplicate", "failed"
    attempts: int = 0
    email_sent: bool = False
    in_app_created: bool = False
    job_id: Optional[str] = None
    score: Optional[int] = None
    error: Optional[str] = None

    def is_success(self) -> bool:
        return self.status == "sent"


@dataclass
class FanoutResult:
    """Summary of one notification batch.

    Attributes:
        kind: Batch kind (job_recommendation, weekly_digest, application_reminder)
        job_id: Posted job for job_recommendation batches
        evaluated: Seekers considered
        eligible: Seekers selected for delivery (after threshold and cap)
        results: Per-recipient outcomes, in delivery order
    """

    kind: str
    job_id: Optional[str] = None
    evaluated: int = 0
    eligible: int = 0
    results: List[NotificationResult] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def sent(self) -> int:
        return self.count("sent")

    @property
    def failed(self) -> int:
        return self.count("failed")

    @property
    def duplicates(self) -> int:
        return self.count("duplicate")

    @property
    def skipped(self) -> int:
        return self.count("skipped")

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "job_id": self.job_id,
            "evaluated": self.evaluated,
            "eligible": self.eligible,
            "sent": self.sent,
            "duplicates": self.duplicates,
            "skipped": self.skipped,
            "failed": self.failed,
        }
