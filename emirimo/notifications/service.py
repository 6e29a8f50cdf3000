"""Notification fan-out for job recommendations.

NotificationService turns matches into emails, in-app notifications and
real-time pushes:
- notify_job_posted: alert the best-matching seekers about a new job
- send_weekly_digest: top jobs of the week for every active seeker
- send_application_reminders: nudge seekers who have not signed in lately

Every batch isolates per-seeker failures: one bad profile or one SMTP
outage for a recipient is logged and counted, and the batch continues.
"""

import logging
import time
from datetime import datetime, timedelta
from email.message import EmailMessage
from typing import Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from emirimo.config.environment import EnvironmentConfig
from emirimo.config.models import EmailConfig, NotificationsConfig
from emirimo.domain.models import JobPosting, SeekerProfile
from emirimo.logging import get_logger
from emirimo.logging.context import log_context
from emirimo.matching.engine import MatchEngine
from emirimo.matching.models import JobRecommendation, MatchResult
from emirimo.matching.ranker import RecommendationRanker
from emirimo.matching.utils import build_digest_payload, build_recommendation_payload
from emirimo.utils.timestamps import utc_now

from .models import FanoutResult, NotificationResult, SMTPDeliveryError
from .notifier import NullNotifier
from .payloads import (
    build_digest_notification,
    build_realtime_payload,
    build_recommendation_notification,
)
from .smtp_client import SMTPClient, build_sender_address, normalize_recipient
from .templates import (
    APPLICATION_REMINDER,
    JOB_RECOMMENDATION,
    WEEKLY_DIGEST,
    TemplateRenderer,
)

logger = get_logger(__name__, component="notification")

MAX_RETRY_DELAY = 60.0


class NotificationService:
    """Sends recommendation emails and in-app notifications.

    Stores, the match engine, the notifier and the SMTP client are all
    injected; nothing here holds a database session between calls.
    """

    def __init__(
        self,
        profile_store,
        job_store,
        notification_store,
        alert_store,
        env_config: Optional[EnvironmentConfig] = None,
        notifications_config: Optional[NotificationsConfig] = None,
        email_config: Optional[EmailConfig] = None,
        engine: Optional[MatchEngine] = None,
        ranker: Optional[RecommendationRanker] = None,
        notifier=None,
        template_renderer: Optional[TemplateRenderer] = None,
        smtp_client: Optional[SMTPClient] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            profile_store: Source of seeker profiles
            job_store: Source of job postings
            notification_store: Where in-app notifications are written
            alert_store: Dedupe store for job recommendation alerts
            env_config: SMTP settings (email is skipped when not configured)
            notifications_config: Threshold, caps and batch sizes
            email_config: TLS and retry settings
            engine: MatchEngine used for single-job fan-out
            ranker: Ranker used for digests and reminders
            notifier: Real-time notifier (NullNotifier if None)
            template_renderer: Email template renderer (creates default if None)
            smtp_client: SMTP client (creates default if None)
            sleep: Delay function between SMTP retries
            logger_instance: Logger instance (uses module logger if None)
        """
        self.profile_store = profile_store
        self.job_store = job_store
        self.notification_store = notification_store
        self.alert_store = alert_store
        self.env_config = env_config or EnvironmentConfig()
        self.config = notifications_config or NotificationsConfig()
        self.email_config = email_config or EmailConfig()
        self.engine = engine or MatchEngine()
        self.ranker = ranker or RecommendationRanker(profile_store, job_store, self.engine)
        self.notifier = notifier or NullNotifier()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.smtp_client = smtp_client or SMTPClient()
        self.sleep = sleep
        self.logger = logger_instance or logger

    def handle_job_event(self, event) -> FanoutResult:
        """Event bus handler for JobPosted and JobActivated."""
        return self.notify_job_posted(event.job_id)

    def notify_job_posted(self, job_id: str) -> FanoutResult:
        """Alert the best-matching active seekers about one job.

        Steps:
        1. Load the job (missing or inactive -> empty result)
        2. Score every active seeker that has an email address
        3. Keep scores at or above the threshold, best first
        4. Cap at max_recipients
        5. Email, store an in-app notification, push it, record the alert

        Args:
            job_id: Posted or re-activated job

        Returns:
            FanoutResult with per-recipient outcomes
        """
        fanout = FanoutResult(kind=JOB_RECOMMENDATION, job_id=job_id)

        with log_context(job_id=job_id, batch_id=uuid4().hex[:12]):
            job = self.job_store.get_by_id(job_id)
            if job is None or not job.is_active:
                self.logger.info(
                    f"Skipping fan-out for job {job_id}: not found or inactive",
                    extra={"event": "fanout.job.skipped", "found": job is not None},
                )
                return fanout

            seekers = [s for s in self.profile_store.list_active_seekers() if s.email]
            fanout.evaluated = len(seekers)

            # Step 2-3: score and filter, isolating per-seeker failures
            matches: List[Tuple[SeekerProfile, MatchResult]] = []
            for seeker in seekers:
                try:
                    result = self.engine.evaluate(seeker, job)
                except Exception as e:
                    self.logger.warning(
                        f"Skipping seeker {seeker.id}: scoring failed: {e}",
                        exc_info=True,
                        extra={"event": "fanout.evaluation.failed", "seeker_id": seeker.id},
                    )
                    continue
                if result.score >= self.config.threshold:
                    matches.append((seeker, result))

            # Step 4: stable sort keeps store order among equal scores
            matches.sort(key=lambda pair: pair[1].score, reverse=True)
            recipients = matches[: self.config.max_recipients]
            fanout.eligible = len(recipients)

            self.logger.info(
                f"Job {job_id}: {len(matches)} of {len(seekers)} seekers at or above "
                f"{self.config.threshold}%, notifying {len(recipients)}",
                extra={
                    "event": "fanout.started",
                    "evaluated": len(seekers),
                    "matched": len(matches),
                    "recipients": len(recipients),
                },
            )

            # Step 5
            for seeker, result in recipients:
                fanout.results.append(self._notify_job_match(seeker, job, result))

            self._log_summary(fanout)
            return fanout

    def send_weekly_digest(self) -> FanoutResult:
        """Email every active seeker their top jobs of the week."""
        fanout = FanoutResult(kind=WEEKLY_DIGEST)

        with log_context(batch_id=uuid4().hex[:12], batch=WEEKLY_DIGEST):
            seekers = [s for s in self.profile_store.list_active_seekers() if s.email]
            jobs = self.job_store.list_active()
            fanout.evaluated = len(seekers)

            for seeker in seekers:
                fanout.results.append(
                    self._send_digest(seeker, jobs, self.config.digest_size, WEEKLY_DIGEST)
                )

            fanout.eligible = fanout.count("sent") + fanout.count("failed")
            self._log_summary(fanout)
            return fanout

    def send_application_reminders(self, now: Optional[datetime] = None) -> FanoutResult:
        """Remind seekers inactive for reminder_inactive_days of their top jobs.

        Args:
            now: Reference time for the inactivity cutoff (defaults to UTC now)
        """
        fanout = FanoutResult(kind=APPLICATION_REMINDER)
        now = now or utc_now()
        since = now - timedelta(days=self.config.reminder_inactive_days)

        with log_context(batch_id=uuid4().hex[:12], batch=APPLICATION_REMINDER):
            seekers = [s for s in self.profile_store.list_inactive_seekers(since) if s.email]
            jobs = self.job_store.list_active()
            fanout.evaluated = len(seekers)

            for seeker in seekers:
                fanout.results.append(
                    self._send_digest(seeker, jobs, self.config.reminder_size, APPLICATION_REMINDER)
                )

            fanout.eligible = fanout.count("sent") + fanout.count("failed")
            self._log_summary(fanout)
            return fanout

    def _notify_job_match(
        self, seeker: SeekerProfile, job: JobPosting, result: MatchResult
    ) -> NotificationResult:
        """Deliver one job recommendation; never raises."""
        outcome = NotificationResult(
            user_id=seeker.id,
            kind=JOB_RECOMMENDATION,
            status="failed",
            job_id=job.id,
            score=result.score,
        )

        with log_context(seeker_id=seeker.id):
            try:
                if self.alert_store.has_been_sent(seeker.id, job.id):
                    self.logger.info(
                        f"Skipping seeker {seeker.id}: already alerted about job {job.id}",
                        extra={"event": "fanout.recipient.duplicate"},
                    )
                    outcome.status = "duplicate"
                    return outcome

                context = build_recommendation_payload(seeker, job, result)
                outcome.attempts, outcome.email_sent = self._deliver_email(
                    JOB_RECOMMENDATION, context, seeker.email
                )

                notification = self.notification_store.create(
                    build_recommendation_notification(seeker, job, result)
                )
                outcome.in_app_created = True
                self._push(seeker.id, notification)

                self.alert_store.record_alert(seeker.id, job.id, result.score, utc_now())
                outcome.status = "sent"

            except Exception as e:
                outcome.error = str(e)
                self.logger.error(
                    f"Failed to notify seeker {seeker.id} about job {job.id}: {e}",
                    exc_info=True,
                    extra={
                        "event": "fanout.recipient.failed",
                        "error_type": type(e).__name__,
                        "attempts": outcome.attempts,
                    },
                )

        return outcome

    def _send_digest(
        self, seeker: SeekerProfile, jobs: List[JobPosting], size: int, kind: str
    ) -> NotificationResult:
        """Deliver a multi-job email (digest or reminder); never raises."""
        outcome = NotificationResult(user_id=seeker.id, kind=kind, status="failed")

        with log_context(seeker_id=seeker.id):
            try:
                recommendations: List[JobRecommendation] = self.ranker.rank_jobs(seeker, jobs, size)
                if not recommendations:
                    self.logger.debug(
                        f"No {kind} for seeker {seeker.id}: no matching jobs",
                        extra={"event": "fanout.recipient.skipped"},
                    )
                    outcome.status = "skipped"
                    return outcome

                outcome.score = recommendations[0].score
                context = build_digest_payload(seeker, recommendations)
                outcome.attempts, outcome.email_sent = self._deliver_email(kind, context, seeker.email)

                notification = self.notification_store.create(
                    build_digest_notification(
                        seeker, recommendations, reminder=kind == APPLICATION_REMINDER
                    )
                )
                outcome.in_app_created = True
                self._push(seeker.id, notification)
                outcome.status = "sent"

            except Exception as e:
                outcome.error = str(e)
                self.logger.error(
                    f"Failed to send {kind} to seeker {seeker.id}: {e}",
                    exc_info=True,
                    extra={
                        "event": "fanout.recipient.failed",
                        "error_type": type(e).__name__,
                        "attempts": outcome.attempts,
                    },
                )

        return outcome

    def _deliver_email(self, kind: str, context: Dict, to_address: str) -> Tuple[int, bool]:
        """Render and send one email with retry/backoff.

        Returns:
            (attempts, sent); (0, False) when SMTP is not configured

        Raises:
            NotificationTemplateError: If rendering fails
            ValueError: If the recipient address is invalid
            SMTPDeliveryError: If every attempt fails
        """
        if not self.env_config.email_enabled:
            self.logger.debug(
                f"Email delivery disabled, skipping {kind} email",
                extra={"event": "notification.email.disabled"},
            )
            return 0, False

        rendered = self.template_renderer.render(kind, context)

        message = EmailMessage()
        message["Subject"] = rendered["subject"]
        message["From"] = build_sender_address(self.env_config)
        message["To"] = normalize_recipient(to_address)
        message.set_content(rendered["text_body"])

        max_attempts = self.email_config.max_retries + 1
        last_error: Optional[SMTPDeliveryError] = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = self.email_config.retry_initial_delay * (
                    self.email_config.retry_backoff_multiplier ** (attempt - 2)
                )
                delay = min(delay, MAX_RETRY_DELAY)
                self.logger.warning(
                    f"Retrying {kind} email (attempt {attempt}/{max_attempts}) after {delay:.1f}s delay",
                    extra={"event": "notification.send.attempt", "attempt": attempt},
                )
                self.sleep(delay)

            try:
                self.smtp_client.send(message, self.env_config, self.email_config.use_tls)
                self.logger.info(
                    f"Sent {kind} email to {message['To']} (attempts: {attempt})",
                    extra={"event": "notification.send.success", "attempt": attempt},
                )
                return attempt, True

            except SMTPDeliveryError as e:
                last_error = e
                self.logger.warning(
                    f"SMTP delivery failed (attempt {attempt}/{max_attempts}): {e}",
                    extra={
                        "event": "notification.send.failure",
                        "attempt": attempt,
                        "retry_remaining": attempt < max_attempts,
                    },
                )

        raise SMTPDeliveryError(
            f"Delivery failed after {max_attempts} attempts: {last_error}"
        ) from last_error

    def _push(self, user_id: str, notification) -> None:
        """Push to the real-time notifier; a push failure never fails delivery."""
        try:
            self.notifier.send(user_id, build_realtime_payload(notification))
        except Exception as e:
            self.logger.warning(
                f"Real-time push failed for user {user_id}: {e}",
                extra={"event": "notification.push.failed", "error_type": type(e).__name__},
            )

    def _log_summary(self, fanout: FanoutResult) -> None:
        self.logger.info(
            f"Notification batch complete: {fanout.sent} sent, {fanout.skipped} skipped, "
            f"{fanout.duplicates} duplicates, {fanout.failed} failed "
            f"(total: {len(fanout.results)})",
            extra={"event": "fanout.completed", **fanout.to_dict()},
        )
