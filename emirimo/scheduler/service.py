"""Scheduler service for the weekly digest and application reminders."""

import threading
from datetime import datetime
from typing import Callable, Dict, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler

from emirimo.config.models import ScheduleConfig
from emirimo.logging import get_logger
from emirimo.logging.context import log_context
from emirimo.utils.cron import crontab_trigger

logger = get_logger(__name__, component="scheduler")

DIGEST_JOB_ID = "weekly-digest"
REMINDER_JOB_ID = "application-reminders"

# Batches may start up to an hour late (e.g. after a restart) and still run
MISFIRE_GRACE_SECONDS = 3600


class SchedulerService:
    """
    Wraps APScheduler to run notification batches on cron schedules.

    Uses BackgroundScheduler so the main thread stays free to handle
    signals and coordinate shutdown.
    """

    def __init__(
        self,
        schedule_config: ScheduleConfig,
        digest_callable: Callable[[], object],
        reminder_callable: Callable[[], object],
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the scheduler service.

        Args:
            schedule_config: Cron expressions, timezone and enabled flags
            digest_callable: Runs one weekly digest batch
            reminder_callable: Runs one application reminder batch
            shutdown_event: Optional event set on shutdown for coordination
        """
        self.schedule_config = schedule_config
        self.timezone = ZoneInfo(schedule_config.timezone)
        self.shutdown_event = shutdown_event
        self._callables: Dict[str, Callable[[], object]] = {
            DIGEST_JOB_ID: digest_callable,
            REMINDER_JOB_ID: reminder_callable,
        }

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": MISFIRE_GRACE_SECONDS,
            },
            timezone=self.timezone,
        )

    def start(self) -> None:
        """Register the enabled batches and start the scheduler."""
        jobs = [
            (
                DIGEST_JOB_ID,
                "Weekly job digest",
                self.schedule_config.digest_enabled,
                self.schedule_config.digest_cron,
            ),
            (
                REMINDER_JOB_ID,
                "Application reminders",
                self.schedule_config.reminder_enabled,
                self.schedule_config.reminder_cron,
            ),
        ]

        for job_id, name, enabled, cron in jobs:
            if not enabled:
                logger.info(
                    f"Batch disabled: {name}",
                    extra={"event": "scheduler.job.disabled", "job_name": job_id},
                )
                continue

            self.scheduler.add_job(
                func=self._run_batch,
                args=[job_id],
                trigger=crontab_trigger(cron, self.timezone),
                id=job_id,
                name=name,
                replace_existing=True,
            )

        self.scheduler.start()

        logger.info(
            "Scheduler started",
            extra={
                "event": "scheduler.started",
                "timezone": self.schedule_config.timezone,
                "jobs": [job.id for job in self.scheduler.get_jobs()],
            },
        )

    def _run_batch(self, job_id: str) -> None:
        """Run one batch; errors are logged so the scheduler keeps running."""
        with log_context(scheduled_job=job_id):
            logger.info(f"Running scheduled batch {job_id}", extra={"event": "scheduler.job.started"})
            try:
                self._callables[job_id]()
            except Exception as e:
                logger.error(
                    f"Scheduled batch {job_id} failed: {e}",
                    exc_info=True,
                    extra={"event": "scheduler.job.failed", "error_type": type(e).__name__},
                )
                return
            logger.info(f"Scheduled batch {job_id} finished", extra={"event": "scheduler.job.finished"})

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown the scheduler gracefully.

        Args:
            wait: If True, wait for running batches to complete before returning
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def trigger_now(self, job_id: str) -> None:
        """Run a batch synchronously in the current thread."""
        if job_id not in self._callables:
            raise KeyError(f"Unknown scheduled job: {job_id}")

        logger.info(
            f"Triggering immediate run of {job_id}",
            extra={"event": "scheduler.trigger_now", "job_name": job_id},
        )
        self._run_batch(job_id)

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self, job_id: str) -> Optional[datetime]:
        """Next fire time of a registered batch, or None if not scheduled."""
        job = self.scheduler.get_job(job_id)
        return job.next_run_time if job else None
