"""Cron scheduling for notification batches."""

from .service import DIGEST_JOB_ID, REMINDER_JOB_ID, SchedulerService

__all__ = ["SchedulerService", "DIGEST_JOB_ID", "REMINDER_JOB_ID"]
