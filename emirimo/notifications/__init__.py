"""Notification fan-out for job recommendations.

This module provides:
- NotificationService: job-posted alerts, weekly digests, application reminders
- Notifier implementations for real-time pushes (NullNotifier, InMemoryNotifier)
- TemplateRenderer: Jinja2 plain-text email templates
- SMTPClient: SMTP wrapper with TLS/SSL support
"""

from .models import (
    FanoutResult,
    NotificationError,
    NotificationResult,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .notifier import InMemoryNotifier, Notifier, NullNotifier
from .service import NotificationService
from .smtp_client import SMTPClient, build_sender_address, normalize_recipient
from .templates import TemplateRenderer

__all__ = [
    "NotificationService",
    "NotificationResult",
    "FanoutResult",
    "NotificationError",
    "NotificationTemplateError",
    "SMTPDeliveryError",
    "Notifier",
    "NullNotifier",
    "InMemoryNotifier",
    "TemplateRenderer",
    "SMTPClient",
    "build_sender_address",
    "normalize_recipient",
]
