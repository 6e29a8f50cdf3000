"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    notifications = config_dict.get("notifications") or {}
    if isinstance(notifications, dict):
        threshold = notifications.get("threshold")
        if isinstance(threshold, int) and threshold < 40:
            warning_messages.append(
                f"Low notifications.threshold ({threshold}) will email seekers about poor matches"
            )

        max_recipients = notifications.get("max_recipients")
        if isinstance(max_recipients, int) and max_recipients > 200:
            warning_messages.append(
                f"Large notifications.max_recipients ({max_recipients}) may trigger SMTP rate limits"
            )

    matching = config_dict.get("matching") or {}
    if isinstance(matching, dict):
        max_workers = matching.get("max_workers")
        if isinstance(max_workers, int) and max_workers > 8:
            warning_messages.append(
                f"matching.max_workers ({max_workers}) rarely helps; scoring is CPU-light"
            )

    schedule = config_dict.get("schedule") or {}
    if isinstance(schedule, dict):
        if schedule.get("digest_enabled") is False and schedule.get("reminder_enabled") is False:
            warning_messages.append("All scheduled batches are disabled")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
