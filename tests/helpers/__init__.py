"""Test helper utilities for eMirimo tests."""

from .factories import (
    FakeAlertStore,
    FakeJobStore,
    FakeNotificationStore,
    FakeProfileStore,
    make_job,
    make_seeker,
)

__all__ = [
    "make_seeker",
    "make_job",
    "FakeProfileStore",
    "FakeJobStore",
    "FakeNotificationStore",
    "FakeAlertStore",
]
