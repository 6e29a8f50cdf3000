"""Unit tests for job posting use cases."""

from unittest.mock import Mock

import pytest

from emirimo.events import EventBus, JobActivated, JobPosted
from emirimo.jobs import JobPostingService
from emirimo.persistence.exceptions import RecordNotFoundError
from tests.helpers import FakeJobStore, make_job


@pytest.fixture
def job_store():
    return FakeJobStore()


@pytest.fixture
def published():
    return []


@pytest.fixture
def service(job_store, published):
    bus = EventBus()
    bus.subscribe(JobPosted, published.append)
    bus.subscribe(JobActivated, published.append)
    return JobPostingService(job_store, bus)


class TestCreateJob:
    def test_new_active_job_publishes_job_posted(self, service, job_store, published):
        stored = service.create_job(make_job("job-1"))

        assert stored.id == "job-1"
        assert job_store.get_by_id("job-1") is not None
        assert [type(e) for e in published] == [JobPosted]
        assert published[0].job_id == "job-1"

    def test_inactive_job_does_not_publish(self, service, published):
        service.create_job(make_job("job-1", is_active=False))
        assert published == []

    def test_updating_existing_job_does_not_publish(self, service, published):
        service.create_job(make_job("job-1"))
        service.create_job(make_job("job-1", title="Senior Data Analyst"))

        assert len(published) == 1

    def test_publish_can_be_disabled(self, service, published):
        service.create_job(make_job("job-1"), publish=False)
        assert published == []

    def test_handler_failure_does_not_fail_creation(self, job_store):
        bus = EventBus()
        bus.subscribe(JobPosted, Mock(side_effect=RuntimeError("fan-out failed")))
        service = JobPostingService(job_store, bus)

        stored = service.create_job(make_job("job-1"))

        assert stored.id == "job-1"


class TestActivation:
    def test_activate_publishes_job_activated(self, service, job_store, published):
        job_store.upsert(make_job("job-1", is_active=False))

        job = service.activate_job("job-1")

        assert job.is_active
        assert [type(e) for e in published] == [JobActivated]

    def test_reactivating_active_job_publishes_again(self, service, job_store, published):
        job_store.upsert(make_job("job-1"))

        service.activate_job("job-1")
        service.activate_job("job-1")

        assert len(published) == 2

    def test_activate_missing_job_raises(self, service, published):
        with pytest.raises(RecordNotFoundError):
            service.activate_job("missing")
        assert published == []

    def test_deactivate(self, service, job_store, published):
        job_store.upsert(make_job("job-1"))

        service.deactivate_job("job-1")

        assert not job_store.get_by_id("job-1").is_active
        assert published == []
