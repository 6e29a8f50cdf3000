"""Unit tests for the in-process event bus."""

from unittest.mock import Mock

from emirimo.events import EventBus, JobActivated, JobPosted


class TestEventBus:
    def test_publish_calls_handlers_in_subscription_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(JobPosted, lambda event: calls.append(("first", event.job_id)))
        bus.subscribe(JobPosted, lambda event: calls.append(("second", event.job_id)))

        errors = bus.publish(JobPosted(job_id="job-1"))

        assert errors == []
        assert calls == [("first", "job-1"), ("second", "job-1")]

    def test_handlers_are_keyed_by_event_class(self):
        bus = EventBus()
        posted = Mock()
        activated = Mock()
        bus.subscribe(JobPosted, posted)
        bus.subscribe(JobActivated, activated)

        event = JobActivated(job_id="job-1")
        bus.publish(event)

        posted.assert_not_called()
        activated.assert_called_once_with(event)

    def test_failing_handler_does_not_stop_others(self):
        bus = EventBus()
        failure = RuntimeError("smtp down")
        later = Mock()
        bus.subscribe(JobPosted, Mock(side_effect=failure))
        bus.subscribe(JobPosted, later)

        errors = bus.publish(JobPosted(job_id="job-1"))

        assert errors == [failure]
        later.assert_called_once()

    def test_publish_without_handlers(self):
        assert EventBus().publish(JobPosted(job_id="job-1")) == []

    def test_handlers_for_returns_copy(self):
        bus = EventBus()
        handler = Mock()
        bus.subscribe(JobPosted, handler)

        handlers = bus.handlers_for(JobPosted)
        handlers.clear()

        assert bus.handlers_for(JobPosted) == [handler]


def test_events_record_occurrence_time():
    event = JobPosted(job_id="job-1")
    assert event.occurred_at.tzinfo is not None
