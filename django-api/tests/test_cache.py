"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache
from factories import EVENT_ID, generate_payload
from rest_framework.test import APIClient

from scheduling.cache import event_key, invalidate, schedule_key
from scheduling.services.publisher import ScheduleChange, SignalPublisher
from scheduling.signals import schedule_committed


@pytest.fixture
def sid(api_client: APIClient) -> str:
    return api_client.post(f"/scheduler/{EVENT_ID}", generate_payload()).json()["scheduleId"]


class TestCacheKeys:
    def test_keys_are_scoped_by_event(self):
        assert schedule_key(EVENT_ID, "abc") == f"scheduler:{EVENT_ID}:abc"
        assert event_key(EVENT_ID) == f"scheduler:event:{EVENT_ID}"

    def test_invalidate_drops_detail_and_list(self):
        cache.set(schedule_key(EVENT_ID, "abc"), {"version": 1})
        cache.set(event_key(EVENT_ID), [])

        invalidate(EVENT_ID, "abc")

        assert cache.get(schedule_key(EVENT_ID, "abc")) is None
        assert cache.get(event_key(EVENT_ID)) is None


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on committed versions."""

    def test_detail_response_is_cached(self, api_client: APIClient, sid):
        """Reading a schedule stores its latest snapshot under the detail key."""
        api_client.get(f"/scheduler/{EVENT_ID}/{sid}")
        assert cache.get(schedule_key(EVENT_ID, sid))["version"] == 1

    def test_commit_invalidates_detail_cache(self, api_client: APIClient, sid):
        """An edit drops the cached snapshot so readers see the new version."""
        api_client.get(f"/scheduler/{EVENT_ID}/{sid}")

        api_client.post(f"/scheduler/{EVENT_ID}/{sid}/heats", {"sessionId": "day-1:grace"})

        assert cache.get(schedule_key(EVENT_ID, sid)) is None
        assert api_client.get(f"/scheduler/{EVENT_ID}/{sid}").json()["version"] == 2

    def test_generate_invalidates_event_list(self, api_client: APIClient, sid):
        """A new schedule drops the cached event listing."""
        assert len(api_client.get(f"/scheduler/{EVENT_ID}").json()) == 1

        api_client.post(f"/scheduler/{EVENT_ID}", generate_payload())

        assert cache.get(event_key(EVENT_ID)) is None
        assert len(api_client.get(f"/scheduler/{EVENT_ID}").json()) == 2

    def test_rejected_edit_keeps_cache(self, api_client: APIClient, sid):
        """Nothing is committed, so the cached snapshot stays valid."""
        api_client.get(f"/scheduler/{EVENT_ID}/{sid}")

        response = api_client.post(
            f"/scheduler/{EVENT_ID}/{sid}/heats/move",
            {"sessionId": "day-1:grace", "athleteId": "men-9", "targetHeatId": "day-1:grace:h1"},
        )

        assert response.status_code == 409
        assert cache.get(schedule_key(EVENT_ID, sid)) is not None


class TestSignalPublisher:
    def test_failing_receiver_does_not_raise(self, caplog):
        def broken(sender, change, **kwargs):
            raise RuntimeError("receiver down")

        schedule_committed.connect(broken)
        try:
            SignalPublisher().publish(ScheduleChange(EVENT_ID, "abc", "add_heat", 2))
        finally:
            schedule_committed.disconnect(broken)

        assert "receiver down" in caplog.text

    def test_publish_invalidates_cache(self):
        cache.set(schedule_key(EVENT_ID, "abc"), {"version": 1})

        SignalPublisher().publish(ScheduleChange(EVENT_ID, "abc", "add_heat", 2))

        assert cache.get(schedule_key(EVENT_ID, "abc")) is None
