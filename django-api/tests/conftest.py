"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from factories import EVENT_ID, athletes, make_constraints
from rest_framework.test import APIClient

from scheduling.domain.constraints import CategorySpec, ConstraintModel
from scheduling.services import ScheduleService
from scheduling.services.publisher import RecordingPublisher
from scheduling.stores import InMemoryRoster, InMemoryScheduleStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def constraints() -> ConstraintModel:
    return make_constraints()


@pytest.fixture
def clock():
    """Advances one minute per call so audit timestamps are ordered."""
    ticks = count()
    start = datetime(2025, 11, 1, 9, 0, tzinfo=UTC)
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture
def store() -> InMemoryScheduleStore:
    return InMemoryScheduleStore(timeout=1)


@pytest.fixture
def roster() -> InMemoryRoster:
    return InMemoryRoster(
        athletes={EVENT_ID: athletes("men", 9) + athletes("women", 3) + athletes("men", 2, "late")},
        categories={
            EVENT_ID: [
                CategorySpec("men", "Men's Intermediate"),
                CategorySpec("women", "Women's Intermediate"),
            ]
        },
    )


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def service(store, roster, publisher, clock) -> ScheduleService:
    return ScheduleService(store, roster, publisher, lock_timeout=1, clock=clock)


@pytest.fixture
def schedule(service, constraints):
    """Version 1 of the one-day, two-WOD scenario."""
    return service.generate(EVENT_ID, constraints, "organizer-1")
