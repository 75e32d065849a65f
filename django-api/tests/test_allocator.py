"""Unit tests for the greedy heat allocator.

Run with: pytest tests/test_allocator.py -v
"""

from datetime import UTC, datetime, timedelta

import pytest

from scheduling.domain.errors import ConfigurationError
from scheduling.domain.models import ScheduledAthlete
from scheduling.domain.value_objects import AthleteStatus
from scheduling.services.allocator import allocate_heats, heat_id_for

START = datetime(2025, 11, 17, 8, 10, tzinfo=UTC)


def roster(n, category_id="men"):
    return [
        ScheduledAthlete(f"{category_id}-{i}", f"Athlete {i}", category_id, AthleteStatus.READY)
        for i in range(1, n + 1)
    ]


def allocate(athletes, capacity=8, first_number=1):
    return allocate_heats(
        "day-1:grace",
        "men",
        athletes,
        capacity,
        first_number=first_number,
        first_start=START,
        heat_duration=15,
        break_duration=5,
    )


class TestAllocateHeats:
    def test_nine_athletes_fill_one_heat_then_open_another(self):
        heats = allocate(roster(9))

        assert [len(h.assignments) for h in heats] == [8, 1]
        assert heats[1].athlete_ids == ("men-9",)

    def test_exact_multiple_leaves_no_partial_heat(self):
        heats = allocate(roster(16))
        assert [len(h.assignments) for h in heats] == [8, 8]

    def test_heat_count_is_ceiling_of_roster_over_capacity(self):
        assert len(allocate(roster(17), capacity=5)) == 4

    def test_empty_roster_produces_no_heats(self):
        assert allocate([]) == ()

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_non_positive_capacity_is_rejected(self, capacity):
        with pytest.raises(ConfigurationError):
            allocate(roster(3), capacity=capacity)

    def test_preserves_input_order(self):
        athletes = list(reversed(roster(4)))
        heats = allocate(athletes, capacity=3)
        assert heats[0].athlete_ids == ("men-4", "men-3", "men-2")
        assert heats[1].athlete_ids == ("men-1",)

    def test_lanes_number_from_one_per_heat(self):
        heats = allocate(roster(10))
        assert [a.slot for a in heats[0].assignments] == list(range(1, 9))
        assert [a.slot for a in heats[1].assignments] == [1, 2]

    def test_heats_are_spaced_by_duration_plus_break(self):
        heats = allocate(roster(20))
        assert [h.start_time for h in heats] == [
            START,
            START + timedelta(minutes=20),
            START + timedelta(minutes=40),
        ]
        assert heats[0].end_time == START + timedelta(minutes=15)

    def test_numbering_continues_from_first_number(self):
        heats = allocate(roster(3), first_number=3)
        assert heats[0].heat_number == 3
        assert heats[0].heat_id == heat_id_for("day-1:grace", 3) == "day-1:grace:h3"

    def test_is_deterministic(self):
        assert allocate(roster(11)) == allocate(roster(11))
