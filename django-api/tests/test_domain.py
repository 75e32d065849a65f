"""Unit tests for domain primitives and the constraint model.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import date, time
from uuid import UUID

import pytest
from factories import generate_payload, make_constraints

from scheduling.domain import AthleteStatus, Capacity, EventId, ScheduleId
from scheduling.domain.constraints import AthleteSpec, ConstraintModel, WodSpec
from scheduling.domain.errors import ConfigurationError, ErrorCode, ScheduleNotFoundError


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        assert Capacity(8).value == 8

    def test_capacity_accepts_zero(self):
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Capacity(-1)


class TestIdentifiers:
    def test_schedule_id_from_string_valid_uuid(self):
        value = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
        assert ScheduleId.from_string(value).value == UUID(value)

    def test_schedule_id_from_string_invalid_uuid(self):
        with pytest.raises(ValueError):
            ScheduleId.from_string("not-a-uuid")

    def test_new_schedule_ids_are_unique(self):
        assert ScheduleId.new() != ScheduleId.new()

    def test_event_id_rejects_blank(self):
        with pytest.raises(ValueError):
            EventId("  ")


class TestAthleteStatus:
    @pytest.mark.parametrize("status", [AthleteStatus.WITHDRAWN, AthleteStatus.DISQUALIFIED])
    def test_terminal_statuses(self, status):
        assert status.is_terminal

    @pytest.mark.parametrize(
        "status",
        [AthleteStatus.PENDING_PAYMENT, AthleteStatus.READY, AthleteStatus.ACTIVE, AthleteStatus.INJURED],
    )
    def test_non_terminal_statuses(self, status):
        assert not status.is_terminal

    def test_only_ready_and_active_are_allocated(self):
        allocatable = {s for s in AthleteStatus if s.is_allocatable}
        assert allocatable == {AthleteStatus.READY, AthleteStatus.ACTIVE}


class TestDomainError:
    def test_str_includes_code(self):
        error = ScheduleNotFoundError("abc")
        assert str(error) == "SCHEDULE_NOT_FOUND: Schedule not found"
        assert error.code == ErrorCode.SCHEDULE_NOT_FOUND
        assert error.schedule_id == "abc"


class TestConstraintModelValidation:
    def test_valid_model_passes(self):
        make_constraints().validate()

    def test_requires_a_day(self):
        with pytest.raises(ConfigurationError):
            make_constraints(days=()).validate()

    def test_requires_a_wod(self):
        with pytest.raises(ConfigurationError):
            make_constraints(wods=()).validate()

    @pytest.mark.parametrize("per_heat", [0, -3])
    def test_rejects_non_positive_heat_capacity(self, per_heat):
        with pytest.raises(ConfigurationError, match="athletesPerHeat"):
            make_constraints(athletes_per_heat=per_heat).validate()

    def test_rejects_lunch_longer_than_day(self):
        with pytest.raises(ConfigurationError, match="lunchBreakHours"):
            make_constraints(max_day_hours=2, lunch_break_hours=2).validate()

    def test_rejects_negative_break(self):
        with pytest.raises(ConfigurationError, match="breakDuration"):
            make_constraints(break_duration=-5).validate()

    def test_rejects_wod_pinned_to_unknown_day(self):
        wods = (WodSpec(wod_id="grace", day_id="day-9"),)
        with pytest.raises(ConfigurationError, match="unknown day"):
            make_constraints(wods=wods).validate()

    def test_rejects_duplicate_wod_ids(self):
        wods = (WodSpec(wod_id="grace"), WodSpec(wod_id="grace"))
        with pytest.raises(ConfigurationError, match="Duplicate WOD"):
            make_constraints(wods=wods).validate()

    def test_rejects_athlete_in_unknown_category(self):
        model = make_constraints()
        athletes = model.athletes[:1] + (AthleteSpec(athlete_id="x", category_id="masters"),)
        with pytest.raises(ConfigurationError, match="unknown category"):
            model.with_athletes(athletes).validate()


class TestConstraintModelFromPayload:
    def test_parses_camel_case_body(self):
        model = ConstraintModel.from_payload(generate_payload())

        assert model.athletes_per_heat == 8
        assert model.max_day_hours == 10.0
        assert model.days[0].date == date(2025, 11, 17)
        assert model.days[0].start_time == time(8, 0)
        assert [w.wod_id for w in model.wods] == ["grace", "fran"]
        assert len(model.athletes) == 12
        assert model.athletes[0].athlete_id == "men-1"
        assert model.athletes[0].name == "Man 1"
        assert model.athletes[0].status == AthleteStatus.READY

    def test_applies_defaults(self):
        payload = generate_payload()
        for key in ("setupTime", "heatDuration", "breakDuration", "athletesPerHeat"):
            payload.pop(key)
        model = ConstraintModel.from_payload(payload)
        assert (model.setup_time, model.heat_duration, model.break_duration) == (10, 15, 5)
        assert model.athletes_per_heat == 8

    def test_reads_day_start_time(self):
        payload = generate_payload(
            days=[{"dayId": "d1", "date": "2025-11-17", "startTime": "07:30"}]
        )
        assert ConstraintModel.from_payload(payload).days[0].start_time == time(7, 30)

    def test_missing_field_raises_configuration_error(self):
        payload = generate_payload(days=[{"date": "2025-11-17"}])
        with pytest.raises(ConfigurationError):
            ConstraintModel.from_payload(payload)

    def test_bad_date_raises_configuration_error(self):
        payload = generate_payload(days=[{"dayId": "d1", "date": "17/11/2025"}])
        with pytest.raises(ConfigurationError):
            ConstraintModel.from_payload(payload)

    def test_rejects_post_registration_status(self):
        payload = generate_payload(
            athletes=[{"userId": "a", "categoryId": "men", "status": "active"}]
        )
        with pytest.raises(ConfigurationError):
            ConstraintModel.from_payload(payload)

    def test_rejects_non_object(self):
        with pytest.raises(ConfigurationError):
            ConstraintModel.from_payload(["days"])

    @pytest.mark.parametrize("key", ["days", "wods", "categories", "athletes"])
    def test_rejects_non_object_entries(self, key):
        payload = generate_payload(**{key: ["oops"]})
        with pytest.raises(ConfigurationError, match=f"{key} entries must be objects"):
            ConstraintModel.from_payload(payload)
