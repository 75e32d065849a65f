"""Constraint model builders shared by the test modules."""

from datetime import date

from scheduling.domain.constraints import (
    AthleteSpec,
    CategorySpec,
    ConstraintModel,
    DaySpec,
    WodSpec,
)

EVENT_ID = "evt-1762664019818"
DAY = date(2025, 11, 17)


def athletes(category_id: str, n: int, prefix: str | None = None) -> list[AthleteSpec]:
    prefix = prefix or category_id
    return [
        AthleteSpec(athlete_id=f"{prefix}-{i}", category_id=category_id, name=f"{prefix.title()} {i}")
        for i in range(1, n + 1)
    ]


def make_constraints(**overrides) -> ConstraintModel:
    """One day, WODs grace and fran, 9 men and 3 women, 8 per heat."""
    values = dict(
        days=(DaySpec(day_id="day-1", date=DAY, name="Competition Day 1"),),
        wods=(WodSpec(wod_id="grace", name="Grace"), WodSpec(wod_id="fran", name="Fran")),
        categories=(
            CategorySpec(category_id="men", name="Men's Intermediate"),
            CategorySpec(category_id="women", name="Women's Intermediate"),
        ),
        athletes=tuple(athletes("men", 9) + athletes("women", 3)),
        athletes_per_heat=8,
        setup_time=10,
        heat_duration=15,
        break_duration=5,
        max_day_hours=10,
        lunch_break_hours=1,
    )
    values.update(overrides)
    return ConstraintModel(**values)


def generate_payload(**overrides) -> dict:
    """The camelCase body organizers POST to generate a schedule."""
    payload = {
        "competitionMode": "HEATS",
        "maxDayHours": 10,
        "lunchBreakHours": 1,
        "athletesPerHeat": 8,
        "setupTime": 10,
        "heatDuration": 15,
        "breakDuration": 5,
        "wods": [
            {"wodId": "grace", "name": "Grace"},
            {"wodId": "fran", "name": "Fran"},
        ],
        "categories": [
            {"categoryId": "men", "name": "Men's Intermediate"},
            {"categoryId": "women", "name": "Women's Intermediate"},
        ],
        "athletes": [
            {"userId": f"men-{i}", "firstName": "Man", "lastName": str(i), "categoryId": "men"}
            for i in range(1, 10)
        ]
        + [
            {"userId": f"women-{i}", "firstName": "Woman", "lastName": str(i), "categoryId": "women"}
            for i in range(1, 4)
        ],
        "days": [
            {"dayId": "day-1", "date": "2025-11-17", "name": "Competition Day 1"},
        ],
    }
    payload.update(overrides)
    return payload
