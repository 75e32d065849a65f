"""Constraint model: the inputs to one scheduling run.

Pure data plus validation of its own shape. ``from_payload`` accepts the
camelCase request body organizers send when generating a schedule.
"""

from dataclasses import dataclass, replace
from datetime import date, time
from typing import Any, Self

from scheduling.domain.errors import ConfigurationError
from scheduling.domain.value_objects import AthleteStatus

DEFAULT_DAY_START = time(8, 0)
REGISTRATION_STATUSES = (AthleteStatus.PENDING_PAYMENT, AthleteStatus.READY)


@dataclass(frozen=True)
class DaySpec:
    day_id: str
    date: date
    name: str = ""
    start_time: time = DEFAULT_DAY_START


@dataclass(frozen=True)
class WodSpec:
    wod_id: str
    name: str = ""
    day_id: str | None = None
    heat_duration: int | None = None


@dataclass(frozen=True)
class CategorySpec:
    category_id: str
    name: str = ""


@dataclass(frozen=True)
class AthleteSpec:
    athlete_id: str
    category_id: str
    name: str = ""
    status: AthleteStatus = AthleteStatus.READY


@dataclass(frozen=True)
class ConstraintModel:
    """Everything the builder needs to lay out one event's schedule."""

    days: tuple[DaySpec, ...]
    wods: tuple[WodSpec, ...]
    categories: tuple[CategorySpec, ...]
    athletes: tuple[AthleteSpec, ...] = ()
    athletes_per_heat: int = 8
    setup_time: int = 10
    heat_duration: int = 15
    break_duration: int = 5
    max_day_hours: float = 10
    lunch_break_hours: float = 1
    competition_mode: str = "HEATS"

    def with_athletes(self, athletes) -> Self:
        return replace(self, athletes=tuple(athletes))

    def validate(self) -> None:
        """Raise ConfigurationError when the model cannot be scheduled."""
        if not self.days:
            raise ConfigurationError("At least one day is required")
        if not self.wods:
            raise ConfigurationError("At least one WOD is required")
        if self.athletes_per_heat <= 0:
            raise ConfigurationError("athletesPerHeat must be greater than zero")
        for name in ("setup_time", "heat_duration", "break_duration"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{_camel(name)} cannot be negative")
        if self.heat_duration == 0:
            raise ConfigurationError("heatDuration must be greater than zero")
        if self.max_day_hours <= 0 or self.max_day_hours > 24:
            raise ConfigurationError("maxDayHours must be between 0 and 24")
        if self.lunch_break_hours < 0 or self.lunch_break_hours >= self.max_day_hours:
            raise ConfigurationError("lunchBreakHours must be less than maxDayHours")

        _ensure_unique("day", [d.day_id for d in self.days])
        _ensure_unique("WOD", [w.wod_id for w in self.wods])
        _ensure_unique("category", [c.category_id for c in self.categories])
        _ensure_unique("athlete", [a.athlete_id for a in self.athletes])

        day_ids = {d.day_id for d in self.days}
        for wod in self.wods:
            if wod.day_id is not None and wod.day_id not in day_ids:
                raise ConfigurationError(f"WOD {wod.wod_id} is pinned to unknown day {wod.day_id}")
            if wod.heat_duration is not None and wod.heat_duration <= 0:
                raise ConfigurationError(f"WOD {wod.wod_id} heatDuration must be greater than zero")

        category_ids = {c.category_id for c in self.categories}
        for athlete in self.athletes:
            if athlete.category_id not in category_ids:
                raise ConfigurationError(
                    f"Athlete {athlete.athlete_id} is in unknown category {athlete.category_id}"
                )

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        """Build a model from a camelCase request body.

        Raises:
            ConfigurationError: If a field is missing or has the wrong shape.
        """
        if not isinstance(payload, dict):
            raise ConfigurationError("Constraint model must be an object")
        try:
            model = cls(
                days=tuple(_day(d) for d in _list(payload, "days")),
                wods=tuple(_wod(w) for w in _list(payload, "wods")),
                categories=tuple(_category(c) for c in _list(payload, "categories")),
                athletes=tuple(_athlete(a) for a in _list(payload, "athletes")),
                athletes_per_heat=int(payload.get("athletesPerHeat", 8)),
                setup_time=int(payload.get("setupTime", 10)),
                heat_duration=int(payload.get("heatDuration", 15)),
                break_duration=int(payload.get("breakDuration", 5)),
                max_day_hours=float(payload.get("maxDayHours", 10)),
                lunch_break_hours=float(payload.get("lunchBreakHours", 1)),
                competition_mode=str(payload.get("competitionMode", "HEATS")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Malformed constraint model: {exc}") from exc
        return model


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _ensure_unique(label: str, ids: list[str]) -> None:
    seen = set()
    for item in ids:
        if item in seen:
            raise ConfigurationError(f"Duplicate {label} id {item}")
        seen.add(item)


def _list(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = payload.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list")
    if not all(isinstance(item, dict) for item in value):
        raise ValueError(f"{key} entries must be objects")
    return value


def _day(raw: dict[str, Any]) -> DaySpec:
    start = raw.get("startTime")
    return DaySpec(
        day_id=str(raw["dayId"]),
        date=date.fromisoformat(raw["date"]),
        name=raw.get("name", ""),
        start_time=time.fromisoformat(start) if start else DEFAULT_DAY_START,
    )


def _wod(raw: dict[str, Any]) -> WodSpec:
    heat_duration = raw.get("heatDuration")
    return WodSpec(
        wod_id=str(raw["wodId"]),
        name=raw.get("name", ""),
        day_id=raw.get("dayId"),
        heat_duration=int(heat_duration) if heat_duration is not None else None,
    )


def _category(raw: dict[str, Any]) -> CategorySpec:
    return CategorySpec(category_id=str(raw["categoryId"]), name=raw.get("name", ""))


def _athlete(raw: dict[str, Any]) -> AthleteSpec:
    athlete_id = raw.get("athleteId") or raw["userId"]
    name = raw.get("name") or " ".join(
        part for part in (raw.get("firstName"), raw.get("lastName")) if part
    )
    status = AthleteStatus(raw.get("status", AthleteStatus.READY.value))
    if status not in REGISTRATION_STATUSES:
        raise ValueError(f"registration status must be pending_payment or ready, got {status.value}")
    return AthleteSpec(
        athlete_id=str(athlete_id),
        category_id=str(raw["categoryId"]),
        name=name,
        status=status,
    )
