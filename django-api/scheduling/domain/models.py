"""Domain models representing a schedule snapshot.

These are pure domain objects with no API input rules.
Django ORM models are in scheduling/models.py (persistence layer).

A Schedule exclusively owns its days, sessions, heats and assignments. Every
object is frozen; edits build new objects with ``dataclasses.replace``.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta

from scheduling.domain.errors import (
    AthleteNotFoundError,
    HeatNotFoundError,
    SessionNotFoundError,
)
from scheduling.domain.value_objects import AthleteStatus, Capacity, EventId, ScheduleId


def minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start) / timedelta(minutes=1))


@dataclass(frozen=True)
class Category:
    """Athlete grouping that heats do not mix."""

    category_id: str
    name: str


@dataclass(frozen=True)
class Wod:
    """A scored workout of the event."""

    wod_id: str
    name: str


@dataclass(frozen=True)
class ScheduledAthlete:
    """An athlete on the schedule's roster, with a per-schedule status."""

    athlete_id: str
    name: str
    category_id: str
    status: AthleteStatus


@dataclass(frozen=True)
class HeatAssignment:
    """Binds one athlete to one heat."""

    athlete_id: str
    category_id: str
    slot: int


@dataclass(frozen=True)
class Heat:
    """One concurrent run-group within a session."""

    heat_id: str
    heat_number: int
    category_id: str | None
    start_time: datetime
    duration: int
    capacity: Capacity
    assignments: tuple[HeatAssignment, ...] = ()

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(minutes=self.duration)

    @property
    def athlete_ids(self) -> tuple[str, ...]:
        return tuple(a.athlete_id for a in self.assignments)

    @property
    def is_full(self) -> bool:
        return len(self.assignments) >= self.capacity.value

    def free_slot(self) -> int:
        """Return the lowest lane number not taken by an assignment."""
        taken = {a.slot for a in self.assignments}
        slot = 1
        while slot in taken:
            slot += 1
        return slot


@dataclass(frozen=True)
class Session:
    """All heats for one WOD on one day."""

    session_id: str
    day_id: str
    wod_id: str
    category_ids: tuple[str, ...]
    start_time: datetime
    setup_time: int
    heat_duration: int
    break_duration: int
    athletes_per_heat: int
    heats: tuple[Heat, ...] = ()
    # Highest heat number ever issued; removed heat ids are never reused.
    last_heat_number: int = 0

    @property
    def next_heat_number(self) -> int:
        return max([self.last_heat_number, *(h.heat_number for h in self.heats)]) + 1

    @property
    def setup_start(self) -> datetime:
        return self.start_time - timedelta(minutes=self.setup_time)

    @property
    def end_time(self) -> datetime:
        if not self.heats:
            return self.start_time
        return max(heat.end_time for heat in self.heats)

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.setup_start, self.end_time)

    @property
    def athlete_ids(self) -> tuple[str, ...]:
        return tuple(athlete_id for heat in self.heats for athlete_id in heat.athlete_ids)

    def find_heat(self, heat_id: str) -> Heat:
        for heat in self.heats:
            if heat.heat_id == heat_id:
                return heat
        raise HeatNotFoundError(heat_id)

    def heat_of(self, athlete_id: str) -> Heat | None:
        for heat in self.heats:
            if athlete_id in heat.athlete_ids:
                return heat
        return None

    def replace_heat(self, heat: Heat) -> "Session":
        heats = tuple(heat if h.heat_id == heat.heat_id else h for h in self.heats)
        return replace(self, heats=heats)


@dataclass(frozen=True)
class Day:
    """One calendar day of the competition, budgeted in hours."""

    day_id: str
    date: date
    name: str
    start_time: datetime
    max_day_hours: float
    lunch_break_hours: float
    sessions: tuple[Session, ...] = ()

    @property
    def available_minutes(self) -> int:
        return int(round((self.max_day_hours - self.lunch_break_hours) * 60))

    @property
    def used_minutes(self) -> int:
        """Setup, heat and break minutes summed over the day's sessions."""
        return sum(session.duration_minutes for session in self.sessions)

    @property
    def closing_time(self) -> datetime:
        """Latest moment a session may end: day start plus the full day hours."""
        return self.start_time + timedelta(minutes=int(round(self.max_day_hours * 60)))


@dataclass(frozen=True)
class Schedule:
    """Root aggregate for one event's schedule at one version."""

    event_id: EventId
    schedule_id: ScheduleId
    version: int
    competition_mode: str
    days: tuple[Day, ...]
    athletes: tuple[ScheduledAthlete, ...]
    categories: tuple[Category, ...]
    wods: tuple[Wod, ...]
    created_at: datetime
    updated_at: datetime

    @property
    def sessions(self) -> tuple[Session, ...]:
        return tuple(session for day in self.days for session in day.sessions)

    def find_session(self, session_id: str) -> Session:
        for session in self.sessions:
            if session.session_id == session_id:
                return session
        raise SessionNotFoundError(session_id)

    def day_of(self, session: Session) -> Day:
        for day in self.days:
            if day.day_id == session.day_id:
                return day
        raise SessionNotFoundError(session.session_id)

    def find_athlete(self, athlete_id: str) -> ScheduledAthlete:
        for athlete in self.athletes:
            if athlete.athlete_id == athlete_id:
                return athlete
        raise AthleteNotFoundError(athlete_id)

    def has_athlete(self, athlete_id: str) -> bool:
        return any(a.athlete_id == athlete_id for a in self.athletes)

    def replace_session(self, session: Session) -> "Schedule":
        days = tuple(
            replace(
                day,
                sessions=tuple(
                    session if s.session_id == session.session_id else s for s in day.sessions
                ),
            )
            for day in self.days
        )
        return replace(self, days=days)

    def replace_athlete(self, athlete: ScheduledAthlete) -> "Schedule":
        if not self.has_athlete(athlete.athlete_id):
            return replace(self, athletes=self.athletes + (athlete,))
        athletes = tuple(
            athlete if a.athlete_id == athlete.athlete_id else a for a in self.athletes
        )
        return replace(self, athletes=athletes)

    def sessions_for_wod(self, wod_id: str) -> tuple[Session, ...]:
        return tuple(s for s in self.sessions if s.wod_id == wod_id)
