"""Schedule builder: lays out every day, WOD and category into heats.

Generation is all-or-nothing. A day that does not fit its hours budget
aborts the whole build; athletes are never silently dropped.
"""

import logging
from datetime import UTC, datetime, timedelta

from scheduling.domain.constraints import ConstraintModel, DaySpec, WodSpec
from scheduling.domain.errors import CapacityExceededError, ValidationFailure
from scheduling.domain.models import (
    Category,
    Day,
    Heat,
    Schedule,
    ScheduledAthlete,
    Session,
    Wod,
)
from scheduling.domain.value_objects import AthleteStatus, EventId, ScheduleId
from scheduling.services.allocator import allocate_heats
from scheduling.services.validator import validate_schedule

logger = logging.getLogger(__name__)


def session_id_for(day_id: str, wod_id: str) -> str:
    return f"{day_id}:{wod_id}"


def distribute_wods(constraints: ConstraintModel) -> dict[str, list[WodSpec]]:
    """Assign WODs to days: pinned WODs keep their day, the rest go round-robin."""
    by_day: dict[str, list[WodSpec]] = {day.day_id: [] for day in constraints.days}
    unpinned = 0
    for wod in constraints.wods:
        if wod.day_id is not None:
            by_day[wod.day_id].append(wod)
            continue
        day = constraints.days[unpinned % len(constraints.days)]
        by_day[day.day_id].append(wod)
        unpinned += 1
    return by_day


def build_schedule(
    event_id: str,
    constraints: ConstraintModel,
    *,
    schedule_id: ScheduleId | None = None,
    now: datetime | None = None,
) -> Schedule:
    """Generate version 1 of a schedule from a constraint model.

    Raises:
        ConfigurationError: If the constraint model is malformed.
        CapacityExceededError: If any day's sessions exceed its budget.
        ValidationFailure: If the generated schedule is inconsistent.
    """
    constraints.validate()
    now = now or datetime.now(UTC)

    roster = [
        ScheduledAthlete(
            athlete_id=a.athlete_id,
            name=a.name,
            category_id=a.category_id,
            status=a.status,
        )
        for a in constraints.athletes
    ]
    eligible = [a for a in roster if a.status.is_allocatable]

    wods_by_day = distribute_wods(constraints)
    days = tuple(
        _build_day(day_spec, wods_by_day[day_spec.day_id], constraints, eligible)
        for day_spec in constraints.days
    )

    allocated = {
        athlete_id
        for day in days
        for session in day.sessions
        for athlete_id in session.athlete_ids
    }
    athletes = tuple(
        ScheduledAthlete(a.athlete_id, a.name, a.category_id, AthleteStatus.ACTIVE)
        if a.athlete_id in allocated
        else a
        for a in roster
    )

    schedule = Schedule(
        event_id=EventId(event_id),
        schedule_id=schedule_id or ScheduleId.new(),
        version=1,
        competition_mode=constraints.competition_mode,
        days=days,
        athletes=athletes,
        categories=tuple(Category(c.category_id, c.name) for c in constraints.categories),
        wods=tuple(Wod(w.wod_id, w.name) for w in constraints.wods),
        created_at=now,
        updated_at=now,
    )

    result = validate_schedule(schedule)
    if not result.valid:
        raise ValidationFailure(result.issues)

    logger.info(
        "Built schedule %s for event %s: %d sessions, %d heats",
        schedule.schedule_id,
        event_id,
        result.statistics["sessions"],
        result.statistics["heats"],
    )
    return schedule


def _build_day(
    spec: DaySpec,
    wods: list[WodSpec],
    constraints: ConstraintModel,
    eligible: list[ScheduledAthlete],
) -> Day:
    day_start = datetime.combine(spec.date, spec.start_time, tzinfo=UTC)
    cursor = day_start
    sessions = []

    for wod in wods:
        session = _build_session(spec.day_id, wod, constraints, eligible, cursor)
        if session is None:
            logger.info("WOD %s on day %s has no eligible athletes", wod.wod_id, spec.day_id)
            continue
        sessions.append(session)
        cursor = session.end_time

    day = Day(
        day_id=spec.day_id,
        date=spec.date,
        name=spec.name,
        start_time=day_start,
        max_day_hours=constraints.max_day_hours,
        lunch_break_hours=constraints.lunch_break_hours,
        sessions=tuple(sessions),
    )
    if day.used_minutes > day.available_minutes:
        raise CapacityExceededError(spec.day_id, day.used_minutes - day.available_minutes)
    return day


def _build_session(
    day_id: str,
    wod: WodSpec,
    constraints: ConstraintModel,
    eligible: list[ScheduledAthlete],
    setup_start: datetime,
) -> Session | None:
    session_id = session_id_for(day_id, wod.wod_id)
    heat_duration = wod.heat_duration or constraints.heat_duration
    start = setup_start + timedelta(minutes=constraints.setup_time)
    spacing = timedelta(minutes=heat_duration + constraints.break_duration)

    heats: list[Heat] = []
    category_ids = []
    for category in constraints.categories:
        athletes = [a for a in eligible if a.category_id == category.category_id]
        category_heats = allocate_heats(
            session_id,
            category.category_id,
            athletes,
            constraints.athletes_per_heat,
            first_number=len(heats) + 1,
            first_start=start + spacing * len(heats),
            heat_duration=heat_duration,
            break_duration=constraints.break_duration,
        )
        if category_heats:
            category_ids.append(category.category_id)
            heats.extend(category_heats)

    if not heats:
        return None

    return Session(
        session_id=session_id,
        day_id=day_id,
        wod_id=wod.wod_id,
        category_ids=tuple(category_ids),
        start_time=start,
        setup_time=constraints.setup_time,
        heat_duration=heat_duration,
        break_duration=constraints.break_duration,
        athletes_per_heat=constraints.athletes_per_heat,
        heats=tuple(heats),
        last_heat_number=len(heats),
    )
