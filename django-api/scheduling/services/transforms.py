"""Pure schedule transformations, one per edit operation.

Each function takes the current snapshot and an operation and returns the
candidate snapshot. Version numbers and timestamps are left to the schedule
service; structural consistency is checked afterwards by the validator.
"""

from dataclasses import replace
from datetime import UTC, timedelta

from scheduling.domain.errors import (
    AthleteAlreadyAssignedError,
    AthleteNotAssignedError,
    AthleteNotEligibleError,
    CapacityExceededError,
    ConfigurationError,
    HeatFullError,
    HeatNotEmptyError,
    InvalidStatusTransitionError,
)
from scheduling.domain.models import (
    Heat,
    HeatAssignment,
    Schedule,
    ScheduledAthlete,
    Session,
    minutes_between,
)
from scheduling.domain.operations import (
    AddHeat,
    AdjustSessionTime,
    MoveAthleteToHeat,
    RemoveHeat,
    SubstituteAthlete,
    SwapAthletes,
    UpdateAthleteStatus,
)
from scheduling.domain.value_objects import AthleteStatus, Capacity
from scheduling.services.allocator import heat_id_for


def update_athlete_status(schedule: Schedule, op: UpdateAthleteStatus) -> Schedule:
    athlete = schedule.find_athlete(op.athlete_id)
    if athlete.status.is_terminal and op.new_status != athlete.status:
        raise InvalidStatusTransitionError(
            athlete.athlete_id, athlete.status.value, op.new_status.value
        )
    return schedule.replace_athlete(replace(athlete, status=op.new_status))


def substitute_athlete(schedule: Schedule, op: SubstituteAthlete) -> Schedule:
    session = schedule.find_session(op.session_id)
    heat = session.heat_of(op.old_athlete_id)
    if heat is None:
        raise AthleteNotAssignedError(op.old_athlete_id, session.session_id)

    newcomer = schedule.find_athlete(op.new_athlete_id)
    if newcomer.status.is_terminal:
        raise AthleteNotEligibleError(newcomer.athlete_id, newcomer.status.value)
    for other in schedule.sessions_for_wod(session.wod_id):
        if newcomer.athlete_id in other.athlete_ids:
            raise AthleteAlreadyAssignedError(newcomer.athlete_id, other.session_id)

    assignments = tuple(
        HeatAssignment(newcomer.athlete_id, newcomer.category_id, a.slot)
        if a.athlete_id == op.old_athlete_id
        else a
        for a in heat.assignments
    )
    schedule = schedule.replace_session(
        session.replace_heat(replace(heat, assignments=assignments))
    )
    return schedule.replace_athlete(replace(newcomer, status=AthleteStatus.ACTIVE))


def swap_athletes(schedule: Schedule, op: SwapAthletes) -> Schedule:
    session = schedule.find_session(op.session_id)
    first = _assigned_active(schedule, session, op.athlete1_id)
    second = _assigned_active(schedule, session, op.athlete2_id)

    exchange = {first.athlete_id: second, second.athlete_id: first}
    heats = []
    for heat in session.heats:
        assignments = tuple(
            HeatAssignment(exchange[a.athlete_id].athlete_id, exchange[a.athlete_id].category_id, a.slot)
            if a.athlete_id in exchange
            else a
            for a in heat.assignments
        )
        heats.append(replace(heat, assignments=assignments))
    return schedule.replace_session(replace(session, heats=tuple(heats)))


def adjust_session_time(schedule: Schedule, op: AdjustSessionTime) -> Schedule:
    session = schedule.find_session(op.session_id)
    new_start = op.new_start_time
    if new_start.tzinfo is None:
        new_start = new_start.replace(tzinfo=UTC)
    delta = new_start - session.start_time
    heats = tuple(replace(heat, start_time=heat.start_time + delta) for heat in session.heats)
    candidate = schedule.replace_session(replace(session, start_time=new_start, heats=heats))
    _ensure_day_budget(candidate, session.day_id)
    return candidate


def move_athlete_to_heat(schedule: Schedule, op: MoveAthleteToHeat) -> Schedule:
    session = schedule.find_session(op.session_id)
    athlete = _assigned_active(schedule, session, op.athlete_id)
    source = session.heat_of(athlete.athlete_id)
    target = session.find_heat(op.target_heat_id)
    if target.heat_id == source.heat_id:
        raise AthleteAlreadyAssignedError(athlete.athlete_id, session.session_id)
    if target.is_full:
        raise HeatFullError(target.heat_id)

    source = replace(
        source,
        assignments=tuple(a for a in source.assignments if a.athlete_id != athlete.athlete_id),
    )
    target = replace(
        target,
        assignments=target.assignments
        + (HeatAssignment(athlete.athlete_id, athlete.category_id, target.free_slot()),),
    )
    session = session.replace_heat(source).replace_heat(target)
    return schedule.replace_session(session)


def add_heat(schedule: Schedule, op: AddHeat) -> Schedule:
    session = schedule.find_session(op.session_id)
    category_id = op.category_id or _default_category(session)
    if category_id is not None and category_id not in {c.category_id for c in schedule.categories}:
        raise ConfigurationError(f"Unknown category {category_id}")

    if session.heats:
        last = session.heats[-1]
        start = last.start_time + timedelta(minutes=session.heat_duration + session.break_duration)
    else:
        start = session.start_time
    number = session.next_heat_number

    heat = Heat(
        heat_id=heat_id_for(session.session_id, number),
        heat_number=number,
        category_id=category_id,
        start_time=start,
        duration=session.heat_duration,
        capacity=Capacity(session.athletes_per_heat),
    )
    category_ids = session.category_ids
    if category_id is not None and category_id not in category_ids:
        category_ids = category_ids + (category_id,)
    candidate = schedule.replace_session(
        replace(
            session,
            category_ids=category_ids,
            heats=session.heats + (heat,),
            last_heat_number=number,
        )
    )
    _ensure_day_budget(candidate, session.day_id)
    return candidate


def remove_heat(schedule: Schedule, op: RemoveHeat) -> Schedule:
    """Delete a heat; with ``force_remove`` its athletes are left unassigned."""
    session = schedule.find_session(op.session_id)
    heat = session.find_heat(op.heat_id)
    if heat.assignments and not op.force_remove:
        raise HeatNotEmptyError(heat.heat_id, len(heat.assignments))
    heats = tuple(h for h in session.heats if h.heat_id != heat.heat_id)
    return schedule.replace_session(replace(session, heats=heats))


TRANSFORMS = {
    UpdateAthleteStatus: update_athlete_status,
    SubstituteAthlete: substitute_athlete,
    SwapAthletes: swap_athletes,
    AdjustSessionTime: adjust_session_time,
    MoveAthleteToHeat: move_athlete_to_heat,
    AddHeat: add_heat,
    RemoveHeat: remove_heat,
}


def apply_operation(schedule: Schedule, operation) -> Schedule:
    return TRANSFORMS[type(operation)](schedule, operation)


def _assigned_active(schedule: Schedule, session: Session, athlete_id: str) -> ScheduledAthlete:
    if session.heat_of(athlete_id) is None:
        raise AthleteNotAssignedError(athlete_id, session.session_id)
    athlete = schedule.find_athlete(athlete_id)
    if athlete.status != AthleteStatus.ACTIVE:
        raise AthleteNotEligibleError(athlete_id, athlete.status.value)
    return athlete


def _default_category(session: Session) -> str | None:
    if session.heats:
        return session.heats[-1].category_id
    return session.category_ids[0] if session.category_ids else None


def _ensure_day_budget(schedule: Schedule, day_id: str) -> None:
    """Reject a candidate whose day no longer fits its hours or opening window."""
    day = next(d for d in schedule.days if d.day_id == day_id)
    if day.used_minutes > day.available_minutes:
        raise CapacityExceededError(day_id, day.used_minutes - day.available_minutes)
    for session in day.sessions:
        if session.setup_start < day.start_time:
            raise CapacityExceededError(day_id, minutes_between(session.setup_start, day.start_time))
        if session.end_time > day.closing_time:
            raise CapacityExceededError(day_id, minutes_between(day.closing_time, session.end_time))
