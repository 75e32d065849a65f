"""Heat allocator: greedy, deterministic bin-fill of one category's roster."""

from datetime import datetime, timedelta

from scheduling.domain.errors import ConfigurationError
from scheduling.domain.models import Heat, HeatAssignment, ScheduledAthlete
from scheduling.domain.value_objects import Capacity


def heat_id_for(session_id: str, heat_number: int) -> str:
    return f"{session_id}:h{heat_number}"


def allocate_heats(
    session_id: str,
    category_id: str,
    athletes: list[ScheduledAthlete],
    capacity: int,
    *,
    first_number: int,
    first_start: datetime,
    heat_duration: int,
    break_duration: int,
) -> tuple[Heat, ...]:
    """Split a category's athletes into heats in input order.

    Each heat is filled to ``capacity`` before the next one opens; the last
    heat may be partial. A category with no athletes produces no heats.
    Heats are numbered from ``first_number`` and spaced
    ``heat_duration + break_duration`` minutes apart from ``first_start``.

    Raises:
        ConfigurationError: If capacity is not positive.
    """
    if capacity <= 0:
        raise ConfigurationError("athletesPerHeat must be greater than zero")

    heats = []
    spacing = timedelta(minutes=heat_duration + break_duration)
    for index in range(0, len(athletes), capacity):
        chunk = athletes[index:index + capacity]
        number = first_number + len(heats)
        heats.append(
            Heat(
                heat_id=heat_id_for(session_id, number),
                heat_number=number,
                category_id=category_id,
                start_time=first_start + spacing * len(heats),
                duration=heat_duration,
                capacity=Capacity(capacity),
                assignments=tuple(
                    HeatAssignment(athlete_id=a.athlete_id, category_id=a.category_id, slot=lane)
                    for lane, a in enumerate(chunk, start=1)
                ),
            )
        )
    return tuple(heats)
