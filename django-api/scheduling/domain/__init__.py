from scheduling.domain.models import (
    Category,
    Day,
    Heat,
    HeatAssignment,
    Schedule,
    ScheduledAthlete,
    Session,
    Wod,
)
from scheduling.domain.value_objects import (
    AthleteStatus,
    Capacity,
    ChangeType,
    EventId,
    ScheduleId,
)

__all__ = [
    "Schedule",
    "Day",
    "Session",
    "Heat",
    "HeatAssignment",
    "ScheduledAthlete",
    "Category",
    "Wod",
    "EventId",
    "ScheduleId",
    "Capacity",
    "AthleteStatus",
    "ChangeType",
]
