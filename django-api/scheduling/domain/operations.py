"""Edit operations accepted by the schedule service.

Each variant is a frozen dataclass tagged with the change type it records in
the audit log. Request bodies are mapped onto exactly one of these at the
handler boundary.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, ClassVar

from scheduling.domain.value_objects import AthleteStatus, ChangeType


@dataclass(frozen=True)
class UpdateAthleteStatus:
    change_type: ClassVar[ChangeType] = ChangeType.UPDATE_ATHLETE_STATUS

    athlete_id: str
    new_status: AthleteStatus


@dataclass(frozen=True)
class SubstituteAthlete:
    change_type: ClassVar[ChangeType] = ChangeType.SUBSTITUTE_ATHLETE

    session_id: str
    old_athlete_id: str
    new_athlete_id: str


@dataclass(frozen=True)
class SwapAthletes:
    change_type: ClassVar[ChangeType] = ChangeType.SWAP_ATHLETES

    session_id: str
    athlete1_id: str
    athlete2_id: str


@dataclass(frozen=True)
class AdjustSessionTime:
    change_type: ClassVar[ChangeType] = ChangeType.ADJUST_SESSION_TIME

    session_id: str
    new_start_time: datetime


@dataclass(frozen=True)
class MoveAthleteToHeat:
    change_type: ClassVar[ChangeType] = ChangeType.MOVE_ATHLETE_TO_HEAT

    session_id: str
    athlete_id: str
    target_heat_id: str


@dataclass(frozen=True)
class AddHeat:
    change_type: ClassVar[ChangeType] = ChangeType.ADD_HEAT

    session_id: str
    category_id: str | None = None


@dataclass(frozen=True)
class RemoveHeat:
    change_type: ClassVar[ChangeType] = ChangeType.REMOVE_HEAT

    session_id: str
    heat_id: str
    force_remove: bool = False


EditOperation = (
    UpdateAthleteStatus
    | SubstituteAthlete
    | SwapAthletes
    | AdjustSessionTime
    | MoveAthleteToHeat
    | AddHeat
    | RemoveHeat
)


def operation_details(operation: EditOperation) -> dict[str, Any]:
    """JSON-safe payload of an operation for the audit log."""
    details = {}
    for key, value in asdict(operation).items():
        if isinstance(value, AthleteStatus):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        details[key] = value
    return details
