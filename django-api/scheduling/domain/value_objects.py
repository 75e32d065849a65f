"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EventId:
    """Identifier of the competition event a schedule belongs to."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("EventId cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ScheduleId:
    """Unique identifier for a Schedule."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


class AthleteStatus(Enum):
    """Status of an athlete within one schedule."""

    PENDING_PAYMENT = "pending_payment"
    READY = "ready"
    ACTIVE = "active"
    WITHDRAWN = "withdrawn"
    DISQUALIFIED = "disqualified"
    INJURED = "injured"

    @property
    def is_terminal(self) -> bool:
        return self in (AthleteStatus.WITHDRAWN, AthleteStatus.DISQUALIFIED)

    @property
    def is_allocatable(self) -> bool:
        """Whether generation places athletes with this status into heats."""
        return self in (AthleteStatus.READY, AthleteStatus.ACTIVE)


class ChangeType(Enum):
    """Kinds of committed changes recorded in the audit log."""

    GENERATE = "generate"
    UPDATE_ATHLETE_STATUS = "update_athlete_status"
    SUBSTITUTE_ATHLETE = "substitute_athlete"
    SWAP_ATHLETES = "swap_athletes"
    ADJUST_SESSION_TIME = "adjust_session_time"
    MOVE_ATHLETE_TO_HEAT = "move_athlete_to_heat"
    ADD_HEAT = "add_heat"
    REMOVE_HEAT = "remove_heat"
    REVERT = "revert"
