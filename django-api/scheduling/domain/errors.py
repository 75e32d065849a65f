"""Domain error codes for the scheduling module."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    VERSION_CONFLICT = "VERSION_CONFLICT"
    INVALID_SCHEDULE_ID = "INVALID_SCHEDULE_ID"
    SCHEDULE_NOT_FOUND = "SCHEDULE_NOT_FOUND"
    VERSION_NOT_FOUND = "VERSION_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    HEAT_NOT_FOUND = "HEAT_NOT_FOUND"
    ATHLETE_NOT_FOUND = "ATHLETE_NOT_FOUND"
    HEAT_FULL = "HEAT_FULL"
    HEAT_NOT_EMPTY = "HEAT_NOT_EMPTY"
    ATHLETE_ALREADY_ASSIGNED = "ATHLETE_ALREADY_ASSIGNED"
    ATHLETE_NOT_ASSIGNED = "ATHLETE_NOT_ASSIGNED"
    ATHLETE_NOT_ELIGIBLE = "ATHLETE_NOT_ELIGIBLE"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    SCHEDULE_BUSY = "SCHEDULE_BUSY"
    COMMIT_OUTCOME_UNKNOWN = "COMMIT_OUTCOME_UNKNOWN"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message}


class ConfigurationError(DomainError):
    """Raised when constraint input is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.CONFIGURATION_ERROR, message=message)


class CapacityExceededError(DomainError):
    """Raised when a day's scheduled time would exceed its hours budget."""

    def __init__(self, day_id: str, overage_minutes: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message=f"Day {day_id} exceeds its available time by {overage_minutes} minutes",
        )
        self.day_id = day_id
        self.overage_minutes = overage_minutes

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(dayId=self.day_id, overageMinutes=self.overage_minutes)
        return data


class ValidationFailure(DomainError):
    """Raised when a candidate schedule fails validation.

    The prior version stays current; ``issues`` lists what must be corrected.
    """

    def __init__(self, issues) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message="Schedule validation failed",
        )
        self.issues = tuple(issues)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["issues"] = [issue.to_dict() for issue in self.issues]
        return data


class VersionConflictError(DomainError):
    """Raised when the expected version is not the current committed version."""

    def __init__(self, schedule_id: str, expected: int, current: int) -> None:
        super().__init__(
            code=ErrorCode.VERSION_CONFLICT,
            message="Schedule was modified; refetch and retry",
        )
        self.schedule_id = schedule_id
        self.expected = expected
        self.current = current

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(expectedVersion=self.expected, currentVersion=self.current)
        return data


class InvalidScheduleIdError(DomainError):
    """Raised when a schedule ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SCHEDULE_ID,
            message="Invalid schedule ID format",
        )


class NotFoundError(DomainError):
    """Base class for references that do not exist."""


class ScheduleNotFoundError(NotFoundError):
    def __init__(self, schedule_id: str) -> None:
        super().__init__(code=ErrorCode.SCHEDULE_NOT_FOUND, message="Schedule not found")
        self.schedule_id = schedule_id


class VersionNotFoundError(NotFoundError):
    def __init__(self, schedule_id: str, version: int) -> None:
        super().__init__(
            code=ErrorCode.VERSION_NOT_FOUND,
            message=f"Version {version} not found",
        )
        self.schedule_id = schedule_id
        self.version = version


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: str) -> None:
        super().__init__(code=ErrorCode.SESSION_NOT_FOUND, message="Session not found")
        self.session_id = session_id


class HeatNotFoundError(NotFoundError):
    def __init__(self, heat_id: str) -> None:
        super().__init__(code=ErrorCode.HEAT_NOT_FOUND, message="Heat not found")
        self.heat_id = heat_id


class AthleteNotFoundError(NotFoundError):
    def __init__(self, athlete_id: str) -> None:
        super().__init__(code=ErrorCode.ATHLETE_NOT_FOUND, message="Athlete not found")
        self.athlete_id = athlete_id


class EditRejectedError(DomainError):
    """Base class for edits refused by an operation's own rules."""


class HeatFullError(EditRejectedError):
    def __init__(self, heat_id: str) -> None:
        super().__init__(code=ErrorCode.HEAT_FULL, message="Target heat is at capacity")
        self.heat_id = heat_id


class HeatNotEmptyError(EditRejectedError):
    def __init__(self, heat_id: str, assigned: int) -> None:
        super().__init__(
            code=ErrorCode.HEAT_NOT_EMPTY,
            message=f"Heat has {assigned} assigned athletes; use forceRemove to remove it",
        )
        self.heat_id = heat_id
        self.assigned = assigned


class AthleteAlreadyAssignedError(EditRejectedError):
    def __init__(self, athlete_id: str, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.ATHLETE_ALREADY_ASSIGNED,
            message="Athlete is already assigned for this workout",
        )
        self.athlete_id = athlete_id
        self.session_id = session_id


class AthleteNotAssignedError(EditRejectedError):
    def __init__(self, athlete_id: str, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.ATHLETE_NOT_ASSIGNED,
            message="Athlete is not assigned in this session",
        )
        self.athlete_id = athlete_id
        self.session_id = session_id


class AthleteNotEligibleError(EditRejectedError):
    def __init__(self, athlete_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.ATHLETE_NOT_ELIGIBLE,
            message=f"Athlete with status {status} cannot be reassigned",
        )
        self.athlete_id = athlete_id
        self.status = status


class InvalidStatusTransitionError(EditRejectedError):
    def __init__(self, athlete_id: str, current: str, requested: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATUS_TRANSITION,
            message=f"Cannot change status from {current} to {requested}",
        )
        self.athlete_id = athlete_id
        self.current = current
        self.requested = requested


class ScheduleBusyError(DomainError):
    """Raised when another edit holds the schedule longer than the lock wait."""

    def __init__(self, schedule_id: str) -> None:
        super().__init__(
            code=ErrorCode.SCHEDULE_BUSY,
            message="Schedule is being edited; retry shortly",
        )
        self.schedule_id = schedule_id


class CommitOutcomeUnknownError(DomainError):
    """Raised when a commit timed out; the caller must refetch before retrying."""

    def __init__(self, schedule_id: str) -> None:
        super().__init__(
            code=ErrorCode.COMMIT_OUTCOME_UNKNOWN,
            message="Commit outcome unknown; refetch the schedule and retry",
        )
        self.schedule_id = schedule_id
