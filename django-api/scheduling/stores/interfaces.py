"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from scheduling.domain import Schedule, ScheduleId
from scheduling.domain.constraints import AthleteSpec, CategorySpec
from scheduling.domain.history import AuditFilter, AuditLogEntry, Change, VersionInfo


class ScheduleStore(ABC):
    """Append-only history of schedule snapshots and their audit log."""

    @abstractmethod
    def create(self, schedule: Schedule, change: Change) -> AuditLogEntry:
        """Store version 1 of a new schedule together with its audit entry."""
        ...

    @abstractmethod
    def commit(self, schedule: Schedule, expected_version: int, change: Change) -> AuditLogEntry:
        """Store ``schedule`` as ``expected_version + 1``.

        Compare-and-swap on the version counter: the snapshot and its audit
        entry are stored only if the current version is still
        ``expected_version``.

        Raises:
            ScheduleNotFoundError: If the schedule does not exist.
            VersionConflictError: If another commit happened first.
            CommitOutcomeUnknownError: If the commit timed out.
        """
        ...

    @abstractmethod
    def get(self, schedule_id: ScheduleId, version: int | None = None) -> Schedule | None:
        """Return the snapshot at ``version`` (latest when None), or None if not found."""
        ...

    @abstractmethod
    def current_version(self, schedule_id: ScheduleId) -> int | None:
        """Return the latest committed version, or None if the schedule does not exist."""
        ...

    @abstractmethod
    def list_for_event(self, event_id: str) -> list[Schedule]:
        """Return the latest snapshot of every schedule of an event, oldest first."""
        ...

    @abstractmethod
    def list_versions(self, schedule_id: ScheduleId) -> list[VersionInfo]:
        """Return version metadata ordered by version ascending."""
        ...

    @abstractmethod
    def append_audit(
        self,
        schedule_id: ScheduleId,
        change: Change,
        before_version: int | None,
        after_version: int,
    ) -> AuditLogEntry:
        """Append an audit entry with the next sequence number. Never validates."""
        ...

    @abstractmethod
    def audit_log(self, schedule_id: ScheduleId, filters: AuditFilter | None = None) -> list[AuditLogEntry]:
        """Return audit entries ordered by sequence number ascending."""
        ...


class RosterLookup(ABC):
    """Read-only view of an event's registered athletes and categories."""

    @abstractmethod
    def athletes_for_event(self, event_id: str) -> list[AthleteSpec]:
        """Return registered athletes in registration order."""
        ...

    @abstractmethod
    def get_athlete(self, event_id: str, athlete_id: str) -> AthleteSpec | None:
        """Return one registered athlete, or None if not registered."""
        ...

    @abstractmethod
    def categories_for_event(self, event_id: str) -> list[CategorySpec]:
        """Return the event's categories."""
        ...
