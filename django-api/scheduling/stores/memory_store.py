"""In-process implementations of the store interfaces.

Snapshots are frozen dataclasses and are stored as-is.
"""

import threading
from contextlib import contextmanager

from scheduling.domain import Schedule, ScheduleId
from scheduling.domain.constraints import AthleteSpec, CategorySpec
from scheduling.domain.errors import (
    CommitOutcomeUnknownError,
    ScheduleNotFoundError,
    VersionConflictError,
)
from scheduling.domain.history import AuditFilter, AuditLogEntry, Change, VersionInfo
from scheduling.stores.interfaces import RosterLookup, ScheduleStore


class InMemoryScheduleStore(ScheduleStore):
    """Thread-safe store keeping every version in process memory."""

    def __init__(self, timeout: float = 5.0) -> None:
        self._timeout = timeout
        self._lock = threading.Lock()
        self._versions: dict[ScheduleId, list[Schedule]] = {}
        self._version_info: dict[ScheduleId, list[VersionInfo]] = {}
        self._audit: dict[ScheduleId, list[AuditLogEntry]] = {}

    @contextmanager
    def _locked(self, key):
        if not self._lock.acquire(timeout=self._timeout):
            raise CommitOutcomeUnknownError(str(key))
        try:
            yield
        finally:
            self._lock.release()

    def create(self, schedule: Schedule, change: Change) -> AuditLogEntry:
        with self._locked(schedule.schedule_id):
            if schedule.schedule_id in self._versions:
                current = len(self._versions[schedule.schedule_id])
                raise VersionConflictError(str(schedule.schedule_id), 0, current)
            self._versions[schedule.schedule_id] = []
            self._version_info[schedule.schedule_id] = []
            self._audit[schedule.schedule_id] = []
            return self._store(schedule, None, change)

    def commit(self, schedule: Schedule, expected_version: int, change: Change) -> AuditLogEntry:
        with self._locked(schedule.schedule_id):
            versions = self._versions.get(schedule.schedule_id)
            if versions is None:
                raise ScheduleNotFoundError(str(schedule.schedule_id))
            current = versions[-1].version
            if current != expected_version or schedule.version != expected_version + 1:
                raise VersionConflictError(str(schedule.schedule_id), expected_version, current)
            return self._store(schedule, expected_version, change)

    def _store(self, schedule: Schedule, before: int | None, change: Change) -> AuditLogEntry:
        self._versions[schedule.schedule_id].append(schedule)
        self._version_info[schedule.schedule_id].append(
            VersionInfo(
                schedule_id=schedule.schedule_id,
                version=schedule.version,
                created_at=schedule.updated_at,
                created_by=change.user_id,
                change_type=change.change_type,
            )
        )
        return self._append(schedule.schedule_id, change, before, schedule.version)

    def get(self, schedule_id: ScheduleId, version: int | None = None) -> Schedule | None:
        with self._locked(schedule_id):
            versions = self._versions.get(schedule_id)
            if not versions:
                return None
            if version is None:
                return versions[-1]
            if 1 <= version <= len(versions):
                return versions[version - 1]
            return None

    def current_version(self, schedule_id: ScheduleId) -> int | None:
        with self._locked(schedule_id):
            versions = self._versions.get(schedule_id)
            return versions[-1].version if versions else None

    def list_for_event(self, event_id: str) -> list[Schedule]:
        with self._locked(event_id):
            return [
                versions[-1]
                for versions in self._versions.values()
                if versions and str(versions[-1].event_id) == event_id
            ]

    def list_versions(self, schedule_id: ScheduleId) -> list[VersionInfo]:
        with self._locked(schedule_id):
            return list(self._version_info.get(schedule_id, []))

    def append_audit(
        self,
        schedule_id: ScheduleId,
        change: Change,
        before_version: int | None,
        after_version: int,
    ) -> AuditLogEntry:
        with self._locked(schedule_id):
            return self._append(schedule_id, change, before_version, after_version)

    def _append(
        self,
        schedule_id: ScheduleId,
        change: Change,
        before: int | None,
        after: int,
    ) -> AuditLogEntry:
        log = self._audit.setdefault(schedule_id, [])
        entry = AuditLogEntry(
            schedule_id=schedule_id,
            sequence_number=len(log) + 1,
            timestamp=change.timestamp,
            user_id=change.user_id,
            change_type=change.change_type,
            before_version=before,
            after_version=after,
            details=dict(change.details),
        )
        log.append(entry)
        return entry

    def audit_log(self, schedule_id: ScheduleId, filters: AuditFilter | None = None) -> list[AuditLogEntry]:
        filters = filters or AuditFilter()
        with self._locked(schedule_id):
            return [e for e in self._audit.get(schedule_id, []) if filters.matches(e)]


class InMemoryRoster(RosterLookup):
    """Roster backed by plain lists, keyed by event id."""

    def __init__(
        self,
        athletes: dict[str, list[AthleteSpec]] | None = None,
        categories: dict[str, list[CategorySpec]] | None = None,
    ) -> None:
        self._athletes = athletes or {}
        self._categories = categories or {}

    def athletes_for_event(self, event_id: str) -> list[AthleteSpec]:
        return list(self._athletes.get(event_id, []))

    def get_athlete(self, event_id: str, athlete_id: str) -> AthleteSpec | None:
        for athlete in self._athletes.get(event_id, []):
            if athlete.athlete_id == athlete_id:
                return athlete
        return None

    def categories_for_event(self, event_id: str) -> list[CategorySpec]:
        return list(self._categories.get(event_id, []))
