"""Schedule service - all business logic lives here.

Services:
- Depend only on interfaces (stores, roster lookup, publisher)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every mutation reads the current version, checks the caller's expected
version, applies a pure transformation, validates the candidate and commits
it through the store's compare-and-swap together with one audit entry.
Mutations of one schedule are serialized; different schedules proceed in
parallel.
"""

import logging
import threading
import weakref
from contextlib import contextmanager
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any, Callable
from uuid import UUID

from scheduling.domain import ChangeType, Schedule, ScheduledAthlete, ScheduleId
from scheduling.domain.constraints import ConstraintModel
from scheduling.domain.errors import (
    InvalidScheduleIdError,
    ScheduleBusyError,
    ScheduleNotFoundError,
    ValidationFailure,
    VersionConflictError,
    VersionNotFoundError,
)
from scheduling.domain.history import AuditFilter, AuditLogEntry, Change, VersionInfo
from scheduling.domain.operations import EditOperation, SubstituteAthlete, operation_details
from scheduling.services.builder import build_schedule
from scheduling.services.publisher import NullPublisher, ScheduleChange, SchedulePublisher
from scheduling.services.transforms import apply_operation
from scheduling.services.validator import ValidationResult, validate_schedule
from scheduling.stores.interfaces import RosterLookup, ScheduleStore

logger = logging.getLogger(__name__)


def parse_schedule_id(schedule_id: str) -> ScheduleId:
    """Raises InvalidScheduleIdError if the value is not a UUID."""
    if isinstance(schedule_id, ScheduleId):
        return schedule_id
    try:
        return ScheduleId.from_string(str(schedule_id))
    except ValueError as exc:
        raise InvalidScheduleIdError() from exc


class ScheduleService:
    """Generation, editing, validation and history of competition schedules."""

    def __init__(
        self,
        store: ScheduleStore,
        roster: RosterLookup | None = None,
        publisher: SchedulePublisher | None = None,
        *,
        lock_timeout: float = 5.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._roster = roster
        self._publisher = publisher or NullPublisher()
        self._lock_timeout = lock_timeout
        self._clock = clock or (lambda: datetime.now(UTC))
        # Entries vanish once no caller holds or waits on the lock.
        self._locks: weakref.WeakValueDictionary[UUID, threading.Lock] = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def generate(self, event_id: str, constraints: ConstraintModel, user_id: str) -> Schedule:
        """Build and commit version 1 of a new schedule.

        Raises:
            ConfigurationError: If the constraint model is malformed.
            CapacityExceededError: If a day cannot hold its sessions.
            ValidationFailure: If the generated schedule is inconsistent.
        """
        constraints = self._with_roster(event_id, constraints)
        schedule = build_schedule(event_id, constraints, now=self._clock())
        change = Change(
            change_type=ChangeType.GENERATE,
            user_id=user_id,
            timestamp=schedule.created_at,
            details={
                "days": len(schedule.days),
                "sessions": len(schedule.sessions),
                "athletes": len(schedule.athletes),
            },
        )
        self._store.create(schedule, change)
        logger.info("Generated schedule %s for event %s", schedule.schedule_id, event_id)
        self._publish(schedule, ChangeType.GENERATE)
        return schedule

    def get(self, schedule_id: str, version: int | None = None, *, event_id: str | None = None) -> Schedule:
        """Return the latest snapshot, or the snapshot at ``version``.

        Raises:
            InvalidScheduleIdError: If the schedule_id is not a valid UUID.
            ScheduleNotFoundError: If the schedule does not exist.
            VersionNotFoundError: If the version does not exist.
        """
        sid = parse_schedule_id(schedule_id)
        schedule = self._store.get(sid, version)
        if schedule is None:
            if version is not None and self._store.current_version(sid) is not None:
                raise VersionNotFoundError(str(sid), version)
            raise ScheduleNotFoundError(str(sid))
        if event_id is not None and str(schedule.event_id) != event_id:
            raise ScheduleNotFoundError(str(sid))
        return schedule

    def list_for_event(self, event_id: str) -> list[Schedule]:
        return self._store.list_for_event(event_id)

    def validate(self, schedule_id: str, *, event_id: str | None = None) -> ValidationResult:
        return validate_schedule(self.get(schedule_id, event_id=event_id))

    def apply(
        self,
        schedule_id: str,
        expected_version: int,
        operation: EditOperation,
        user_id: str,
        *,
        event_id: str | None = None,
    ) -> Schedule:
        """Apply one edit operation and commit it as the next version.

        Raises:
            VersionConflictError: If ``expected_version`` is not current.
            ValidationFailure: If the edited schedule fails validation.
            CapacityExceededError: If a day would exceed its budget.
            EditRejectedError: If the operation's own rules refuse the edit.
            NotFoundError: If a referenced schedule, session, heat or athlete is missing.
        """
        sid = parse_schedule_id(schedule_id)
        with self._exclusive(sid):
            current = self.get(sid, event_id=event_id)
            self._check_version(current, expected_version)
            candidate = apply_operation(self._prepare(current, operation), operation)
            return self._commit(
                current,
                candidate,
                operation.change_type,
                user_id,
                operation_details(operation),
            )

    def revert(
        self,
        schedule_id: str,
        target_version: int,
        expected_version: int,
        user_id: str,
        *,
        event_id: str | None = None,
    ) -> Schedule:
        """Commit the snapshot at ``target_version`` as a brand-new version."""
        sid = parse_schedule_id(schedule_id)
        with self._exclusive(sid):
            current = self.get(sid, event_id=event_id)
            self._check_version(current, expected_version)
            target = self._store.get(sid, target_version)
            if target is None:
                raise VersionNotFoundError(str(sid), target_version)
            return self._commit(
                current,
                target,
                ChangeType.REVERT,
                user_id,
                {"targetVersion": target_version},
            )

    def current_version(self, schedule_id: str) -> int:
        sid = parse_schedule_id(schedule_id)
        version = self._store.current_version(sid)
        if version is None:
            raise ScheduleNotFoundError(str(sid))
        return version

    def list_versions(self, schedule_id: str, *, event_id: str | None = None) -> list[VersionInfo]:
        schedule = self.get(schedule_id, event_id=event_id)
        return self._store.list_versions(schedule.schedule_id)

    def audit_log(
        self,
        schedule_id: str,
        filters: AuditFilter | None = None,
        *,
        event_id: str | None = None,
    ) -> list[AuditLogEntry]:
        schedule = self.get(schedule_id, event_id=event_id)
        return self._store.audit_log(schedule.schedule_id, filters)

    def _with_roster(self, event_id: str, constraints: ConstraintModel) -> ConstraintModel:
        if constraints.athletes or self._roster is None:
            return constraints
        athletes = self._roster.athletes_for_event(event_id)
        if not constraints.categories:
            constraints = replace(
                constraints, categories=tuple(self._roster.categories_for_event(event_id))
            )
        return constraints.with_athletes(athletes)

    def _prepare(self, schedule: Schedule, operation: EditOperation) -> Schedule:
        """Bring a late-registered substitute onto the schedule's roster."""
        if not isinstance(operation, SubstituteAthlete) or self._roster is None:
            return schedule
        if schedule.has_athlete(operation.new_athlete_id):
            return schedule
        spec = self._roster.get_athlete(str(schedule.event_id), operation.new_athlete_id)
        if spec is None:
            return schedule
        return schedule.replace_athlete(
            ScheduledAthlete(spec.athlete_id, spec.name, spec.category_id, spec.status)
        )

    @staticmethod
    def _check_version(current: Schedule, expected_version: int) -> None:
        if current.version != expected_version:
            raise VersionConflictError(str(current.schedule_id), expected_version, current.version)

    def _commit(
        self,
        current: Schedule,
        candidate: Schedule,
        change_type: ChangeType,
        user_id: str,
        details: dict[str, Any],
    ) -> Schedule:
        now = self._clock()
        candidate = replace(candidate, version=current.version + 1, updated_at=now)
        result = validate_schedule(candidate)
        if not result.valid:
            logger.info(
                "Rejected %s on schedule %s v%d: %d issues",
                change_type.value,
                current.schedule_id,
                current.version,
                len(result.issues),
            )
            raise ValidationFailure(result.issues)

        change = Change(change_type=change_type, user_id=user_id, timestamp=now, details=details)
        self._store.commit(candidate, current.version, change)
        logger.info(
            "Committed %s on schedule %s: v%d -> v%d by %s",
            change_type.value,
            current.schedule_id,
            current.version,
            candidate.version,
            user_id,
        )
        self._publish(candidate, change_type)
        return candidate

    def _publish(self, schedule: Schedule, change_type: ChangeType) -> None:
        change = ScheduleChange(
            event_id=str(schedule.event_id),
            schedule_id=str(schedule.schedule_id),
            change_type=change_type.value,
            version=schedule.version,
        )
        try:
            self._publisher.publish(change)
        except Exception:
            logger.exception("Publishing %s for schedule %s failed", change_type.value, schedule.schedule_id)

    @contextmanager
    def _exclusive(self, schedule_id: ScheduleId):
        with self._locks_guard:
            lock = self._locks.setdefault(schedule_id.value, threading.Lock())
        if not lock.acquire(timeout=self._lock_timeout):
            raise ScheduleBusyError(str(schedule_id))
        try:
            yield
        finally:
            lock.release()
