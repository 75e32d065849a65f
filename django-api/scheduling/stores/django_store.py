"""Django ORM implementation of the store interfaces."""

import logging

from django.db import IntegrityError, OperationalError, transaction
from django.db.models import Max

from scheduling import models
from scheduling.domain import AthleteStatus, ChangeType, Schedule, ScheduleId
from scheduling.domain.constraints import AthleteSpec, CategorySpec
from scheduling.domain.errors import (
    CommitOutcomeUnknownError,
    ScheduleNotFoundError,
    VersionConflictError,
)
from scheduling.domain.history import AuditFilter, AuditLogEntry, Change, VersionInfo
from scheduling.stores.codec import schedule_from_dict, schedule_to_dict
from scheduling.stores.interfaces import RosterLookup, ScheduleStore

logger = logging.getLogger(__name__)


class DjangoScheduleStore(ScheduleStore):
    """Relational schedule store using Django ORM.

    The version counter on ``Schedule`` is advanced with a conditional
    UPDATE, which is the compare-and-swap every commit goes through.
    """

    def create(self, schedule: Schedule, change: Change) -> AuditLogEntry:
        try:
            with transaction.atomic():
                record = models.Schedule.objects.create(
                    id=schedule.schedule_id.value,
                    event_id=str(schedule.event_id),
                    current_version=schedule.version,
                )
                self._insert_version(record, schedule, change)
                return self._insert_audit(record, change, None, schedule.version)
        except IntegrityError as exc:
            current = self.current_version(schedule.schedule_id) or 0
            raise VersionConflictError(str(schedule.schedule_id), 0, current) from exc
        except OperationalError as exc:
            logger.warning("Create of schedule %s timed out: %s", schedule.schedule_id, exc)
            raise CommitOutcomeUnknownError(str(schedule.schedule_id)) from exc

    def commit(self, schedule: Schedule, expected_version: int, change: Change) -> AuditLogEntry:
        schedule_id = schedule.schedule_id
        if schedule.version != expected_version + 1:
            current = self.current_version(schedule_id) or 0
            raise VersionConflictError(str(schedule_id), expected_version, current)
        try:
            with transaction.atomic():
                swapped = models.Schedule.objects.filter(
                    id=schedule_id.value, current_version=expected_version
                ).update(current_version=schedule.version, updated_at=schedule.updated_at)
                if not swapped:
                    current = (
                        models.Schedule.objects.filter(id=schedule_id.value)
                        .values_list("current_version", flat=True)
                        .first()
                    )
                    if current is None:
                        raise ScheduleNotFoundError(str(schedule_id))
                    raise VersionConflictError(str(schedule_id), expected_version, current)
                record = models.Schedule.objects.get(id=schedule_id.value)
                self._insert_version(record, schedule, change)
                return self._insert_audit(record, change, expected_version, schedule.version)
        except OperationalError as exc:
            logger.warning("Commit of schedule %s v%d timed out: %s", schedule_id, schedule.version, exc)
            raise CommitOutcomeUnknownError(str(schedule_id)) from exc

    def get(self, schedule_id: ScheduleId, version: int | None = None) -> Schedule | None:
        queryset = models.ScheduleVersion.objects.filter(schedule_id=schedule_id.value)
        if version is None:
            row = queryset.order_by("-version").first()
        else:
            row = queryset.filter(version=version).first()
        return schedule_from_dict(row.snapshot) if row else None

    def current_version(self, schedule_id: ScheduleId) -> int | None:
        return (
            models.Schedule.objects.filter(id=schedule_id.value)
            .values_list("current_version", flat=True)
            .first()
        )

    def list_for_event(self, event_id: str) -> list[Schedule]:
        schedules = []
        for record in models.Schedule.objects.filter(event_id=event_id).order_by("created_at"):
            row = record.versions.filter(version=record.current_version).first()
            if row is not None:
                schedules.append(schedule_from_dict(row.snapshot))
        return schedules

    def list_versions(self, schedule_id: ScheduleId) -> list[VersionInfo]:
        rows = models.ScheduleVersion.objects.filter(schedule_id=schedule_id.value).order_by("version")
        return [
            VersionInfo(
                schedule_id=schedule_id,
                version=row.version,
                created_at=row.created_at,
                created_by=row.created_by,
                change_type=ChangeType(row.change_type),
            )
            for row in rows
        ]

    def append_audit(
        self,
        schedule_id: ScheduleId,
        change: Change,
        before_version: int | None,
        after_version: int,
    ) -> AuditLogEntry:
        with transaction.atomic():
            record = models.Schedule.objects.select_for_update().filter(id=schedule_id.value).first()
            if record is None:
                raise ScheduleNotFoundError(str(schedule_id))
            return self._insert_audit(record, change, before_version, after_version)

    def audit_log(self, schedule_id: ScheduleId, filters: AuditFilter | None = None) -> list[AuditLogEntry]:
        filters = filters or AuditFilter()
        queryset = models.AuditLogEntry.objects.filter(schedule_id=schedule_id.value)
        if filters.start_date is not None:
            queryset = queryset.filter(timestamp__gte=filters.start_date)
        if filters.end_date is not None:
            queryset = queryset.filter(timestamp__lte=filters.end_date)
        if filters.change_type is not None:
            queryset = queryset.filter(change_type=filters.change_type.value)
        if filters.user_id is not None:
            queryset = queryset.filter(user_id=filters.user_id)
        return [self._to_domain_entry(schedule_id, row) for row in queryset.order_by("sequence_number")]

    def _insert_version(self, record: models.Schedule, schedule: Schedule, change: Change) -> None:
        models.ScheduleVersion.objects.create(
            schedule=record,
            version=schedule.version,
            snapshot=schedule_to_dict(schedule),
            change_type=change.change_type.value,
            created_by=change.user_id,
            created_at=schedule.updated_at,
        )

    def _insert_audit(
        self,
        record: models.Schedule,
        change: Change,
        before: int | None,
        after: int,
    ) -> AuditLogEntry:
        last = record.audit_entries.aggregate(m=Max("sequence_number")).get("m") or 0
        row = models.AuditLogEntry.objects.create(
            schedule=record,
            sequence_number=last + 1,
            timestamp=change.timestamp,
            user_id=change.user_id,
            change_type=change.change_type.value,
            before_version=before,
            after_version=after,
            details=change.details,
        )
        return self._to_domain_entry(ScheduleId(record.id), row)

    @staticmethod
    def _to_domain_entry(schedule_id: ScheduleId, row: models.AuditLogEntry) -> AuditLogEntry:
        return AuditLogEntry(
            schedule_id=schedule_id,
            sequence_number=row.sequence_number,
            timestamp=row.timestamp,
            user_id=row.user_id,
            change_type=ChangeType(row.change_type),
            before_version=row.before_version,
            after_version=row.after_version,
            details=row.details,
        )


class DjangoRosterLookup(RosterLookup):
    """Roster read from RegisteredAthlete rows."""

    def athletes_for_event(self, event_id: str) -> list[AthleteSpec]:
        return [
            self._to_spec(row)
            for row in models.RegisteredAthlete.objects.filter(event_id=event_id)
        ]

    def get_athlete(self, event_id: str, athlete_id: str) -> AthleteSpec | None:
        row = models.RegisteredAthlete.objects.filter(event_id=event_id, athlete_id=athlete_id).first()
        return self._to_spec(row) if row else None

    def categories_for_event(self, event_id: str) -> list[CategorySpec]:
        rows = (
            models.RegisteredAthlete.objects.filter(event_id=event_id)
            .order_by("category_id")
            .values_list("category_id", "category_name")
            .distinct()
        )
        return [CategorySpec(category_id=cid, name=name) for cid, name in rows]

    @staticmethod
    def _to_spec(row: models.RegisteredAthlete) -> AthleteSpec:
        return AthleteSpec(
            athlete_id=row.athlete_id,
            category_id=row.category_id,
            name=row.name,
            status=AthleteStatus(row.status),
        )
