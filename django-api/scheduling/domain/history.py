"""Version and audit records kept alongside schedule snapshots."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from scheduling.domain.value_objects import ChangeType, ScheduleId


@dataclass(frozen=True)
class Change:
    """What is being committed, by whom. The store assigns the sequence number."""

    change_type: ChangeType
    user_id: str
    timestamp: datetime
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuditLogEntry:
    """One committed change, strictly ordered by sequence number."""

    schedule_id: ScheduleId
    sequence_number: int
    timestamp: datetime
    user_id: str
    change_type: ChangeType
    before_version: int | None
    after_version: int
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class VersionInfo:
    """Metadata of one stored snapshot."""

    schedule_id: ScheduleId
    version: int
    created_at: datetime
    created_by: str
    change_type: ChangeType


@dataclass(frozen=True)
class AuditFilter:
    """Optional filters for reading the audit log."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    change_type: ChangeType | None = None
    user_id: str | None = None

    def matches(self, entry: AuditLogEntry) -> bool:
        if self.start_date is not None and entry.timestamp < self.start_date:
            return False
        if self.end_date is not None and entry.timestamp > self.end_date:
            return False
        if self.change_type is not None and entry.change_type != self.change_type:
            return False
        if self.user_id is not None and entry.user_id != self.user_id:
            return False
        return True
