"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Snapshots are stored whole as JSON; rows in ScheduleVersion and AuditLogEntry
are only ever inserted.
"""

import uuid

from django.db import models


class Schedule(models.Model):
    """Persistence model holding a schedule's current version counter."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_id = models.CharField(max_length=255)
    current_version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event_id", "created_at"], name="scheduling__event_i_5c1f0e_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event_id} - v{self.current_version}"


class ScheduleVersion(models.Model):
    """Immutable snapshot of a schedule at one version."""

    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="versions")
    version = models.PositiveIntegerField()
    snapshot = models.JSONField()
    change_type = models.CharField(max_length=50)
    created_by = models.CharField(max_length=255)
    created_at = models.DateTimeField()

    class Meta:
        ordering = ["version"]
        constraints = [
            models.UniqueConstraint(fields=["schedule", "version"], name="unique_schedule_version"),
        ]

    def __str__(self) -> str:
        return f"{self.schedule_id} v{self.version}"


class AuditLogEntry(models.Model):
    """Append-only record of a committed change."""

    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="audit_entries")
    sequence_number = models.PositiveIntegerField()
    timestamp = models.DateTimeField()
    user_id = models.CharField(max_length=255)
    change_type = models.CharField(max_length=50)
    before_version = models.PositiveIntegerField(null=True, blank=True)
    after_version = models.PositiveIntegerField()
    details = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["sequence_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["schedule", "sequence_number"], name="unique_audit_sequence"
            ),
        ]
        indexes = [
            models.Index(fields=["schedule", "timestamp"], name="scheduling__schedul_8a2d41_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.schedule_id} #{self.sequence_number} {self.change_type}"


class RegisteredAthlete(models.Model):
    """Read-only roster source: athletes registered for an event."""

    class Status(models.TextChoices):
        PENDING_PAYMENT = "pending_payment"
        READY = "ready"

    event_id = models.CharField(max_length=255)
    athlete_id = models.CharField(max_length=255)
    name = models.CharField(max_length=255, blank=True)
    category_id = models.CharField(max_length=255)
    category_name = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.READY)
    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["registered_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["event_id", "athlete_id"], name="unique_event_athlete"),
        ]

    def __str__(self) -> str:
        return f"{self.name or self.athlete_id} ({self.category_id})"
