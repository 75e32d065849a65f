"""Serializers for transforming domain models to API responses, and request
bodies to edit operations.

Each mutation endpoint has one input serializer that validates the payload
shape and builds exactly one operation variant.
"""

from rest_framework import serializers

from scheduling.domain import AthleteStatus, ChangeType
from scheduling.domain.history import AuditFilter
from scheduling.domain.operations import (
    AddHeat,
    AdjustSessionTime,
    MoveAthleteToHeat,
    RemoveHeat,
    SubstituteAthlete,
    SwapAthletes,
    UpdateAthleteStatus,
)

# Responses


class HeatAssignmentSerializer(serializers.Serializer):
    athleteId = serializers.CharField(source="athlete_id")
    categoryId = serializers.CharField(source="category_id")
    slot = serializers.IntegerField()


class HeatSerializer(serializers.Serializer):
    heatId = serializers.CharField(source="heat_id")
    heatNumber = serializers.IntegerField(source="heat_number")
    categoryId = serializers.CharField(source="category_id", allow_null=True)
    startTime = serializers.DateTimeField(source="start_time")
    endTime = serializers.DateTimeField(source="end_time")
    capacity = serializers.IntegerField(source="capacity.value")
    assignments = HeatAssignmentSerializer(many=True)


class SessionSerializer(serializers.Serializer):
    sessionId = serializers.CharField(source="session_id")
    dayId = serializers.CharField(source="day_id")
    wodId = serializers.CharField(source="wod_id")
    categoryIds = serializers.ListField(source="category_ids", child=serializers.CharField())
    startTime = serializers.DateTimeField(source="start_time")
    endTime = serializers.DateTimeField(source="end_time")
    setupTime = serializers.IntegerField(source="setup_time")
    heatDuration = serializers.IntegerField(source="heat_duration")
    breakDuration = serializers.IntegerField(source="break_duration")
    athletesPerHeat = serializers.IntegerField(source="athletes_per_heat")
    heats = HeatSerializer(many=True)


class DaySerializer(serializers.Serializer):
    dayId = serializers.CharField(source="day_id")
    date = serializers.DateField()
    name = serializers.CharField()
    startTime = serializers.DateTimeField(source="start_time")
    maxDayHours = serializers.FloatField(source="max_day_hours")
    lunchBreakHours = serializers.FloatField(source="lunch_break_hours")
    availableMinutes = serializers.IntegerField(source="available_minutes")
    usedMinutes = serializers.IntegerField(source="used_minutes")
    sessions = SessionSerializer(many=True)


class ScheduledAthleteSerializer(serializers.Serializer):
    athleteId = serializers.CharField(source="athlete_id")
    name = serializers.CharField()
    categoryId = serializers.CharField(source="category_id")
    status = serializers.CharField(source="status.value")


class CategorySerializer(serializers.Serializer):
    categoryId = serializers.CharField(source="category_id")
    name = serializers.CharField()


class WodSerializer(serializers.Serializer):
    wodId = serializers.CharField(source="wod_id")
    name = serializers.CharField()


class ScheduleSerializer(serializers.Serializer):
    """Serializer for the Schedule domain model."""

    eventId = serializers.CharField(source="event_id")
    scheduleId = serializers.CharField(source="schedule_id")
    version = serializers.IntegerField()
    competitionMode = serializers.CharField(source="competition_mode")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    categories = CategorySerializer(many=True)
    wods = WodSerializer(many=True)
    athletes = ScheduledAthleteSerializer(many=True)
    days = DaySerializer(many=True)


class IssueSerializer(serializers.Serializer):
    kind = serializers.CharField(source="kind.value")
    message = serializers.CharField()
    dayId = serializers.CharField(source="day_id", allow_null=True)
    sessionId = serializers.CharField(source="session_id", allow_null=True)
    heatId = serializers.CharField(source="heat_id", allow_null=True)
    athleteId = serializers.CharField(source="athlete_id", allow_null=True)


class ValidationResultSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    issues = IssueSerializer(many=True)
    statistics = serializers.JSONField()


class VersionInfoSerializer(serializers.Serializer):
    scheduleId = serializers.CharField(source="schedule_id")
    version = serializers.IntegerField()
    createdAt = serializers.DateTimeField(source="created_at")
    createdBy = serializers.CharField(source="created_by")
    changeType = serializers.CharField(source="change_type.value")


class AuditLogEntrySerializer(serializers.Serializer):
    scheduleId = serializers.CharField(source="schedule_id")
    sequenceNumber = serializers.IntegerField(source="sequence_number")
    timestamp = serializers.DateTimeField()
    userId = serializers.CharField(source="user_id")
    changeType = serializers.CharField(source="change_type.value")
    beforeVersion = serializers.IntegerField(source="before_version", allow_null=True)
    afterVersion = serializers.IntegerField(source="after_version")
    details = serializers.JSONField()


# Requests


class OperationSerializer(serializers.Serializer):
    """Base for edit payloads; ``expectedVersion`` guards against stale edits."""

    operation_class = None

    expectedVersion = serializers.IntegerField(source="expected_version", required=False, min_value=1)

    @property
    def expected_version(self) -> int | None:
        return self.validated_data.get("expected_version")

    def to_operation(self, **path_values):
        data = {k: v for k, v in self.validated_data.items() if k != "expected_version"}
        return self.operation_class(**data, **path_values)


class UpdateAthleteStatusSerializer(OperationSerializer):
    operation_class = UpdateAthleteStatus

    newStatus = serializers.ChoiceField(
        source="new_status", choices=[status.value for status in AthleteStatus]
    )

    def validate_newStatus(self, value):
        return AthleteStatus(value)


class SubstituteAthleteSerializer(OperationSerializer):
    operation_class = SubstituteAthlete

    sessionId = serializers.CharField(source="session_id")
    oldAthleteId = serializers.CharField(source="old_athlete_id")
    newAthleteId = serializers.CharField(source="new_athlete_id")

    def validate(self, attrs):
        if attrs["old_athlete_id"] == attrs["new_athlete_id"]:
            raise serializers.ValidationError("oldAthleteId and newAthleteId must differ")
        return attrs


class SwapAthletesSerializer(OperationSerializer):
    operation_class = SwapAthletes

    sessionId = serializers.CharField(source="session_id")
    athlete1Id = serializers.CharField(source="athlete1_id")
    athlete2Id = serializers.CharField(source="athlete2_id")

    def validate(self, attrs):
        if attrs["athlete1_id"] == attrs["athlete2_id"]:
            raise serializers.ValidationError("athlete1Id and athlete2Id must differ")
        return attrs


class AdjustSessionTimeSerializer(OperationSerializer):
    operation_class = AdjustSessionTime

    newStartTime = serializers.DateTimeField(source="new_start_time")


class MoveAthleteToHeatSerializer(OperationSerializer):
    operation_class = MoveAthleteToHeat

    sessionId = serializers.CharField(source="session_id")
    athleteId = serializers.CharField(source="athlete_id")
    targetHeatId = serializers.CharField(source="target_heat_id")


class AddHeatSerializer(OperationSerializer):
    operation_class = AddHeat

    sessionId = serializers.CharField(source="session_id")
    categoryId = serializers.CharField(source="category_id", required=False)


class RemoveHeatSerializer(OperationSerializer):
    operation_class = RemoveHeat

    sessionId = serializers.CharField(source="session_id")
    forceRemove = serializers.BooleanField(source="force_remove", default=False)


class RevertSerializer(serializers.Serializer):
    versionId = serializers.IntegerField(source="version_id", min_value=1)
    expectedVersion = serializers.IntegerField(source="expected_version", required=False, min_value=1)


class AuditLogQuerySerializer(serializers.Serializer):
    startDate = serializers.DateTimeField(source="start_date", required=False)
    endDate = serializers.DateTimeField(source="end_date", required=False)
    changeType = serializers.ChoiceField(
        source="change_type", choices=[change.value for change in ChangeType], required=False
    )
    userId = serializers.CharField(source="user_id", required=False)

    def to_filter(self) -> AuditFilter:
        data = dict(self.validated_data)
        if "change_type" in data:
            data["change_type"] = ChangeType(data["change_type"])
        return AuditFilter(**data)
