"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call the schedule service for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.apps import apps
from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from scheduling import cache as cache_keys
from scheduling.domain.constraints import ConstraintModel
from scheduling.handlers.errors import maps_domain_errors
from scheduling.handlers.serializers import (
    AddHeatSerializer,
    AdjustSessionTimeSerializer,
    AuditLogEntrySerializer,
    AuditLogQuerySerializer,
    MoveAthleteToHeatSerializer,
    RemoveHeatSerializer,
    RevertSerializer,
    ScheduleSerializer,
    SessionSerializer,
    SubstituteAthleteSerializer,
    SwapAthletesSerializer,
    UpdateAthleteStatusSerializer,
    ValidationResultSerializer,
    VersionInfoSerializer,
)
from scheduling.services import ScheduleService


class SchedulerView(APIView):
    """Shared plumbing for scheduler endpoints."""

    @property
    def service(self) -> ScheduleService:
        return apps.get_app_config("scheduling").service

    @staticmethod
    def user_id(request: Request) -> str:
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return user.get_username()
        return request.headers.get("X-User-Id") or "anonymous"

    def edit(self, request, event_id, schedule_id, serializer, **path_values):
        """Run one edit operation described by a validated serializer."""
        operation = serializer.to_operation(**path_values)
        expected = serializer.expected_version
        if expected is None:
            expected = self.service.current_version(schedule_id)
        return self.service.apply(
            schedule_id,
            expected,
            operation,
            self.user_id(request),
            event_id=event_id,
        )

    @staticmethod
    def session_payload(schedule, session_id: str) -> dict:
        data = SessionSerializer(schedule.find_session(session_id)).data
        data["scheduleVersion"] = schedule.version
        return data


class ScheduleCollectionView(SchedulerView):
    """Handler for POST/GET /scheduler/{event_id}"""

    @maps_domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        constraints = ConstraintModel.from_payload(request.data)
        schedule = self.service.generate(event_id, constraints, self.user_id(request))
        return Response(ScheduleSerializer(schedule).data, status=status.HTTP_201_CREATED)

    @maps_domain_errors
    def get(self, request: Request, event_id: str) -> Response:
        key = cache_keys.event_key(event_id)
        data = cache.get(key)
        if data is None:
            data = ScheduleSerializer(self.service.list_for_event(event_id), many=True).data
            cache.set(key, data, cache_keys.cache_timeout())
        return Response(data)


class ScheduleDetailView(SchedulerView):
    """Handler for GET /scheduler/{event_id}/{schedule_id}"""

    @maps_domain_errors
    def get(self, request: Request, event_id: str, schedule_id: str) -> Response:
        version = request.query_params.get("version")
        if version is not None:
            if not version.isdigit():
                return Response({"version": ["Must be a positive integer"]}, status=status.HTTP_400_BAD_REQUEST)
            schedule = self.service.get(schedule_id, int(version), event_id=event_id)
            return Response(ScheduleSerializer(schedule).data)

        key = cache_keys.schedule_key(event_id, schedule_id)
        data = cache.get(key)
        if data is None:
            schedule = self.service.get(schedule_id, event_id=event_id)
            data = ScheduleSerializer(schedule).data
            cache.set(key, data, cache_keys.cache_timeout())
        return Response(data)


class AthleteStatusView(SchedulerView):
    """Handler for PUT /scheduler/{event_id}/{schedule_id}/athletes/{athlete_id}"""

    @maps_domain_errors
    def put(self, request: Request, event_id: str, schedule_id: str, athlete_id: str) -> Response:
        serializer = UpdateAthleteStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        schedule = self.edit(request, event_id, schedule_id, serializer, athlete_id=athlete_id)
        return Response(ScheduleSerializer(schedule).data)


class SubstituteAthleteView(SchedulerView):
    """Handler for POST /scheduler/{event_id}/{schedule_id}/substitute"""

    @maps_domain_errors
    def post(self, request: Request, event_id: str, schedule_id: str) -> Response:
        serializer = SubstituteAthleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        schedule = self.edit(request, event_id, schedule_id, serializer)
        return Response(self.session_payload(schedule, serializer.validated_data["session_id"]))


class SwapAthletesView(SchedulerView):
    """Handler for POST /scheduler/{event_id}/{schedule_id}/swap"""

    @maps_domain_errors
    def post(self, request: Request, event_id: str, schedule_id: str) -> Response:
        serializer = SwapAthletesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        schedule = self.edit(request, event_id, schedule_id, serializer)
        return Response(self.session_payload(schedule, serializer.validated_data["session_id"]))


class SessionTimeView(SchedulerView):
    """Handler for PUT /scheduler/{event_id}/{schedule_id}/sessions/{session_id}/time"""

    @maps_domain_errors
    def put(self, request: Request, event_id: str, schedule_id: str, session_id: str) -> Response:
        serializer = AdjustSessionTimeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        schedule = self.edit(request, event_id, schedule_id, serializer, session_id=session_id)
        return Response(ScheduleSerializer(schedule).data)


class MoveAthleteView(SchedulerView):
    """Handler for POST /scheduler/{event_id}/{schedule_id}/heats/move"""

    @maps_domain_errors
    def post(self, request: Request, event_id: str, schedule_id: str) -> Response:
        serializer = MoveAthleteToHeatSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        schedule = self.edit(request, event_id, schedule_id, serializer)
        return Response(self.session_payload(schedule, serializer.validated_data["session_id"]))


class HeatCollectionView(SchedulerView):
    """Handler for POST /scheduler/{event_id}/{schedule_id}/heats"""

    @maps_domain_errors
    def post(self, request: Request, event_id: str, schedule_id: str) -> Response:
        serializer = AddHeatSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        schedule = self.edit(request, event_id, schedule_id, serializer)
        return Response(
            self.session_payload(schedule, serializer.validated_data["session_id"]),
            status=status.HTTP_201_CREATED,
        )


class HeatDetailView(SchedulerView):
    """Handler for DELETE /scheduler/{event_id}/{schedule_id}/heats/{heat_id}"""

    @maps_domain_errors
    def delete(self, request: Request, event_id: str, schedule_id: str, heat_id: str) -> Response:
        data = request.data or request.query_params
        serializer = RemoveHeatSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        schedule = self.edit(request, event_id, schedule_id, serializer, heat_id=heat_id)
        return Response({"success": True, "version": schedule.version})


class ValidateView(SchedulerView):
    """Handler for GET /scheduler/{event_id}/{schedule_id}/validate"""

    @maps_domain_errors
    def get(self, request: Request, event_id: str, schedule_id: str) -> Response:
        result = self.service.validate(schedule_id, event_id=event_id)
        return Response(ValidationResultSerializer(result).data)


class AuditLogView(SchedulerView):
    """Handler for GET /scheduler/{event_id}/{schedule_id}/audit-log"""

    @maps_domain_errors
    def get(self, request: Request, event_id: str, schedule_id: str) -> Response:
        query = AuditLogQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        entries = self.service.audit_log(schedule_id, query.to_filter(), event_id=event_id)
        return Response(AuditLogEntrySerializer(entries, many=True).data)


class RevertView(SchedulerView):
    """Handler for POST /scheduler/{event_id}/{schedule_id}/revert"""

    @maps_domain_errors
    def post(self, request: Request, event_id: str, schedule_id: str) -> Response:
        serializer = RevertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expected = serializer.validated_data.get("expected_version")
        if expected is None:
            expected = self.service.current_version(schedule_id)
        schedule = self.service.revert(
            schedule_id,
            serializer.validated_data["version_id"],
            expected,
            self.user_id(request),
            event_id=event_id,
        )
        return Response(ScheduleSerializer(schedule).data)


class VersionListView(SchedulerView):
    """Handler for GET /scheduler/{event_id}/{schedule_id}/versions"""

    @maps_domain_errors
    def get(self, request: Request, event_id: str, schedule_id: str) -> Response:
        versions = self.service.list_versions(schedule_id, event_id=event_id)
        return Response(VersionInfoSerializer(versions, many=True).data)
