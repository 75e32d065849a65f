from django.urls import path

from scheduling.handlers import (
    AthleteStatusView,
    AuditLogView,
    HeatCollectionView,
    HeatDetailView,
    MoveAthleteView,
    RevertView,
    ScheduleCollectionView,
    ScheduleDetailView,
    SessionTimeView,
    SubstituteAthleteView,
    SwapAthletesView,
    ValidateView,
    VersionListView,
)

schedule = "scheduler/<str:event_id>/<str:schedule_id>"

urlpatterns = [
    path("scheduler/<str:event_id>", ScheduleCollectionView.as_view(), name="schedule-list"),
    path(schedule, ScheduleDetailView.as_view(), name="schedule-detail"),
    path(
        f"{schedule}/athletes/<str:athlete_id>",
        AthleteStatusView.as_view(),
        name="schedule-athlete-status",
    ),
    path(f"{schedule}/substitute", SubstituteAthleteView.as_view(), name="schedule-substitute"),
    path(f"{schedule}/swap", SwapAthletesView.as_view(), name="schedule-swap"),
    path(
        f"{schedule}/sessions/<str:session_id>/time",
        SessionTimeView.as_view(),
        name="schedule-session-time",
    ),
    path(f"{schedule}/heats/move", MoveAthleteView.as_view(), name="schedule-heat-move"),
    path(f"{schedule}/heats", HeatCollectionView.as_view(), name="schedule-heat-list"),
    path(f"{schedule}/heats/<str:heat_id>", HeatDetailView.as_view(), name="schedule-heat-detail"),
    path(f"{schedule}/validate", ValidateView.as_view(), name="schedule-validate"),
    path(f"{schedule}/audit-log", AuditLogView.as_view(), name="schedule-audit-log"),
    path(f"{schedule}/revert", RevertView.as_view(), name="schedule-revert"),
    path(f"{schedule}/versions", VersionListView.as_view(), name="schedule-versions"),
]
