from scheduling.handlers.views import (
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

__all__ = [
    "ScheduleCollectionView",
    "ScheduleDetailView",
    "AthleteStatusView",
    "SubstituteAthleteView",
    "SwapAthletesView",
    "SessionTimeView",
    "MoveAthleteView",
    "HeatCollectionView",
    "HeatDetailView",
    "ValidateView",
    "AuditLogView",
    "RevertView",
    "VersionListView",
]
