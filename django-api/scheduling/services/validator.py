"""
Schedule validation logic.

These checks verify that a schedule snapshot is internally consistent. They
run after generation and on every candidate version before it is committed;
a failing result blocks the commit. Validation never mutates the schedule.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from scheduling.domain.models import Heat, Schedule
from scheduling.domain.value_objects import AthleteStatus


class IssueKind(Enum):
    DUPLICATE_ASSIGNMENT = "duplicate_assignment"
    DUPLICATE_WOD_ASSIGNMENT = "duplicate_wod_assignment"
    HEAT_OVER_CAPACITY = "heat_over_capacity"
    UNKNOWN_ATHLETE = "unknown_athlete"
    CATEGORY_MISMATCH = "category_mismatch"
    HEAT_OVERLAP = "heat_overlap"
    ATHLETE_TIME_CONFLICT = "athlete_time_conflict"
    DAY_OVER_BUDGET = "day_over_budget"
    EMPTY_SESSION = "empty_session"


@dataclass(frozen=True)
class Issue:
    """A single structural violation."""

    kind: IssueKind
    message: str
    day_id: str | None = None
    session_id: str | None = None
    heat_id: str | None = None
    athlete_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {"kind": self.kind.value, "message": self.message}
        for key, value in (
            ("dayId", self.day_id),
            ("sessionId", self.session_id),
            ("heatId", self.heat_id),
            ("athleteId", self.athlete_id),
        ):
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class ValidationResult:
    """Full validation report for a schedule."""

    valid: bool
    issues: tuple[Issue, ...]
    statistics: dict[str, Any] = field(default_factory=dict)

    def issues_of(self, kind: IssueKind) -> list[Issue]:
        return [issue for issue in self.issues if issue.kind == kind]


def check_no_duplicate_assignments(schedule: Schedule) -> list[Issue]:
    """(a) An athlete appears in at most one heat per session."""
    issues = []
    for session in schedule.sessions:
        counts = Counter(session.athlete_ids)
        for athlete_id, count in counts.items():
            if count > 1:
                issues.append(Issue(
                    IssueKind.DUPLICATE_ASSIGNMENT,
                    f"Athlete {athlete_id} is assigned {count} times in session {session.session_id}",
                    session_id=session.session_id,
                    athlete_id=athlete_id,
                ))
    return issues


def check_one_session_per_wod(schedule: Schedule) -> list[Issue]:
    """An athlete appears in at most one session per WOD."""
    issues = []
    seen: dict[tuple[str, str], str] = {}
    for session in schedule.sessions:
        for athlete_id in set(session.athlete_ids):
            key = (session.wod_id, athlete_id)
            first = seen.setdefault(key, session.session_id)
            if first != session.session_id:
                issues.append(Issue(
                    IssueKind.DUPLICATE_WOD_ASSIGNMENT,
                    f"Athlete {athlete_id} is in sessions {first} and {session.session_id} of WOD {session.wod_id}",
                    session_id=session.session_id,
                    athlete_id=athlete_id,
                ))
    return issues


def check_heat_capacity(schedule: Schedule) -> list[Issue]:
    """(b) No heat holds more athletes than its capacity."""
    issues = []
    for session in schedule.sessions:
        for heat in session.heats:
            if len(heat.assignments) > heat.capacity.value:
                issues.append(Issue(
                    IssueKind.HEAT_OVER_CAPACITY,
                    f"Heat {heat.heat_id} has {len(heat.assignments)} athletes for capacity {heat.capacity.value}",
                    session_id=session.session_id,
                    heat_id=heat.heat_id,
                ))
    return issues


def check_assignment_references(schedule: Schedule) -> list[Issue]:
    """(c) Assignments reference rostered athletes of the heat's category."""
    roster = {a.athlete_id: a for a in schedule.athletes}
    issues = []
    for session in schedule.sessions:
        for heat in session.heats:
            if heat.category_id is not None and heat.category_id not in session.category_ids:
                issues.append(Issue(
                    IssueKind.CATEGORY_MISMATCH,
                    f"Heat {heat.heat_id} category {heat.category_id} is not run in session {session.session_id}",
                    session_id=session.session_id,
                    heat_id=heat.heat_id,
                ))
            for assignment in heat.assignments:
                athlete = roster.get(assignment.athlete_id)
                if athlete is None:
                    issues.append(Issue(
                        IssueKind.UNKNOWN_ATHLETE,
                        f"Athlete {assignment.athlete_id} is not on the event roster",
                        session_id=session.session_id,
                        heat_id=heat.heat_id,
                        athlete_id=assignment.athlete_id,
                    ))
                    continue
                expected = heat.category_id or athlete.category_id
                if athlete.category_id != expected or assignment.category_id != expected:
                    issues.append(Issue(
                        IssueKind.CATEGORY_MISMATCH,
                        f"Athlete {athlete.athlete_id} ({athlete.category_id}) is in a {expected} heat",
                        session_id=session.session_id,
                        heat_id=heat.heat_id,
                        athlete_id=athlete.athlete_id,
                    ))
    return issues


def check_heat_timing(schedule: Schedule) -> list[Issue]:
    """(d) Heat start times within a session increase and never overlap."""
    issues = []
    for session in schedule.sessions:
        for previous, heat in zip(session.heats, session.heats[1:]):
            if heat.start_time <= previous.start_time or heat.start_time < previous.end_time:
                issues.append(Issue(
                    IssueKind.HEAT_OVERLAP,
                    f"Heat {heat.heat_id} starts before heat {previous.heat_id} ends",
                    session_id=session.session_id,
                    heat_id=heat.heat_id,
                ))
    return issues


def check_athletes_not_double_booked(schedule: Schedule) -> list[Issue]:
    """An athlete is never in two heats of one day that run at the same time."""
    issues = []
    for day in schedule.days:
        booked: dict[str, list[Heat]] = {}
        for session in day.sessions:
            for heat in session.heats:
                for athlete_id in heat.athlete_ids:
                    booked.setdefault(athlete_id, []).append(heat)
        for athlete_id, heats in booked.items():
            heats.sort(key=lambda h: h.start_time)
            for previous, heat in zip(heats, heats[1:]):
                if heat.start_time < previous.end_time:
                    issues.append(Issue(
                        IssueKind.ATHLETE_TIME_CONFLICT,
                        f"Athlete {athlete_id} is in heats {previous.heat_id} and {heat.heat_id} at the same time",
                        day_id=day.day_id,
                        heat_id=heat.heat_id,
                        athlete_id=athlete_id,
                    ))
    return issues


def check_day_budget(schedule: Schedule) -> list[Issue]:
    """(e) Every day's sessions fit its hours budget and its opening hours."""
    issues = []
    for day in schedule.days:
        if day.used_minutes > day.available_minutes:
            issues.append(Issue(
                IssueKind.DAY_OVER_BUDGET,
                f"Day {day.day_id} uses {day.used_minutes} of {day.available_minutes} minutes",
                day_id=day.day_id,
            ))
        for session in day.sessions:
            if session.setup_start < day.start_time:
                issues.append(Issue(
                    IssueKind.DAY_OVER_BUDGET,
                    f"Session {session.session_id} starts before day {day.day_id} begins",
                    day_id=day.day_id,
                    session_id=session.session_id,
                ))
            elif session.end_time > day.closing_time:
                issues.append(Issue(
                    IssueKind.DAY_OVER_BUDGET,
                    f"Session {session.session_id} ends after day {day.day_id} closes",
                    day_id=day.day_id,
                    session_id=session.session_id,
                ))
    return issues


def check_sessions_have_heats(schedule: Schedule) -> list[Issue]:
    """(f) Empty heats are allowed; a session without heats is not."""
    return [
        Issue(
            IssueKind.EMPTY_SESSION,
            f"Session {session.session_id} has no heats",
            day_id=session.day_id,
            session_id=session.session_id,
        )
        for session in schedule.sessions
        if not session.heats
    ]


CHECKS = (
    check_no_duplicate_assignments,
    check_one_session_per_wod,
    check_heat_capacity,
    check_assignment_references,
    check_heat_timing,
    check_athletes_not_double_booked,
    check_day_budget,
    check_sessions_have_heats,
)


def calculate_statistics(schedule: Schedule) -> dict[str, Any]:
    heats = [heat for session in schedule.sessions for heat in session.heats]
    assignments = sum(len(heat.assignments) for heat in heats)
    capacity = sum(heat.capacity.value for heat in heats)
    assigned = {athlete_id for session in schedule.sessions for athlete_id in session.athlete_ids}
    active = [a for a in schedule.athletes if a.status == AthleteStatus.ACTIVE]
    return {
        "days": len(schedule.days),
        "sessions": len(schedule.sessions),
        "heats": len(heats),
        "emptyHeats": sum(1 for heat in heats if not heat.assignments),
        "assignments": assignments,
        "athletes": len(schedule.athletes),
        "unassignedActiveAthletes": sum(1 for a in active if a.athlete_id not in assigned),
        "totalCapacity": capacity,
        "utilization": round(assignments / capacity, 4) if capacity else 0.0,
        "dayUsage": {
            day.day_id: {"usedMinutes": day.used_minutes, "availableMinutes": day.available_minutes}
            for day in schedule.days
        },
    }


def validate_schedule(schedule: Schedule) -> ValidationResult:
    """Run every check against a snapshot."""
    issues = tuple(issue for check in CHECKS for issue in check(schedule))
    return ValidationResult(
        valid=not issues,
        issues=issues,
        statistics=calculate_statistics(schedule),
    )
