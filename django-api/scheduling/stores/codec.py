"""JSON snapshot codec for persisted schedule versions."""

from datetime import date, datetime
from typing import Any
from uuid import UUID

from scheduling.domain import (
    AthleteStatus,
    Capacity,
    Category,
    Day,
    EventId,
    Heat,
    HeatAssignment,
    Schedule,
    ScheduledAthlete,
    ScheduleId,
    Session,
    Wod,
)


def schedule_to_dict(schedule: Schedule) -> dict[str, Any]:
    return {
        "eventId": str(schedule.event_id),
        "scheduleId": str(schedule.schedule_id),
        "version": schedule.version,
        "competitionMode": schedule.competition_mode,
        "createdAt": schedule.created_at.isoformat(),
        "updatedAt": schedule.updated_at.isoformat(),
        "categories": [{"categoryId": c.category_id, "name": c.name} for c in schedule.categories],
        "wods": [{"wodId": w.wod_id, "name": w.name} for w in schedule.wods],
        "athletes": [
            {
                "athleteId": a.athlete_id,
                "name": a.name,
                "categoryId": a.category_id,
                "status": a.status.value,
            }
            for a in schedule.athletes
        ],
        "days": [_day_to_dict(day) for day in schedule.days],
    }


def _day_to_dict(day: Day) -> dict[str, Any]:
    return {
        "dayId": day.day_id,
        "date": day.date.isoformat(),
        "name": day.name,
        "startTime": day.start_time.isoformat(),
        "maxDayHours": day.max_day_hours,
        "lunchBreakHours": day.lunch_break_hours,
        "sessions": [_session_to_dict(session) for session in day.sessions],
    }


def _session_to_dict(session: Session) -> dict[str, Any]:
    return {
        "sessionId": session.session_id,
        "dayId": session.day_id,
        "wodId": session.wod_id,
        "categoryIds": list(session.category_ids),
        "startTime": session.start_time.isoformat(),
        "setupTime": session.setup_time,
        "heatDuration": session.heat_duration,
        "breakDuration": session.break_duration,
        "athletesPerHeat": session.athletes_per_heat,
        "heats": [
            {
                "heatId": heat.heat_id,
                "heatNumber": heat.heat_number,
                "categoryId": heat.category_id,
                "startTime": heat.start_time.isoformat(),
                "duration": heat.duration,
                "capacity": heat.capacity.value,
                "assignments": [
                    {"athleteId": a.athlete_id, "categoryId": a.category_id, "slot": a.slot}
                    for a in heat.assignments
                ],
            }
            for heat in session.heats
        ],
        "lastHeatNumber": session.last_heat_number,
    }


def schedule_from_dict(data: dict[str, Any]) -> Schedule:
    return Schedule(
        event_id=EventId(data["eventId"]),
        schedule_id=ScheduleId(UUID(data["scheduleId"])),
        version=data["version"],
        competition_mode=data["competitionMode"],
        created_at=datetime.fromisoformat(data["createdAt"]),
        updated_at=datetime.fromisoformat(data["updatedAt"]),
        categories=tuple(Category(c["categoryId"], c["name"]) for c in data["categories"]),
        wods=tuple(Wod(w["wodId"], w["name"]) for w in data["wods"]),
        athletes=tuple(
            ScheduledAthlete(
                athlete_id=a["athleteId"],
                name=a["name"],
                category_id=a["categoryId"],
                status=AthleteStatus(a["status"]),
            )
            for a in data["athletes"]
        ),
        days=tuple(_day_from_dict(day) for day in data["days"]),
    )


def _day_from_dict(data: dict[str, Any]) -> Day:
    return Day(
        day_id=data["dayId"],
        date=date.fromisoformat(data["date"]),
        name=data["name"],
        start_time=datetime.fromisoformat(data["startTime"]),
        max_day_hours=data["maxDayHours"],
        lunch_break_hours=data["lunchBreakHours"],
        sessions=tuple(_session_from_dict(s) for s in data["sessions"]),
    )


def _session_from_dict(data: dict[str, Any]) -> Session:
    return Session(
        session_id=data["sessionId"],
        day_id=data["dayId"],
        wod_id=data["wodId"],
        category_ids=tuple(data["categoryIds"]),
        start_time=datetime.fromisoformat(data["startTime"]),
        setup_time=data["setupTime"],
        heat_duration=data["heatDuration"],
        break_duration=data["breakDuration"],
        athletes_per_heat=data["athletesPerHeat"],
        heats=tuple(
            Heat(
                heat_id=h["heatId"],
                heat_number=h["heatNumber"],
                category_id=h["categoryId"],
                start_time=datetime.fromisoformat(h["startTime"]),
                duration=h["duration"],
                capacity=Capacity(h["capacity"]),
                assignments=tuple(
                    HeatAssignment(a["athleteId"], a["categoryId"], a["slot"])
                    for a in h["assignments"]
                ),
            )
            for h in data["heats"]
        ),
        last_heat_number=data.get("lastHeatNumber", len(data["heats"])),
    )
