"""Integration tests for the scheduler HTTP API.

Requests go through the process-wide engine backed by the Django store.
Run with: pytest tests/test_scheduler_api.py -v
"""

import pytest
from factories import EVENT_ID, generate_payload
from rest_framework.test import APIClient

from scheduling.models import AuditLogEntry, RegisteredAthlete, ScheduleVersion

UNKNOWN_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


def base(schedule_id, event_id=EVENT_ID):
    return f"/scheduler/{event_id}/{schedule_id}"


@pytest.fixture
def created(api_client: APIClient) -> dict:
    response = api_client.post(f"/scheduler/{EVENT_ID}", generate_payload(), HTTP_X_USER_ID="organizer-1")
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def sid(created) -> str:
    return created["scheduleId"]


def session(data, session_id):
    for day in data["days"]:
        for item in day["sessions"]:
            if item["sessionId"] == session_id:
                return item
    raise AssertionError(f"{session_id} not in response")


@pytest.mark.django_db
class TestGenerate:
    """Tests for POST /scheduler/{eventId}"""

    def test_generate_returns_version_one(self, created):
        """Given a valid constraint model, returns the new schedule."""
        assert created["eventId"] == EVENT_ID
        assert created["version"] == 1
        grace = session(created, "day-1:grace")
        assert [len(h["assignments"]) for h in grace["heats"]] == [8, 1, 3]
        assert grace["heats"][0]["startTime"] == "2025-11-17T08:10:00Z"
        assert created["days"][0]["usedMinutes"] == 130

    def test_generate_persists_snapshot_and_audit(self, sid):
        """Version 1 and its audit entry are stored together."""
        assert ScheduleVersion.objects.filter(schedule_id=sid).count() == 1
        entry = AuditLogEntry.objects.get(schedule_id=sid)
        assert entry.change_type == "generate"
        assert entry.user_id == "organizer-1"

    def test_generate_over_budget_returns_422(self, api_client: APIClient):
        """Given a day too short for its sessions, returns 422 and stores nothing."""
        response = api_client.post(
            f"/scheduler/{EVENT_ID}", generate_payload(maxDayHours=2), format="json"
        )

        assert response.status_code == 422
        assert response.json()["code"] == "CAPACITY_EXCEEDED"
        assert response.json()["overageMinutes"] == 70
        assert ScheduleVersion.objects.count() == 0

    def test_generate_malformed_returns_400(self, api_client: APIClient):
        """Given a malformed constraint model, returns 400."""
        response = api_client.post(f"/scheduler/{EVENT_ID}", generate_payload(athletesPerHeat=0))

        assert response.status_code == 400
        assert response.json()["code"] == "CONFIGURATION_ERROR"

    @pytest.mark.parametrize("key", ["days", "wods", "categories", "athletes"])
    def test_generate_non_object_entries_return_400(self, api_client: APIClient, key):
        """Given a list entry that is not an object, returns 400 and stores nothing."""
        response = api_client.post(
            f"/scheduler/{EVENT_ID}", generate_payload(**{key: ["oops"]}), format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "CONFIGURATION_ERROR"
        assert ScheduleVersion.objects.count() == 0

    def test_generate_uses_registered_roster(self, api_client: APIClient):
        """Given no athletes in the body, registered athletes are scheduled."""
        for i in range(1, 4):
            RegisteredAthlete.objects.create(
                event_id=EVENT_ID, athlete_id=f"reg-{i}", category_id="men", category_name="Men"
            )

        response = api_client.post(f"/scheduler/{EVENT_ID}", generate_payload(athletes=[]))

        assert response.status_code == 201
        assert session(response.json(), "day-1:grace")["heats"][0]["assignments"][2]["athleteId"] == "reg-3"

    def test_list_schedules_for_event(self, api_client: APIClient, sid):
        """GET /scheduler/{eventId} lists the latest snapshot of each schedule."""
        response = api_client.get(f"/scheduler/{EVENT_ID}")

        assert response.status_code == 200
        assert [s["scheduleId"] for s in response.json()] == [sid]


@pytest.mark.django_db
class TestScheduleDetail:
    """Tests for GET /scheduler/{eventId}/{scheduleId}"""

    def test_get_returns_latest(self, api_client: APIClient, sid):
        response = api_client.get(base(sid))
        assert response.status_code == 200
        assert response.json()["version"] == 1

    def test_get_invalid_id_returns_400(self, api_client: APIClient):
        response = api_client.get(base("not-a-uuid"))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SCHEDULE_ID"

    def test_get_unknown_returns_404(self, api_client: APIClient):
        response = api_client.get(base(UNKNOWN_ID))
        assert response.status_code == 404

    def test_get_under_other_event_returns_404(self, api_client: APIClient, sid):
        response = api_client.get(base(sid, event_id="evt-other"))
        assert response.status_code == 404

    def test_get_historical_version(self, api_client: APIClient, sid):
        api_client.post(f"{base(sid)}/heats", {"sessionId": "day-1:grace"})

        old = api_client.get(base(sid), {"version": 1}).json()
        latest = api_client.get(base(sid)).json()

        assert len(session(old, "day-1:grace")["heats"]) == 3
        assert len(session(latest, "day-1:grace")["heats"]) == 4

    def test_get_bad_version_param_returns_400(self, api_client: APIClient, sid):
        assert api_client.get(base(sid), {"version": "latest"}).status_code == 400


@pytest.mark.django_db
class TestEditEndpoints:
    def test_update_athlete_status(self, api_client: APIClient, sid):
        response = api_client.put(
            f"{base(sid)}/athletes/men-1", {"newStatus": "injured", "expectedVersion": 1}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == 2
        assert {a["athleteId"]: a["status"] for a in data["athletes"]}["men-1"] == "injured"

    def test_update_athlete_status_rejects_unknown_status(self, api_client: APIClient, sid):
        response = api_client.put(f"{base(sid)}/athletes/men-1", {"newStatus": "retired"})
        assert response.status_code == 400

    def test_terminal_status_transition_returns_409(self, api_client: APIClient, sid):
        api_client.put(f"{base(sid)}/athletes/men-1", {"newStatus": "withdrawn"})

        response = api_client.put(f"{base(sid)}/athletes/men-1", {"newStatus": "active"})

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_STATUS_TRANSITION"

    def test_substitute_registered_athlete(self, api_client: APIClient, sid):
        RegisteredAthlete.objects.create(
            event_id=EVENT_ID, athlete_id="late-1", name="Late One", category_id="men"
        )

        response = api_client.post(
            f"{base(sid)}/substitute",
            {"sessionId": "day-1:grace", "oldAthleteId": "men-9", "newAthleteId": "late-1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["sessionId"] == "day-1:grace"
        assert data["scheduleVersion"] == 2
        assert data["heats"][1]["assignments"] == [
            {"athleteId": "late-1", "categoryId": "men", "slot": 1}
        ]

    def test_substitute_same_athlete_returns_400(self, api_client: APIClient, sid):
        response = api_client.post(
            f"{base(sid)}/substitute",
            {"sessionId": "day-1:grace", "oldAthleteId": "men-9", "newAthleteId": "men-9"},
        )
        assert response.status_code == 400

    def test_swap_returns_updated_session(self, api_client: APIClient, sid):
        response = api_client.post(
            f"{base(sid)}/swap",
            {"sessionId": "day-1:grace", "athlete1Id": "men-1", "athlete2Id": "men-9"},
        )

        assert response.status_code == 200
        heats = response.json()["heats"]
        assert heats[0]["assignments"][0]["athleteId"] == "men-9"
        assert heats[1]["assignments"][0]["athleteId"] == "men-1"

    def test_swap_across_categories_returns_issues(self, api_client: APIClient, sid):
        """A validator rejection surfaces its issue list."""
        response = api_client.post(
            f"{base(sid)}/swap",
            {"sessionId": "day-1:grace", "athlete1Id": "men-1", "athlete2Id": "women-1"},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_FAILED"
        assert {issue["kind"] for issue in body["issues"]} == {"category_mismatch"}
        assert api_client.get(base(sid)).json()["version"] == 1

    def test_adjust_session_time(self, api_client: APIClient, sid):
        response = api_client.put(
            f"{base(sid)}/sessions/day-1:fran/time", {"newStartTime": "2025-11-17T12:00:00Z"}
        )

        assert response.status_code == 200
        fran = session(response.json(), "day-1:fran")
        assert [h["startTime"] for h in fran["heats"]] == [
            "2025-11-17T12:00:00Z",
            "2025-11-17T12:20:00Z",
            "2025-11-17T12:40:00Z",
        ]

    def test_adjust_session_time_over_budget_returns_422(self, api_client: APIClient, sid):
        response = api_client.put(
            f"{base(sid)}/sessions/day-1:fran/time", {"newStartTime": "2025-11-17T18:00:00Z"}
        )
        assert response.status_code == 422
        assert response.json()["code"] == "CAPACITY_EXCEEDED"
        assert response.json()["overageMinutes"] == 55

    def test_move_athlete(self, api_client: APIClient, sid):
        response = api_client.post(
            f"{base(sid)}/heats/move",
            {"sessionId": "day-1:grace", "athleteId": "men-1", "targetHeatId": "day-1:grace:h2"},
        )

        assert response.status_code == 200
        assert [a["athleteId"] for a in response.json()["heats"][1]["assignments"]] == ["men-9", "men-1"]

    def test_move_into_full_heat_returns_409(self, api_client: APIClient, sid):
        response = api_client.post(
            f"{base(sid)}/heats/move",
            {"sessionId": "day-1:grace", "athleteId": "men-9", "targetHeatId": "day-1:grace:h1"},
        )
        assert response.status_code == 409
        assert response.json()["code"] == "HEAT_FULL"

    def test_add_heat(self, api_client: APIClient, sid):
        response = api_client.post(f"{base(sid)}/heats", {"sessionId": "day-1:grace"})

        assert response.status_code == 201
        heat = response.json()["heats"][-1]
        assert heat["heatId"] == "day-1:grace:h4"
        assert heat["assignments"] == []

    def test_unknown_session_returns_404(self, api_client: APIClient, sid):
        response = api_client.post(f"{base(sid)}/heats", {"sessionId": "day-9:grace"})
        assert response.status_code == 404
        assert response.json()["code"] == "SESSION_NOT_FOUND"


@pytest.mark.django_db
class TestRemoveHeat:
    """Tests for DELETE /scheduler/{eventId}/{scheduleId}/heats/{heatId}"""

    def test_non_empty_heat_without_force_returns_409(self, api_client: APIClient, sid):
        response = api_client.delete(
            f"{base(sid)}/heats/day-1:grace:h3", {"sessionId": "day-1:grace"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["code"] == "HEAT_NOT_EMPTY"
        assert AuditLogEntry.objects.filter(schedule_id=sid).count() == 1

    def test_force_remove(self, api_client: APIClient, sid):
        response = api_client.delete(
            f"{base(sid)}/heats/day-1:grace:h3",
            {"sessionId": "day-1:grace", "forceRemove": True},
            format="json",
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "version": 2}
        last = AuditLogEntry.objects.filter(schedule_id=sid).order_by("-sequence_number").first()
        assert last.change_type == "remove_heat"

    def test_parameters_may_come_from_query_string(self, api_client: APIClient, sid):
        api_client.post(f"{base(sid)}/heats", {"sessionId": "day-1:grace"})

        response = api_client.delete(
            f"{base(sid)}/heats/day-1:grace:h4?sessionId=day-1:grace"
        )

        assert response.status_code == 200
        assert response.json()["version"] == 3


@pytest.mark.django_db
class TestVersioning:
    def test_stale_expected_version_returns_409(self, api_client: APIClient, sid):
        api_client.post(f"{base(sid)}/heats", {"sessionId": "day-1:grace", "expectedVersion": 1})

        response = api_client.post(
            f"{base(sid)}/heats", {"sessionId": "day-1:grace", "expectedVersion": 1}
        )

        assert response.status_code == 409
        assert response.json() == {
            "code": "VERSION_CONFLICT",
            "message": "Schedule was modified; refetch and retry",
            "expectedVersion": 1,
            "currentVersion": 2,
        }

    def test_revert_commits_new_version(self, api_client: APIClient, sid):
        api_client.post(f"{base(sid)}/heats", {"sessionId": "day-1:grace"})

        response = api_client.post(f"{base(sid)}/revert", {"versionId": 1, "expectedVersion": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == 3
        assert len(session(data, "day-1:grace")["heats"]) == 3

    def test_revert_unknown_version_returns_404(self, api_client: APIClient, sid):
        response = api_client.post(f"{base(sid)}/revert", {"versionId": 9})
        assert response.status_code == 404
        assert response.json()["code"] == "VERSION_NOT_FOUND"

    def test_list_versions(self, api_client: APIClient, sid):
        api_client.post(f"{base(sid)}/heats", {"sessionId": "day-1:grace"}, HTTP_X_USER_ID="judge-1")

        response = api_client.get(f"{base(sid)}/versions")

        assert response.status_code == 200
        assert [(v["version"], v["changeType"], v["createdBy"]) for v in response.json()] == [
            (1, "generate", "organizer-1"),
            (2, "add_heat", "judge-1"),
        ]


@pytest.mark.django_db
class TestValidateAndAudit:
    def test_validate_reports_statistics(self, api_client: APIClient, sid):
        response = api_client.get(f"{base(sid)}/validate")

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["issues"] == []
        assert body["statistics"]["heats"] == 6

    def test_audit_log_lists_entries_in_order(self, api_client: APIClient, sid):
        api_client.post(f"{base(sid)}/heats", {"sessionId": "day-1:grace"}, HTTP_X_USER_ID="judge-1")

        response = api_client.get(f"{base(sid)}/audit-log")

        entries = response.json()
        assert [e["sequenceNumber"] for e in entries] == [1, 2]
        assert entries[1]["changeType"] == "add_heat"
        assert entries[1]["beforeVersion"] == 1
        assert entries[1]["afterVersion"] == 2
        assert entries[1]["details"] == {"session_id": "day-1:grace", "category_id": None}

    def test_audit_log_filters(self, api_client: APIClient, sid):
        api_client.post(f"{base(sid)}/heats", {"sessionId": "day-1:grace"}, HTTP_X_USER_ID="judge-1")

        by_user = api_client.get(f"{base(sid)}/audit-log", {"userId": "judge-1"}).json()
        by_type = api_client.get(f"{base(sid)}/audit-log", {"changeType": "generate"}).json()

        assert [e["sequenceNumber"] for e in by_user] == [2]
        assert [e["sequenceNumber"] for e in by_type] == [1]

    def test_audit_log_rejects_unknown_change_type(self, api_client: APIClient, sid):
        response = api_client.get(f"{base(sid)}/audit-log", {"changeType": "rename"})
        assert response.status_code == 400
