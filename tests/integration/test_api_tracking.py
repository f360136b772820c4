"""Integration tests for the /api/zeit routes."""

import pytest

FOLDERS = "/api/zeit/folders"
MODULES = "/api/zeit/modules"
ENTRIES = "/api/zeit/entries"


@pytest.fixture
def api(client, auth_headers):
    """Small helper bound to the signed-in user."""

    class Api:
        def post(self, path: str, body: dict) -> dict:
            response = client.post(path, json=body, headers=auth_headers)
            assert response.status_code == 201, response.text
            return response.json()["data"]

        def state(self) -> dict:
            response = client.get("/api/zeit/state", headers=auth_headers)
            assert response.status_code == 200, response.text
            return response.json()["data"]

    return Api()


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["status"] == "ok"


class TestState:
    """Test GET /api/zeit/state."""

    def test_new_user_state(self, api):
        state = api.state()

        assert state["folders"] == []
        assert state["modules"] == []
        assert state["entries"] == []
        assert state["profile"]["email"] == "ada@timekeeper.dev"
        assert state["profile"]["timezone"] == "Europe/Berlin"


class TestFolders:
    """Test folder routes."""

    def test_order_is_sibling_count(self, api):
        first = api.post(FOLDERS, {"name": "One"})
        second = api.post(FOLDERS, {"name": "Two"})
        child = api.post(FOLDERS, {"name": "Child", "parentId": first["id"]})

        assert [first["order"], second["order"], child["order"]] == [0, 1, 0]

    def test_cycle_rejected(self, client, api, auth_headers):
        root = api.post(FOLDERS, {"name": "Root"})
        child = api.post(FOLDERS, {"name": "Child", "parentId": root["id"]})

        response = client.patch(f"{FOLDERS}/{root['id']}", json={"parentId": child["id"]}, headers=auth_headers)

        assert response.status_code == 400
        assert "subfolders" in response.json()["error"]

    def test_move_to_root(self, client, api, auth_headers):
        root = api.post(FOLDERS, {"name": "Root"})
        child = api.post(FOLDERS, {"name": "Child", "parentId": root["id"]})

        response = client.patch(f"{FOLDERS}/{child['id']}", json={"parentId": None}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["parentId"] is None

    def test_missing_name(self, client, auth_headers):
        response = client.post(FOLDERS, json={}, headers=auth_headers)
        assert response.status_code == 400

    def test_delete_cascades(self, client, api, auth_headers):
        root = api.post(FOLDERS, {"name": "Root"})
        child = api.post(FOLDERS, {"name": "Child", "parentId": root["id"]})
        module = api.post(MODULES, {"name": "Thesis", "folderId": child["id"]})
        api.post(ENTRIES, {"moduleId": module["id"], "activityType": "Writing", "durationHours": 1, "timestamp": "2024-03-01"})
        other = api.post(FOLDERS, {"name": "Other"})

        response = client.delete(f"{FOLDERS}/{root['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"data": {"success": True}}
        state = api.state()
        assert [f["id"] for f in state["folders"]] == [other["id"]]
        assert state["modules"] == []
        assert state["entries"] == []

    def test_other_users_folder_is_not_found(self, client, api, register_and_login):
        folder = api.post(FOLDERS, {"name": "Mine"})
        intruder = register_and_login("grace@timekeeper.dev")

        response = client.delete(f"{FOLDERS}/{folder['id']}", headers=intruder)

        assert response.status_code == 404
        assert response.json()["error"] == f"Folder not found: {folder['id']}"
        assert len(api.state()["folders"]) == 1


class TestModules:
    """Test module routes."""

    def test_create_and_clear_target(self, client, api, auth_headers):
        folder = api.post(FOLDERS, {"name": "Semester"})
        module = api.post(MODULES, {"name": "Thesis", "folderId": folder["id"], "targetHours": 40})
        assert module["targetHours"] == 40
        assert module["order"] == 0

        response = client.patch(f"{MODULES}/{module['id']}", json={"targetHours": None}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["targetHours"] is None
        assert response.json()["data"]["name"] == "Thesis"

    def test_unknown_folder(self, client, auth_headers):
        response = client.post(MODULES, json={"name": "Thesis", "folderId": "folder_missing"}, headers=auth_headers)
        assert response.status_code == 404


class TestEntries:
    """Test entry routes."""

    @pytest.fixture
    def module(self, api):
        folder = api.post(FOLDERS, {"name": "Semester"})
        return api.post(MODULES, {"name": "Thesis", "folderId": folder["id"]})

    def test_quarter_hours_round_trip(self, api, module):
        entry = api.post(
            ENTRIES,
            {"moduleId": module["id"], "activityType": "Reading", "durationHours": 1.25, "timestamp": "2024-03-01"},
        )

        assert entry["durationHours"] == 1.25
        assert api.state()["entries"][0]["durationHours"] == 1.25

    def test_sub_minute_rejected(self, client, auth_headers, module):
        response = client.post(
            ENTRIES,
            json={"moduleId": module["id"], "activityType": "Reading", "durationHours": 0.001, "timestamp": "2024-03-01"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Duration must be at least one minute."}

    def test_bad_date_rejected(self, client, auth_headers, module):
        response = client.post(
            ENTRIES,
            json={"moduleId": module["id"], "activityType": "Reading", "durationHours": 1, "timestamp": "03/01/2024"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("timestamp")

    def test_update_and_delete(self, client, api, auth_headers, module):
        entry = api.post(
            ENTRIES,
            {"moduleId": module["id"], "activityType": "Reading", "durationHours": 1, "timestamp": "2024-03-01"},
        )

        response = client.patch(f"{ENTRIES}/{entry['id']}", json={"description": "Ch. 2"}, headers=auth_headers)
        assert response.json()["data"]["description"] == "Ch. 2"
        assert response.json()["data"]["durationHours"] == 1

        response = client.delete(f"{ENTRIES}/{entry['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert api.state()["entries"] == []


class TestProfile:
    """Test PATCH /api/zeit/profile."""

    def test_upsert(self, client, auth_headers):
        response = client.patch(
            "/api/zeit/profile", json={"timezone": "UTC", "weeklyFocusGoalMinutes": 600}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["timezone"] == "UTC"
        assert data["weeklyFocusGoalMinutes"] == 600
        assert data["defaultEntryDurationMinutes"] == 60


class TestTimerSessions:
    """Test POST /api/zeit/timer-sessions."""

    def test_duration_computed(self, api):
        session = api.post(
            "/api/zeit/timer-sessions",
            {"startedAt": "2024-03-01T09:00:00+00:00", "stoppedAt": "2024-03-01T09:25:00+00:00"},
        )

        assert session["durationSeconds"] == 1500
        assert session["moduleId"] is None

    def test_stop_before_start(self, client, auth_headers):
        response = client.post(
            "/api/zeit/timer-sessions",
            json={"startedAt": "2024-03-01T09:00:00+00:00", "stoppedAt": "2024-03-01T08:00:00+00:00"},
            headers=auth_headers,
        )
        assert response.status_code == 400
