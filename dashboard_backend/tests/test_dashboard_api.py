import json

from fastapi.testclient import TestClient

from src.api.main import create_app
from src.api.settings import get_settings
from src.api.storage import InMemoryKeyValueStorage

from conftest import NOW

MINUTE = 60 * 1000


class TestHealth:
    def test_health(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["message"] == "Healthy"


class TestTaskEndpoints:
    def test_create_list_update_delete(self, client):
        r = client.post("/api/v1/tasks/", json={"title": "  Fix build  ", "priority": "HIGH", "tags": ["ci", " ", "ci"]})
        assert r.status_code == 201, r.text
        task = r.json()
        assert task["title"] == "Fix build"
        assert task["status"] == "TODO"
        assert task["priority"] == "HIGH"
        assert task["createdAt"] == NOW

        r = client.get("/api/v1/tasks/")
        assert [t["id"] for t in r.json()] == [task["id"]]

        r = client.patch(f"/api/v1/tasks/{task['id']}", json={"description": "flaky test"})
        assert r.status_code == 200
        assert r.json()["description"] == "flaky test"
        assert r.json()["title"] == "Fix build"

        r = client.delete(f"/api/v1/tasks/{task['id']}")
        assert r.status_code == 204
        assert client.get("/api/v1/tasks/").json() == []

    def test_blank_title_becomes_untitled(self, client):
        r = client.post("/api/v1/tasks/", json={"title": "   "})
        assert r.json()["title"] == "Untitled"

    def test_move_done_back_to_todo(self, client):
        task = client.post("/api/v1/tasks/", json={"title": "a"}).json()
        r = client.post(f"/api/v1/tasks/{task['id']}/move", json={"status": "DONE"})
        assert r.json()["status"] == "DONE"
        r = client.post(f"/api/v1/tasks/{task['id']}/move", json={"status": "TODO"})
        assert r.json()["status"] == "TODO"

    def test_filter_by_status(self, client):
        a = client.post("/api/v1/tasks/", json={"title": "a"}).json()
        client.post("/api/v1/tasks/", json={"title": "b", "status": "DONE"})
        r = client.get("/api/v1/tasks/", params={"status": "TODO"})
        assert [t["id"] for t in r.json()] == [a["id"]]

    def test_cycle_priority_wraps(self, client):
        task = client.post("/api/v1/tasks/", json={"title": "a", "priority": "CRITICAL"}).json()
        r = client.post(f"/api/v1/tasks/{task['id']}/cycle-priority")
        assert r.json()["priority"] == "LOW"

    def test_unknown_task_is_404(self, client):
        assert client.patch("/api/v1/tasks/missing", json={"title": "x"}).status_code == 404
        assert client.post("/api/v1/tasks/missing/move", json={"status": "DONE"}).status_code == 404
        r = client.delete("/api/v1/tasks/missing")
        assert r.status_code == 404
        assert r.json()["detail"] == "Task not found"

    def test_invalid_status_uses_error_envelope(self, client):
        task = client.post("/api/v1/tasks/", json={"title": "a"}).json()
        r = client.post(f"/api/v1/tasks/{task['id']}/move", json={"status": "BLOCKED"})
        assert r.status_code == 422
        body = r.json()
        assert body["error"] == "ValidationError"
        assert body["message"] == "Request validation failed"
        assert isinstance(body["detail"], list)


class TestNoteEndpoints:
    def test_new_notes_are_listed_first(self, client):
        client.post("/api/v1/notes/", json={"content": "older"})
        client.post("/api/v1/notes/", json={"content": "newer", "color": "purple"})
        notes = client.get("/api/v1/notes/").json()
        assert [n["content"] for n in notes] == ["newer", "older"]
        assert notes[0]["color"] == "purple"

    def test_reorder(self, client):
        for text in ("c", "b", "a"):
            client.post("/api/v1/notes/", json={"content": text})
        r = client.post("/api/v1/notes/reorder", json={"from_index": 2, "to_index": 0})
        assert r.status_code == 200
        assert [n["content"] for n in r.json()] == ["c", "a", "b"]

    def test_reorder_out_of_range_is_400(self, client):
        client.post("/api/v1/notes/", json={"content": "only"})
        r = client.post("/api/v1/notes/reorder", json={"from_index": 0, "to_index": 5})
        assert r.status_code == 400

    def test_tags(self, client):
        note = client.post("/api/v1/notes/", json={"content": "x"}).json()
        r = client.post(f"/api/v1/notes/{note['id']}/tags", json={"tag": "idea"})
        assert r.json()["tags"] == ["idea"]
        r = client.delete(f"/api/v1/notes/{note['id']}/tags/idea")
        assert r.json()["tags"] == []

    def test_unknown_note_is_404(self, client):
        assert client.delete("/api/v1/notes/missing").status_code == 404


class TestSnippetEndpoints:
    def test_create_and_search(self, client):
        r = client.post("/api/v1/snippets/", json={"title": "", "code": "SELECT 1;", "language": "SQL"})
        assert r.status_code == 201
        assert r.json()["title"] == "Untitled Snippet"
        assert r.json()["language"] == "sql"
        client.post("/api/v1/snippets/", json={"title": "Debounce", "code": "...", "tags": ["perf"]})

        assert [s["title"] for s in client.get("/api/v1/snippets/").json()] == ["Debounce", "Untitled Snippet"]
        found = client.get("/api/v1/snippets/", params={"q": "PERF"}).json()
        assert [s["title"] for s in found] == ["Debounce"]


class TestFocusAndCaffeine:
    def test_caffeine_preset_and_metrics(self, client):
        r = client.post("/api/v1/caffeine", json={"preset": "espresso"})
        assert r.status_code == 201
        assert r.json()["amount"] == 80

        status = client.get("/api/v1/metrics/caffeine", params={"now": NOW + 10 * MINUTE}).json()
        assert 0 < status["activeMg"] < 80
        assert status["peakAt"] == NOW + 45 * MINUTE
        assert status["pastPeak"] is False
        assert status["peakDisplay"] == "12:45"

        later = client.get("/api/v1/metrics/caffeine", params={"now": NOW + 60 * MINUTE}).json()
        assert later["peakDisplay"] == "Past Peak"

    def test_caffeine_requires_amount_or_preset(self, client):
        assert client.post("/api/v1/caffeine", json={}).status_code == 422

    def test_clear_caffeine(self, client):
        client.post("/api/v1/caffeine", json={"amount": 120})
        assert client.delete("/api/v1/caffeine").json() == {"cleared": 1}
        status = client.get("/api/v1/metrics/caffeine").json()
        assert status["activeMg"] == 0
        assert status["peakAt"] is None

    def test_sessions_feed_velocity_and_heatmap(self, client):
        client.post("/api/v1/sessions", json={"duration_minutes": 25})
        client.post("/api/v1/sessions", json={"duration_minutes": 50})
        velocity = client.get("/api/v1/metrics/velocity").json()
        assert len(velocity) == 7
        assert velocity[-1]["minutes"] == 75
        heatmap = client.get("/api/v1/metrics/heatmap").json()
        assert len(heatmap) == 180
        assert heatmap[-1]["level"] == 3
        assert client.get("/api/v1/metrics/summary").json()["totalFocusMinutes"] == 75

    def test_timer_completion_logs_session(self, client):
        r = client.post("/api/v1/timer/start")
        assert r.json()["running"] is True
        assert r.json()["display"] == "25:00"
        r = client.post("/api/v1/timer/tick", json={"seconds": 25 * 60})
        body = r.json()
        assert body["running"] is False
        assert body["completedSession"]["durationMinutes"] == 25
        assert len(client.get("/api/v1/sessions").json()) == 1

    def test_timer_mode_switch(self, client):
        r = client.post("/api/v1/timer/mode", json={"mode": "shortBreak"})
        assert r.json()["display"] == "05:00"
        assert r.json()["running"] is False

    def test_distribution(self, client):
        client.post("/api/v1/tasks/", json={"title": "a", "status": "DONE"})
        dist = client.get("/api/v1/metrics/distribution").json()
        assert [d["label"] for d in dist] == ["Todo", "WIP", "Review", "Done"]
        assert dist[-1]["count"] == 1


class TestDocumentEndpoints:
    def test_settings_updates_are_persisted(self, client, storage):
        assert client.put("/api/v1/document/theme", json={"theme": "dracula"}).status_code == 200
        client.patch("/api/v1/document/background", json={"opacity": 0.5})
        client.patch("/api/v1/document/tools", json={"showCaffeineCounter": True})
        saved = json.loads(storage.get("night_shift_db"))
        assert saved["theme"] == "dracula"
        assert saved["backgroundConfig"]["opacity"] == 0.5
        assert saved["backgroundConfig"]["type"] == "image"
        assert saved["toolsConfig"]["showCaffeineCounter"] is True
        assert saved["lastSavedAt"] == NOW

    def test_unknown_theme_is_rejected(self, client):
        assert client.put("/api/v1/document/theme", json={"theme": "solarized"}).status_code == 422

    def test_export_download(self, client):
        client.post("/api/v1/tasks/", json={"title": "a"})
        r = client.get("/api/v1/document/export", params={"keys": ["tasks", "notes"]})
        assert r.status_code == 200
        assert 'filename="night_shift_backup_2024-03-15.json"' in r.headers["content-disposition"]
        assert set(r.json()) == {"tasks", "notes"}

    def test_import_bare_array_replaces_tasks(self, client):
        note = client.post("/api/v1/notes/", json={"content": "keep"}).json()
        client.post("/api/v1/tasks/", json={"title": "old"})
        payload = b'[{"id": "t1", "title": "legacy", "status": "IN_PROGRESS", "priority": "LOW"}]'
        r = client.post("/api/v1/document/import", files={"file": ("backup.json", payload, "application/json")})
        assert r.status_code == 200, r.text
        assert r.json() == {"imported": ["tasks"], "warnings": []}
        assert [t["title"] for t in client.get("/api/v1/tasks/").json()] == ["legacy"]
        assert [n["id"] for n in client.get("/api/v1/notes/").json()] == [note["id"]]

    def test_import_reports_warnings(self, client):
        payload = b'{"notes": [], "hacker": true}'
        r = client.post("/api/v1/document/import", files={"file": ("backup.json", payload, "application/json")})
        assert r.json()["imported"] == ["notes"]
        assert any("hacker" in w for w in r.json()["warnings"])

    def test_invalid_import_changes_nothing(self, client):
        client.post("/api/v1/tasks/", json={"title": "safe"})
        before = client.get("/api/v1/document").json()
        r = client.post("/api/v1/document/import", files={"file": ("backup.json", b"{oops", "application/json")})
        assert r.status_code == 400
        assert r.json()["error"] == "ImportParseError"
        assert client.get("/api/v1/document").json() == before

    def test_storage_failure_is_507(self, clock):
        app = create_app(settings=get_settings(), storage=InMemoryKeyValueStorage(quota_bytes=400), clock=clock)
        client = TestClient(app)
        r = client.post("/api/v1/notes/", json={"content": "x" * 2000})
        assert r.status_code == 507
        assert r.json()["error"] == "StorageError"


def upload(client, payload):
    return client.post("/api/v1/document/import", files={"file": ("backup.json", payload, "application/json")})


class TestMalformedImports:
    def test_unhashable_status_is_reported_not_fatal(self, client):
        r = upload(client, b'[{"id": "t1", "status": ["DONE"], "priority": "LOW"}]')
        assert r.status_code == 200, r.text
        assert any("['DONE']" in w for w in r.json()["warnings"])
        tasks = client.get("/api/v1/tasks/").json()
        assert tasks[0]["status"] == ["DONE"]
        assert client.get("/api/v1/metrics/distribution").status_code == 200

    def test_tasks_without_id_can_still_be_listed(self, client):
        r = upload(client, b'{"tasks": [{"title": "legacy", "status": "TODO", "priority": "LOW"}]}')
        assert r.status_code == 200
        tasks = client.get("/api/v1/tasks/")
        assert tasks.status_code == 200
        assert tasks.json()[0]["title"] == "legacy"
        assert tasks.json()[0]["id"] is None

    def test_entities_with_odd_field_types_can_be_listed(self, client):
        upload(client, b'{"notes": [{"id": 5, "tags": "x"}], "snippets": [{"title": 3, "createdAt": "yesterday"}]}')
        assert client.get("/api/v1/notes/").json()[0]["id"] == 5
        assert client.get("/api/v1/snippets/").json()[0]["createdAt"] == "yesterday"

    def test_out_of_range_session_timestamp_keeps_metrics_working(self, client):
        upload(client, b'{"pomodoroSessions": [{"id": "s1", "timestamp": 1e20, "durationMinutes": 25}]}')
        velocity = client.get("/api/v1/metrics/velocity")
        assert velocity.status_code == 200
        assert sum(b["minutes"] for b in velocity.json()) == 0
        assert client.get("/api/v1/metrics/heatmap").status_code == 200

    def test_out_of_range_caffeine_timestamp_keeps_peak_working(self, client):
        upload(client, b'{"caffeineLog": [{"id": "c1", "amount": 80, "timestamp": 1e20}]}')
        status = client.get("/api/v1/metrics/caffeine")
        assert status.status_code == 200
        assert status.json()["peakDisplay"] is None

    def test_negative_caffeine_amount_is_not_counted(self, client):
        upload(client, b'{"caffeineLog": [{"id": "c1", "amount": -80, "timestamp": 0}]}')
        assert client.get("/api/v1/metrics/caffeine").json()["activeMg"] == 0

    def test_nan_is_rejected_as_invalid_json(self, client):
        r = upload(client, b'{"pomodoroSessions": [{"id": "s1", "timestamp": NaN, "durationMinutes": 25}]}')
        assert r.status_code == 400
        assert client.get("/api/v1/sessions").json() == []

    def test_out_of_range_now_is_rejected(self, client):
        assert client.get("/api/v1/metrics/velocity", params={"now": 10**20}).status_code == 422
