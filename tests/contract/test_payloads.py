from __future__ import annotations


class TestPayloadValidation:
    def test_open_session_missing_path(self, client):
        resp = client.post("/api/v1/sessions", json={})
        assert resp.status_code == 422

    def test_open_session_unknown_role(self, client):
        resp = client.post("/api/v1/sessions", json={"path": "/admin", "role": "parent"})
        assert resp.status_code == 422

    def test_activity_unknown_kind(self, client):
        session_id = client.post("/api/v1/sessions", json={"path": "/admin"}).json()["session_id"]
        resp = client.post(f"/api/v1/sessions/{session_id}/activity", json={"kind": "hover"})
        assert resp.status_code == 422

    def test_unknown_session_id(self, client):
        resp = client.get("/api/v1/sessions/does-not-exist")
        assert resp.status_code == 404
        data = resp.json()
        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert "does-not-exist" in data["detail"]

    def test_policy_unknown_role(self, client):
        resp = client.get("/api/v1/session-policy", params={"role": "parent"})
        assert resp.status_code == 422

    def test_health_response_shape(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["service"] == "classbridge-session-guard"
        assert data["open_guards"] == 0
