"""HTTP tests for the admin challenge routes."""

import pytest
from fastapi.testclient import TestClient

from api_main import app
from challenge_admin.api.deps import get_db
from challenge_admin.config import settings
from challenge_admin.crud import seed_categories_if_empty

from conftest import challenge_payload

TOKEN = "test-admin-token"
HEADERS = {"X-Admin-Token": TOKEN, "X-Admin-Actor": "ops@example.com"}


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_TOKEN", TOKEN)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def created(client):
    resp = client.post("/v1/admin/challenges", json=challenge_payload(), headers=HEADERS)
    assert resp.status_code == 201
    return resp.json()


class TestAuth:
    def test_missing_token_forbidden(self, client):
        assert client.get("/v1/admin/challenges").status_code == 403

    def test_unconfigured_token(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_API_TOKEN", "")
        assert client.get("/v1/admin/challenges", headers=HEADERS).status_code == 503


class TestChallengeRoutes:
    def test_create_and_fetch(self, client, created):
        assert created["state"] == "draft"
        assert created["version"] == 0
        assert created["created_by"] == "ops@example.com"
        assert created["metric_filters"] == {"realm": "crystalvale"}

        resp = client.get(f"/v1/admin/challenges/{created['id']}", headers=HEADERS)
        assert resp.status_code == 200
        assert [t["tier_code"] for t in resp.json()["tiers"]] == ["COMMON", "RARE", "MYTHIC"]

    def test_list_filters_by_state(self, client, created):
        resp = client.get("/v1/admin/challenges", params={"state": "draft"}, headers=HEADERS)
        assert resp.json()["count"] == 1
        resp = client.get("/v1/admin/challenges", params={"state": "deployed"}, headers=HEADERS)
        assert resp.json()["count"] == 0

    def test_unknown_challenge_is_404(self, client):
        resp = client.get("/v1/admin/challenges/404", headers=HEADERS)
        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "not_found"

    def test_update_with_stale_version_is_409(self, client, created):
        url = f"/v1/admin/challenges/{created['id']}"
        ok = client.put(url, json={"name": "Renamed", "expected_version": 0}, headers=HEADERS)
        assert ok.status_code == 200
        assert ok.json()["version"] == 1

        stale = client.put(url, json={"name": "Again", "expected_version": 0}, headers=HEADERS)
        assert stale.status_code == 409
        assert stale.json()["detail"]["code"] == "conflict"
        assert stale.json()["detail"]["retryable"] is True

    def test_update_rejects_code_change(self, client, created):
        resp = client.put(
            f"/v1/admin/challenges/{created['id']}",
            json={"code": "other", "expected_version": 0},
            headers=HEADERS,
        )
        assert resp.status_code == 422

    def test_full_promotion_flow(self, client, created):
        base = f"/v1/admin/challenges/{created['id']}"

        resp = client.post(f"{base}/state", json={"target_state": "validated", "expected_version": 0}, headers=HEADERS)
        assert resp.json() == {"challenge_id": created["id"], "new_state": "validated", "version": 1}

        resp = client.post(
            f"{base}/validate",
            json={"manual_checks": {"etl_output_verified": True, "copy_approved": False}},
            headers=HEADERS,
        )
        assert resp.status_code == 200
        assert resp.json()["can_promote_to_validated"] is True
        assert resp.json()["can_promote_to_deployed"] is False

        resp = client.post(f"{base}/state", json={"target_state": "deployed", "expected_version": 1}, headers=HEADERS)
        assert resp.status_code == 422
        assert resp.json()["detail"]["failed_checks"] == ["copy_approved"]

        client.post(
            f"{base}/validate",
            json={"manual_checks": {"etl_output_verified": True, "copy_approved": True}},
            headers=HEADERS,
        )
        resp = client.post(f"{base}/state", json={"target_state": "deployed", "expected_version": 1}, headers=HEADERS)
        assert resp.status_code == 200

        resp = client.put(base, json={"name": "Live edit", "expected_version": 2}, headers=HEADERS)
        assert resp.status_code == 409
        assert resp.json()["detail"]["code"] == "illegal_in_current_state"

        audit = client.get(f"{base}/audit", headers=HEADERS).json()
        assert [(e["action"], e["from_state"], e["to_state"]) for e in audit] == [
            ("create", None, "draft"),
            ("transition", "draft", "validated"),
            ("validate", None, None),
            ("validate", None, None),
            ("transition", "validated", "deployed"),
        ]
        assert {e["actor"] for e in audit} == {"ops@example.com"}

    def test_illegal_transition_is_400(self, client, created):
        resp = client.post(
            f"/v1/admin/challenges/{created['id']}/state",
            json={"target_state": "deprecated", "expected_version": 0},
            headers=HEADERS,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"]["allowed"] == ["validated"]


class TestCategories:
    def test_seeded_categories_listed(self, client, session_factory):
        with session_factory() as db:
            assert seed_categories_if_empty(db) == 7
            assert seed_categories_if_empty(db) == 0

        resp = client.get("/v1/admin/challenge-categories", headers=HEADERS)
        assert resp.status_code == 200
        keys = [c["key"] for c in resp.json()]
        assert keys[0] == "hero_progression"
        assert keys[-1] == "prestige_overall"


def test_health_live():
    assert TestClient(app).get("/health/live").json() == {"status": "alive"}
