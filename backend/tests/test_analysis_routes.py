"""AI analysis routes."""

import threading

import pytest

from conftest import auth_headers, get_auth_token, wait_until
from salesboard.services import analysis_service


def _poll(client, headers):
    def finished():
        status = client.get("/api/analysis", headers=headers).json
        return None if status["in_progress"] else status
    return wait_until(finished)


class TestWithoutKey:
    def test_idle_status(self, client, admin_headers):
        resp = client.get("/api/analysis", headers=admin_headers)
        assert resp.json == analysis_service.IDLE_STATUS

    def test_disabled_message(self, client, admin_headers):
        resp = client.post("/api/analysis", headers=admin_headers, json={})
        assert resp.status_code == 202
        assert resp.json["record_count"] == 3
        assert _poll(client, admin_headers)["result"] == analysis_service.DISABLED_MESSAGE

    def test_bad_range(self, client, admin_headers):
        resp = client.post("/api/analysis", headers=admin_headers, json={"date_from": "yesterday"})
        assert resp.status_code == 400


@pytest.fixture
def ai_client(ai_app):
    return ai_app.test_client()


@pytest.fixture
def ai_admin(ai_client):
    return auth_headers(get_auth_token(ai_client, "admin", "password"))


class TestWithKey:
    def test_summary_of_filtered_records(self, ai_client, ai_admin, monkeypatch):
        prompts = []

        def fake_generate(prompt, *, api_key, model):
            prompts.append(prompt)
            return "## Insights"

        monkeypatch.setattr(analysis_service, "_generate", fake_generate)
        resp = ai_client.post("/api/analysis", headers=ai_admin, json={"date_from": "2023-10-27"})
        assert resp.json["record_count"] == 2

        assert _poll(ai_client, ai_admin)["result"] == "## Insights"
        assert "Grappling Hook" in prompts[0]
        assert "Arc Reactor Core" not in prompts[0]

    def test_empty_selection(self, ai_client, ai_admin):
        ai_client.post("/api/analysis", headers=ai_admin, json={"date_from": "2030-01-01"})
        assert _poll(ai_client, ai_admin)["result"] == analysis_service.NO_DATA_MESSAGE

    def test_provider_failure(self, ai_client, ai_admin, monkeypatch):
        def boom(prompt, *, api_key, model):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(analysis_service, "_generate", boom)
        ai_client.post("/api/analysis", headers=ai_admin, json={})
        assert _poll(ai_client, ai_admin)["result"] == analysis_service.FAILURE_MESSAGE

    def test_one_analysis_at_a_time(self, ai_client, ai_admin, monkeypatch):
        release = threading.Event()

        def slow(prompt, *, api_key, model):
            release.wait(5)
            return "done"

        monkeypatch.setattr(analysis_service, "_generate", slow)
        try:
            assert ai_client.post("/api/analysis", headers=ai_admin, json={}).status_code == 202
            assert ai_client.get("/api/analysis", headers=ai_admin).json["in_progress"] is True

            resp = ai_client.post("/api/analysis", headers=ai_admin, json={})
            assert resp.status_code == 409
            assert resp.json["in_progress"] is True

            # Another admin session is independent
            other = auth_headers(get_auth_token(ai_client, "admin", "password"))
            assert ai_client.post("/api/analysis", headers=other, json={}).status_code == 202
        finally:
            release.set()

        assert _poll(ai_client, ai_admin)["result"] == "done"

    def test_discard(self, ai_client, ai_admin, monkeypatch):
        release = threading.Event()

        def slow(prompt, *, api_key, model):
            release.wait(5)
            return "late"

        monkeypatch.setattr(analysis_service, "_generate", slow)
        try:
            ai_client.post("/api/analysis", headers=ai_admin, json={})
            assert ai_client.delete("/api/analysis", headers=ai_admin).status_code == 204
            assert ai_client.get("/api/analysis", headers=ai_admin).json == analysis_service.IDLE_STATUS
        finally:
            release.set()
