"""
Tests for leaddesk/api/health.py - banner, liveness, readiness and the debug flags.
"""
import re
from unittest.mock import AsyncMock, MagicMock

from leaddesk.api.health import health_check, readiness_check

TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


# ---------------------------------------------------------------------------
# GET / and GET /health
# ---------------------------------------------------------------------------


class TestLiveness:
    def test_root_banner(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == "LeadDesk backend is running"

    def test_health_ok(self, client):
        body = client.get("/health").json()
        assert body["ok"] is True
        assert TIMESTAMP_RE.match(body["time"])
        assert body["commit"] is None

    async def test_health_reports_commit(self, settings_factory):
        """commit comes from GIT_COMMIT / RENDER_GIT_COMMIT."""
        result = await health_check(settings=settings_factory(git_commit="abc123"))
        assert result["commit"] == "abc123"


# ---------------------------------------------------------------------------
# GET /health/ready
# ---------------------------------------------------------------------------


class TestReadiness:
    def test_ready_with_database(self, client):
        body = client.get("/health/ready").json()
        assert body == {"ok": True, "checks": {"database": True}, "time": body["time"]}

    async def test_not_ready_when_ping_fails(self):
        store = MagicMock()
        store.ping = AsyncMock(return_value=False)

        result = await readiness_check(store=store)

        assert result["ok"] is False
        assert result["checks"]["database"] is False


# ---------------------------------------------------------------------------
# GET /debug
# ---------------------------------------------------------------------------


class TestDebug:
    def test_flags_for_default_test_settings(self, client):
        body = client.get("/debug").json()
        assert body["ok"] is True
        assert body["adminHtmlExists"] is True
        assert body["dbExists"] is True
        assert body["corsOrigins"] == ["*"]
        assert body["adminTokenSet"] is True
        assert body["smtpConfigured"] is False
        assert body["mailToSet"] is False
        assert body["mailFrom"] is None
        assert body["logoUrlSet"] is False

    def test_never_leaks_secrets(self, client_factory, mail_settings):
        with client_factory(mail_settings) as client:
            resp = client.get("/debug")

        assert resp.json()["smtpConfigured"] is True
        assert "test-admin-token" not in resp.text
        assert "abcd" not in resp.text


# ---------------------------------------------------------------------------
# Unknown routes
# ---------------------------------------------------------------------------


class TestNotFound:
    def test_unknown_route_envelope(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert resp.json() == {"ok": False, "error": "Cannot GET /nope"}

    def test_unknown_method_path(self, client):
        resp = client.post("/api/unknown", json={})
        assert resp.status_code == 404
        assert resp.json()["error"] == "Cannot POST /api/unknown"
