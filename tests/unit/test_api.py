"""Unit tests for the HTTP API."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from termsite.core.config import Settings
from termsite.main import create_app

DASHBOARD_TEMPLATE = Path(__file__).resolve().parents[2] / "templates" / "dashboard.tmpl"


@pytest.fixture
def settings(tmp_path):
    """Create settings with a private template and output directory."""
    templates_dir = tmp_path / "templates"
    templates_dir.mkdir()
    (templates_dir / "dashboard.tmpl").write_text(
        DASHBOARD_TEMPLATE.read_text(encoding="utf-8"), encoding="utf-8"
    )
    (templates_dir / "broken.tmpl").write_text("@heading{1}{ok}\n@bogus{x}", encoding="utf-8")

    return Settings(
        source_dir=tmp_path / "content",
        templates_dir=templates_dir,
        output_dir=tmp_path / "public",
        interval_seconds=3600,
        workers=2,
        hostname="web-01",
    )


@pytest.fixture
def client(settings):
    """Run the application, lifespan included."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


class TestHealth:
    """Test suite for the health endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "termsite", "version": "0.1.0"}


class TestPages:
    """Test suite for the page routes."""

    def test_render_html(self, client):
        """Test on-demand HTML rendering with the seeded data."""
        response = client.get("/pages/dashboard")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "CPU Usage" in response.text
        assert "web-01" in response.text

    def test_render_text(self, client):
        response = client.get("/pages/dashboard", params={"format": "text"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith("# dashboard\n")

    def test_unknown_format(self, client):
        response = client.get("/pages/dashboard", params={"format": "pdf"})

        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"

    def test_missing_template(self, client):
        response = client.get("/pages/nope")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_broken_template(self, client):
        """Test that malformed markup reports its position."""
        response = client.get("/pages/broken")

        assert response.status_code == 422
        assert response.json()["detail"] == "Unknown directive @bogus at line 2, column 1"

    def test_tasks(self, client):
        response = client.get("/pages/tasks")

        assert response.status_code == 200
        body = response.json()
        assert body["running"] is True
        assert body["interval_seconds"] == 3600
        assert [task["name"] for task in body["tasks"]] == ["HomeGenerator"]

    def test_generate(self, client, settings):
        """Test that a manual cycle writes both pages."""
        response = client.post("/pages/generate")

        assert response.status_code == 200
        body = response.json()
        assert body["succeeded"] == 1
        assert body["total"] == 1
        assert body["tasks"][0]["success_count"] >= 1
        assert (settings.output_dir / "index.html").is_file()
        assert (settings.output_dir / "index.txt").is_file()

    def test_clear_cache(self, client):
        client.get("/pages/dashboard")

        response = client.post("/pages/cache/clear")

        assert response.status_code == 200
        assert "dashboard" in response.json()["cleared"]
        assert client.post("/pages/cache/clear").json()["cleared"] == []


class TestIngest:
    """Test suite for the ingest routes."""

    def test_ingest_metrics(self, client):
        """Test that ingested metrics show up on the next render."""
        response = client.post(
            "/ingest/metrics",
            json=[{"name": "Queue Depth", "value": 7, "labels": {"unit": "jobs"}}],
        )

        assert response.status_code == 201
        assert response.json() == {"accepted": 1, "total": 4}
        assert "Queue Depth" in client.get("/pages/dashboard", params={"format": "text"}).text

    def test_ingest_logs(self, client):
        response = client.post(
            "/ingest/logs",
            json=[
                {"message": "deploy finished", "level": "INFO", "source": "ci"},
                {"message": "disk almost full", "level": "WARNING"},
            ],
        )

        assert response.status_code == 201
        assert response.json()["accepted"] == 2

    def test_ingest_logs_rejects_unknown_level(self, client):
        response = client.post("/ingest/logs", json=[{"message": "m", "level": "LOUD"}])

        assert response.status_code == 422

    def test_ingest_traces(self, client):
        response = client.post(
            "/ingest/traces",
            json=[
                {
                    "name": "Checkout",
                    "duration_ms": 80,
                    "start_time": "2025-01-01T00:00:00Z",
                    "end_time": "2025-01-01T00:00:00.080Z",
                    "metadata": {"status": "201"},
                }
            ],
        )

        assert response.status_code == 201
        assert response.json() == {"accepted": 1, "total": 3}

    def test_ingest_traces_rejects_negative_duration(self, client):
        response = client.post(
            "/ingest/traces",
            json=[
                {
                    "name": "Bad",
                    "duration_ms": -1,
                    "start_time": "2025-01-01T00:00:00Z",
                    "end_time": "2025-01-01T00:00:00Z",
                }
            ],
        )

        assert response.status_code == 422
