"""Unit tests for the dashboard generation task."""

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from termsite.interfaces.template import TemplateNotFoundError
from termsite.models.records import LogEntryRecord, MetricRecord, TraceRecord
from termsite.storage import LogStorage, MetricStorage, TraceStorage, seed_sample_data
from termsite.strategies.renderers import HtmlRenderer, TextRenderer
from termsite.strategies.template_engine import TemplateEngine
from termsite.tasks import HomeGeneratorTask

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestHomeGeneratorTask:
    """Test suite for HomeGeneratorTask."""

    @pytest.fixture
    def storages(self):
        return MetricStorage(), LogStorage(), TraceStorage()

    @pytest.fixture
    def make_task(self, storages, tmp_path):
        """Build a task over the bundled templates writing into tmp_path."""
        metrics, logs, traces = storages

        def _make(template_dir=TEMPLATES_DIR, template_name="dashboard"):
            return HomeGeneratorTask(
                engine=TemplateEngine(template_dir),
                metric_storage=metrics,
                log_storage=logs,
                trace_storage=traces,
                html_renderer=HtmlRenderer(),
                text_renderer=TextRenderer(),
                output_dir=tmp_path / "public",
                template_name=template_name,
                hostname="web-01",
            )

        return _make

    def test_name(self, make_task):
        assert make_task().name == "HomeGenerator"

    # =========================================================================
    # Context
    # =========================================================================

    def test_build_context_uses_lookback_window(self, make_task, storages):
        """Test that only records inside the window reach the context."""
        metrics, logs, traces = storages
        metrics.add(MetricRecord(name="recent", value=1, timestamp=NOW - timedelta(minutes=5)))
        metrics.add(MetricRecord(name="old", value=1, timestamp=NOW - timedelta(hours=3)))
        logs.add(LogEntryRecord(message="recent", timestamp=NOW - timedelta(minutes=1)))
        traces.add(TraceRecord.between("recent", NOW - timedelta(minutes=2), NOW - timedelta(minutes=1)))

        context = make_task().build_context(now=NOW)

        assert [m.name for m in context.metrics] == ["recent"]
        assert len(context.logs) == 1
        assert len(context.traces) == 1
        assert context.variables == {
            "current_time": NOW.isoformat(),
            "hostname": "web-01",
            "metric_count": "1",
            "trace_count": "1",
            "log_count": "1",
        }

    def test_failed_query_is_treated_as_empty(self, make_task, storages, monkeypatch):
        """Test that a store error degrades to an empty collection."""
        metrics, _, _ = storages

        def broken(start, end):
            raise RuntimeError("store offline")

        monkeypatch.setattr(metrics, "get_by_time_range", broken)

        context = make_task().build_context(now=NOW)

        assert context.metrics == []
        assert context.variables["metric_count"] == "0"

    # =========================================================================
    # Generation
    # =========================================================================

    def test_generate_site_writes_both_formats(self, make_task, storages, tmp_path):
        """Test a full run against the bundled dashboard template."""
        seed_sample_data(*storages)

        html_path, text_path = make_task().generate_site()

        assert html_path == tmp_path / "public" / "index.html"
        html = html_path.read_text(encoding="utf-8")
        text = text_path.read_text(encoding="utf-8")

        assert html.startswith("<!DOCTYPE html>")
        assert "web-01" in html
        assert "CPU Usage" in html
        assert "[[" not in html

        assert text.startswith("# dashboard\n")
        assert "web-01" in text
        assert "Memory Usage" in text
        assert "API Request" in text
        assert "[[" not in text

    def test_generate_site_with_empty_stores(self, make_task):
        html_path, text_path = make_task().generate_site()

        assert "No logs available." in text_path.read_text(encoding="utf-8")
        assert "<!-- Metrics: 0 -->" in html_path.read_text(encoding="utf-8")

    def test_missing_template_writes_nothing(self, make_task, tmp_path):
        """Test that a render failure propagates before any file is written."""
        task = make_task(template_name="missing")

        with pytest.raises(TemplateNotFoundError):
            task.generate_site()

        assert not (tmp_path / "public").exists()

    def test_execute_runs_generation(self, make_task, tmp_path):
        asyncio.run(make_task().execute())

        assert (tmp_path / "public" / "index.txt").is_file()
