"""Unit tests for the in-memory telemetry stores."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from termsite.models.records import LogEntryRecord, LogLevel, MetricRecord, TraceRecord
from termsite.storage import LogStorage, MetricStorage, TraceStorage, seed_sample_data

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestMetricStorage:
    """Test suite for MetricStorage."""

    @pytest.fixture
    def storage(self):
        storage = MetricStorage()
        storage.add(MetricRecord(name="CPU", value=10, timestamp=T0).with_label("host", "a"))
        storage.add(MetricRecord(name="CPU", value=20, timestamp=T0 + timedelta(minutes=5)).with_label("host", "b"))
        storage.add(MetricRecord(name="Memory", value=4, timestamp=T0 + timedelta(minutes=10)))
        return storage

    def test_get_all_preserves_insertion_order(self, storage):
        assert [m.value for m in storage.get_all()] == [10, 20, 4]

    def test_get_all_returns_a_copy(self, storage):
        """Test that later writes are not visible through an earlier result."""
        snapshot = storage.get_all()
        storage.add(MetricRecord(name="Disk", value=1))

        assert len(snapshot) == 3
        assert storage.count() == 4

    def test_get_by_name(self, storage):
        assert [m.value for m in storage.get_by_name("CPU")] == [10, 20]
        assert storage.get_by_name("Nope") == []

    def test_get_by_label(self, storage):
        assert [m.value for m in storage.get_by_label("host", "b")] == [20]

    def test_time_range_is_inclusive(self, storage):
        result = storage.get_by_time_range(T0, T0 + timedelta(minutes=5))

        assert [m.value for m in result] == [10, 20]

    def test_extend_and_clear(self, storage):
        added = storage.extend(MetricRecord(name="x", value=i) for i in range(3))

        assert added == 3
        assert storage.count() == 6

        storage.clear()

        assert storage.count() == 0
        assert storage.get_all() == []

    def test_concurrent_adds(self):
        """Test that parallel writers lose no records."""
        storage = MetricStorage()

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: storage.add(MetricRecord(name="n", value=i)), range(400)))

        assert storage.count() == 400


class TestLogStorage:
    """Test suite for LogStorage."""

    @pytest.fixture
    def storage(self):
        storage = LogStorage()
        storage.extend(
            [
                LogEntryRecord(message="debugging", level=LogLevel.DEBUG, source="app", timestamp=T0),
                LogEntryRecord(message="started", level=LogLevel.INFO, source="app", timestamp=T0),
                LogEntryRecord(message="slow query", level=LogLevel.WARNING, source="db", timestamp=T0),
                LogEntryRecord(
                    message="connection lost",
                    level=LogLevel.ERROR,
                    source="db",
                    timestamp=T0 + timedelta(hours=2),
                ),
            ]
        )
        return storage

    def test_get_by_level_is_minimum_severity(self, storage):
        assert [e.message for e in storage.get_by_level(LogLevel.WARNING)] == ["slow query", "connection lost"]
        assert len(storage.get_by_level(LogLevel.DEBUG)) == 4

    def test_get_by_source(self, storage):
        assert [e.message for e in storage.get_by_source("db")] == ["slow query", "connection lost"]

    def test_get_by_message_contains(self, storage):
        assert [e.message for e in storage.get_by_message_contains("query")] == ["slow query"]

    def test_get_by_time_range(self, storage):
        assert len(storage.get_by_time_range(T0, T0 + timedelta(hours=1))) == 3


class TestTraceStorage:
    """Test suite for TraceStorage."""

    @pytest.fixture
    def spans(self):
        root = TraceRecord.between("Request", T0, T0 + timedelta(milliseconds=200))
        child = TraceRecord.between(
            "Query", T0 + timedelta(milliseconds=10), T0 + timedelta(milliseconds=60)
        ).with_parent(root.span_id)
        late = TraceRecord.between("Late", T0 + timedelta(hours=1), T0 + timedelta(hours=2))
        return root, child, late

    @pytest.fixture
    def storage(self, spans):
        storage = TraceStorage()
        storage.extend(spans)
        return storage

    def test_get_by_id(self, storage, spans):
        root, _, _ = spans

        assert storage.get_by_id(root.span_id) is root
        assert storage.get_by_id("missing") is None

    def test_get_by_name(self, storage):
        assert [t.name for t in storage.get_by_name("Query")] == ["Query"]

    def test_parent_child_queries(self, storage, spans):
        root, child, late = spans

        assert storage.get_children(root.span_id) == [child]
        assert storage.get_roots() == [root, late]

    def test_time_range_requires_containment(self, storage):
        """Test that a span overlapping the range end is excluded."""
        result = storage.get_by_time_range(T0, T0 + timedelta(hours=1, minutes=30))

        assert [t.name for t in result] == ["Request", "Query"]


class TestSampleData:
    """Test suite for the demo data seeder."""

    def test_seed_sample_data(self):
        metrics, logs, traces = MetricStorage(), LogStorage(), TraceStorage()

        seed_sample_data(metrics, logs, traces)

        assert [m.name for m in metrics.get_all()] == ["CPU Usage", "Memory Usage", "Response Time"]
        assert metrics.get_by_name("CPU Usage")[0].to_block().trend == 2.3
        assert logs.count() == 4
        assert [t.name for t in traces.get_all()] == ["API Request", "Database Query"]
