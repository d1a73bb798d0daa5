"""Demo telemetry used when the site starts without real data."""

import logging

from termsite.models.records import LogEntryRecord, LogLevel, MetricRecord, TraceRecord
from termsite.storage.memory import LogStorage, MetricStorage, TraceStorage

logger = logging.getLogger(__name__)


def seed_sample_data(
    metric_storage: MetricStorage,
    log_storage: LogStorage,
    trace_storage: TraceStorage,
) -> None:
    """Populate the stores with a small, fixed set of demo records."""
    metric_storage.extend(
        [
            MetricRecord(name="CPU Usage", value=78.5).with_labels({"unit": "%", "trend": "+2.3"}),
            MetricRecord(name="Memory Usage", value=4.2).with_labels({"unit": "GB", "trend": "-0.5"}),
            MetricRecord(name="Response Time", value=120.0).with_label("unit", "ms"),
        ]
    )

    trace_storage.extend(
        [
            TraceRecord.create("API Request", 157).with_metadata_map(
                {"endpoint": "/api/users", "method": "GET", "status": "200"}
            ),
            TraceRecord.create("Database Query", 45).with_metadata_map(
                {"query": "SELECT * FROM users", "rows": "250"}
            ),
        ]
    )

    log_storage.extend(
        [
            LogEntryRecord(message="Server started", level=LogLevel.INFO, source="app_server"),
            LogEntryRecord(
                message="Database connection established", level=LogLevel.INFO, source="database"
            ),
            LogEntryRecord(
                message="Processing request: GET /api/users", level=LogLevel.DEBUG, source="api"
            ),
            LogEntryRecord(message="Cache miss for user data", level=LogLevel.WARNING, source="cache"),
        ]
    )

    logger.info("Added sample data")
