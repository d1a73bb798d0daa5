"""Telemetry records.

Pydantic models for the time-stamped data held by the in-memory stores and
consumed by the context binder. Each record knows how to turn itself into the
matching document block.
"""

import enum
import math
import uuid
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field

from termsite.models.blocks import LogEntry, Metric, Trace

UNKNOWN_STATUS = "unknown"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_metric_value(value: float) -> str:
    """Format a metric value, dropping the fractional part of whole numbers."""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def parse_trend(raw: str | None) -> float | None:
    """Parse a trend label, returning None when it is absent or malformed."""
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


class LogLevel(str, enum.Enum):
    """Severity of a log entry, ordered DEBUG < INFO < WARNING < ERROR."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        """Numeric severity used for ordering."""
        return _LEVEL_RANKS[self]

    @classmethod
    def parse(cls, text: str) -> "LogLevel | None":
        """Parse a level name case-insensitively.

        Accepts ``WARN`` and ``ERR`` as aliases. Returns None for unknown names.
        """
        return _LEVEL_ALIASES.get(text.strip().upper())


_LEVEL_RANKS = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
}

_LEVEL_ALIASES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
    "ERR": LogLevel.ERROR,
}


class MetricRecord(BaseModel):
    """A measured value with free-form labels.

    The ``unit`` and ``trend`` labels feed the rendered metric block.
    """

    name: str = Field(description="Metric name")
    value: float = Field(description="Measured value")
    timestamp: datetime = Field(default_factory=utc_now, description="Measurement time")
    labels: dict[str, str] = Field(default_factory=dict, description="Free-form labels")

    def with_label(self, key: str, value: str) -> "MetricRecord":
        self.labels[key] = value
        return self

    def with_labels(self, labels: dict[str, str]) -> "MetricRecord":
        self.labels.update(labels)
        return self

    def get_label(self, key: str) -> str | None:
        return self.labels.get(key)

    def has_label(self, key: str) -> bool:
        return key in self.labels

    def has_label_value(self, key: str, value: str) -> bool:
        return self.labels.get(key) == value

    def to_block(self) -> Metric:
        """Build the metric block shown for this record.

        A ``trend`` label that does not parse as a number is dropped.
        """
        return Metric(
            name=self.name,
            value=format_metric_value(self.value),
            unit=self.get_label("unit"),
            trend=parse_trend(self.get_label("trend")),
        )


class LogEntryRecord(BaseModel):
    """A single log event."""

    message: str = Field(description="Log message")
    level: LogLevel = Field(default=LogLevel.INFO, description="Severity")
    timestamp: datetime = Field(default_factory=utc_now, description="Event time")
    source: str = Field(default="", description="Component that emitted the event")
    metadata: dict[str, str] = Field(default_factory=dict)

    def with_metadata(self, key: str, value: str) -> "LogEntryRecord":
        self.metadata[key] = value
        return self

    def with_metadata_map(self, metadata: dict[str, str]) -> "LogEntryRecord":
        self.metadata.update(metadata)
        return self

    def has_metadata(self, key: str) -> bool:
        return key in self.metadata

    def get_metadata(self, key: str) -> str | None:
        return self.metadata.get(key)

    def is_level_at_least(self, level: LogLevel) -> bool:
        return self.level.rank >= level.rank

    def format(self) -> str:
        """Format as ``[timestamp] [LEVEL] [source]: message``."""
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M:%S.") + f"{self.timestamp.microsecond // 1000:03d}"
        return f"[{stamp}] [{self.level}] [{self.source}]: {self.message}"

    def to_block(self) -> LogEntry:
        return LogEntry(
            message=self.message,
            level=str(self.level),
            timestamp=self.timestamp.isoformat(),
            source=self.source,
        )


class TraceRecord(BaseModel):
    """A timed span, optionally nested under a parent span."""

    name: str = Field(description="Operation name")
    duration_ms: int = Field(ge=0, description="Duration in milliseconds")
    start_time: datetime = Field(description="Span start")
    end_time: datetime = Field(description="Span end")
    parent_id: str | None = Field(default=None, description="Parent span id")
    span_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    metadata: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def create(cls, name: str, duration_ms: int) -> "TraceRecord":
        """Create a span that ended now and lasted ``duration_ms``."""
        end_time = utc_now()
        return cls(
            name=name,
            duration_ms=duration_ms,
            start_time=end_time - timedelta(milliseconds=duration_ms),
            end_time=end_time,
        )

    @classmethod
    def between(cls, name: str, start_time: datetime, end_time: datetime) -> "TraceRecord":
        """Create a span from explicit bounds; inverted bounds give zero duration."""
        elapsed = end_time - start_time
        duration_ms = max(0, int(elapsed / timedelta(milliseconds=1)))
        return cls(
            name=name,
            duration_ms=duration_ms,
            start_time=start_time,
            end_time=end_time,
        )

    def with_parent(self, parent_id: str) -> "TraceRecord":
        self.parent_id = parent_id
        return self

    def with_metadata(self, key: str, value: str) -> "TraceRecord":
        self.metadata[key] = value
        return self

    def with_metadata_map(self, metadata: dict[str, str]) -> "TraceRecord":
        self.metadata.update(metadata)
        return self

    def is_root(self) -> bool:
        return self.parent_id is None

    def has_metadata(self, key: str) -> bool:
        return key in self.metadata

    def get_metadata(self, key: str) -> str | None:
        return self.metadata.get(key)

    @property
    def status(self) -> str:
        """Status from metadata, ``unknown`` when not recorded."""
        return self.metadata.get("status", UNKNOWN_STATUS)

    def to_block(self) -> Trace:
        return Trace(
            name=self.name,
            duration_ms=self.duration_ms,
            start_time=self.start_time.isoformat(),
            status=self.status,
            metadata=dict(self.metadata),
        )
