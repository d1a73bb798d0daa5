"""Thread-safe in-memory telemetry stores.

Each store keeps its records in insertion order behind a lock. Queries return
new lists, so callers never see later writes through a returned result.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Generic, TypeVar

from termsite.models.records import LogEntryRecord, LogLevel, MetricRecord, TraceRecord

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class RecordStore(Generic[RecordT]):
    """Append-only list of records guarded by a lock."""

    def __init__(self) -> None:
        self._records: list[RecordT] = []
        self._lock = threading.Lock()

    def add(self, record: RecordT) -> None:
        with self._lock:
            self._records.append(record)

    def extend(self, records: Iterable[RecordT]) -> int:
        """Append several records and return how many were added."""
        batch = list(records)
        with self._lock:
            self._records.extend(batch)
        return len(batch)

    def get_all(self) -> list[RecordT]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def _filter(self, predicate: Callable[[RecordT], bool]) -> list[RecordT]:
        with self._lock:
            return [record for record in self._records if predicate(record)]


class MetricStorage(RecordStore[MetricRecord]):
    """Store for metric records."""

    def get_by_name(self, name: str) -> list[MetricRecord]:
        return self._filter(lambda m: m.name == name)

    def get_by_label(self, key: str, value: str) -> list[MetricRecord]:
        return self._filter(lambda m: m.has_label_value(key, value))

    def get_by_time_range(self, start: datetime, end: datetime) -> list[MetricRecord]:
        """Return metrics with ``start <= timestamp <= end``."""
        return self._filter(lambda m: start <= m.timestamp <= end)


class LogStorage(RecordStore[LogEntryRecord]):
    """Store for log records."""

    def get_by_level(self, min_level: LogLevel) -> list[LogEntryRecord]:
        """Return entries at ``min_level`` or more severe."""
        return self._filter(lambda entry: entry.is_level_at_least(min_level))

    def get_by_source(self, source: str) -> list[LogEntryRecord]:
        return self._filter(lambda entry: entry.source == source)

    def get_by_message_contains(self, substring: str) -> list[LogEntryRecord]:
        return self._filter(lambda entry: substring in entry.message)

    def get_by_time_range(self, start: datetime, end: datetime) -> list[LogEntryRecord]:
        """Return entries with ``start <= timestamp <= end``."""
        return self._filter(lambda entry: start <= entry.timestamp <= end)


class TraceStorage(RecordStore[TraceRecord]):
    """Store for trace spans."""

    def get_by_id(self, span_id: str) -> TraceRecord | None:
        matches = self._filter(lambda t: t.span_id == span_id)
        return matches[0] if matches else None

    def get_by_name(self, name: str) -> list[TraceRecord]:
        return self._filter(lambda t: t.name == name)

    def get_children(self, parent_id: str) -> list[TraceRecord]:
        return self._filter(lambda t: t.parent_id == parent_id)

    def get_roots(self) -> list[TraceRecord]:
        return self._filter(lambda t: t.is_root())

    def get_by_time_range(self, start: datetime, end: datetime) -> list[TraceRecord]:
        """Return spans lying entirely inside the range.

        A span matches when it starts at or after ``start`` and ends at or
        before ``end``.
        """
        return self._filter(lambda t: t.start_time >= start and t.end_time <= end)
