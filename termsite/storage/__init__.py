"""In-memory telemetry storage."""

from termsite.storage.memory import LogStorage, MetricStorage, RecordStore, TraceStorage
from termsite.storage.sample import seed_sample_data

__all__ = [
    "RecordStore",
    "MetricStorage",
    "LogStorage",
    "TraceStorage",
    "seed_sample_data",
]
