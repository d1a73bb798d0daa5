"""Document blocks and telemetry records."""

from termsite.models.blocks import (
    Block,
    CommandPrompt,
    Container,
    Frame,
    Heading,
    LogEntry,
    Metric,
    Output,
    Paragraph,
    Raw,
    Table,
    Trace,
    clamp_heading_level,
)
from termsite.models.records import (
    LogEntryRecord,
    LogLevel,
    MetricRecord,
    TraceRecord,
)

__all__ = [
    # Blocks
    "Block",
    "Heading",
    "Paragraph",
    "CommandPrompt",
    "Output",
    "Frame",
    "Table",
    "Metric",
    "LogEntry",
    "Trace",
    "Raw",
    "Container",
    "clamp_heading_level",
    # Records
    "LogLevel",
    "MetricRecord",
    "LogEntryRecord",
    "TraceRecord",
]
