"""Runtime data for a single render."""

from dataclasses import dataclass, field
from typing import Any

from termsite.models.records import LogEntryRecord, MetricRecord, TraceRecord


@dataclass
class TemplateContext:
    """Data made available to a template for one generation cycle.

    Built fresh for every render and discarded afterwards. The ``with_*``
    methods mutate the context and return it so calls can be chained.

    Example:
        ```python
        context = (
            TemplateContext()
            .with_variable("hostname", "web-01")
            .with_metrics(metric_storage.get_all())
        )
        ```
    """

    variables: dict[str, str] = field(default_factory=dict)
    metrics: list[MetricRecord] = field(default_factory=list)
    logs: list[LogEntryRecord] = field(default_factory=list)
    traces: list[TraceRecord] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    def with_variable(self, name: str, value: Any) -> "TemplateContext":
        self.variables[name] = str(value)
        return self

    def with_variables(self, variables: dict[str, Any]) -> "TemplateContext":
        for name, value in variables.items():
            self.variables[name] = str(value)
        return self

    def with_metrics(self, metrics: list[MetricRecord]) -> "TemplateContext":
        self.metrics = list(metrics)
        return self

    def with_logs(self, logs: list[LogEntryRecord]) -> "TemplateContext":
        self.logs = list(logs)
        return self

    def with_traces(self, traces: list[TraceRecord]) -> "TemplateContext":
        self.traces = list(traces)
        return self

    def with_data(self, key: str, value: Any) -> "TemplateContext":
        self.data[key] = value
        return self
