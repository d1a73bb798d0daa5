"""HTML renderer strategy.

Produces a single self-contained HTML document styled like a terminal
window. Every element carries a ``terminal-*`` class and all text is
escaped.
"""

import html
import logging
from collections.abc import Sequence

from termsite.interfaces.renderer import BaseRenderer, TemplateData
from termsite.models.blocks import Block, clamp_heading_level
from termsite.models.records import LogEntryRecord, LogLevel, MetricRecord, TraceRecord

logger = logging.getLogger(__name__)

TERMINAL_CSS = """
.terminal {
    background-color: #1e1e1e;
    color: #f0f0f0;
    font-family: 'Courier New', monospace;
    padding: 1rem;
    border-radius: 0.5rem;
    overflow: auto;
    line-height: 1.5;
    max-width: 100%;
    box-sizing: border-box;
}
.terminal-command { color: #63c8ff; margin: 0.5rem 0; }
.terminal-command::before { content: '$ '; color: #63c8ff; }
.terminal-output {
    margin: 0.5rem 0 1.5rem 0;
    padding-left: 0.5rem;
    border-left: 2px solid #3a3a3a;
}
.terminal-frame {
    border: 1px solid #3a3a3a;
    padding: 0.5rem;
    margin: 0.5rem 0;
    border-radius: 0.3rem;
}
.terminal-frame-title {
    background-color: #3a3a3a;
    padding: 0.3rem 0.5rem;
    margin: -0.5rem -0.5rem 0.5rem -0.5rem;
    border-radius: 0.3rem 0.3rem 0 0;
    font-weight: bold;
}
.terminal-metric { display: flex; justify-content: space-between; padding: 0.3rem 0; }
.terminal-metric-name { font-weight: bold; }
.terminal-metric-value { color: #63c8ff; }
.terminal-log { padding: 0.2rem 0; }
.terminal-log-debug { color: #9e9e9e; }
.terminal-log-info { color: #63c8ff; }
.terminal-log-warning { color: #ffac35; }
.terminal-log-error { color: #ff5b5b; }
.terminal-table { border-collapse: collapse; width: 100%; margin: 0.5rem 0; }
.terminal-table th {
    text-align: left;
    padding: 0.3rem;
    border-bottom: 1px solid #3a3a3a;
    color: #63c8ff;
}
.terminal-table td { padding: 0.3rem; border-bottom: 1px solid #2a2a2a; }
.terminal-trace { padding: 0.3rem 0; }
.terminal-trace-name { font-weight: bold; }
.terminal-trace-duration { color: #63c8ff; }
.terminal-trend-up::after { content: ' \\25B2'; color: #4caf50; }
.terminal-trend-down::after { content: ' \\25BC'; color: #ff5b5b; }
.terminal-empty-message { color: #9e9e9e; font-style: italic; }
@media (max-width: 768px) {
    .terminal { padding: 0.5rem; }
    .terminal-table { font-size: 0.9rem; }
}
"""

_LOG_LEVEL_CLASSES = {
    LogLevel.DEBUG: "terminal-log-debug",
    LogLevel.INFO: "terminal-log-info",
    LogLevel.WARNING: "terminal-log-warning",
    LogLevel.ERROR: "terminal-log-error",
}

TRACE_TABLE_HEADERS = ["Name", "Duration", "Started", "Status"]


def escape(text: str) -> str:
    """Escape ``& < > " '`` for safe inclusion in HTML."""
    return html.escape(text, quote=True)


def trend_class(trend: float | None) -> str:
    """Return the CSS class for a trend, or an empty string when flat or absent."""
    if trend is None:
        return ""
    if trend > 0:
        return "terminal-trend-up"
    if trend < 0:
        return "terminal-trend-down"
    return ""


def log_level_class(level: str) -> str:
    """Map a level name to its CSS class; unknown levels render as info."""
    parsed = LogLevel.parse(level)
    return _LOG_LEVEL_CLASSES.get(parsed, "terminal-log-info")


class HtmlRenderer(BaseRenderer):
    """Renders block trees as terminal-styled HTML.

    Attributes:
        additional_classes: Extra classes added to the root ``terminal`` div.
        include_inline_css: Whether ``render_template`` embeds the stylesheet.
    """

    def __init__(
        self,
        additional_classes: Sequence[str] | None = None,
        include_inline_css: bool = True,
    ) -> None:
        self.additional_classes = list(additional_classes or [])
        self.include_inline_css = include_inline_css

    @property
    def file_extension(self) -> str:
        return ".html"

    @property
    def media_type(self) -> str:
        return "text/html"

    def render_heading(self, level: int, text: str) -> str:
        level = clamp_heading_level(level)
        return (
            f'<h{level} class="terminal-heading terminal-heading-{level}">'
            f"{escape(text)}</h{level}>"
        )

    def render_paragraph(self, text: str) -> str:
        return f'<p class="terminal-paragraph">{escape(text)}</p>'

    def render_command_prompt(self, command: str) -> str:
        return f'<div class="terminal-command">{escape(command)}</div>'

    def render_output(self, children: Sequence[Block]) -> str:
        return f'<div class="terminal-output">{self.render_blocks(children)}</div>'

    def render_frame(self, title: str | None, content: Sequence[Block]) -> str:
        title_html = ""
        if title is not None:
            title_html = f'<div class="terminal-frame-title">{escape(title)}</div>'
        return f'<div class="terminal-frame">{title_html}{self.render_blocks(content)}</div>'

    def render_metric(
        self,
        name: str,
        value: str,
        unit: str | None = None,
        trend: float | None = None,
    ) -> str:
        shown = escape(value)
        if unit is not None:
            shown = f"{shown} {escape(unit)}"

        value_classes = " ".join(filter(None, ["terminal-metric-value", trend_class(trend)]))
        return (
            '<div class="terminal-metric">'
            f'<span class="terminal-metric-name">{escape(name)}</span>'
            f'<span class="{value_classes}">{shown}</span>'
            "</div>"
        )

    def render_log_entry(
        self,
        message: str,
        level: str,
        timestamp: str | None = None,
        source: str | None = None,
    ) -> str:
        prefix = "".join(f"[{escape(part)}] " for part in (timestamp, source) if part is not None)
        return (
            f'<div class="terminal-log {log_level_class(level)}">'
            f'<span class="terminal-log-prefix">{prefix}</span>'
            f'<span class="terminal-log-message">{escape(message)}</span>'
            "</div>"
        )

    def render_table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
        column_count = max([len(headers), *(len(row) for row in rows)])

        header_row = ""
        if headers:
            padded = list(headers) + [""] * (column_count - len(headers))
            header_row = "<tr>" + "".join(f"<th>{escape(h)}</th>" for h in padded) + "</tr>"

        body_rows = []
        for row in rows:
            padded = list(row) + [""] * (column_count - len(row))
            body_rows.append("<tr>" + "".join(f"<td>{escape(c)}</td>" for c in padded) + "</tr>")

        return (
            '<table class="terminal-table">'
            f"<thead>{header_row}</thead>"
            f"<tbody>{''.join(body_rows)}</tbody>"
            "</table>"
        )

    def render_trace(
        self,
        name: str,
        duration_ms: int,
        start_time: str,
        status: str,
        metadata: dict[str, str],
    ) -> str:
        metadata_html = ""
        if metadata:
            items = ", ".join(
                '<span class="terminal-trace-metadata-item">'
                f'<span class="terminal-trace-metadata-key">{escape(key)}</span>: '
                f'<span class="terminal-trace-metadata-value">{escape(metadata[key])}</span>'
                "</span>"
                for key in sorted(metadata)
            )
            metadata_html = f'<div class="terminal-trace-metadata">{items}</div>'

        return (
            '<div class="terminal-trace">'
            '<div class="terminal-trace-header">'
            f'<span class="terminal-trace-name">{escape(name)}</span>'
            f'<span class="terminal-trace-duration">{duration_ms} ms</span>'
            "</div>"
            '<div class="terminal-trace-details">'
            f"Started: {escape(start_time)}, Status: {escape(status)}"
            "</div>"
            f"{metadata_html}"
            "</div>"
        )

    def render_raw(self, text: str) -> str:
        return text

    def render_template(self, template_data: TemplateData) -> str:
        content = self.render_blocks(template_data.blocks)
        root_classes = " ".join(["terminal", *self.additional_classes])
        style = f"<style>{TERMINAL_CSS}</style>" if self.include_inline_css else ""

        logger.debug(f"Rendered HTML for template '{template_data.template_name}'")
        return (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n'
            "<head>\n"
            '<meta charset="UTF-8">\n'
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
            f"<title>{escape(template_data.template_name)}</title>\n"
            f"{style}\n"
            "</head>\n"
            "<body>\n"
            f'<div class="{escape(root_classes)}">{content}</div>\n'
            "</body>\n"
            "</html>\n"
        )

    def render_metrics(self, metrics: Sequence[MetricRecord]) -> str:
        if not metrics:
            return '<div class="terminal-empty-message">No metrics available</div>'
        return self.render_blocks([metric.to_block() for metric in metrics])

    def render_logs(self, logs: Sequence[LogEntryRecord]) -> str:
        if not logs:
            return '<div class="terminal-empty-message">No logs available</div>'
        return self.render_blocks([log.to_block() for log in logs])

    def render_traces(self, traces: Sequence[TraceRecord]) -> str:
        if not traces:
            return '<div class="terminal-empty-message">No traces available</div>'

        rows = [
            [trace.name, f"{trace.duration_ms} ms", trace.start_time.isoformat(), trace.status]
            for trace in traces
        ]
        return self.render_table(TRACE_TABLE_HEADERS, rows)
