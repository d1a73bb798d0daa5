"""Plain-text renderer strategy.

Produces a terminal-friendly document: underlined headings, paragraphs
wrapped to a fixed width, and frames and tables drawn with box characters
(or plain ASCII when requested).
"""

import copy
import logging
import textwrap
from collections.abc import Sequence
from dataclasses import dataclass

from termsite.interfaces.renderer import BaseRenderer, TemplateData
from termsite.models.blocks import Block, clamp_heading_level
from termsite.models.records import LogEntryRecord, LogLevel, MetricRecord, TraceRecord, utc_now

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80
MIN_WIDTH = 20

# Narrowest space left for a log message before it moves below its prefix.
MIN_MESSAGE_WIDTH = 10

_HEADING_UNDERLINES = {1: "=", 2: "-", 3: "~"}

_LOG_LEVEL_LABELS = {
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO ",
    LogLevel.WARNING: "WARN ",
    LogLevel.ERROR: "ERROR",
}

TRACE_TABLE_HEADERS = ["Name", "Duration", "Started", "Status"]


@dataclass(frozen=True)
class BoxChars:
    """Glyph set used for frames and tables."""

    horizontal: str
    vertical: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    cross: str
    tee_right: str
    tee_left: str
    tee_down: str
    tee_up: str
    trend_up: str
    trend_down: str


UNICODE_BOX = BoxChars(
    horizontal="─",
    vertical="│",
    top_left="┌",
    top_right="┐",
    bottom_left="└",
    bottom_right="┘",
    cross="┼",
    tee_right="├",
    tee_left="┤",
    tee_down="┬",
    tee_up="┴",
    trend_up="▲",
    trend_down="▼",
)

ASCII_BOX = BoxChars(
    horizontal="-",
    vertical="|",
    top_left="+",
    top_right="+",
    bottom_left="+",
    bottom_right="+",
    cross="+",
    tee_right="+",
    tee_left="+",
    tee_down="+",
    tee_up="+",
    trend_up="^",
    trend_down="v",
)


def wrap_text(text: str, width: int) -> list[str]:
    """Word-wrap text to ``width`` columns.

    Runs of whitespace collapse to one space. Words longer than ``width``
    are split so that no line is wider than ``width``.
    """
    return textwrap.wrap(
        " ".join(text.split()),
        width=width,
        break_long_words=True,
        break_on_hyphens=False,
    )


def _split_line(line: str, width: int) -> list[str]:
    width = max(width, 1)
    if len(line) <= width:
        return [line]
    return [line[i:i + width] for i in range(0, len(line), width)]


class TextRenderer(BaseRenderer):
    """Renders block trees as fixed-width plain text.

    Attributes:
        width: Target column width for wrapping and frames.
        ascii_only: Use ``+ - |`` instead of box-drawing glyphs.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, ascii_only: bool = False) -> None:
        """Initialize the renderer.

        Args:
            width: Column width, at least 20.
            ascii_only: Restrict output to ASCII glyphs.

        Raises:
            ValueError: If ``width`` is below the minimum.
        """
        if width < MIN_WIDTH:
            raise ValueError(f"Text width must be at least {MIN_WIDTH}, got {width}")
        self.width = width
        self.ascii_only = ascii_only

    @property
    def file_extension(self) -> str:
        return ".txt"

    @property
    def media_type(self) -> str:
        return "text/plain"

    @property
    def box(self) -> BoxChars:
        return ASCII_BOX if self.ascii_only else UNICODE_BOX

    def _narrowed(self, width: int) -> "TextRenderer":
        # Frame content is rendered at the inner width, which may drop below MIN_WIDTH
        # but never below one column.
        inner = copy.copy(self)
        inner.width = max(width, 1)
        return inner

    def render_heading(self, level: int, text: str) -> str:
        underline = _HEADING_UNDERLINES.get(clamp_heading_level(level))
        if underline is None:
            return f"{text}\n\n"
        return f"{text}\n{underline * len(text)}\n\n"

    def render_paragraph(self, text: str) -> str:
        return "\n".join(wrap_text(text, self.width)) + "\n\n"

    def render_command_prompt(self, command: str) -> str:
        return f"$ {command}\n"

    def render_output(self, children: Sequence[Block]) -> str:
        return self.render_blocks(children) + "\n"

    def render_frame(self, title: str | None, content: Sequence[Block]) -> str:
        box = self.box
        inner_width = max(self.width - 4, 1)

        rendered = self._narrowed(inner_width).render_blocks(content)
        lines = rendered.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        lines = [chunk for line in lines for chunk in _split_line(line, inner_width)]

        content_width = max((len(line) for line in lines), default=0)
        if title is not None:
            title = title[:inner_width]
            content_width = max(content_width, len(title) + 2)
        content_width = min(content_width, inner_width)

        if title is not None:
            title_text = f" {title} "
            padding = content_width + 2 - len(title_text)
            top = f"{box.top_left}{title_text}{box.horizontal * padding}{box.top_right}"
        else:
            top = f"{box.top_left}{box.horizontal * (content_width + 2)}{box.top_right}"

        body = [
            f"{box.vertical} {line}{' ' * (content_width - len(line))} {box.vertical}"
            for line in lines
        ]
        bottom = f"{box.bottom_left}{box.horizontal * (content_width + 2)}{box.bottom_right}"

        return "\n".join([top, *body, bottom]) + "\n"

    def render_metric(
        self,
        name: str,
        value: str,
        unit: str | None = None,
        trend: float | None = None,
    ) -> str:
        shown = f"{value} {unit}" if unit is not None else value
        if trend is not None and trend > 0:
            shown = f"{shown} {self.box.trend_up}"
        elif trend is not None and trend < 0:
            shown = f"{shown} {self.box.trend_down}"

        padding = max(0, self.width - len(name) - len(shown) - 3)
        return f"{name}: {' ' * padding}{shown}\n"

    def render_log_entry(
        self,
        message: str,
        level: str,
        timestamp: str | None = None,
        source: str | None = None,
    ) -> str:
        label = _LOG_LEVEL_LABELS.get(LogLevel.parse(level), _LOG_LEVEL_LABELS[LogLevel.INFO])
        parts = [timestamp, label, source]
        prefix = "".join(f"[{part}] " for part in parts if part is not None)

        indent = len(prefix)
        available = self.width - indent
        if available < MIN_MESSAGE_WIDTH:
            lines = wrap_text(message, self.width)
            return "\n".join([prefix.rstrip(), *lines]) + "\n"

        lines = wrap_text(message, available)
        if not lines:
            return prefix.rstrip() + "\n"

        result = [prefix + lines[0]]
        result.extend(" " * indent + line for line in lines[1:])
        return "\n".join(result) + "\n"

    def _rule(self, widths: list[int], left: str, joint: str, right: str) -> str:
        segments = [self.box.horizontal * (width + 2) for width in widths]
        return left + joint.join(segments) + right

    def _row(self, cells: Sequence[str], widths: list[int]) -> str:
        padded = list(cells) + [""] * (len(widths) - len(cells))
        v = self.box.vertical
        return v + v.join(f" {cell:<{width}} " for cell, width in zip(padded, widths)) + v

    def render_table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
        if not headers and not rows:
            return ""

        box = self.box
        column_count = max([len(headers), *(len(row) for row in rows)])
        widths = [0] * column_count
        for cells in [headers, *rows]:
            for i, cell in enumerate(cells):
                widths[i] = max(widths[i], len(cell))

        separator = self._rule(widths, box.tee_right, box.cross, box.tee_left)
        lines = [self._rule(widths, box.top_left, box.tee_down, box.top_right)]

        if headers:
            lines.append(self._row(headers, widths))
            if rows:
                lines.append(separator)

        for i, row in enumerate(rows):
            if i > 0:
                lines.append(separator)
            lines.append(self._row(row, widths))

        lines.append(self._rule(widths, box.bottom_left, box.tee_up, box.bottom_right))
        return "\n".join(lines) + "\n"

    def render_trace(
        self,
        name: str,
        duration_ms: int,
        start_time: str,
        status: str,
        metadata: dict[str, str],
    ) -> str:
        lines = [f"{name} ({duration_ms} ms)", f"Started: {start_time}, Status: {status}"]
        if metadata:
            lines.append("Metadata:")
            lines.extend(f"  {key}: {metadata[key]}" for key in sorted(metadata))
        return "\n".join(lines) + "\n"

    def render_raw(self, text: str) -> str:
        return text

    def render_template(self, template_data: TemplateData) -> str:
        content = self.render_blocks(template_data.blocks)
        header = f"# {template_data.template_name}\n\n"
        footer = f"\n--- Generated at {utc_now().isoformat()} ---\n"

        logger.debug(f"Rendered text for template '{template_data.template_name}'")
        return header + content + footer

    def render_metrics(self, metrics: Sequence[MetricRecord]) -> str:
        if not metrics:
            return "No metrics available\n"
        return self.render_blocks([metric.to_block() for metric in metrics])

    def render_logs(self, logs: Sequence[LogEntryRecord]) -> str:
        if not logs:
            return "No logs available\n"
        return self.render_blocks([log.to_block() for log in logs])

    def render_traces(self, traces: Sequence[TraceRecord]) -> str:
        if not traces:
            return "No traces available\n"

        rows = [
            [trace.name, f"{trace.duration_ms} ms", trace.start_time.isoformat(), trace.status]
            for trace in traces
        ]
        return self.render_table(TRACE_TABLE_HEADERS, rows)
