"""Abstract base class for output renderers.

The Strategy Pattern lets one bound block tree be turned into several output
formats. Concrete renderers only decide how each block variant looks; the
tree walk is shared here.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import final

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
)
from termsite.models.records import LogEntryRecord, MetricRecord, TraceRecord


@dataclass(frozen=True)
class TemplateData:
    """Renderer-facing view of a bound template.

    Attributes:
        blocks: The bound block tree.
        template_name: Name of the template the tree came from.
    """

    blocks: list[Block] = field(default_factory=list)
    template_name: str = ""


class RenderError(Exception):
    """Exception raised when a block cannot be rendered."""

    pass


class BaseRenderer(ABC):
    """Abstract base class for rendering strategies.

    Implementations provide one method per block variant plus the
    whole-document and direct-record entry points. ``render_block`` dispatches
    every variant to its method and may be overridden as long as per-variant
    output stays the same; ``render_blocks`` always concatenates
    ``render_block`` over its input.

    Example:
        ```python
        renderer = TextRenderer(width=60)
        text = renderer.render_template(TemplateData(blocks, "dashboard"))
        ```
    """

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension used for this format (e.g. '.html')."""
        ...

    @property
    @abstractmethod
    def media_type(self) -> str:
        """Return the MIME type of the rendered output."""
        ...

    @abstractmethod
    def render_heading(self, level: int, text: str) -> str:
        """Render a heading. ``level`` must be clamped to 1-6 here."""
        ...

    @abstractmethod
    def render_paragraph(self, text: str) -> str:
        ...

    @abstractmethod
    def render_command_prompt(self, command: str) -> str:
        ...

    @abstractmethod
    def render_output(self, children: Sequence[Block]) -> str:
        """Render a terminal output grouping around its child blocks."""
        ...

    @abstractmethod
    def render_frame(self, title: str | None, content: Sequence[Block]) -> str:
        """Render a frame around its child blocks."""
        ...

    @abstractmethod
    def render_metric(
        self,
        name: str,
        value: str,
        unit: str | None = None,
        trend: float | None = None,
    ) -> str:
        ...

    @abstractmethod
    def render_log_entry(
        self,
        message: str,
        level: str,
        timestamp: str | None = None,
        source: str | None = None,
    ) -> str:
        ...

    @abstractmethod
    def render_table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
        """Render a table. Rows may be shorter or longer than ``headers``."""
        ...

    @abstractmethod
    def render_trace(
        self,
        name: str,
        duration_ms: int,
        start_time: str,
        status: str,
        metadata: dict[str, str],
    ) -> str:
        ...

    @abstractmethod
    def render_raw(self, text: str) -> str:
        ...

    @abstractmethod
    def render_template(self, template_data: TemplateData) -> str:
        """Render a complete document from a bound template."""
        ...

    @abstractmethod
    def render_metrics(self, metrics: Sequence[MetricRecord]) -> str:
        """Render metric records directly, outside the template pipeline."""
        ...

    @abstractmethod
    def render_logs(self, logs: Sequence[LogEntryRecord]) -> str:
        """Render log records directly, outside the template pipeline."""
        ...

    @abstractmethod
    def render_traces(self, traces: Sequence[TraceRecord]) -> str:
        """Render trace records directly, outside the template pipeline."""
        ...

    def render_block(self, block: Block) -> str:
        """Dispatch a single block to its variant-specific render method.

        Args:
            block: The block to render.

        Returns:
            The rendered text.

        Raises:
            RenderError: If the object is not a known block variant.
        """
        match block:
            case Heading(level=level, text=text):
                return self.render_heading(level, text)
            case Paragraph(text=text):
                return self.render_paragraph(text)
            case CommandPrompt(text=text):
                return self.render_command_prompt(text)
            case Output(children=children):
                return self.render_output(children)
            case Frame(content=content, title=title):
                return self.render_frame(title, content)
            case Metric(name=name, value=value, unit=unit, trend=trend):
                return self.render_metric(name, value, unit, trend)
            case LogEntry(message=message, level=level, timestamp=timestamp, source=source):
                return self.render_log_entry(message, level, timestamp, source)
            case Table(headers=headers, rows=rows):
                return self.render_table(headers, rows)
            case Trace(
                name=name,
                duration_ms=duration_ms,
                start_time=start_time,
                status=status,
                metadata=metadata,
            ):
                return self.render_trace(name, duration_ms, start_time, status, metadata)
            case Raw(text=text):
                return self.render_raw(text)
            case Container(children=children):
                return self.render_blocks(children)
            case _:
                raise RenderError(f"Unsupported block type: {type(block).__name__}")

    @final
    def render_blocks(self, blocks: Sequence[Block]) -> str:
        """Render blocks depth-first and concatenate the results."""
        return "".join(self.render_block(block) for block in blocks)
