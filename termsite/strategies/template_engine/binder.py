"""Context binder.

Expands the ``@metrics``, ``@logs`` and ``@traces`` markers left by the parser
into concrete blocks populated from a ``TemplateContext``. ``@var{name}``
markers are left alone; they are resolved by text substitution after
rendering.
"""

import logging
from collections.abc import Sequence

from termsite.models.blocks import Block, Container, Frame, Output, Paragraph, Raw, Table
from termsite.strategies.template_engine.context import TemplateContext

logger = logging.getLogger(__name__)

METRICS_MARKER = "@metrics"
LOGS_MARKER = "@logs"
TRACES_MARKER = "@traces"

LOG_TABLE_HEADERS = ["Timestamp", "Level", "Source", "Message"]
NO_LOGS_TEXT = "No logs available."


class ContextBinder:
    """Rewrites data markers in a block tree against a context.

    Binding never mutates its input: a new list (and new container blocks)
    is returned. A tree without markers binds to an equal tree.
    """

    def bind(self, blocks: Sequence[Block], context: TemplateContext) -> list[Block]:
        """Bind a block tree.

        Args:
            blocks: Parsed blocks, possibly containing data markers.
            context: Data for this render.

        Returns:
            The bound block tree.

        Raises:
            TemplateBindError: If a directive cannot be resolved.
        """
        bound: list[Block] = []

        for block in blocks:
            match block:
                case Raw(text=text) if text.strip() == METRICS_MARKER:
                    bound.extend(self._bind_metrics(context))
                case Raw(text=text) if text.strip() == LOGS_MARKER:
                    bound.extend(self._bind_logs(context))
                case Raw(text=text) if text.strip() == TRACES_MARKER:
                    bound.extend(self._bind_traces(context))
                case Frame(content=content, title=title):
                    bound.append(Frame(content=self.bind(content, context), title=title))
                case Output(children=children):
                    bound.append(Output(children=self.bind(children, context)))
                case Container(children=children):
                    bound.append(Container(children=self.bind(children, context)))
                case _:
                    bound.append(block)

        return bound

    def _bind_metrics(self, context: TemplateContext) -> list[Block]:
        logger.debug(f"Binding {len(context.metrics)} metrics")
        blocks: list[Block] = [Raw(f"<!-- Metrics: {len(context.metrics)} -->")]
        blocks.extend(metric.to_block() for metric in context.metrics)
        return blocks

    def _bind_logs(self, context: TemplateContext) -> list[Block]:
        logger.debug(f"Binding {len(context.logs)} log entries")
        blocks: list[Block] = [Raw(f"<!-- Logs: {len(context.logs)} -->")]

        if not context.logs:
            blocks.append(Paragraph(NO_LOGS_TEXT))
            return blocks

        rows = [
            [log.timestamp.isoformat(), str(log.level), log.source, log.message]
            for log in context.logs
        ]
        blocks.append(Table(headers=list(LOG_TABLE_HEADERS), rows=rows))
        return blocks

    def _bind_traces(self, context: TemplateContext) -> list[Block]:
        logger.debug(f"Binding {len(context.traces)} traces")
        blocks: list[Block] = [Raw(f"<!-- Traces: {len(context.traces)} -->")]
        blocks.extend(trace.to_block() for trace in context.traces)
        return blocks
