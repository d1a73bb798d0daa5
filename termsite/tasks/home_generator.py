"""Dashboard generation task.

Each run collects the recent telemetry, renders the dashboard template as
HTML and as plain text, and writes both next to each other in the output
directory.
"""

import asyncio
import logging
import socket
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from typing import TypeVar

from termsite.interfaces.renderer import BaseRenderer
from termsite.interfaces.task import BaseTask
from termsite.models.records import utc_now
from termsite.storage.memory import LogStorage, MetricStorage, TraceStorage
from termsite.strategies.template_engine.context import TemplateContext
from termsite.strategies.template_engine.engine import TemplateEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HomeGeneratorTask(BaseTask):
    """Renders the home dashboard from the last window of telemetry.

    Attributes:
        engine: Template engine used for both renders.
        html_renderer: Renderer for the ``.html`` output.
        text_renderer: Renderer for the ``.txt`` output.
        output_dir: Directory the pages are written to.
        template_name: Template rendered on every run.
        base_name: Output file name without extension.
        lookback: How far back to query the stores.
        hostname: Value of the ``hostname`` variable.
    """

    def __init__(
        self,
        engine: TemplateEngine,
        metric_storage: MetricStorage,
        log_storage: LogStorage,
        trace_storage: TraceStorage,
        html_renderer: BaseRenderer,
        text_renderer: BaseRenderer,
        output_dir: str | Path,
        template_name: str = "dashboard",
        base_name: str = "index",
        lookback: timedelta = timedelta(hours=1),
        hostname: str | None = None,
    ) -> None:
        self.engine = engine
        self.metric_storage = metric_storage
        self.log_storage = log_storage
        self.trace_storage = trace_storage
        self.html_renderer = html_renderer
        self.text_renderer = text_renderer
        self.output_dir = Path(output_dir)
        self.template_name = template_name
        self.base_name = base_name
        self.lookback = lookback
        self.hostname = hostname or socket.gethostname()

    @property
    def name(self) -> str:
        return "HomeGenerator"

    async def execute(self) -> None:
        await asyncio.to_thread(self.generate_site)

    def generate_site(self) -> tuple[Path, Path]:
        """Render and write the dashboard pages.

        Returns:
            Paths of the written HTML and text files.

        Raises:
            TemplateError: If rendering or writing fails. Nothing is written
                when either render fails.
        """
        logger.info("Generating dashboard content")
        context = self.build_context()

        try:
            html_content = self.engine.render(self.template_name, context, self.html_renderer)
            text_content = self.engine.render(self.template_name, context, self.text_renderer)
        except Exception as e:
            logger.error(f"Dashboard render failed: {e}")
            raise

        paths = self.engine.write_output(html_content, text_content, self.output_dir, self.base_name)
        logger.info("Dashboard generation completed")
        return paths

    def build_context(self, now: datetime | None = None) -> TemplateContext:
        """Query the stores and assemble the render context.

        A store query that fails is logged and treated as empty.
        """
        now = now or utc_now()
        since = now - self.lookback

        metrics = self._query("metrics", lambda: self.metric_storage.get_by_time_range(since, now))
        traces = self._query("traces", lambda: self.trace_storage.get_by_time_range(since, now))
        logs = self._query("logs", lambda: self.log_storage.get_by_time_range(since, now))

        return (
            TemplateContext()
            .with_metrics(metrics)
            .with_traces(traces)
            .with_logs(logs)
            .with_variables(
                {
                    "current_time": now.isoformat(),
                    "hostname": self.hostname,
                    "metric_count": len(metrics),
                    "trace_count": len(traces),
                    "log_count": len(logs),
                }
            )
        )

    def _query(self, kind: str, query: Callable[[], list[T]]) -> list[T]:
        try:
            return query()
        except Exception as e:
            logger.warning(f"Failed to retrieve {kind}: {e}")
            return []
