"""Component Factory for strategy instantiation.

The Factory Pattern lets the application pick renderer strategies at
runtime and share one template engine, one set of stores and one scheduler
between the HTTP layer and the background loop.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from termsite.core.config import Settings, get_settings
from termsite.interfaces.renderer import BaseRenderer
from termsite.scheduler import Scheduler
from termsite.storage.memory import LogStorage, MetricStorage, TraceStorage
from termsite.strategies.renderers import HtmlRenderer, TextRenderer
from termsite.strategies.template_engine import TemplateEngine
from termsite.tasks.home_generator import HomeGeneratorTask

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Storages:
    """The three telemetry stores."""

    metrics: MetricStorage
    logs: LogStorage
    traces: TraceStorage


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        engine = factory.get_template_engine()
        html = engine.render("dashboard", context, factory.get_renderer("html"))
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._renderer_cache: dict[str, BaseRenderer] = {}
        self._engine_cache: TemplateEngine | None = None
        self._storages_cache: Storages | None = None
        self._scheduler_cache: Scheduler | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_renderer(self, renderer_type: str) -> BaseRenderer:
        """Get a renderer instance for an output format.

        Args:
            renderer_type: ``"html"`` or ``"text"``.

        Returns:
            A BaseRenderer implementation instance.

        Raises:
            ValueError: If the renderer type is unknown.
        """
        if renderer_type not in self._renderer_cache:
            logger.info(f"Instantiating renderer: {renderer_type}")

            match renderer_type:
                case "html":
                    renderer: BaseRenderer = HtmlRenderer(
                        include_inline_css=self._settings.html_inline_css,
                    )
                case "text":
                    renderer = TextRenderer(
                        width=self._settings.text_width,
                        ascii_only=self._settings.ascii_only,
                    )
                case _:
                    raise ValueError(
                        f"Unknown renderer type: {renderer_type}. "
                        f"Valid options: 'html', 'text'"
                    )

            self._renderer_cache[renderer_type] = renderer

        return self._renderer_cache[renderer_type]

    def get_template_engine(self) -> TemplateEngine:
        """Get the shared template engine.

        Returns:
            The TemplateEngine reading from ``settings.templates_dir``.
        """
        if self._engine_cache is None:
            logger.info(f"Instantiating template engine: {self._settings.templates_dir}")
            self._engine_cache = TemplateEngine(self._settings.templates_dir)

        return self._engine_cache

    def get_storages(self) -> Storages:
        """Get the shared telemetry stores."""
        if self._storages_cache is None:
            logger.info("Instantiating in-memory storages")
            self._storages_cache = Storages(
                metrics=MetricStorage(),
                logs=LogStorage(),
                traces=TraceStorage(),
            )

        return self._storages_cache

    def get_home_generator(self) -> HomeGeneratorTask:
        """Build the dashboard task wired to the shared components."""
        storages = self.get_storages()
        return HomeGeneratorTask(
            engine=self.get_template_engine(),
            metric_storage=storages.metrics,
            log_storage=storages.logs,
            trace_storage=storages.traces,
            html_renderer=self.get_renderer("html"),
            text_renderer=self.get_renderer("text"),
            output_dir=self._settings.output_dir,
            template_name=self._settings.dashboard_template,
            base_name=self._settings.output_base_name,
            lookback=timedelta(minutes=self._settings.lookback_minutes),
            hostname=self._settings.hostname,
        )

    def get_scheduler(self) -> Scheduler:
        """Get the shared scheduler, with the home generator registered."""
        if self._scheduler_cache is None:
            logger.info(f"Instantiating scheduler: every {self._settings.interval_seconds}s")
            scheduler = Scheduler(interval_seconds=self._settings.interval_seconds)
            scheduler.add_task(self.get_home_generator())
            self._scheduler_cache = scheduler

        return self._scheduler_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._renderer_cache.clear()
        self._engine_cache = None
        self._storages_cache = None
        self._scheduler_cache = None
        logger.debug("Component factory cache cleared")


# Global factory instance
_factory: ComponentFactory | None = None


def get_factory() -> ComponentFactory:
    """Get or create the global ComponentFactory instance.

    Returns:
        The singleton ComponentFactory instance.
    """
    global _factory
    if _factory is None:
        _factory = ComponentFactory()
    return _factory
