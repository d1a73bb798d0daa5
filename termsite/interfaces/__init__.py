"""Abstract base classes for rendering and scheduled tasks."""

from termsite.interfaces.renderer import BaseRenderer, RenderError, TemplateData
from termsite.interfaces.task import BaseTask, SchedulerError
from termsite.interfaces.template import (
    TemplateBindError,
    TemplateCacheError,
    TemplateError,
    TemplateNotFoundError,
    TemplateParseError,
)

__all__ = [
    "BaseRenderer",
    "BaseTask",
    "RenderError",
    "SchedulerError",
    "TemplateData",
    "TemplateError",
    "TemplateParseError",
    "TemplateNotFoundError",
    "TemplateCacheError",
    "TemplateBindError",
]
