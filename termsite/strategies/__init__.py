"""Concrete strategy implementations."""

from termsite.strategies.renderers import (
    HtmlRenderer,
    TextRenderer,
)
from termsite.strategies.template_engine import (
    ContextBinder,
    Template,
    TemplateContext,
    TemplateEngine,
    TemplateParser,
)

__all__ = [
    "HtmlRenderer",
    "TextRenderer",
    "ContextBinder",
    "Template",
    "TemplateContext",
    "TemplateEngine",
    "TemplateParser",
]
