"""Template engine strategies.

Parses terminal-style markup, binds it against runtime data and drives
renderers to produce the final documents.
"""

from termsite.strategies.template_engine.binder import ContextBinder
from termsite.strategies.template_engine.context import TemplateContext
from termsite.strategies.template_engine.engine import TemplateEngine, substitute_variables
from termsite.strategies.template_engine.parser import TemplateParser, parse
from termsite.strategies.template_engine.template import Template

__all__ = [
    "ContextBinder",
    "Template",
    "TemplateContext",
    "TemplateEngine",
    "TemplateParser",
    "parse",
    "substitute_variables",
]
