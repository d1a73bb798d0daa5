"""Output renderer strategies."""

from termsite.strategies.renderers.html import HtmlRenderer
from termsite.strategies.renderers.text import TextRenderer

__all__ = [
    "HtmlRenderer",
    "TextRenderer",
]
