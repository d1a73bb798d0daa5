"""Template engine.

Loads and caches templates, binds them against a context, renders them
through a renderer strategy and resolves variables in the rendered text.
"""

import logging
import re
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from termsite.interfaces.renderer import BaseRenderer, TemplateData
from termsite.interfaces.template import (
    TemplateCacheError,
    TemplateError,
    TemplateNotFoundError,
)
from termsite.models.blocks import Block
from termsite.strategies.template_engine.binder import ContextBinder
from termsite.strategies.template_engine.context import TemplateContext
from termsite.strategies.template_engine.template import Template

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".tmpl"

# ``[[name]]`` tokens and ``@var{name}`` markers, resolved in one pass. Marker
# names may contain ``\}``.
VARIABLE_PATTERN = re.compile(r"\[\[([^\[\]]+)\]\]|@var\{((?:\\\}|[^}])*)\}")


def substitute_variables(text: str, variables: dict[str, str]) -> str:
    """Replace variable tokens in rendered text.

    Both ``[[name]]`` and ``@var{name}`` are replaced with the matching value.
    Names with no value are left exactly as written. Substituted values are
    not scanned again. An escaped ``\\}`` in an ``@var`` name stands for ``}``.

    Args:
        text: Rendered output.
        variables: Variable values by name.

    Returns:
        The text with known variables resolved.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            name = match.group(1)
        else:
            name = match.group(2).replace("\\}", "}")
        return variables.get(name, match.group(0))

    return VARIABLE_PATTERN.sub(_replace, text)


class TemplateEngine:
    """Orchestrates load, bind, render and substitute.

    The cache maps template names to parsed templates. It is filled lazily
    and only emptied by ``clear_cache``; changed files are not noticed until
    then. Two threads missing on the same name may both parse it, and the
    later insert wins.

    Example:
        ```python
        engine = TemplateEngine("templates")
        html = engine.render("dashboard", context, HtmlRenderer())
        text = engine.render("dashboard", context, TextRenderer())
        engine.write_output(html, text, "public", "index")
        ```
    """

    def __init__(
        self,
        template_dir: str | Path,
        binder: ContextBinder | None = None,
        lock_timeout: float = 5.0,
    ) -> None:
        """Initialize the engine.

        Args:
            template_dir: Directory holding ``<name>.tmpl`` files.
            binder: Context binder. A default one is created if None.
            lock_timeout: Seconds to wait for the cache lock.
        """
        self.template_dir = Path(template_dir)
        self.binder = binder or ContextBinder()
        self.lock_timeout = lock_timeout
        self._cache: dict[str, Template] = {}
        self._lock = threading.Lock()

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise TemplateCacheError(
                f"Failed to acquire template cache lock within {self.lock_timeout}s"
            )
        try:
            yield
        finally:
            self._lock.release()

    def template_path(self, name: str) -> Path:
        return self.template_dir / f"{name}{TEMPLATE_SUFFIX}"

    def load_template(self, name: str) -> Template:
        """Return the named template, parsing it on a cache miss.

        Args:
            name: Template name, without suffix.

        Returns:
            The cached or freshly parsed template.

        Raises:
            TemplateNotFoundError: If ``<name>.tmpl`` does not exist.
            TemplateParseError: If the file is malformed.
            TemplateCacheError: If the cache lock cannot be acquired.
        """
        with self._locked():
            cached = self._cache.get(name)
        if cached is not None:
            logger.debug(f"Template cache hit: {name}")
            return cached

        path = self.template_path(name)
        if not path.is_file():
            raise TemplateNotFoundError(name)

        logger.info(f"Loading template '{name}' from {path}")
        template = Template.from_file(path)

        with self._locked():
            self._cache[name] = template

        return template

    def clear_cache(self) -> None:
        with self._locked():
            count = len(self._cache)
            self._cache.clear()
        logger.info(f"Cleared {count} cached templates")

    def cached_names(self) -> list[str]:
        with self._locked():
            return sorted(self._cache)

    def bind_blocks(self, blocks: list[Block], context: TemplateContext) -> list[Block]:
        return self.binder.bind(blocks, context)

    def render(
        self,
        template_name: str,
        context: TemplateContext,
        renderer: BaseRenderer,
    ) -> str:
        """Render a named template.

        Args:
            template_name: Template to load.
            context: Data for this render.
            renderer: Output format strategy.

        Returns:
            The rendered document with variables resolved.

        Raises:
            TemplateError: On lookup, parse, bind or lock failures.
        """
        template = self.load_template(template_name)
        return self.render_template(template, context, renderer)

    def render_template(
        self,
        template: Template,
        context: TemplateContext,
        renderer: BaseRenderer,
    ) -> str:
        """Render an already loaded template.

        Context variables take precedence over the template's own variables.
        """
        bound = self.bind_blocks(template.blocks, context)
        template_data = TemplateData(blocks=bound, template_name=template.name)

        rendered = renderer.render_template(template_data)

        variables = {**template.variables, **context.variables}
        return substitute_variables(rendered, variables)

    def substitute_variables(self, text: str, variables: dict[str, str]) -> str:
        return substitute_variables(text, variables)

    def write_output(
        self,
        html_content: str,
        text_content: str,
        output_dir: str | Path,
        base_name: str,
    ) -> tuple[Path, Path]:
        """Write the HTML and text renders side by side.

        Args:
            html_content: Rendered HTML document.
            text_content: Rendered text document.
            output_dir: Destination directory, created if missing.
            base_name: File name without extension.

        Returns:
            Paths of the written ``.html`` and ``.txt`` files.

        Raises:
            TemplateError: If the directory or files cannot be written.
        """
        output_dir = Path(output_dir)
        html_path = output_dir / f"{base_name}.html"
        text_path = output_dir / f"{base_name}.txt"

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            html_path.write_text(html_content, encoding="utf-8")
            text_path.write_text(text_content, encoding="utf-8")
        except OSError as e:
            raise TemplateError(f"Failed to write output to {output_dir}: {e}") from e

        logger.info(f"Wrote {html_path} and {text_path}")
        return html_path, text_path
