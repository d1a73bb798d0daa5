"""Parsed template with its source text and variable defaults."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from termsite.interfaces.renderer import TemplateData
from termsite.interfaces.template import TemplateError
from termsite.models.blocks import Block
from termsite.strategies.template_engine.parser import parse

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_NAME = "unnamed"


@dataclass
class Template:
    """A named template: source text, parsed blocks and variables.

    Attributes:
        name: Template name, usually the file stem.
        content: Original markup.
        blocks: Parsed top-level blocks.
        variables: Template-level variable values.
    """

    name: str
    content: str
    blocks: list[Block] = field(default_factory=list)
    variables: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_string(cls, name: str, content: str) -> "Template":
        """Parse markup into a template.

        Args:
            name: Template name.
            content: Template markup.

        Returns:
            The parsed template.

        Raises:
            TemplateParseError: If the markup is malformed.
        """
        blocks = parse(content)
        logger.debug(f"Template '{name}' parsed into {len(blocks)} blocks")
        return cls(name=name, content=content, blocks=blocks)

    @classmethod
    def from_file(cls, path: str | Path) -> "Template":
        """Read and parse a UTF-8 template file.

        Args:
            path: Path to the template file.

        Returns:
            The parsed template, named after the file stem.

        Raises:
            TemplateError: If the file cannot be read.
            TemplateParseError: If the markup is malformed.
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateError(f"Failed to read template {path}: {e}") from e

        return cls.from_string(path.stem or DEFAULT_TEMPLATE_NAME, content)

    def to_template_data(self) -> TemplateData:
        return TemplateData(blocks=list(self.blocks), template_name=self.name)

    def set_variable(self, name: str, value: str) -> None:
        self.variables[name] = value

    def set_variables(self, variables: dict[str, str]) -> None:
        self.variables.update(variables)
