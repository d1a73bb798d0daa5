"""Markup parser.

Turns template markup into a list of blocks. The grammar is small:

- ``@metrics``, ``@logs``, ``@traces``: bare data markers, kept as ``Raw``
  blocks and expanded later by the context binder.
- ``@name{arg}{arg}...``: named directives. An argument ends at the first
  unescaped ``}``; ``\\}`` is the only escape.
- ``@output{...}`` and ``@frame[{title}]{...}``: bodies are cut out by brace
  depth and parsed as independent documents.
- Any other run of text up to the next ``@`` becomes a paragraph.

Nested bodies are parsed by a fresh parser, so line and column numbers in
their errors are relative to the start of the body.
"""

import logging
from collections.abc import Callable

from termsite.interfaces.template import TemplateParseError
from termsite.models.blocks import (
    Block,
    CommandPrompt,
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

logger = logging.getLogger(__name__)

DIRECTIVE_PREFIX = "@"
ARG_OPEN = "{"
ARG_CLOSE = "}"
ESCAPE = "\\"
CELL_SEPARATOR = "|"

BARE_KEYWORDS = frozenset({"metrics", "logs", "traces"})

# Longest snippet of offending text carried on an error.
_SNIPPET_LIMIT = 40


def _unescape(text: str) -> str:
    return text.replace(ESCAPE + ARG_CLOSE, ARG_CLOSE)


def _escape(text: str) -> str:
    return text.replace(ARG_CLOSE, ESCAPE + ARG_CLOSE)


def _split_cells(text: str) -> list[str]:
    return [cell.strip() for cell in text.split(CELL_SEPARATOR)]


def _snippet(text: str) -> str:
    if len(text) <= _SNIPPET_LIMIT:
        return text
    return text[:_SNIPPET_LIMIT] + "..."


class TemplateParser:
    """Recursive-descent parser over a cursor into the source text.

    Attributes:
        source: The markup being parsed.
    """

    def __init__(self, source: str) -> None:
        """Initialize the parser.

        Args:
            source: Template markup to parse.
        """
        self.source = source
        self._position = 0
        self._line = 1
        self._column = 1
        self._directives: dict[str, Callable[[], Block]] = {
            "heading": self._parse_heading,
            "paragraph": self._parse_paragraph,
            "command": self._parse_command,
            "output": self._parse_output,
            "frame": self._parse_frame,
            "metric": self._parse_metric,
            "log": self._parse_log,
            "table": self._parse_table,
            "trace": self._parse_trace,
            "raw": self._parse_raw,
            "var": self._parse_var,
        }

    def parse(self) -> list[Block]:
        """Parse the whole source.

        Returns:
            The top-level blocks in source order.

        Raises:
            TemplateParseError: If the markup is malformed.
        """
        blocks: list[Block] = []
        while True:
            block = self._parse_block()
            if block is None:
                break
            blocks.append(block)
        return blocks

    # ------------------------------------------------------------------
    # Blocks and directives
    # ------------------------------------------------------------------

    def _parse_block(self) -> Block | None:
        self._skip_whitespace()

        if self._is_at_end():
            return None

        if self._peek() == DIRECTIVE_PREFIX:
            line, column = self._line, self._column
            self._advance()
            return self._parse_directive(line, column)

        return Paragraph(self._parse_text())

    def _parse_directive(self, line: int, column: int) -> Block:
        name = self._parse_identifier()

        if name in BARE_KEYWORDS:
            return Raw(DIRECTIVE_PREFIX + name)

        handler = self._directives.get(name)
        if handler is None:
            raise TemplateParseError(
                f"Unknown directive {DIRECTIVE_PREFIX}{name}", line, column, name
            )
        return handler()

    def _parse_heading(self) -> Heading:
        line, column = self._line, self._column
        raw_level = self._parse_argument()
        try:
            level = int(raw_level)
        except ValueError:
            raise TemplateParseError(
                f"Invalid heading level '{raw_level}'", line, column, raw_level
            ) from None
        return Heading(level=level, text=self._parse_argument())

    def _parse_paragraph(self) -> Paragraph:
        return Paragraph(self._parse_argument())

    def _parse_command(self) -> CommandPrompt:
        return CommandPrompt(self._parse_argument())

    def _parse_raw(self) -> Raw:
        return Raw(self._parse_argument())

    def _parse_var(self) -> Raw:
        # Escapes stay in the marker; substitution unescapes the name.
        name = _escape(self._parse_argument())
        return Raw(f"{DIRECTIVE_PREFIX}var{ARG_OPEN}{name}{ARG_CLOSE}")

    def _parse_output(self) -> Output:
        body = self._read_body("output")
        return Output(children=TemplateParser(body).parse())

    def _parse_frame(self) -> Frame:
        first = self._read_body("frame")
        if self._peek() != ARG_OPEN:
            return Frame(content=TemplateParser(first).parse(), title=None)

        body = self._read_body("frame")
        return Frame(content=TemplateParser(body).parse(), title=_unescape(first))

    def _parse_metric(self) -> Metric:
        name = self._parse_argument()
        value = self._parse_argument()

        unit = None
        if self._peek() == ARG_OPEN:
            unit = self._parse_argument()

        trend = None
        if self._peek() == ARG_OPEN:
            line, column = self._line, self._column
            raw_trend = self._parse_argument()
            try:
                trend = float(raw_trend)
            except ValueError:
                raise TemplateParseError(
                    f"Invalid trend value '{raw_trend}'", line, column, raw_trend
                ) from None

        return Metric(name=name, value=value, unit=unit, trend=trend)

    def _parse_log(self) -> LogEntry:
        message = self._parse_argument()
        level = self._parse_argument()

        timestamp = None
        if self._peek() == ARG_OPEN:
            timestamp = self._parse_argument()

        source = None
        if self._peek() == ARG_OPEN:
            source = self._parse_argument()

        return LogEntry(message=message, level=level, timestamp=timestamp, source=source)

    def _parse_table(self) -> Table:
        self._expect_char(ARG_OPEN)
        self._skip_whitespace()

        headers: list[str] = []
        if self._match_string("@headers"):
            headers = _split_cells(self._parse_argument())
            self._skip_whitespace()

        rows: list[list[str]] = []
        while self._match_string("@row"):
            rows.append(_split_cells(self._parse_argument()))
            self._skip_whitespace()

        self._expect_char(ARG_CLOSE)
        return Table(headers=headers, rows=rows)

    def _parse_trace(self) -> Trace:
        name = self._parse_argument()

        line, column = self._line, self._column
        raw_duration = self._parse_argument()
        try:
            duration_ms = int(raw_duration)
        except ValueError:
            duration_ms = -1
        if duration_ms < 0:
            raise TemplateParseError(
                f"Invalid duration '{raw_duration}'", line, column, raw_duration
            )

        start_time = self._parse_argument()
        status = self._parse_argument()

        metadata: dict[str, str] = {}
        if self._peek() == ARG_OPEN:
            self._advance()
            self._skip_whitespace()
            while self._match_string("@meta"):
                key = self._parse_argument()
                metadata[key] = self._parse_argument()
                self._skip_whitespace()
            self._expect_char(ARG_CLOSE)

        return Trace(
            name=name,
            duration_ms=duration_ms,
            start_time=start_time,
            status=status,
            metadata=metadata,
        )

    # ------------------------------------------------------------------
    # Lexical helpers
    # ------------------------------------------------------------------

    def _parse_text(self) -> str:
        start = self._position
        while not self._is_at_end() and self._peek() != DIRECTIVE_PREFIX:
            self._advance()
        return self.source[start:self._position]

    def _parse_identifier(self) -> str:
        start = self._position
        while not self._is_at_end() and (self._peek().isalnum() or self._peek() == "_"):
            self._advance()
        return self.source[start:self._position]

    def _parse_argument(self) -> str:
        """Read one ``{...}`` argument and return its unescaped body."""
        self._expect_char(ARG_OPEN)
        line, column = self._line, self._column

        chars: list[str] = []
        while not self._is_at_end() and self._peek() != ARG_CLOSE:
            if self._peek() == ESCAPE and self._peek_next() == ARG_CLOSE:
                self._advance()
            chars.append(self._advance())

        if self._is_at_end():
            raise TemplateParseError(
                f"Expected '{ARG_CLOSE}' but reached end of input",
                line,
                column,
                _snippet("".join(chars)),
            )

        self._advance()
        return "".join(chars)

    def _read_body(self, kind: str) -> str:
        """Cut out a brace-balanced ``{...}`` body without parsing it."""
        self._expect_char(ARG_OPEN)
        line, column = self._line, self._column
        start = self._position
        depth = 1

        while depth > 0 and not self._is_at_end():
            char = self._advance()
            if char == ESCAPE and self._peek() == ARG_CLOSE:
                self._advance()
            elif char == ARG_OPEN:
                depth += 1
            elif char == ARG_CLOSE:
                depth -= 1

        if depth > 0:
            raise TemplateParseError(
                f"Unclosed {kind} block",
                line,
                column,
                _snippet(self.source[start:self._position]),
            )

        return self.source[start:self._position - 1]

    def _expect_char(self, expected: str) -> None:
        if self._is_at_end():
            raise TemplateParseError(
                f"Expected '{expected}' but reached end of input", self._line, self._column
            )

        found = self._peek()
        if found != expected:
            raise TemplateParseError(
                f"Expected '{expected}' but found '{found}'", self._line, self._column, found
            )

        self._advance()

    def _match_string(self, expected: str) -> bool:
        if not self.source.startswith(expected, self._position):
            return False
        for _ in expected:
            self._advance()
        return True

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek().isspace():
            self._advance()

    def _advance(self) -> str:
        char = self.source[self._position]
        self._position += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    def _peek(self) -> str:
        if self._is_at_end():
            return ""
        return self.source[self._position]

    def _peek_next(self) -> str:
        if self._position + 1 >= len(self.source):
            return ""
        return self.source[self._position + 1]

    def _is_at_end(self) -> bool:
        return self._position >= len(self.source)


def parse(source: str) -> list[Block]:
    """Parse template markup into blocks.

    Args:
        source: Template markup.

    Returns:
        The parsed top-level blocks.

    Raises:
        TemplateParseError: If the markup is malformed.
    """
    blocks = TemplateParser(source).parse()
    logger.debug(f"Parsed {len(blocks)} top-level blocks from {len(source)} characters")
    return blocks
