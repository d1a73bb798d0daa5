"""Document block model.

A parsed template is a tree of blocks. Every variant is an immutable
dataclass that owns its data; container variants (``Output``, ``Frame``,
``Container``) own their children, so the tree can never contain cycles.
"""

from dataclasses import dataclass, field
from typing import Union

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6


@dataclass(frozen=True)
class Heading:
    """Section heading.

    Attributes:
        level: Heading level as written in the source. Renderers clamp it
            to the 1-6 range; the parser keeps the raw value.
        text: Heading text.
    """

    level: int
    text: str


@dataclass(frozen=True)
class Paragraph:
    """Running text."""

    text: str


@dataclass(frozen=True)
class CommandPrompt:
    """A shell command line, shown with a prompt marker."""

    text: str


@dataclass(frozen=True)
class Output:
    """Terminal output grouping for the blocks printed by a command."""

    children: list["Block"] = field(default_factory=list)


@dataclass(frozen=True)
class Frame:
    """Boxed group of blocks with an optional title."""

    content: list["Block"] = field(default_factory=list)
    title: str | None = None


@dataclass(frozen=True)
class Table:
    """Tabular data.

    Rows may hold fewer or more cells than there are headers.
    """

    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


@dataclass(frozen=True)
class Metric:
    """A single named measurement with optional unit and trend."""

    name: str
    value: str
    unit: str | None = None
    trend: float | None = None


@dataclass(frozen=True)
class LogEntry:
    """One log line."""

    message: str
    level: str
    timestamp: str | None = None
    source: str | None = None


@dataclass(frozen=True)
class Trace:
    """A timed operation.

    Attributes:
        name: Operation name.
        duration_ms: Duration in milliseconds, never negative.
        start_time: Start timestamp as text.
        status: Completion status.
        metadata: Free-form key/value details, order irrelevant.
    """

    name: str
    duration_ms: int
    start_time: str
    status: str
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Raw:
    """Pass-through text.

    Also used for unresolved data markers (``@metrics``, ``@logs``,
    ``@traces``, ``@var{name}``) until binding or final substitution.
    """

    text: str


@dataclass(frozen=True)
class Container:
    """Structural grouping with no visual wrapper."""

    children: list["Block"] = field(default_factory=list)


Block = Union[
    Heading,
    Paragraph,
    CommandPrompt,
    Output,
    Frame,
    Table,
    Metric,
    LogEntry,
    Trace,
    Raw,
    Container,
]

BLOCK_TYPES: tuple[type, ...] = (
    Heading,
    Paragraph,
    CommandPrompt,
    Output,
    Frame,
    Table,
    Metric,
    LogEntry,
    Trace,
    Raw,
    Container,
)


def clamp_heading_level(level: int) -> int:
    """Normalize a heading level to the renderable 1-6 range."""
    return max(MIN_HEADING_LEVEL, min(MAX_HEADING_LEVEL, level))
