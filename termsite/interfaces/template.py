"""Template error taxonomy.

Every failure in the load, parse, bind and persist path surfaces as a
``TemplateError`` subclass so callers can tell parse problems from lookup and
locking problems.
"""


class TemplateError(Exception):
    """Base exception for template loading, parsing, binding and output."""

    pass


class TemplateParseError(TemplateError):
    """Raised when template markup cannot be parsed.

    Attributes:
        line: 1-based line of the failure inside the parsed source.
        column: 1-based column of the failure.
        text: The offending text, when there is any.
    """

    def __init__(self, message: str, line: int, column: int, text: str = "") -> None:
        self.line = line
        self.column = column
        self.text = text
        super().__init__(f"{message} at line {line}, column {column}")


class TemplateNotFoundError(TemplateError):
    """Raised when no template file exists for a requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Template '{name}' not found")


class TemplateCacheError(TemplateError):
    """Raised when the template cache lock cannot be acquired."""

    pass


class TemplateBindError(TemplateError):
    """Raised when a directive cannot be bound against the runtime context."""

    pass
