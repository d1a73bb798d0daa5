"""termsite: a terminal-styled status site generator.

Renders small markup templates, enriched with live metrics, logs and
traces, into HTML and plain-text pages on a fixed schedule.
"""

__version__ = "0.1.0"
