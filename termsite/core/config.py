"""Application configuration using Pydantic v2 Settings.

Loads from ``TERMSITE_``-prefixed environment variables or a ``.env`` file
and provides type-safe access throughout the application.
"""

import logging
import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _default_workers() -> int:
    return max(os.cpu_count() or 1, 1)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have defaults and can be overridden via environment
    variables (``TERMSITE_OUTPUT_DIR=...``) or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="TERMSITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Directories
    source_dir: Path = Field(
        default=Path("./content"),
        description="Directory for source content.",
    )
    templates_dir: Path = Field(
        default=Path("./templates"),
        description="Directory holding <name>.tmpl template files.",
    )
    output_dir: Path = Field(
        default=Path("./public"),
        description="Directory the generated pages are written to.",
    )

    # Scheduling
    interval_seconds: float = Field(
        default=30,
        gt=0,
        description="Seconds between generation cycles.",
    )
    workers: int = Field(
        default_factory=_default_workers,
        ge=1,
        description="Threads available for rendering.",
    )

    # Rendering
    text_width: int = Field(
        default=80,
        ge=20,
        description="Column width of the plain-text output.",
    )
    ascii_only: bool = Field(
        default=False,
        description="Draw text frames and tables with ASCII characters only.",
    )
    html_inline_css: bool = Field(
        default=True,
        description="Embed the terminal stylesheet in generated HTML.",
    )

    # Dashboard
    dashboard_template: str = Field(
        default="dashboard",
        description="Template rendered by the home generator.",
    )
    output_base_name: str = Field(
        default="index",
        description="File name, without extension, of the generated pages.",
    )
    lookback_minutes: int = Field(
        default=60,
        ge=1,
        description="Window of telemetry shown on the dashboard.",
    )
    hostname: str | None = Field(
        default=None,
        description="Hostname shown on the dashboard. Defaults to the machine name.",
    )
    seed_sample_data: bool = Field(
        default=True,
        description="Load demo telemetry on startup.",
    )

    # Logging
    verbose: bool = Field(
        default=False,
        description="Force DEBUG logging.",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )

    @field_validator("source_dir", "templates_dir", "output_dir")
    @classmethod
    def ensure_dir(cls, v: Path) -> Path:
        """Ensure the directory exists."""
        v.mkdir(parents=True, exist_ok=True)
        return v.resolve()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.verbose else self.log_level

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.effective_log_level, logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=level,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
