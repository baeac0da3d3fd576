"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Markup shell
    brand_name: str = Field(
        default="Frontier Meals",
        description="Brand name printed in the copyright footer.",
    )
    support_handle: str = Field(
        default="@noahchonlee",
        description="Support contact shown in the support footer.",
    )
    support_url: str = Field(
        default="https://t.me/noahchonlee",
        description="Link target of the support contact.",
    )
    copyright_year: int = Field(
        default=2025,
        ge=1970,
        le=9999,
        description="Year printed in footers. Fixed so rendering stays deterministic.",
    )

    # Rendering
    escape_variable_values: bool = Field(
        default=True,
        description="HTML-escape substituted variable values inside markup.",
    )

    # API
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware.",
    )
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL the Streamlit tool uses to reach the API.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path = Field(
        default=Path("./logs"),
        description="Directory for info.log and error.log.",
    )
    log_to_file: bool = Field(
        default=True,
        description="Write info.log/error.log in addition to the console.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("support_url", "api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop trailing slashes so URLs compare and join predictably."""
        return v.rstrip("/")

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

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
