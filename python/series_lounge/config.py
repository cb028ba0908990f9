"""Application settings loaded from environment variables.

Environment Configuration:
    SERIES_LOUNGE_ENV: Deployment environment (local | test | staging | prod)
    PORT: Listening port (optional, falls back to 5100)
    HOST: Listening interface (default 0.0.0.0)

Logging Configuration:
    LOG_FORMAT: json | console (default json)
    LOG_LEVEL: Root log level (default INFO)

Routing:
    GLOBAL_PREFIX: Path prefix applied to every route when set (inert by default)

Settings are built once at startup and passed by reference; the instance is frozen.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_PORT = 5100


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


class LogFormat(str, Enum):
    """Log renderers."""

    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    """Application configuration.

    Only PORT is read by the bootstrap itself; the rest tunes the ambient stack.
    """

    series_lounge_env: Environment = Field(default=Environment.LOCAL, alias="SERIES_LOUNGE_ENV")

    port: int | None = Field(default=None, alias="PORT")
    host: str = Field(default="0.0.0.0", alias="HOST")

    log_format: LogFormat = Field(default=LogFormat.JSON, alias="LOG_FORMAT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    global_prefix: str | None = Field(default=None, alias="GLOBAL_PREFIX")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
        "populate_by_name": True,
    }

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard level name, got {value!r}")
        return level

    @field_validator("global_prefix")
    @classmethod
    def normalize_global_prefix(cls, value: str | None) -> str | None:
        """Return prefix as '/segment' with no trailing slash, or None when blank."""
        if value is None:
            return None
        stripped = value.strip().strip("/")
        return f"/{stripped}" if stripped else None

    @property
    def listen_port(self) -> int:
        """Port to bind; falls back to DEFAULT_PORT when PORT is unset or 0."""
        return self.port or DEFAULT_PORT

    @property
    def json_logs(self) -> bool:
        return self.log_format == LogFormat.JSON


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If a setting is present but invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
