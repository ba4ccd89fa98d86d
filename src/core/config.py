"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Interpreter settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="RENDERER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Remote calls
    api_base_url: str = Field(default="", description="Base URL for relative API urls")
    api_timeout: float = Field(default=10.0, gt=0, description="API request timeout (seconds)")
    breaker_fail_max: int = Field(default=5, gt=0, description="Failures before the breaker opens")
    breaker_reset_timeout: int = Field(
        default=30, gt=0, description="Seconds before an open breaker half-opens"
    )

    # Rendering
    max_render_depth: int = Field(default=64, gt=0, description="Max node nesting when rendering")
    max_config_depth: int = Field(default=128, gt=0, description="Max JSON depth of a config")
    max_config_size: int = Field(
        default=1024 * 1024, gt=0, description="Max config size in bytes"
    )

    # Data fetching
    abort_fetches_on_error: bool = Field(
        default=False, description="Stop a dataFetch list at the first failed fetch"
    )

    # Monitoring
    enable_metrics: bool = Field(default=True, description="Record Prometheus metrics")

    # Formatting
    currency_symbol: str = Field(default="$", description="Symbol used by toCurrency")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
