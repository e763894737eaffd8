"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from learnpath.exceptions import ConfigurationError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ollama Configuration
    ollama_host: str = Field(default="http://localhost:11434", description="Ollama base URL")
    ollama_model: str = Field(default="llama3.2:latest", description="Model used for generation")
    ollama_timeout_seconds: float | None = Field(
        default=None, description="Ollama request timeout, unset means wait indefinitely"
    )
    ollama_startup_check: bool = Field(
        default=True, description="Probe Ollama once when the application starts"
    )

    # Search Configuration
    search_timeout_ms: int = Field(default=10000, ge=1, description="Search request timeout")
    max_search_results: int = Field(default=15, ge=1, description="Result blocks read per query")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="Outbound User-Agent")
    search_delay_min_ms: int = Field(default=500, ge=0, description="Minimum pause before a query")
    search_delay_max_ms: int = Field(default=1500, ge=0, description="Maximum pause before a query")
    search_fallback_enabled: bool = Field(
        default=False, description="Use the built-in catalog when a category finds nothing"
    )

    # Application Configuration
    app_title: str = Field(default="Red Hat Learning Path Generator", description="Application title")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Deployment environment name")
    allowed_origins: str = Field(
        default="http://localhost:3000", description="Comma separated CORS origins"
    )
    prompt_version: str = Field(default="v1", description="Prompt file version")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    log_json: bool = Field(default=True, description="Use JSON log format")
    log_file: str | None = Field(default=None, description="Optional log file path")

    @model_validator(mode="after")
    def _check_delay_window(self) -> "Settings":
        if self.search_delay_min_ms > self.search_delay_max_ms:
            raise ConfigurationError(
                "SEARCH_DELAY_MIN_MS must not exceed SEARCH_DELAY_MAX_MS "
                f"({self.search_delay_min_ms} > {self.search_delay_max_ms})"
            )
        return self

    @property
    def search_timeout(self) -> float:
        return self.search_timeout_ms / 1000

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
