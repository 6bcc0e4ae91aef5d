"""Configuration management using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Parser settings loaded from REST_PARSER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REST_PARSER_",
        case_sensitive=False,
        extra="ignore",
    )

    max_render_depth: int = Field(default=16, ge=1, description="Nesting bound for variable resolution")
    default_flavor: str = Field(default="vscode", pattern="^(vscode|jetbrains)$", description="Flavor for unknown file extensions")
    encoding: str = Field(default="utf-8", description="Encoding of REST files and body files")
    log_level: str = Field(default="WARNING", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """Get the settings instance."""
    return Settings()
