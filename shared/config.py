"""
Shared configuration management for the Lessons Proxy.
"""

from typing import Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigurationError


GITHUB_CONTENTS_URL = "https://api.github.com/repos/Adventech/sabbath-school-lessons/contents/src"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="LESSONS_",
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # External services
    redis_url: str = "redis://localhost:6379/0"

    # Observability
    enable_tracing: bool = False
    otel_exporter: Optional[str] = None
    enable_console_tracing: bool = False


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    # Origin
    github_token: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("github_token", "LESSONS_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    origin_base_url: str = GITHUB_CONTENTS_URL
    origin_timeout_seconds: float = 10.0

    # Cache
    cache_ttl_seconds: int = Field(default=3600, gt=0)
    allow_empty_listings: bool = False

    def require_token(self) -> str:
        """Return the origin bearer token or fail."""
        token = self.github_token.get_secret_value().strip() if self.github_token else ""
        if not token:
            raise ConfigurationError(
                "GITHUB_TOKEN is not set",
                details={"setting": "github_token"}
            )
        return token


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Build and validate configuration for a service."""
    overrides.setdefault("service_name", service_name)
    overrides.setdefault("port", port)
    config = ServiceConfig(**overrides)
    config.require_token()
    return config
