"""Configuration management for blogops."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``BLOGOPS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BLOGOPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Source checkout
    project_dir: str = Field(default=".", description="Root of the blog source checkout")
    git_remote: str = Field(default="origin", description="Remote to fetch from and push to")
    source_branch: str = Field(default="main", description="Upstream branch the server tracks")

    # Compose
    compose_command: str = Field(
        default="docker-compose",
        description="Compose executable, e.g. 'docker-compose' or 'docker compose'",
    )
    compose_file: str | None = Field(default=None, description="Explicit compose file path")
    service: str = Field(default="caddy", description="Compose service fronting the site")

    # Static site
    output_dir: str = Field(default="public", description="Output repository directory")
    output_branch: str = Field(default="master", description="Branch the output repo pushes")
    hugo_binary: str = Field(default="hugo", description="Hugo executable")
    hugo_theme: str = Field(default="hello-friend", description="Hugo theme name")

    # Post-restart HTTP probe
    site_url: str | None = Field(default=None, description="URL probed after a restart")
    health_retries: int = Field(default=5, ge=1, description="HTTP probe attempts")
    health_delay_seconds: float = Field(default=3.0, ge=0, description="Delay between probes")

    command_timeout: int = Field(default=600, gt=0, description="Per-command timeout (seconds)")

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def compose_argv(self) -> list[str]:
        """Compose command split into argv words."""
        return self.compose_command.split()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
