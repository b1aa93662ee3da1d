"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="GIST_PROXY_")

    app_name: str = "GitHub Gist Proxy"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    # GitHub API settings
    github_api_base_url: str = "https://api.github.com"
    github_api_timeout: float = 10.0
    user_agent: str = "gist-proxy"


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
