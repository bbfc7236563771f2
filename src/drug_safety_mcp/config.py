"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from drug_safety_mcp.constants import DEFAULT_API_KEY_FILE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # openFDA
    openfda_api_key: str = ""
    openfda_api_key_file: Path = DEFAULT_API_KEY_FILE
    request_timeout_seconds: float | None = None  # None -> aiohttp default

    # Transport
    mcp_mode: str = "stdio"  # stdio | local | http | remote
    host: str = "0.0.0.0"
    port: int = 3000
    base_url: str = ""
    cors_origin: str = "*"
    rate_limit_per_minute: int = 0  # 0 disables the inbound limiter

    # OAuth (delegated to the MCP gateway)
    oauth_enabled: bool = False
    mcp_gateway_url: str = ""
    auth_cache_ttl_seconds: int = 3600

    # App Settings
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        frozen = True

    @property
    def http_mode(self) -> bool:
        return self.mcp_mode.lower() in ("http", "remote")

    @property
    def public_base_url(self) -> str:
        return self.base_url or f"http://localhost:{self.port}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
