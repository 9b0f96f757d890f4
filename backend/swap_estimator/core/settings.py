"""Application settings and configuration management."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # App basics
    app_name: str = "Uniswap V2 Estimator API"
    version: str = "1.0.0"
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "env"),
    )
    debug: bool = False

    # Server
    host: str = "localhost"
    port: int = 1337

    # Blockchain - required, there is no public fallback
    ethereum_rpc_url: str

    # Performance
    request_timeout: float = 10.0  # seconds
    max_connections: int = 100

    # CORS settings
    cors_origins: Union[List[str], str] = ["*"]
    cors_allow_methods: List[str] = ["GET", "POST", "HEAD", "PUT", "DELETE", "PATCH", "OPTIONS"]

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Field(default_factory=lambda: Path("data/logs"))
    log_to_file: bool = True

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def server_address(self) -> str:
        """Full bind address for the HTTP server."""
        return f"{self.host}:{self.port}"

    @field_validator("ethereum_rpc_url")
    @classmethod
    def validate_rpc_url(cls, v: str) -> str:
        """Ensure the RPC endpoint is an HTTP(S) URL."""
        if not v:
            raise ValueError("ETHEREUM_RPC_URL is required")
        if not v.startswith(("http://", "https://")):
            raise ValueError("ETHEREUM_RPC_URL must be an http(s) URL")
        return v

    @field_validator("cors_origins")
    @classmethod
    def split_cors_origins(cls, v):
        """Accept a JSON list or a comma-separated string."""
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return [o.strip() for o in v if o.strip()]

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError(f"invalid PORT: {v}")
        return v

    @field_validator("request_timeout", "max_connections")
    @classmethod
    def validate_positive(cls, v):
        """Timeouts and pool sizes must be positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        if v not in ["development", "staging", "production"]:
            raise ValueError("Environment must be one of: development, staging, production")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = {
        "extra": "ignore",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "str_strip_whitespace": True,
    }


# Process-wide settings, loaded on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        Settings: The global settings instance

    Raises:
        pydantic.ValidationError: If required configuration is missing
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """
    Reload settings from environment.

    Returns:
        Settings: Reloaded settings instance
    """
    global _settings
    _settings = Settings()
    return _settings


__all__ = [
    "Settings",
    "get_settings",
    "reload_settings"
]
