"""
Shared configuration management for the Account Token Service.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ACCOUNT_",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class AccountConfig(BaseConfig):
    """Token service configuration."""

    # Key material
    keys_path: str = Field(default="certs/service")
    token_service: str = Field(default="account")

    # Token lifetimes, in seconds
    access_token_lifetime: int = Field(default=3600, ge=1)
    refresh_token_lifetime: int = Field(default=14 * 24 * 3600, ge=1)
    password_reset_lifetime: int = Field(default=24 * 3600, ge=1)
    service_token_lifetime: int = Field(default=24 * 3600, ge=1)


def get_config(**overrides) -> AccountConfig:
    """Get configuration for the account token service."""
    return AccountConfig(**overrides)
