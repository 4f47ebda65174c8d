"""
Application settings and configuration management.

Uses Pydantic Settings for validation and environment variable support.
The App Store Connect credentials are required; a missing value is a
startup failure, never a per-call error.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from customer_review_mcp.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.appstoreconnect.apple.com/v1"
CONNECT_ENV_PREFIX = "APP_STORE_CONNECT_"


class ConnectSettings(BaseSettings):
    """App Store Connect API key and transport configuration."""

    key_id: str = Field(min_length=1, description="API key ID (the 'kid' header)")
    issuer_id: str = Field(min_length=1, description="Issuer ID from App Store Connect")
    p8_path: Path = Field(
        description="Path to the .p8 private key file. Read on every token issuance."
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="App Store Connect API root")
    timeout: float = Field(
        default=30.0, gt=0, description="HTTP request timeout in seconds"
    )

    @field_validator("p8_path", mode="before")
    @classmethod
    def _require_p8_path(cls, value):
        # Path("") is Path("."), which would pass as a directory
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be empty")
        return value

    model_config = SettingsConfigDict(
        env_prefix=CONNECT_ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


class Settings(BaseSettings):
    """Main application settings."""

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(default=None, description="Log file path")

    server_name: str = Field(
        default="appstore-connect-server", description="Name advertised to MCP clients"
    )

    connect: ConnectSettings = Field(default_factory=ConnectSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _variable_names(error: ValidationError, prefix: str = "") -> list[str]:
    names = []
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else "?"
        names.append(f"{prefix}{field}".upper())
    return names


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from file and environment.

    Args:
        env_file: Path to .env file (optional, defaults to ./.env)

    Returns:
        Loaded settings instance

    Raises:
        ConfigurationError: If a required value is missing or any value is invalid
    """
    file_kwargs = {"_env_file": env_file} if env_file else {}

    try:
        connect = ConnectSettings(**file_kwargs)
    except ValidationError as e:
        raise ConfigurationError(
            "Missing or invalid App Store Connect configuration. Please set: "
            + ", ".join(_variable_names(e, CONNECT_ENV_PREFIX))
        ) from e

    try:
        return Settings(connect=connect, **file_kwargs)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration: " + ", ".join(_variable_names(e))
        ) from e
