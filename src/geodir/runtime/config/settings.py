from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Selects which <ENV>_ prefixed variables override the plain ones
    app_environment: Literal["development", "production", "test"] = Field(
        default="development"
    )
    config_path: str = Field(default="config.yaml")
