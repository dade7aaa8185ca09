"""
Configuration management for remotelink.

Non-secret configuration loaded from a YAML file, secrets (the GitHub token)
usually from environment variables.
"""

import os
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_FILE = "~/.config/remotelink/config.yaml"


def config_file_path() -> Path:
    """Resolve the YAML config path, honouring REMOTELINK_CONFIG_FILE."""
    return Path(os.environ.get("REMOTELINK_CONFIG_FILE", DEFAULT_CONFIG_FILE)).expanduser()


def yaml_config_settings_source() -> dict[str, Any]:
    """Load configuration from YAML file."""
    config_path = config_file_path()
    if config_path.exists():
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    return {}


# --- Remote Configuration Models ---


class RemoteType(StrEnum):
    """Hosting services with a provider implementation."""

    GITHUB = "github"


class CustomRemoteConfig(BaseModel):
    """A self-hosted domain mapped onto a known provider type."""

    domain: str = Field(description="Host name, e.g. 'git.example.com'")
    type: RemoteType = Field(default=RemoteType.GITHUB)
    name: str | None = Field(
        default=None, description="Display name override (falls back to 'GitHub (domain)')"
    )
    protocol: str = Field(default="https")


# --- GitHub Configuration ---


class GitHubConfig(BaseModel):
    """GitHub API configuration."""

    graphql_url: str = Field(default="https://api.github.com/graphql")
    timeout_seconds: float = Field(default=10.0)


# --- Main Settings ---


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="REMOTELINK_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False, description="JSON logging instead of console output")

    github_token: str | None = Field(
        default=None, description="GitHub personal access token used for pull request lookups"
    )
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    remotes: list[CustomRemoteConfig] = Field(
        default_factory=list,
        description="Custom (self-hosted) remote domains",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings sources: env vars override YAML config."""
        return (
            init_settings,
            env_settings,
            yaml_config_settings_source,
            dotenv_settings,
            file_secret_settings,
        )


# Global settings instance
settings = Settings()
