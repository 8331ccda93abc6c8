"""Configuration management for PowerPrompt."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
import os

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .git.models import StatusOptions

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def default_config_path() -> Path:
    """Return the YAML config location, honouring ``POWERPROMPT_CONFIG``."""

    explicit = os.environ.get("POWERPROMPT_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or "~/.config"
    return Path(base).expanduser() / "powerprompt" / "config.yaml"


class PowerPromptSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and an optional YAML file."""

    model_config = SettingsConfigDict(
        env_prefix="POWERPROMPT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    profile_root: Path | None = Field(default=None)
    profile_variable: str = Field(default="AWS_PROFILE")
    git_path: str | None = Field(default=None)
    refresh: bool = Field(default=True)
    tty_path: Path = Field(default=Path("/dev/tty"))
    log_level: str = Field(default="WARNING")
    log_file: Path | None = Field(default=None)
    status: StatusOptions = Field(default_factory=StatusOptions)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # No dotenv: the working directory changes with every prompt.
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=default_config_path()),
        )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(
                "POWERPROMPT_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("profile_root", "log_file", mode="before")
    @classmethod
    def _blank_path_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("profile_variable")
    @classmethod
    def _validate_profile_variable(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("POWERPROMPT_PROFILE_VARIABLE must not be empty")
        return normalized


@lru_cache(maxsize=1)
def get_settings() -> PowerPromptSettings:
    """Return cached settings instance."""

    settings = PowerPromptSettings()
    if settings.profile_root is not None:
        settings.profile_root = settings.profile_root.expanduser()
    if settings.log_file is not None:
        settings.log_file = settings.log_file.expanduser()
    return settings


__all__ = ["PowerPromptSettings", "default_config_path", "get_settings"]
