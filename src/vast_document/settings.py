"""
Settings Management Module

Provides pydantic-based configuration management with:
- YAML configuration file loading
- Environment variable overrides (``VAST_*``)
- Multi-environment support (dev, prod, test)
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import NormalizerConfig, VastParserConfig
from .exceptions import VastConfigError
from .log_config import configure_logging


class ParserSettings(BaseModel):
    """XML parsing and serialization settings."""

    model_config = ConfigDict(extra="ignore")

    recover_on_error: bool = False
    encoding: str = "utf-8"
    pretty_print: bool = False
    xml_declaration: bool = True


class NormalizerSettings(BaseModel):
    """Normalization pipeline settings."""

    model_config = ConfigDict(extra="ignore")

    secure: bool | None = True
    formats: list[str] = Field(default_factory=list)
    target_width: int = 0
    target_height: int = 0


class Settings(BaseSettings):
    """
    Main application settings with multi-environment support.

    Configuration hierarchy (highest to lowest precedence):
    1. settings/config.{environment}.yaml (environment-specific)
    2. settings/config.yaml (base)
    3. Environment variables (VAST_*)
    4. Field defaults

    Examples:
        >>> settings = get_settings()
        >>> settings.normalizer.secure
        True

        Override from the environment:
        VAST_NORMALIZER__FORMATS='["video/mp4"]' VAST_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="VAST_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="allow",
    )

    environment: str = "development"
    log_level: str = "INFO"
    log_json: bool = False

    parser: ParserSettings = Field(default_factory=ParserSettings)
    normalizer: NormalizerSettings = Field(default_factory=NormalizerSettings)

    @classmethod
    def load_from_yaml(cls, config_path: Path | None = None) -> "Settings":
        """
        Load settings from YAML configuration file.

        Args:
            config_path: Path to config file (default: settings/config.yaml)

        Returns:
            Settings instance

        Raises:
            VastConfigError: If a config file is not valid YAML
        """
        if config_path is None:
            config_path = Path.cwd() / "settings" / "config.yaml"

        if not config_path.exists():
            return cls()

        config_data = cls._read_yaml(config_path)

        env = os.getenv("VAST_ENVIRONMENT", config_data.get("environment", "development"))
        env_config_path = config_path.parent / f"config.{env}.yaml"
        if env_config_path.exists():
            config_data = cls._deep_merge(config_data, cls._read_yaml(env_config_path))

        return cls(**config_data)

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise VastConfigError(f"Invalid YAML: {str(e)}", config_key=str(path)) from e
        if not isinstance(data, dict):
            raise VastConfigError("Top-level YAML value must be a mapping", config_key=str(path))
        return data

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = Settings._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def parser_config(self) -> VastParserConfig:
        return VastParserConfig(**self.parser.model_dump())

    def normalizer_config(self) -> NormalizerConfig:
        return NormalizerConfig(**self.normalizer.model_dump())

    def configure_logging(self) -> None:
        """Apply ``log_level`` and ``log_json`` to the structlog configuration."""
        configure_logging(level=self.log_level, json=self.log_json)


@lru_cache
def get_settings(config_path: Path | None = None) -> Settings:
    """
    Get cached settings instance.

    Args:
        config_path: Optional path to config file

    Returns:
        Settings instance
    """
    return Settings.load_from_yaml(config_path)


def reload_settings() -> Settings:
    """Reload settings by clearing cache."""
    get_settings.cache_clear()
    return get_settings()


__all__ = [
    "Settings",
    "ParserSettings",
    "NormalizerSettings",
    "get_settings",
    "reload_settings",
]
