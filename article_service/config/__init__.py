"""
Configuration Module
====================

Application settings and configuration management using Pydantic.

Settings are read once at startup from a nested key/value file (JSON, or YAML
when the file extension says so) and handed to every component that needs
them. Environment variables prefixed with ``ARTICLES_`` override file values,
using ``__`` as the nesting delimiter (``ARTICLES_DATABASE__HOST``).
"""

import json
import os
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from article_service.core import ConfigurationException


CONFIG_PATH_ENV = "ARTICLES_CONFIG"
DEFAULT_CONFIG_PATH = "config.json"


class DatabaseSettings(BaseModel):
    """Connection parameters for the relational store."""

    model_config = ConfigDict(populate_by_name=True)

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port", ge=1, le=65535)
    user: str = Field(default="postgres", description="Database user")
    password: str = Field(default="", alias="pass", description="Database password")
    name: str = Field(default="article", description="Database name")
    pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)


class ContextSettings(BaseModel):
    """Per-request execution context."""

    timeout: int = Field(default=2, description="Per-request deadline in seconds", ge=1)


class ServerSettings(BaseModel):
    """HTTP listener settings."""

    address: str = Field(default=":9090", description="Bind address, host:port or :port")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Ensure address has a numeric port."""
        host, sep, port = v.rpartition(":")
        if not sep or not port.isdigit() or not 1 <= int(port) <= 65535:
            raise ValueError(f"server.address must look like 'host:port' or ':port', got {v!r}")
        return v

    @property
    def host(self) -> str:
        host = self.address.rpartition(":")[0]
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        return int(self.address.rpartition(":")[2])


class CorsSettings(BaseModel):
    origins: List[str] = Field(default=["*"], description="Allowed CORS origins")


class ArticleSettings(BaseModel):
    """Limits for the article listing endpoint."""

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def validate_bounds(self) -> "ArticleSettings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self


class Settings(BaseSettings):
    """
    Application settings.

    Built once by ``load_settings()`` and passed by reference; there is no
    module-level instance.
    """

    # ========== Application ==========
    app_name: str = Field(default="article-service", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Log level when debug is off")

    # ========== Components ==========
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    context: ContextSettings = Field(default_factory=ContextSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)
    articles: ArticleSettings = Field(default_factory=ArticleSettings)

    model_config = SettingsConfigDict(
        env_prefix="ARTICLES_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # File values arrive as init kwargs; the environment wins over them.
        return env_settings, init_settings, file_secret_settings

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


def _parse_config_file(path: Path, raw: str) -> dict:
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(raw)
    else:
        data = json.loads(raw)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationException(
            f"Config file {path} must contain a mapping at the top level",
            {"path": str(path)}
        )
    return data


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from a config file.

    Args:
        config_path: Path to the file. Falls back to ``$ARTICLES_CONFIG``,
            then ``config.json`` in the working directory.

    Returns:
        Settings: Validated settings

    Raises:
        ConfigurationException: File missing, unreadable, malformed or invalid
    """
    path = Path(config_path or os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationException(
            f"Cannot read config file {path}: {e}",
            {"path": str(path)}
        ) from e

    try:
        data = _parse_config_file(path, raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationException(
            f"Malformed config file {path}: {e}",
            {"path": str(path)}
        ) from e

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationException(
            f"Invalid configuration in {path}: {e}",
            {"path": str(path), "error_count": e.error_count()}
        ) from e
