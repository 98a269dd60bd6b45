"""Configuration management for font-catcher."""

import os
import platform
from pathlib import Path

import yaml
from platformdirs import user_data_dir
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidYamlError,
    NonPositiveSettingError,
)

APP_NAME = "font-catcher"


def default_data_dir() -> Path:
    """Directory holding repos.conf and cached repository payloads."""
    return Path(user_data_dir(APP_NAME, appauthor=False))


def default_user_font_dir() -> Path:
    """Per-user font directory for the running platform."""
    system = platform.system().lower()
    if system == "windows":
        return Path(os.environ.get("LOCALAPPDATA", "")) / "Microsoft" / "Windows" / "Fonts"
    if system == "darwin":
        return Path.home() / "Library" / "Fonts"
    return Path.home() / ".local" / "share" / "fonts"


def default_system_font_dir() -> Path:
    """System-wide font directory for the running platform."""
    system = platform.system().lower()
    if system == "windows":
        return Path(os.environ.get("WINDIR", "C:\\Windows")) / "Fonts"
    if system == "darwin":
        return Path("/Library/Fonts")
    return Path("/usr/local/share/fonts")


class DownloadConfig(BaseSettings):
    """HTTP transfer settings for catalogs and font files."""

    model_config = SettingsConfigDict(
        env_prefix="DOWNLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    timeout_seconds: int = Field(60, description="Per-request timeout")
    max_retries: int = Field(3, description="Attempts per transfer")
    chunk_size: int = Field(8192, description="Streaming chunk size in bytes")
    verify_ssl: bool = Field(True, description="Verify TLS certificates")
    user_agent: str = Field("font-catcher/0.2.0", description="User-Agent header")
    show_progress: bool = Field(True, description="Show tqdm progress bars")

    @field_validator("timeout_seconds", "max_retries", "chunk_size")
    @classmethod
    def validate_positive(cls, v, info):
        if v <= 0:
            raise NonPositiveSettingError(info.field_name)
        return v


class AppConfig(BaseSettings):
    """Main application configuration that loads from multiple sources."""

    model_config = SettingsConfigDict(
        env_prefix="FONTCATCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = Field(default_factory=default_data_dir, description="font-catcher data dir")
    repos_file: Path | None = Field(None, description="User repositories TOML file")
    repos_dir: Path | None = Field(None, description="Cached repository payloads")
    user_font_dir: Path = Field(
        default_factory=default_user_font_dir, description="Install dir for User location"
    )
    system_font_dir: Path = Field(
        default_factory=default_system_font_dir, description="Install dir for System location"
    )

    google_fonts_key: str | None = Field(None, description="Google Fonts API key", repr=False)
    include_default_repos: bool = Field(True, description="Use the built-in repositories")
    log_level: str = Field("INFO", description="Application log level")

    download: DownloadConfig = Field(default_factory=DownloadConfig)

    @field_validator("data_dir", "user_font_dir", "system_font_dir")
    @classmethod
    def expand_path(cls, v):
        return Path(v).expanduser()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def model_post_init(self, __context) -> None:
        """Derive repository paths from data_dir when not set explicitly."""
        if self.repos_file is None:
            self.repos_file = self.data_dir / "repos.conf"
        if self.repos_dir is None:
            self.repos_dir = self.data_dir / "repos"

    def __repr__(self) -> str:
        key = "'***'" if self.google_fonts_key else "None"
        return (
            f"AppConfig(data_dir='{self.data_dir}', user_font_dir='{self.user_font_dir}', "
            f"system_font_dir='{self.system_font_dir}', google_fonts_key={key})"
        )

    def to_safe_dict(self) -> dict:
        """Export configuration with sensitive fields masked."""
        config_dict = self.model_dump()
        if config_dict.get("google_fonts_key"):
            config_dict["google_fonts_key"] = "***MASKED***"
        return config_dict

    @classmethod
    def load_from_env(cls, env_file: str | Path | None = ".env") -> "AppConfig":
        """Load configuration from environment variables and .env file."""
        if env_file:
            env_file = Path(env_file)
            if env_file.exists():
                return cls(_env_file=env_file)
        return cls()

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with config_path.open() as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e

    if config_data is None:
        raise EmptyConfigFileError(str(config_path))

    try:
        return config_class(**config_data)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigLoadError(str(e)) from e
