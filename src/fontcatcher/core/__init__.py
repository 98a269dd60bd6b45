"""Core components for font-catcher."""

from .config import AppConfig, DownloadConfig
from .exceptions import (
    CatalogParseError,
    DateParseError,
    FontCatcherError,
    FontNotFoundError,
    NetworkError,
    PartialUninstallError,
    StorageError,
    ValidationError,
)
from .models import FontsList, RepoFont, Repository

__all__ = [
    "AppConfig",
    "CatalogParseError",
    "DateParseError",
    "DownloadConfig",
    "FontCatcherError",
    "FontNotFoundError",
    "FontsList",
    "NetworkError",
    "PartialUninstallError",
    "RepoFont",
    "Repository",
    "StorageError",
    "ValidationError",
]
