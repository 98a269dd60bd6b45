"""Custom exceptions for the font-catcher system."""

from typing import Any


class FontCatcherError(Exception):
    """Base exception for all font-catcher errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class ValidationError(FontCatcherError):
    """Exception raised for input validation errors."""


class ConfigurationError(FontCatcherError):
    """Exception raised for configuration errors."""


class RepositoryError(FontCatcherError):
    """Exception raised for repository access errors."""


class StorageError(FontCatcherError):
    """Exception raised when a local font file cannot be read, written or removed."""

    def __init__(self, path: str, error: str):
        super().__init__(f"File operation failed for {path}: {error}", details={"path": path})
        self.path = path


class CatalogParseError(RepositoryError):
    """Exception raised when a repository payload is malformed."""

    def __init__(self, repository: str, error: str):
        super().__init__(f"Malformed catalog for repository '{repository}': {error}")
        self.repository = repository


class NetworkError(RepositoryError):
    """Exception raised when a transfer fails."""

    def __init__(self, url: str, error: str):
        super().__init__(f"Failed to fetch {url}: {error}", details={"url": url})
        self.url = url


class DateParseError(ValidationError):
    """Exception raised when a repository date is not in %Y-%m-%d."""

    def __init__(self, value: str):
        super().__init__(f"Date not in %Y-%m-%d: {value!r}")
        self.value = value


class FontNotFoundError(FontCatcherError):
    """Exception raised when a family is absent from the catalog."""

    def __init__(self, family: str):
        super().__init__(f"Font not found: {family}")
        self.family = family


class RepositoryNotAvailableError(RepositoryError):
    """Exception raised when a repository does not carry a family."""

    def __init__(self, family: str, repository: str):
        super().__init__(f"Repository '{repository}' does not provide {family}")
        self.family = family
        self.repository = repository


class NoRepositoryAvailableError(RepositoryError):
    """Exception raised when no repository carries a family."""

    def __init__(self, family: str):
        super().__init__(f"No repository provides {family}")
        self.family = family


class LocationNotInstallableError(ValidationError):
    """Exception raised when installing into a location without a directory."""

    def __init__(self, location: str):
        super().__init__(f"Fonts cannot be installed into location: {location}")


class PartialUninstallError(StorageError):
    """Exception raised when only some files of a family could be removed."""

    def __init__(self, family: str, removed: list[str], remaining: list[str]):
        FontCatcherError.__init__(
            self,
            f"Uninstall of {family} incomplete: {len(remaining)} file(s) remain",
            details={"removed": removed, "remaining": remaining},
        )
        self.path = remaining[0] if remaining else ""
        self.family = family
        self.removed = removed
        self.remaining = remaining


class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")


class InvalidRepositoryFileError(ConfigurationError):
    """Exception raised when the repositories file is not valid TOML."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Invalid repositories file {path}: {error}")


class NonPositiveSettingError(ValueError):
    """Exception raised for numeric settings that must be positive."""

    def __init__(self, name: str):
        super().__init__(f"{name} must be positive")


class EmptyRepositoryFieldError(ValueError):
    """Exception raised when a repository is missing its name or url."""

    def __init__(self, field: str):
        super().__init__(f"Repository {field} cannot be empty")


class InvalidRepositoryNameError(ValueError):
    """Exception raised when a repository name cannot be used as a cache file name."""

    def __init__(self, name: str):
        super().__init__(f"Repository name '{name}' must not contain path separators or start with '.'")
