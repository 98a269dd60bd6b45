"""
Font data models and types.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path


class Location(Enum):
    """Installation scope of a local font copy."""

    USER = "user"
    SYSTEM = "system"
    MEMORY = "memory"  # reported by the OS without a file path

    def __str__(self) -> str:
        return self.value


LOCAL_ATTRIBUTES = ("family", "variants", "files", "last_modified", "installed")


@dataclass(frozen=True)
class RawFontHandle:
    """A single font face as reported by the operating system."""

    full_name: str
    postscript_name: str
    family: str
    path: Path | None = None
    mtime: float | None = None

    @property
    def in_memory(self) -> bool:
        return self.path is None


@dataclass
class LocalFontRecord:
    """
    What is known about one family at one location.

    ``None`` means "not resolved yet". A record whose only set field is
    ``installed=False`` is the uninstalled sentinel: the family was looked for
    (or removed) and is not there.
    """

    family: str | None = None
    variants: list[str] | None = None
    files: dict[str, Path] | None = None
    last_modified: datetime | None = None
    installed: bool | None = None

    @classmethod
    def uninstalled(cls) -> "LocalFontRecord":
        return cls(installed=False)

    @property
    def is_sentinel(self) -> bool:
        return self.installed is False and all(
            getattr(self, name) is None for name in LOCAL_ATTRIBUTES if name != "installed"
        )

    def get(self, attribute: str):
        if attribute not in LOCAL_ATTRIBUTES:
            raise AttributeError(attribute)
        return getattr(self, attribute)


class UpdateState(Enum):
    """Outcome of an update check for one location."""

    NO_LOCAL_COPY = "no_local_copy"
    UP_TO_DATE = "up_to_date"
    UPDATE_AVAILABLE = "update_available"


@dataclass
class UpdateCheck:
    """Update check result with the repositories newer than the local copy."""

    state: UpdateState
    repositories: list[str] = field(default_factory=list)

    @property
    def has_update(self) -> bool:
        return self.state is UpdateState.UPDATE_AVAILABLE
