"""Test doubles shared across the test suite."""

from pathlib import Path

from fontcatcher.core.exceptions import StorageError
from fontcatcher.fonts.resolver import StaticFontResolver


class CountingResolver(StaticFontResolver):
    """Static resolver that records every resolve and refresh call."""

    def __init__(self, handles=None):
        super().__init__(handles)
        self.resolve_calls: list[str] = []
        self.refresh_calls = 0

    def resolve(self, family):
        self.resolve_calls.append(family)
        return super().resolve(family)

    def refresh(self):
        self.refresh_calls += 1


class FakeStorage:
    """In-memory file collaborator; paths in ``fail_on`` raise StorageError."""

    def __init__(self, fail_on=()):
        self.files: dict[Path, bytes] = {}
        self.deleted: list[Path] = []
        self.fail_on = {Path(p) for p in fail_on}

    def write(self, path, data):
        if Path(path) in self.fail_on:
            raise StorageError(str(path), "disk full")
        self.files[Path(path)] = data

    def delete(self, path):
        if Path(path) in self.fail_on:
            raise StorageError(str(path), "permission denied")
        self.files.pop(Path(path), None)
        self.deleted.append(Path(path))

    def read(self, path):
        try:
            return self.files[Path(path)]
        except KeyError as e:
            raise StorageError(str(path), "no such file") from e
