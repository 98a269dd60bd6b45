"""
Local font resolution.

A resolver reports raw font handles for a family; this module turns them
into per-location ``LocalFontRecord`` entries.
"""

import logging
from collections import defaultdict
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from .models import LocalFontRecord, Location, RawFontHandle
from .utils import file_mtime, variant_name

logger = logging.getLogger(__name__)


class FontResolver(Protocol):
    """Source of raw font handles, usually the operating system."""

    def resolve(self, family: str) -> list[RawFontHandle]:
        """Handles of every face of ``family`` currently known."""
        ...

    def all_fonts(self) -> list[RawFontHandle]:
        """Handles of every face currently known."""
        ...

    def refresh(self) -> None:
        """Drop cached knowledge after fonts were added or removed."""
        ...


class StaticFontResolver:
    """Resolver over a fixed, editable set of handles."""

    def __init__(self, handles: list[RawFontHandle] | None = None):
        self._handles: list[RawFontHandle] = list(handles or [])

    def add(self, handle: RawFontHandle) -> None:
        self._handles.append(handle)

    def remove_family(self, family: str) -> None:
        self._handles = [h for h in self._handles if h.family != family]

    def resolve(self, family: str) -> list[RawFontHandle]:
        return [h for h in self._handles if h.family == family]

    def all_fonts(self) -> list[RawFontHandle]:
        return list(self._handles)

    def refresh(self) -> None:
        pass


def location_for(path: Path | None, home: Path | None = None) -> Location:
    """Memory when there is no path, User under the home directory, System otherwise."""
    if path is None:
        return Location.MEMORY
    home = home or Path.home()
    if Path(path).expanduser().is_relative_to(home):
        return Location.USER
    return Location.SYSTEM


def normalize_handles(
    family: str, handles: list[RawFontHandle], home: Path | None = None
) -> dict[Location, LocalFontRecord]:
    """
    Group a family's handles into one record per location.

    Handles of other families are ignored. When two handles yield the same
    variant name at one location, the first one in path order wins.
    """
    records: dict[Location, LocalFontRecord] = {}

    ordered = sorted(
        (h for h in handles if h.family == family),
        key=lambda h: (str(h.path) if h.path else "", h.full_name),
    )
    for handle in ordered:
        location = location_for(handle.path, home)
        record = records.get(location)
        if record is None:
            record = LocalFontRecord(family=family, variants=[], files={}, installed=True)
            records[location] = record

        variant = variant_name(handle.full_name, family)
        if variant in record.variants:
            logger.debug(f"Duplicate variant {variant} of {family} at {handle.path}")
            continue
        record.variants.append(variant)

        if handle.path is None:
            continue
        record.files[variant] = Path(handle.path)

        modified = _handle_mtime(handle)
        if modified and (record.last_modified is None or modified > record.last_modified):
            record.last_modified = modified

    return records


def _handle_mtime(handle: RawFontHandle) -> datetime | None:
    if handle.mtime is not None:
        return datetime.fromtimestamp(handle.mtime, tz=UTC)
    return file_mtime(Path(handle.path))


def scan_local_fonts(
    resolver: FontResolver, home: Path | None = None
) -> list[tuple[Location, LocalFontRecord]]:
    """Initial local scan: every known family, normalized per location."""
    by_family: dict[str, list[RawFontHandle]] = defaultdict(list)
    for handle in resolver.all_fonts():
        by_family[handle.family].append(handle)

    result = []
    for family in sorted(by_family):
        for location, record in normalize_handles(family, by_family[family], home).items():
            result.append((location, record))

    logger.debug(f"Local scan found {len(by_family)} families")
    return result
