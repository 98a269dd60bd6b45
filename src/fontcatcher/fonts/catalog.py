"""
Font Catalog
============

Mapping from family name to ``Font`` aggregate, built by merging repository
catalogs with a scan of the local machine.
"""

import copy
import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from fontcatcher.core.config import AppConfig
from fontcatcher.core.exceptions import FontNotFoundError, LocationNotInstallableError
from fontcatcher.core.models import RepoFont
from fontcatcher.repos.downloader import FontDownloader
from fontcatcher.repos.fetcher import CatalogFetcher
from fontcatcher.repos.registry import RepositoryRegistry

from .font import Font
from .models import LocalFontRecord, Location
from .resolver import FontResolver, scan_local_fonts
from .system import SystemFontResolver

logger = logging.getLogger(__name__)


class FontCatalog:
    """
    Every known family, each exactly once.

    Repository entries are merged in ``repo_order`` (unlisted repositories
    follow in sorted order), so the result never depends on mapping order.
    """

    def __init__(
        self,
        resolver: FontResolver | None = None,
        repo_order: list[str] | None = None,
        home: Path | None = None,
    ):
        self.resolver = resolver
        self.repo_order = list(repo_order or [])
        self.home = home
        self._fonts: dict[str, Font] = {}

    @classmethod
    def build(
        cls,
        repo_entries: Mapping[str, Iterable[RepoFont]],
        local_records: Iterable[tuple[Location, LocalFontRecord]],
        resolver: FontResolver | None = None,
        repo_order: list[str] | None = None,
        home: Path | None = None,
    ) -> "FontCatalog":
        catalog = cls(resolver, repo_order, home)
        catalog.merge(repo_entries, local_records)
        return catalog

    def _ordered_repos(self, names: Iterable[str]) -> list[str]:
        names = set(names)
        ordered = [name for name in self.repo_order if name in names]
        ordered.extend(sorted(names - set(ordered)))
        return ordered

    def _aggregate(self, family: str) -> Font:
        font = self._fonts.get(family)
        if font is None:
            font = Font(family, self.resolver, self.repo_order, self.home)
            self._fonts[family] = font
        return font

    def merge(
        self,
        repo_entries: Mapping[str, Iterable[RepoFont]],
        local_records: Iterable[tuple[Location, LocalFontRecord]],
    ) -> None:
        """Insert repository entries, then local records; later inserts win."""
        for repo in self._ordered_repos(repo_entries):
            for entry in repo_entries[repo]:
                self._aggregate(entry.family).add_repo_font(repo, entry)

        for location, record in local_records:
            if not record.family:
                logger.warning(f"Ignoring {location} record without a family name")
                continue
            self._aggregate(record.family).set_local_font(location, copy.deepcopy(record))

        logger.debug(f"Catalog holds {len(self._fonts)} families")

    def get(self, family: str) -> Font | None:
        return self._fonts.get(family)

    def require(self, family: str) -> Font:
        """
        Aggregate for ``family``.

        Raises:
            FontNotFoundError: If the family is not in the catalog
        """
        font = self._fonts.get(family)
        if font is None:
            raise FontNotFoundError(family)
        return font

    def find(self, family: str) -> Font | None:
        """Case-insensitive lookup; an exact match wins."""
        if family in self._fonts:
            return self._fonts[family]
        wanted = family.casefold()
        matches = sorted(name for name in self._fonts if name.casefold() == wanted)
        return self._fonts[matches[0]] if matches else None

    def search(self, query: str, repo: str | None = None) -> list[Font]:
        """Families whose name contains ``query`` (case-insensitive), sorted by name."""
        needle = query.casefold()
        results = []
        for family in self.families():
            if needle not in family.casefold():
                continue
            font = self._fonts[family]
            if repo is not None and not font.is_font_in_repo(repo):
                continue
            results.append(font)
        return results

    def families(self) -> list[str]:
        return sorted(self._fonts)

    def __contains__(self, family: str) -> bool:
        return family in self._fonts

    def __len__(self) -> int:
        return len(self._fonts)

    def __iter__(self) -> Iterator[Font]:
        return (self._fonts[family] for family in self.families())


def install_dir_for(config: AppConfig, location: Location) -> Path:
    """Directory fonts are installed into for ``location``."""
    if location is Location.USER:
        return config.user_font_dir
    if location is Location.SYSTEM:
        return config.system_font_dir
    raise LocationNotInstallableError(str(location))


def load_catalog(
    config: AppConfig,
    registry: RepositoryRegistry | None = None,
    fetcher: CatalogFetcher | None = None,
    resolver: FontResolver | None = None,
    online: bool = False,
) -> FontCatalog:
    """
    Build the catalog for one run from cached repository payloads and a
    local scan.
    """
    if registry is None:
        registry = RepositoryRegistry(
            config.repos_file, config.google_fonts_key, config.include_default_repos
        )
    if fetcher is None:
        fetcher = CatalogFetcher(FontDownloader(config.download), config.repos_dir)
    if resolver is None:
        resolver = SystemFontResolver()

    repo_entries = fetcher.load_all(registry.list_repositories(), online=online)
    local_records = scan_local_fonts(resolver)
    return FontCatalog.build(repo_entries, local_records, resolver, repo_order=registry.names())
