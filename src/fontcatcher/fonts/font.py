"""
Font Aggregate
==============

One ``Font`` per family: the repository entries that publish it and what is
known about its local copies, resolved lazily through a ``FontResolver``.
"""

import logging
import threading
from datetime import UTC, datetime
from pathlib import Path

from fontcatcher.core.exceptions import (
    DateParseError,
    LocationNotInstallableError,
    NoRepositoryAvailableError,
    PartialUninstallError,
    RepositoryNotAvailableError,
    StorageError,
)
from fontcatcher.core.models import RepoFont
from fontcatcher.repos.downloader import FontDownloader

from .models import LocalFontRecord, Location, UpdateCheck, UpdateState
from .resolver import FontResolver, normalize_handles
from .storage import LocalStorage
from .utils import output_filename, parse_repo_date

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


class Font:
    """
    Merged view of one family across repositories and local locations.

    Local attributes are resolved on first use and cached in ``local_font``.
    Queries may therefore mutate the aggregate; every read and write goes
    through a per-aggregate lock so one ``Font`` is never mutated by two
    threads at once.
    """

    def __init__(
        self,
        family: str,
        resolver: FontResolver | None = None,
        repo_priority: list[str] | None = None,
        home: Path | None = None,
    ):
        self.family = family
        self.repo_font: dict[str, RepoFont] = {}
        self.local_font: dict[Location, LocalFontRecord] = {}
        self.resolver = resolver
        self.repo_priority = list(repo_priority or [])
        self.home = home
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        locations = ", ".join(str(loc) for loc in self.local_font)
        return f"Font({self.family!r}, repos={self.get_repos_availability()}, local=[{locations}])"

    def add_repo_font(self, repo: str, entry: RepoFont) -> None:
        """Insert a repository entry; a later entry for the same repository wins."""
        with self._lock:
            self.repo_font[repo] = entry

    def set_local_font(self, location: Location, record: LocalFontRecord) -> None:
        """Insert a local record, replacing any prior record for that location."""
        with self._lock:
            self.local_font[location] = record

    # Repository side

    def is_font_in_repo(self, repo: str) -> bool:
        return repo in self.repo_font

    def get_repos_availability(self) -> list[str]:
        """Repositories carrying this family, in priority order."""
        rank = {name: i for i, name in enumerate(self.repo_priority)}
        return sorted(self.repo_font, key=lambda name: (rank.get(name, len(rank)), name))

    def get_first_available_repo(self) -> str | None:
        repos = self.get_repos_availability()
        return repos[0] if repos else None

    def get_repo_family(self, repo: str) -> str | None:
        entry = self.repo_font.get(repo)
        return entry.family if entry else None

    def get_repo_variants(self, repo: str) -> list[str] | None:
        entry = self.repo_font.get(repo)
        return list(entry.variants) if entry else None

    def get_repo_files(self, repo: str) -> dict[str, str] | None:
        entry = self.repo_font.get(repo)
        return dict(entry.files) if entry else None

    def get_repo_subsets(self, repo: str) -> list[str] | None:
        entry = self.repo_font.get(repo)
        return list(entry.subsets) if entry and entry.subsets is not None else None

    def get_repo_version(self, repo: str) -> str | None:
        entry = self.repo_font.get(repo)
        return entry.version if entry else None

    def get_repo_commentary(self, repo: str) -> str | None:
        entry = self.repo_font.get(repo)
        return entry.commentary if entry else None

    def get_repo_creator(self, repo: str) -> str | None:
        entry = self.repo_font.get(repo)
        return entry.creator if entry else None

    def get_repo_last_modified(self, repo: str) -> datetime | None:
        """Repository date as midnight UTC; None when absent or malformed."""
        entry = self.repo_font.get(repo)
        if entry is None or entry.last_modified is None:
            return None
        try:
            return parse_repo_date(entry.last_modified)
        except DateParseError as e:
            logger.warning(f"{self.family} in {repo}: {e}")
            return None

    # Local side

    def resolve_local(self, location: Location | None = None) -> dict[Location, LocalFontRecord]:
        """
        Run the resolver for this family and store what it reports.

        Every reported location overwrites its cached record. The requested
        location, and any location without a record yet, gets the uninstalled
        sentinel when the resolver reports nothing there.

        Returns:
            The records reported by the resolver
        """
        with self._lock:
            handles = self.resolver.resolve(self.family) if self.resolver else []
            resolved = normalize_handles(self.family, handles, self.home)

            for loc, record in resolved.items():
                self.local_font[loc] = record

            for loc in Location:
                if loc in resolved:
                    continue
                existing = self.local_font.get(loc)
                if loc == location or existing is None or existing.installed is None:
                    self.local_font[loc] = LocalFontRecord.uninstalled()

            logger.debug(
                f"Resolved {self.family}: {', '.join(str(loc) for loc in resolved) or 'not found'}"
            )
            return resolved

    def _local_attribute(self, location: Location, attribute: str):
        """
        Cached value of a local attribute, resolving it on demand.

        The resolver runs at most once per call. A sentinel record answers
        every query without resolving.
        """
        with self._lock:
            record = self.local_font.get(location)
            if record is not None:
                value = record.get(attribute)
                if value is not None or record.installed is False:
                    return value

            resolved = self.resolve_local(location)
            if location in resolved:
                return self.local_font[location].get(attribute)
            return None

    def known_locations(self) -> list[Location]:
        """Locations already recorded as installed; never invokes the resolver."""
        with self._lock:
            return [loc for loc, record in self.local_font.items() if record.installed]

    def is_font_installed(self, location: Location | None = None) -> bool:
        """Whether a local copy exists at ``location``, or at any location."""
        if location is None:
            return any(self.is_font_installed(loc) for loc in Location)
        return bool(self._local_attribute(location, "installed"))

    def get_local_family(self, location: Location) -> str:
        return self._local_attribute(location, "family") or ""

    def get_local_variants(self, location: Location) -> list[str]:
        return list(self._local_attribute(location, "variants") or [])

    def get_local_files(self, location: Location) -> dict[str, Path]:
        return dict(self._local_attribute(location, "files") or {})

    def get_local_last_modified(self, location: Location) -> datetime:
        value = self._local_attribute(location, "last_modified")
        return _as_utc(value) if value is not None else datetime.now(UTC)

    # Updates

    def check_updates(self, location: Location) -> UpdateCheck:
        """Repositories whose entry is strictly newer than the local copy."""
        with self._lock:
            local_modified = self._local_attribute(location, "last_modified")
            if local_modified is None:
                if not self._local_attribute(location, "installed"):
                    return UpdateCheck(UpdateState.NO_LOCAL_COPY)
                local_modified = datetime.now(UTC)
            local_modified = _as_utc(local_modified)

            newer = []
            for repo in self.get_repos_availability():
                repo_modified = self.get_repo_last_modified(repo)
                if repo_modified is not None and repo_modified > local_modified:
                    newer.append(repo)

        if newer:
            return UpdateCheck(UpdateState.UPDATE_AVAILABLE, newer)
        return UpdateCheck(UpdateState.UP_TO_DATE)

    def has_update(self, location: Location) -> list[str] | None:
        """
        Repositories with an update, or None.

        None covers both "no local copy" and "no update"; use
        ``check_updates`` to tell them apart.
        """
        return self.check_updates(location).repositories or None

    # Install / uninstall

    def _select_repo(self, repo: str | None) -> str:
        if repo is not None:
            if repo not in self.repo_font:
                raise RepositoryNotAvailableError(self.family, repo)
            return repo
        first = self.get_first_available_repo()
        if first is None:
            raise NoRepositoryAvailableError(self.family)
        return first

    def download(
        self,
        output_dir: Path,
        downloader: FontDownloader,
        storage: LocalStorage,
        repo: str | None = None,
    ) -> dict[str, Path]:
        """
        Write every variant of the family from one repository into ``output_dir``.

        Aggregate state is not touched. The first failing variant aborts the
        download; files already written stay in place.

        Returns:
            Mapping of variant to written file
        """
        repo_name = self._select_repo(repo)
        entry = self.repo_font[repo_name]

        written: dict[str, Path] = {}
        for variant, url in entry.ordered_files:
            path = Path(output_dir) / output_filename(entry.family, variant, url)
            logger.info(f"Downloading {path.name} from {url}")
            storage.write(path, downloader.fetch(url, description=path.name))
            written[variant] = path
        return written

    def install(
        self,
        location: Location,
        install_dir: Path,
        downloader: FontDownloader,
        storage: LocalStorage,
        repo: str | None = None,
    ) -> LocalFontRecord:
        """
        Install the family into ``location`` and re-resolve it.

        Raises:
            LocationNotInstallableError: For the in-memory location
            RepositoryNotAvailableError: If ``repo`` does not carry the family
            NoRepositoryAvailableError: If no repository carries the family
            NetworkError: If a variant cannot be downloaded
            StorageError: If a variant cannot be written
        """
        if location is Location.MEMORY:
            raise LocationNotInstallableError(str(location))

        with self._lock:
            written = self.download(install_dir, downloader, storage, repo)

            if self.resolver:
                self.resolver.refresh()
            self.resolve_local(location)

            record = self.local_font.get(location)
            if record is None or not record.installed:
                # Resolver does not see the new files yet
                record = LocalFontRecord(
                    family=self.family,
                    variants=list(written),
                    files=dict(written),
                    last_modified=datetime.now(UTC),
                    installed=True,
                )
                self.local_font[location] = record

            logger.info(f"Installed {self.family} ({len(written)} files) to {install_dir}")
            return record

    def uninstall(self, location: Location, storage: LocalStorage) -> list[Path]:
        """
        Remove every file of the family at ``location``.

        Variants sharing one file (variable fonts, collections) delete it
        once. All deletions are attempted. The record becomes the
        uninstalled sentinel only when every file is gone; otherwise it
        keeps the remaining files and ``PartialUninstallError`` is raised.

        Returns:
            Removed files
        """
        with self._lock:
            files = self.get_local_files(location)

            removed: list[Path] = []
            failed: set[Path] = set()
            for path in dict.fromkeys(files.values()):
                logger.info(f"Removing {path}...")
                try:
                    storage.delete(path)
                    removed.append(path)
                except StorageError as e:
                    logger.warning(f"Could not remove {path}: {e}")
                    failed.add(path)

            remaining = {variant: path for variant, path in files.items() if path in failed}
            if remaining:
                record = self.local_font.get(location)
                if record is not None:
                    record.files = remaining
                    record.variants = list(remaining)
                raise PartialUninstallError(
                    self.family, [str(p) for p in removed], [str(p) for p in remaining.values()]
                )

            self.local_font[location] = LocalFontRecord.uninstalled()
            if self.resolver and removed:
                self.resolver.refresh()
            return removed
