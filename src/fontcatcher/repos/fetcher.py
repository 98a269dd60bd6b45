"""
Catalog Fetcher
===============

Turns repository descriptors into lists of ``RepoFont`` entries, either
straight from the network or from the local payload cache written by
``update_repos``.
"""

import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from fontcatcher.core.exceptions import (
    CatalogParseError,
    FontCatcherError,
    NetworkError,
    StorageError,
)
from fontcatcher.core.models import FontsList, RepoFont, Repository

from .downloader import FontDownloader

logger = logging.getLogger(__name__)


def parse_catalog(payload: str | bytes, repository: str) -> list[RepoFont]:
    """
    Parse a catalog payload (``{"kind": ..., "items": [...]}``).

    Raises:
        CatalogParseError: If the payload is not a valid catalog
    """
    try:
        return FontsList.model_validate_json(payload).items
    except PydanticValidationError as e:
        raise CatalogParseError(repository, str(e)) from e


class CatalogFetcher:
    """Fetches, validates and caches repository catalogs."""

    def __init__(self, downloader: FontDownloader, repos_dir: Path | None = None):
        self.downloader = downloader
        self.repos_dir = repos_dir

    def fetch(self, repo: Repository) -> list[RepoFont]:
        """
        Fetch and parse a repository catalog from the network.

        Raises:
            NetworkError: On transfer failure
            CatalogParseError: On malformed payload
        """
        return parse_catalog(self._fetch_payload(repo), repo.name)

    def _fetch_payload(self, repo: Repository) -> str:
        if repo.requires_key and not repo.key:
            logger.warning(f"Repository '{repo.name}' needs an API key but none is configured")
        return self.downloader.fetch_text(repo.resolved_url(), f"Fetching {repo.name}")

    def cache_path(self, repo: Repository) -> Path:
        if self.repos_dir is None:
            raise StorageError(repo.cache_filename, "no repository cache directory configured")
        return self.repos_dir / repo.cache_filename

    def update_repository(self, repo: Repository) -> int:
        """
        Refresh the cached payload of one repository.

        The payload is validated before it replaces the cached copy.

        Returns:
            Number of font families in the new payload
        """
        logger.info(f"Updating {repo.name}...")
        payload = self._fetch_payload(repo)
        fonts = parse_catalog(payload, repo.name)

        path = self.cache_path(repo)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise StorageError(str(path), str(e)) from e

        logger.info(f"{repo.name}: {len(fonts)} families")
        return len(fonts)

    def update_repos(
        self, repos: list[Repository]
    ) -> tuple[dict[str, int], dict[str, FontCatcherError]]:
        """
        Refresh every repository cache, continuing past failures.

        Returns:
            (family counts of updated repositories, errors of failed ones)
        """
        updated: dict[str, int] = {}
        failed: dict[str, FontCatcherError] = {}
        for repo in repos:
            try:
                updated[repo.name] = self.update_repository(repo)
            except (NetworkError, CatalogParseError, StorageError) as e:
                logger.warning(f"Skipping repository {repo.name}: {e}")
                failed[repo.name] = e
        return updated, failed

    def load_cached(self, repo: Repository) -> list[RepoFont]:
        """
        Read a repository's cached payload; no cache file means no entries.

        Raises:
            CatalogParseError: On malformed payload
            StorageError: If the cache file cannot be read
        """
        path = self.cache_path(repo)
        if not path.exists():
            logger.debug(f"No cached catalog for {repo.name} at {path}")
            return []
        try:
            payload = path.read_bytes()
        except OSError as e:
            raise StorageError(str(path), str(e)) from e
        return parse_catalog(payload, repo.name)

    def load_all(self, repos: list[Repository], online: bool = False) -> dict[str, list[RepoFont]]:
        """
        Collect entries for every repository, in repository order.

        A repository that fails to load contributes an empty entry list and a
        warning; it never prevents using the rest.
        """
        result: dict[str, list[RepoFont]] = {}
        for repo in repos:
            try:
                result[repo.name] = self.fetch(repo) if online else self.load_cached(repo)
            except (NetworkError, CatalogParseError, StorageError) as e:
                logger.warning(f"Skipping repository {repo.name}: {e}")
                result[repo.name] = []
        return result
