"""
Repository Registry
===================

Keeps the ordered list of font repositories: the built-in ones followed by
those declared in the user's ``repos.conf``.
"""

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from fontcatcher.core.exceptions import InvalidRepositoryFileError
from fontcatcher.core.models import Repository

logger = logging.getLogger(__name__)

OPEN_FONT_REPOSITORY = "Open Font Repository"
GOOGLE_FONTS = "Google Fonts"


def get_default_repos(google_fonts_key: str | None = None) -> list[Repository]:
    """Built-in repositories; Google Fonts only when an API key is available."""
    repos = []
    if google_fonts_key:
        repos.append(
            Repository(
                name=GOOGLE_FONTS,
                url="https://www.googleapis.com/webfonts/v1/webfonts?key={API_KEY}",
                key=google_fonts_key,
            )
        )
    repos.append(
        Repository(
            name=OPEN_FONT_REPOSITORY,
            url="https://raw.githubusercontent.com/GustavoPeredo/open-font-repository/main/fonts.json",
        )
    )
    return repos


def parse_repositories(text: str, source: str = "<string>") -> list[Repository]:
    """
    Parse a repositories TOML document.

    The document holds ``[[repo]]`` tables with ``name``, ``url`` and an
    optional ``key``.

    Raises:
        InvalidRepositoryFileError: If the TOML or one of its entries is invalid
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise InvalidRepositoryFileError(source, str(e)) from e

    entries = data.get("repo", [])
    if not isinstance(entries, list):
        raise InvalidRepositoryFileError(source, "'repo' must be an array of tables")

    try:
        return [Repository(**entry) for entry in entries]
    except (TypeError, PydanticValidationError) as e:
        raise InvalidRepositoryFileError(source, str(e)) from e


def load_repos_file(repos_file: Path) -> list[Repository]:
    """Read repositories from a TOML file."""
    return parse_repositories(repos_file.read_text(encoding="utf-8"), str(repos_file))


class RepositoryRegistry:
    """
    Ordered registry of repositories, keyed by name.

    Registration order doubles as the priority used to pick a default source
    repository when a caller does not name one.
    """

    def __init__(
        self,
        repos_file: Path | None = None,
        google_fonts_key: str | None = None,
        include_defaults: bool = True,
    ):
        self.repos_file = repos_file
        self._repos: dict[str, Repository] = {}

        if include_defaults:
            for repo in get_default_repos(google_fonts_key):
                self.register(repo)

        if repos_file is not None and repos_file.exists():
            self._load_user_repositories(repos_file)

    def _load_user_repositories(self, repos_file: Path) -> None:
        try:
            repos = load_repos_file(repos_file)
        except (InvalidRepositoryFileError, OSError) as e:
            logger.warning(f"{e}; skipping user repositories")
            return

        for repo in repos:
            self.register(repo)
        logger.debug(f"Loaded {len(repos)} repositories from {repos_file}")

    def register(self, repo: Repository) -> None:
        """Add a repository; an existing one with the same name is replaced in place."""
        if repo.name in self._repos:
            logger.debug(f"Replacing repository definition: {repo.name}")
        self._repos[repo.name] = repo

    def get(self, name: str) -> Repository | None:
        return self._repos.get(name)

    def list_repositories(self) -> list[Repository]:
        return list(self._repos.values())

    def names(self) -> list[str]:
        return list(self._repos)

    def __contains__(self, name: str) -> bool:
        return name in self._repos

    def __len__(self) -> int:
        return len(self._repos)
