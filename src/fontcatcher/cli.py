"""
font-catcher CLI
================

Commands to refresh repositories, search them, and install, download,
remove or check updates for font families.
"""

import logging
import sys
from functools import cached_property
from pathlib import Path

import click

from fontcatcher import __version__
from fontcatcher.core.config import AppConfig
from fontcatcher.core.exceptions import ConfigurationError, FontCatcherError
from fontcatcher.fonts.catalog import FontCatalog, install_dir_for, load_catalog
from fontcatcher.fonts.font import Font
from fontcatcher.fonts.models import Location, UpdateState
from fontcatcher.fonts.resolver import FontResolver
from fontcatcher.fonts.storage import LocalStorage
from fontcatcher.fonts.system import SystemFontResolver
from fontcatcher.repos.downloader import FontDownloader
from fontcatcher.repos.fetcher import CatalogFetcher
from fontcatcher.repos.registry import RepositoryRegistry

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

VERSION_MESSAGE = (
    "%(prog)s %(version)s\n"
    "This is free software. It is licensed for use, modification and\n"
    "redistribution under the terms of the GNU Affero General Public License,\n"
    "version 3. <https://www.gnu.org/licenses/agpl-3.0.en.html>\n"
    "\n"
    "Install, update and remove font families from remote font repositories."
)


class CliSession:
    """Collaborators shared by the commands of one invocation, created on first use."""

    def __init__(
        self,
        config: AppConfig,
        resolver: FontResolver | None = None,
        downloader: FontDownloader | None = None,
        storage: LocalStorage | None = None,
    ):
        self.config = config
        self._resolver = resolver
        self._downloader = downloader
        self._storage = storage

    @cached_property
    def resolver(self) -> FontResolver:
        return self._resolver or SystemFontResolver()

    @cached_property
    def downloader(self) -> FontDownloader:
        return self._downloader or FontDownloader(self.config.download)

    @cached_property
    def storage(self) -> LocalStorage:
        return self._storage or LocalStorage()

    @cached_property
    def registry(self) -> RepositoryRegistry:
        return RepositoryRegistry(
            self.config.repos_file,
            self.config.google_fonts_key,
            self.config.include_default_repos,
        )

    @cached_property
    def fetcher(self) -> CatalogFetcher:
        return CatalogFetcher(self.downloader, self.config.repos_dir)

    @cached_property
    def catalog(self) -> FontCatalog:
        return load_catalog(self.config, self.registry, self.fetcher, self.resolver)


def _location(system: bool) -> Location:
    return Location.SYSTEM if system else Location.USER


def _find_fonts(session: CliSession, families: tuple[str, ...]) -> tuple[list[Font], int]:
    """Look up families case-insensitively; returns (found, number missing)."""
    found, missing = [], 0
    for family in families:
        font = session.catalog.find(family)
        if font is None:
            click.echo(f"{family}: not found", err=True)
            missing += 1
        else:
            found.append(font)
    return found, missing


@click.group()
@click.version_option(__version__, "--version", prog_name="font-catcher", message=VERSION_MESSAGE)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration YAML file",
)
@click.pass_context
def cli(ctx, verbose, config):
    """Install, update and remove fonts from remote repositories."""
    if ctx.obj is None:
        try:
            app_config = AppConfig.from_yaml(config) if config else AppConfig.load_from_env()
        except ConfigurationError as e:
            logger.error(f"Configuration failed: {e}")
            sys.exit(1)
        ctx.obj = CliSession(app_config)

    logging.getLogger().setLevel(logging.DEBUG if verbose else ctx.obj.config.log_level)


@cli.command(name="update-repos")
@click.pass_obj
def update_repos(session: CliSession):
    """Download every repository catalog into the local cache."""
    updated, failed = session.fetcher.update_repos(session.registry.list_repositories())
    for name, count in updated.items():
        click.echo(f"{name}: {count} families")
    for name, error in failed.items():
        click.echo(f"{name}: {error}", err=True)
    if failed:
        sys.exit(1)


@cli.command(name="list-repos")
@click.pass_obj
def list_repos(session: CliSession):
    """List configured repositories in priority order."""
    for repo in session.registry.list_repositories():
        click.echo(f"{repo.name}\t{repo.url}")


@cli.command()
@click.argument("query")
@click.option("--repo", "-r", help="Only search this repository")
@click.pass_obj
def search(session: CliSession, query, repo):
    """Search family names."""
    results = session.catalog.search(query, repo)
    for font in results:
        repos = ", ".join(font.get_repos_availability()) or "-"
        marker = " [installed]" if font.known_locations() else ""
        click.echo(f"{font.family} ({repos}){marker}")
    if not results:
        click.echo("No fonts found")


@cli.command()
@click.argument("family")
@click.pass_obj
def info(session: CliSession, family):
    """Show repository and local details of a family."""
    font = session.catalog.find(family)
    if font is None:
        click.echo(f"{family}: not found", err=True)
        sys.exit(1)

    click.echo(font.family)
    click.echo("=" * len(font.family))
    for repo in font.get_repos_availability():
        modified = font.get_repo_last_modified(repo)
        click.echo(f"{repo}:")
        click.echo(f"  variants: {', '.join(font.get_repo_variants(repo) or [])}")
        if font.get_repo_version(repo):
            click.echo(f"  version: {font.get_repo_version(repo)}")
        if modified:
            click.echo(f"  last modified: {modified.date().isoformat()}")
        if font.get_repo_creator(repo):
            click.echo(f"  creator: {font.get_repo_creator(repo)}")
    for location in (Location.USER, Location.SYSTEM):
        if font.is_font_installed(location):
            click.echo(f"{location}: {', '.join(font.get_local_variants(location))}")


@cli.command()
@click.argument("families", nargs=-1, required=True)
@click.option("--repo", "-r", help="Repository to install from")
@click.option("--system", is_flag=True, help="Install for all users")
@click.pass_obj
def install(session: CliSession, families, repo, system):
    """Install font families."""
    location = _location(system)
    fonts, failures = _find_fonts(session, families)
    install_dir = install_dir_for(session.config, location)

    for font in fonts:
        try:
            record = font.install(location, install_dir, session.downloader, session.storage, repo)
            click.echo(f"{font.family}: installed {len(record.files or {})} files")
        except FontCatcherError as e:
            click.echo(f"{font.family}: install failed: {e}", err=True)
            failures += 1

    if failures:
        sys.exit(1)


@cli.command()
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.argument("families", nargs=-1, required=True)
@click.option("--repo", "-r", help="Repository to download from")
@click.pass_obj
def download(session: CliSession, directory, families, repo):
    """Download font families into DIRECTORY without installing them."""
    fonts, failures = _find_fonts(session, families)

    for font in fonts:
        try:
            written = font.download(directory, session.downloader, session.storage, repo)
            click.echo(f"{font.family}: {len(written)} files written to {directory}")
        except FontCatcherError as e:
            click.echo(f"{font.family}: download failed: {e}", err=True)
            failures += 1

    if failures:
        sys.exit(1)


@cli.command()
@click.argument("families", nargs=-1, required=True)
@click.option("--system", is_flag=True, help="Remove the system-wide copy")
@click.pass_obj
def remove(session: CliSession, families, system):
    """Remove installed font families."""
    location = _location(system)
    fonts, failures = _find_fonts(session, families)

    for font in fonts:
        if not font.is_font_installed(location):
            click.echo(f"{font.family}: not installed ({location})", err=True)
            failures += 1
            continue
        try:
            removed = font.uninstall(location, session.storage)
            click.echo(f"{font.family}: removed {len(removed)} files")
        except FontCatcherError as e:
            click.echo(f"{font.family}: removal failed: {e}", err=True)
            failures += 1

    if failures:
        sys.exit(1)


@cli.command(name="check-updates")
@click.option("--system", is_flag=True, help="Check system-wide fonts")
@click.pass_obj
def check_updates(session: CliSession, system):
    """List installed families with newer versions in a repository."""
    location = _location(system)
    count = 0
    for font in session.catalog:
        if location not in font.known_locations() or not font.get_repos_availability():
            continue
        result = font.check_updates(location)
        if result.state is UpdateState.UPDATE_AVAILABLE:
            click.echo(f"{font.family}: {', '.join(result.repositories)}")
            count += 1
    if not count:
        click.echo("All fonts are up to date")


if __name__ == "__main__":
    cli()
