"""
Pytest configuration and fixtures for font-catcher tests.
"""

from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import Mock

import pytest

from fontcatcher.core.config import AppConfig, DownloadConfig
from fontcatcher.core.models import RepoFont
from fontcatcher.fonts.models import LocalFontRecord, RawFontHandle
from fontcatcher.repos.downloader import FontDownloader
from tests.helpers import CountingResolver, FakeStorage

HOME = Path("/home/tester")


@pytest.fixture
def home():
    """Home directory used to tell User from System paths."""
    return HOME


@pytest.fixture
def roboto_entry():
    """Roboto as published by a repository."""
    return RepoFont(
        family="Roboto",
        variants=["Regular", "Bold"],
        files={"Regular": "http://x/r.ttf", "Bold": "http://x/b.ttf"},
        last_modified="2023-06-01",
        version="v3.0",
        creator="Christian Robertson",
        subsets=["latin"],
    )


@pytest.fixture
def lato_entry():
    """Lato as published by a repository."""
    return RepoFont(
        family="Lato",
        variants=["Regular"],
        files={"Regular": "http://x/lato.otf"},
        last_modified="2022-01-01",
    )


@pytest.fixture
def user_roboto_record():
    """Installed per-user copy of Roboto Regular dated 2023-01-01."""
    return LocalFontRecord(
        family="Roboto",
        variants=["Regular"],
        files={"Regular": HOME / ".local/share/fonts/Roboto-Regular.ttf"},
        last_modified=datetime(2023, 1, 1, tzinfo=UTC),
        installed=True,
    )


@pytest.fixture
def user_roboto_handles():
    """Raw handles of two Roboto faces in the user font directory."""
    mtime = datetime(2023, 1, 1, tzinfo=UTC).timestamp()
    font_dir = HOME / ".local/share/fonts"
    return [
        RawFontHandle("Roboto Regular", "Roboto-Regular", "Roboto", font_dir / "Roboto-Regular.ttf", mtime),
        RawFontHandle("Roboto Bold", "Roboto-Bold", "Roboto", font_dir / "Roboto-Bold.ttf", mtime + 60),
    ]


@pytest.fixture
def resolver():
    """Resolver that knows no fonts."""
    return CountingResolver()


@pytest.fixture
def storage():
    """Fake file collaborator."""
    return FakeStorage()


@pytest.fixture
def downloader():
    """Downloader returning fixed bytes for every URL."""
    mock = Mock(spec=FontDownloader)
    mock.fetch.return_value = b"font-bytes"
    return mock


@pytest.fixture
def app_config(tmp_path):
    """Configuration rooted in a temporary directory, without built-in repositories."""
    return AppConfig(
        data_dir=tmp_path / "data",
        user_font_dir=tmp_path / "user-fonts",
        system_font_dir=tmp_path / "system-fonts",
        include_default_repos=False,
        download=DownloadConfig(show_progress=False, max_retries=2),
    )
