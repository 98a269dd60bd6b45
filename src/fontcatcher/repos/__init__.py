"""Repository Module
=================

Repository descriptors, catalog fetching and caching, and the HTTP
transport used to download font files.
"""

from .downloader import DownloadProgress, FontDownloader
from .fetcher import CatalogFetcher, parse_catalog
from .registry import RepositoryRegistry, get_default_repos, parse_repositories

__all__ = [
    "CatalogFetcher",
    "DownloadProgress",
    "FontDownloader",
    "RepositoryRegistry",
    "get_default_repos",
    "parse_catalog",
    "parse_repositories",
]
