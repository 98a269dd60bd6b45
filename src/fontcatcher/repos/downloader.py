"""
Font Downloader
===============

HTTP transport for catalog payloads and font files, with progress tracking
and retries.
"""

import logging
import time

import requests
from tqdm import tqdm

from fontcatcher.core.config import DownloadConfig
from fontcatcher.core.exceptions import NetworkError

logger = logging.getLogger(__name__)


class DownloadProgress:
    """Progress tracker for downloads."""

    def __init__(self, total_size: int, description: str = "Downloading", enabled: bool = True):
        self.total_size = total_size
        self.downloaded = 0
        self.start_time = time.time()
        self.pbar = tqdm(
            total=total_size or None,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            desc=description,
            disable=not enabled,
            leave=False,
        )

    def update(self, chunk_size: int):
        """Update progress."""
        self.downloaded += chunk_size
        self.pbar.update(chunk_size)

    def close(self):
        """Close progress bar."""
        self.pbar.close()

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        return time.time() - self.start_time


class FontDownloader:
    """
    Fetches remote resources into memory.

    Catalog payloads and individual font files are small enough to be held in
    memory; writing them to disk is the caller's concern.
    """

    def __init__(self, config: DownloadConfig | None = None):
        self.config = config or DownloadConfig()
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create HTTP session with appropriate configuration."""
        session = requests.Session()
        session.verify = self.config.verify_ssl
        session.headers.update({"User-Agent": self.config.user_agent})
        return session

    def fetch(self, url: str, description: str | None = None) -> bytes:
        """
        Download a URL, following redirects.

        Args:
            url: Resource URL
            description: Label for the progress bar

        Returns:
            Response body

        Raises:
            NetworkError: If every attempt failed
        """
        last_error: Exception | None = None
        for attempt in range(self.config.max_retries):
            try:
                return self._fetch_with_progress(url, description or url)
            except requests.RequestException as e:
                last_error = e
                logger.warning(f"Download attempt {attempt + 1} for {url} failed: {e}")
                if attempt < self.config.max_retries - 1:
                    time.sleep(2**attempt)

        raise NetworkError(url, str(last_error)) from last_error

    def fetch_text(self, url: str, description: str | None = None) -> str:
        """Download a URL and decode it as UTF-8."""
        data = self.fetch(url, description)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NetworkError(url, f"invalid UTF-8 payload: {e}") from e

    def _fetch_with_progress(self, url: str, description: str) -> bytes:
        response = self.session.get(
            url, stream=True, timeout=self.config.timeout_seconds, allow_redirects=True
        )
        response.raise_for_status()

        total_size = int(response.headers.get("content-length", 0) or 0)
        progress = DownloadProgress(total_size, description, enabled=self.config.show_progress)
        chunks: list[bytes] = []

        try:
            for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                if chunk:
                    chunks.append(chunk)
                    progress.update(len(chunk))
        finally:
            progress.close()

        logger.debug(f"Fetched {progress.downloaded} bytes from {url} in {progress.elapsed_time:.2f}s")
        return b"".join(chunks)

    def close(self):
        """Release the HTTP session."""
        self.session.close()

    def __enter__(self) -> "FontDownloader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
