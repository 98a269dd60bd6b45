"""Filesystem access for font files."""

import logging
from pathlib import Path

from fontcatcher.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Reads, writes and removes font files, raising ``StorageError`` on failure."""

    def write(self, path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(str(path), str(e)) from e
        logger.debug(f"Wrote {len(data)} bytes to {path}")

    def delete(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug(f"{path} is already gone")
            return
        except OSError as e:
            raise StorageError(str(path), str(e)) from e
        logger.debug(f"Removed {path}")

    def read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(str(path), str(e)) from e
