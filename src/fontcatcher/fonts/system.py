"""
System Font Resolver
====================

Resolver backed by the fonts installed on the local machine. Uses fontconfig
(``fc-list``) where available and falls back to scanning the standard font
directories with fontTools.
"""

import logging
import os
import platform
import shutil
import subprocess
from collections import defaultdict
from pathlib import Path

from .models import RawFontHandle
from .utils import get_font_names, is_font_file

logger = logging.getLogger(__name__)

FC_LIST_FORMAT = "%{file}\t%{family[0]}\t%{fullname[0]}\t%{postscriptname}\n"


def _escape_fc_pattern(family: str) -> str:
    """Escape fontconfig pattern metacharacters in a family name."""
    for char in ("\\", "-", ":", ","):
        family = family.replace(char, f"\\{char}")
    return family


class SystemFontResolver:
    """
    Reports raw font handles for fonts installed on this machine.

    Results of the directory scan fallback are cached until ``refresh``.
    """

    def __init__(self, use_fontconfig: bool = True, timeout: int = 30):
        self.system = platform.system().lower()
        self.timeout = timeout
        self.fc_list_path = shutil.which("fc-list") if use_fontconfig else None
        self.font_directories = self._get_system_font_directories()
        self._scan_cache: dict[str, list[RawFontHandle]] | None = None

        logger.debug(f"SystemFontResolver initialized for {self.system}")
        logger.debug(f"fc-list: {self.fc_list_path or 'unavailable'}")

    def _get_system_font_directories(self) -> list[Path]:
        """Get font directories based on operating system."""
        directories = []

        if self.system == "windows":
            directories.extend(
                [
                    Path(os.environ.get("WINDIR", "C:\\Windows")) / "Fonts",
                    Path(os.environ.get("LOCALAPPDATA", "")) / "Microsoft" / "Windows" / "Fonts",
                ]
            )

        elif self.system == "darwin":
            directories.extend(
                [
                    Path("/System/Library/Fonts"),
                    Path("/Library/Fonts"),
                    Path.home() / "Library" / "Fonts",
                ]
            )

        else:  # Linux and other Unix-like systems
            directories.extend(
                [
                    Path("/usr/share/fonts"),
                    Path("/usr/local/share/fonts"),
                    Path.home() / ".fonts",
                    Path.home() / ".local" / "share" / "fonts",
                ]
            )

        return [d for d in directories if d.exists() and d.is_dir()]

    def resolve(self, family: str) -> list[RawFontHandle]:
        """Handles for every installed face of ``family``."""
        if self.fc_list_path:
            handles = self._run_fc_list([_escape_fc_pattern(family)])
            if handles is not None:
                return [h for h in handles if h.family == family]
        return list(self._scan_directories().get(family, []))

    def all_fonts(self) -> list[RawFontHandle]:
        """Handles for every installed face."""
        if self.fc_list_path:
            handles = self._run_fc_list([])
            if handles is not None:
                return handles
        return [h for handles in self._scan_directories().values() for h in handles]

    def _run_fc_list(self, pattern: list[str]) -> list[RawFontHandle] | None:
        """Run fc-list; None means fontconfig failed and the caller should fall back."""
        try:
            result = subprocess.run(
                [self.fc_list_path, "-f", FC_LIST_FORMAT, *pattern],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"fc-list failed, scanning font directories instead: {e}")
            return None

        return parse_fc_list_output(result.stdout)

    def _scan_directories(self) -> dict[str, list[RawFontHandle]]:
        if self._scan_cache is not None:
            return self._scan_cache

        by_family: dict[str, list[RawFontHandle]] = defaultdict(list)
        for font_dir in self.font_directories:
            try:
                for font_file in sorted(font_dir.rglob("*")):
                    if not (font_file.is_file() and is_font_file(font_file)):
                        continue
                    handle = self._handle_from_file(font_file)
                    if handle:
                        by_family[handle.family].append(handle)
            except PermissionError:
                logger.debug(f"Permission denied accessing {font_dir}")

        self._scan_cache = dict(by_family)
        logger.debug(f"Directory scan found {len(self._scan_cache)} families")
        return self._scan_cache

    def _handle_from_file(self, font_file: Path) -> RawFontHandle | None:
        names = get_font_names(str(font_file))
        if not names:
            return None
        try:
            mtime = font_file.stat().st_mtime
        except OSError:
            mtime = None
        return RawFontHandle(
            full_name=names["full_name"],
            postscript_name=names["postscript_name"],
            family=names["family"],
            path=font_file,
            mtime=mtime,
        )

    def refresh(self) -> None:
        """Refresh the system font cache and forget scan results."""
        self._scan_cache = None

        if self.system != "linux":
            return

        fc_cache_path = shutil.which("fc-cache")
        if not fc_cache_path:
            logger.warning("fc-cache not found in PATH")
            return
        try:
            subprocess.run([fc_cache_path, "-f"], timeout=self.timeout, check=False)
            logger.debug("Refreshed fontconfig cache")
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Failed to refresh font cache: {e}")


def parse_fc_list_output(output: str) -> list[RawFontHandle]:
    """Parse ``fc-list`` output produced with ``FC_LIST_FORMAT``."""
    handles = []
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2 or not parts[0]:
            continue
        path_str, family = parts[0], parts[1].strip()
        if not family:
            continue
        full_name = parts[2].strip() if len(parts) > 2 and parts[2].strip() else family
        postscript = parts[3].strip() if len(parts) > 3 else ""

        path = Path(path_str)
        try:
            mtime = path.stat().st_mtime
        except OSError:
            logger.debug(f"Skipping unreadable font file {path}")
            continue

        handles.append(
            RawFontHandle(
                full_name=full_name,
                postscript_name=postscript or full_name.replace(" ", "-"),
                family=family,
                path=path,
                mtime=mtime,
            )
        )
    return handles
