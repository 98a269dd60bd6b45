"""
Font Utilities
==============

Helpers for naming, dating and inspecting font files.
"""

import logging
import re
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from fontcatcher.core.exceptions import DateParseError

logger = logging.getLogger(__name__)

FONT_EXTENSIONS = {".ttf", ".otf", ".woff", ".woff2", ".ttc", ".otc"}
REPO_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_VARIANT = "Regular"

_SEPARATORS = re.compile(r"[\s_\-]+")


def variant_name(full_name: str, family: str) -> str:
    """
    Derive a variant name from a face's full name.

    "Roboto Bold Italic" in family "Roboto" gives "Bold Italic";
    "Roboto" alone gives "Regular".
    """
    remainder = full_name.replace(family, "", 1) if family else full_name
    remainder = _SEPARATORS.sub(" ", remainder).strip()
    return remainder or DEFAULT_VARIANT


def parse_repo_date(value: str) -> datetime:
    """
    Parse a repository ``last_modified`` date as midnight UTC.

    Raises:
        DateParseError: If the value is not in %Y-%m-%d
    """
    try:
        return datetime.strptime(value.strip(), REPO_DATE_FORMAT).replace(tzinfo=UTC)
    except (ValueError, AttributeError) as e:
        raise DateParseError(str(value)) from e


def url_extension(url: str) -> str:
    """Text after the last '.' of the URL path; empty when there is none."""
    name = PurePosixPath(urlparse(url).path).name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1]


def output_filename(family: str, variant: str, url: str) -> str:
    """Deterministic install filename: ``{family}-{variant}.{extension}``."""
    extension = url_extension(url)
    stem = f"{family}-{variant}"
    return f"{stem}.{extension}" if extension else stem


def file_mtime(path: Path) -> datetime | None:
    """Modification time of a file as an aware UTC datetime."""
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
    except OSError as e:
        logger.debug(f"Cannot stat {path}: {e}")
        return None


def is_font_file(path: Path) -> bool:
    return path.suffix.lower() in FONT_EXTENSIONS


def get_font_names(font_path: str) -> dict[str, str] | None:
    """
    Extract family, full and postscript names from a font file.

    Tries fontTools first and falls back to parsing the filename.
    """
    return _get_font_names_fonttools(font_path) or _get_font_names_fallback(font_path)


def _get_font_names_fonttools(font_path: str) -> dict[str, str] | None:
    """Get names using the fontTools name table."""
    try:
        from fontTools.ttLib import TTFont

        with TTFont(font_path, lazy=True, fontNumber=0) as font:
            name_table = font["name"]
            # Typographic family (16) wins over legacy family (1)
            family = _get_font_name(name_table, 16) or _get_font_name(name_table, 1)
            if not family:
                return None
            subfamily = _get_font_name(name_table, 17) or _get_font_name(name_table, 2)
            full_name = _get_font_name(name_table, 4) or f"{family} {subfamily or ''}".strip()
            postscript = _get_font_name(name_table, 6) or full_name.replace(" ", "-")

        return {"family": family, "full_name": full_name, "postscript_name": postscript}

    except Exception as e:
        logger.debug(f"fonttools failed for {font_path}: {e}")
        return None


def _get_font_name(name_table, name_id: int) -> str | None:
    """Extract a name record, preferring US English."""
    fallback = None
    for record in name_table.names:
        if record.nameID != name_id:
            continue
        try:
            value = record.toUnicode().strip()
        except UnicodeDecodeError:
            continue
        if record.langID in (0, 1033):
            return value
        fallback = fallback or value
    return fallback


def _get_font_names_fallback(font_path: str) -> dict[str, str] | None:
    """Fallback name extraction from a ``Family-Style.ext`` filename."""
    stem = Path(font_path).stem
    if not stem:
        return None

    parts = re.split(r"[-_]+", stem, maxsplit=1)
    family = parts[0]
    style = parts[1] if len(parts) > 1 else ""
    full_name = f"{family} {style}".strip()
    return {"family": family, "full_name": full_name, "postscript_name": stem}
