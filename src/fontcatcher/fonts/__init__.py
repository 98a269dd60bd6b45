"""Font Module
===========

Font aggregates, the catalog that merges repositories with local fonts,
and local font resolution.
"""

from .catalog import FontCatalog, install_dir_for, load_catalog
from .font import Font
from .models import LocalFontRecord, Location, RawFontHandle, UpdateCheck, UpdateState
from .resolver import FontResolver, StaticFontResolver, normalize_handles, scan_local_fonts
from .storage import LocalStorage
from .system import SystemFontResolver

__all__ = [
    "Font",
    "FontCatalog",
    "FontResolver",
    "LocalFontRecord",
    "LocalStorage",
    "Location",
    "RawFontHandle",
    "StaticFontResolver",
    "SystemFontResolver",
    "UpdateCheck",
    "UpdateState",
    "install_dir_for",
    "load_catalog",
    "normalize_handles",
    "scan_local_fonts",
]
