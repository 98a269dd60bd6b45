"""font-catcher: install, update and remove font families from remote repositories."""

__version__ = "0.2.0"

from .fonts import Font, FontCatalog, LocalFontRecord, Location, load_catalog

__all__ = ["Font", "FontCatalog", "LocalFontRecord", "Location", "__version__", "load_catalog"]
