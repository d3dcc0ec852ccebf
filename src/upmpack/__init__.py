"""
upmpack edits the dependency section of a package manifest, toggling a catalog
of known packages while leaving every other part of the document untouched.
"""

from upmpack.catalog_models import Catalog, CatalogEntry
from upmpack.manifest_editor import EditResult, ManifestEditor
from upmpack.upmpack_config import UpmpackConfig
from upmpack.upmpack_logger import UpmpackLogger

__all__ = [
    "Catalog",
    "CatalogEntry",
    "EditResult",
    "ManifestEditor",
    "UpmpackConfig",
    "UpmpackLogger",
]
