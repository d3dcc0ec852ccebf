"""
Catalog models for upmpack.

This package provides Pydantic data models describing the fixed catalog of
packages the tool offers to toggle in a manifest, along with the default
catalog shipped as package data.
"""

from .catalog import (
    Catalog,
    CatalogEntry,
    DEFAULT_CATALOG_PATH,
    load_default_catalog,
)

__all__ = [
    "Catalog",
    "CatalogEntry",
    "DEFAULT_CATALOG_PATH",
    "load_default_catalog",
]
