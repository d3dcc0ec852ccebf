"""
Manifest editing.

This package handles:
1. Reading the manifest and the current catalog selection
2. Computing the updated manifest for a new selection
3. Writing the result back without partial writes
"""

from .editor import DEFAULT_MANIFEST_TEMPLATE, EditResult, ManifestEditor

__all__ = ["DEFAULT_MANIFEST_TEMPLATE", "EditResult", "ManifestEditor"]
