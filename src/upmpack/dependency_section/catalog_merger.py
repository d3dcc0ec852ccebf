"""
Merges a catalog and a user selection into a parsed dependency section.
"""

import logging
from typing import Iterable, List, Optional

from upmpack.catalog_models import Catalog
from upmpack.dependency_section.entry_parser import EntryMap
from upmpack.upmpack_logger import UpmpackLogger


class CatalogMerger:
    """
    Applies a selection of catalog packages to an EntryMap.

    Selected catalog packages are inserted or overwritten with their catalog
    value, unselected catalog packages are removed, and every entry whose name
    is not in the catalog is left exactly as it was.
    """

    def __init__(self, catalog: Catalog, logger: Optional[UpmpackLogger] = None):
        self.catalog = catalog
        self.logger = logger

    def merge(self, entries: EntryMap, selection: Iterable[str]) -> EntryMap:
        """
        Produce the updated mapping. The input mapping is not modified.

        Args:
            entries: The currently parsed entries
            selection: Catalog names that should be present

        Returns:
            A new EntryMap
        """
        selected = set(selection)
        unknown = selected.difference(self.catalog.names())
        if unknown and self.logger is not None:
            self.logger.log(
                f"Ignoring selected names that are not in the catalog: {sorted(unknown)}",
                logging.DEBUG,
            )

        merged = dict(entries)
        for entry in self.catalog.entries:
            if entry.name in selected:
                merged[entry.name] = entry.value
            else:
                merged.pop(entry.name, None)
        return merged

    def selected_names(self, entries: EntryMap) -> List[str]:
        """Catalog names present in entries, in catalog order."""
        return [name for name in self.catalog.names() if name in entries]
