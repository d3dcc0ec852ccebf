"""
Renders an EntryMap back into dependency section text.
"""

import json
from typing import List, Tuple

from upmpack.catalog_models import Catalog
from upmpack.dependency_section.entry_parser import EntryMap, RawValue


class SectionSerializer:
    """
    Serializes entries with a deterministic two-tier ordering.

    Catalog entries come first, in the catalog's declared order. All other
    entries follow in ascending lexicographic order of name. Serializing the
    parse of serialized text reproduces it byte for byte.
    """

    def __init__(self, catalog: Catalog, indent: str = "  "):
        """
        Args:
            catalog: Catalog whose order governs the first tier
            indent: Indentation of entries relative to the section key
        """
        self.catalog = catalog
        self.indent = indent

    def order(self, entries: EntryMap) -> List[Tuple[str, str]]:
        catalog_names = self.catalog.names()
        ordered = [(name, entries[name]) for name in catalog_names if name in entries]
        known = set(catalog_names)
        ordered.extend(
            (name, entries[name]) for name in sorted(entries) if name not in known
        )
        return ordered

    def serialize(self, entries: EntryMap, key_indent: str = "  ", newline: str = "\n") -> str:
        """
        Render entries as section text, from the opening brace to the closing brace.

        Args:
            entries: The entries to render
            key_indent: Indentation of the line holding the section key; the
                closing brace is aligned with it
            newline: Line separator to use

        Returns:
            The section text
        """
        entry_indent = key_indent + self.indent
        lines = [
            f"{entry_indent}{_encode(name)}: {_encode_value(value)}"
            for name, value in self.order(entries)
        ]
        body = ("," + newline).join(lines)
        if body:
            body += newline
        return "{" + newline + body + key_indent + "}"


def _encode(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _encode_value(value: str) -> str:
    if isinstance(value, RawValue):
        return str(value)
    return _encode(value)
