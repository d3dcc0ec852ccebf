"""
Dependency section engine.

This package handles:
1. Locating the dependency object literal inside a manifest document
2. Parsing its entries into an ordered mapping
3. Merging a catalog selection into the mapping
4. Serializing the mapping deterministically
5. Splicing the new section back into the document
"""

from .tokenizer import Token, TokenKind, tokenize
from .locator import DEFAULT_SECTION_MARKER, Section, find_section, locate_section
from .entry_parser import EntryMap, EntryParser, ParseResult, RawValue, parse_entries
from .catalog_merger import CatalogMerger
from .serializer import SectionSerializer
from .splicer import splice

__all__ = [
    "Token",
    "TokenKind",
    "tokenize",
    "DEFAULT_SECTION_MARKER",
    "Section",
    "find_section",
    "locate_section",
    "EntryMap",
    "EntryParser",
    "ParseResult",
    "RawValue",
    "parse_entries",
    "CatalogMerger",
    "SectionSerializer",
    "splice",
]
