"""
Replaces the dependency section of a document with new section text.
"""

from upmpack.dependency_section.locator import (
    DEFAULT_SECTION_MARKER,
    Section,
    locate_section,
)
from upmpack.upmpack_exceptions import SectionNotFound


def splice(
    document: str,
    section: Section,
    new_text: str,
    marker: str = DEFAULT_SECTION_MARKER,
) -> str:
    """
    Return ``document`` with exactly the span of ``section`` replaced by ``new_text``.

    The section is located again first; if it no longer matches the given span
    the document is left alone and SectionNotFound is raised.

    Raises:
        SectionNotFound: If the section cannot be re-located at the same span
    """
    current = locate_section(document, marker)
    if (current.start, current.end, current.raw_text) != (
        section.start,
        section.end,
        section.raw_text,
    ):
        raise SectionNotFound(marker, "section moved since it was located")

    return document[: section.start] + new_text + document[section.end :]
