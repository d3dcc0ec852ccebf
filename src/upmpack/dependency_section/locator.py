"""
Locates a named object literal inside a larger manifest document.

The section is found by looking for the marker key followed by a colon and an
opening brace, then counting nested braces over the token stream until the
depth returns to zero.
"""

import dataclasses
from typing import List, Optional

from upmpack.dependency_section.tokenizer import Token, TokenKind, tokenize
from upmpack.upmpack_exceptions import SectionNotFound, TokenizeError

DEFAULT_SECTION_MARKER = "dependencies"


@dataclasses.dataclass(frozen=True)
class Section:
    """
    A balanced brace-delimited span of a document.

    ``start`` is the offset of the opening brace and ``end`` is the offset just
    past the matching closing brace, so ``document[start:end] == raw_text``.
    ``key_indent`` is the leading whitespace of the line holding the marker key.
    """

    start: int
    end: int
    raw_text: str
    key_indent: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end:
            raise ValueError(f"Invalid section span: [{self.start}, {self.end})")


def locate_section(document: str, marker: str = DEFAULT_SECTION_MARKER) -> Section:
    """
    Find the object literal introduced by ``marker`` in ``document``.

    Args:
        document: The full manifest text
        marker: The key naming the section (without quotes)

    Returns:
        The located Section

    Raises:
        SectionNotFound: If the marker is absent or its braces never balance
    """
    try:
        tokens = tokenize(document)
    except TokenizeError as e:
        raise SectionNotFound(marker, str(e)) from e

    open_index = _find_marker(tokens, marker)
    if open_index is None:
        raise SectionNotFound(marker)

    depth = 0
    for token in tokens[open_index:]:
        if token.kind == TokenKind.LBRACE:
            depth += 1
        elif token.kind == TokenKind.RBRACE:
            depth -= 1
            if depth == 0:
                start = tokens[open_index].start
                return Section(
                    start=start,
                    end=token.end,
                    raw_text=document[start:token.end],
                    key_indent=_line_indent(document, tokens[open_index - 2].start),
                )

    raise SectionNotFound(marker, "unbalanced braces")


def find_section(document: str, marker: str = DEFAULT_SECTION_MARKER) -> Optional[Section]:
    """Like locate_section, but returns None instead of raising."""
    try:
        return locate_section(document, marker)
    except SectionNotFound:
        return None


def _find_marker(tokens: List[Token], marker: str) -> Optional[int]:
    """Index of the opening brace following the first ``"marker":`` key."""
    for i in range(len(tokens) - 2):
        key, colon, brace = tokens[i], tokens[i + 1], tokens[i + 2]
        if (
            key.kind == TokenKind.STRING
            and colon.kind == TokenKind.COLON
            and brace.kind == TokenKind.LBRACE
            and key.string_value() == marker
        ):
            return i + 2
    return None


def _line_indent(document: str, offset: int) -> str:
    line_start = document.rfind("\n", 0, offset) + 1
    prefix = document[line_start:offset]
    return prefix[: len(prefix) - len(prefix.lstrip())]
