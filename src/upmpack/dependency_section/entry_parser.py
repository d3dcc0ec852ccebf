"""
Recursive-descent parser turning a dependency section into an ordered mapping.

Grammar accepted (a forgiving subset of a JSON object):

    object := "{" [member ("," member)*] [","] "}"
    member := STRING ":" value
    value  := STRING | LITERAL | object | array

Members that do not fit the grammar are skipped and reported, so a partially
hand-edited section still yields every entry that can be recovered.
"""

import dataclasses
from typing import Dict, List, Optional, Tuple

from upmpack.dependency_section.tokenizer import Token, TokenKind, tokenize
from upmpack.upmpack_exceptions import MalformedLine, UpmpackException


class RawValue(str):
    """
    An entry value that is not a JSON string (number, literal, object or array).

    It holds the exact source text and is written back verbatim.
    """

    pass


EntryMap = Dict[str, str]

_OPENERS = (TokenKind.LBRACE, TokenKind.LBRACKET)
_CLOSERS = (TokenKind.RBRACE, TokenKind.RBRACKET)


@dataclasses.dataclass
class ParseResult:
    """Entries parsed from a section, plus the members that had to be skipped."""

    entries: EntryMap
    skipped: List[MalformedLine] = dataclasses.field(default_factory=list)


class EntryParser:
    """
    Parses the raw text of one section. Instances are single-use.
    """

    def __init__(self, raw_text: str):
        self.text = raw_text
        self.tokens = tokenize(raw_text)
        self.pos = 0

    def parse(self) -> ParseResult:
        """
        Parse the section into an EntryMap.

        A later duplicate name overwrites the earlier value and takes the
        later position.

        Raises:
            UpmpackException: If the text does not start with an opening brace
        """
        if not self.tokens or self.tokens[0].kind != TokenKind.LBRACE:
            raise UpmpackException("Section text must start with '{'")
        self.pos = 1

        entries: EntryMap = {}
        skipped: List[MalformedLine] = []
        while True:
            token = self._peek()
            if token is None or token.kind == TokenKind.RBRACE:
                break
            if token.kind == TokenKind.COMMA:
                self.pos += 1
                continue

            try:
                name, value = self._parse_member()
            except MalformedLine as e:
                skipped.append(e)
                self._recover()
                continue

            entries.pop(name, None)
            entries[name] = value

        return ParseResult(entries=entries, skipped=skipped)

    def _parse_member(self) -> Tuple[str, str]:
        key = self._next()
        if key.kind != TokenKind.STRING:
            raise self._malformed(key, "expected a quoted name")

        colon = self._peek()
        if colon is None or colon.kind != TokenKind.COLON:
            raise self._malformed(key, "missing colon")
        self.pos += 1

        value = self._parse_value(key)

        name = key.string_value()
        if not name.strip():
            raise self._malformed(key, "empty name")
        if not value.strip():
            raise self._malformed(key, "empty value")
        return name, value

    def _parse_value(self, key: Token) -> str:
        token = self._peek()
        if token is None or token.kind in (TokenKind.COMMA, TokenKind.COLON) or token.kind in _CLOSERS:
            raise self._malformed(key, "missing value")

        if token.kind == TokenKind.STRING:
            self.pos += 1
            return token.string_value()
        if token.kind == TokenKind.LITERAL:
            self.pos += 1
            return RawValue(token.text)

        start, end = self._parse_composite()
        return RawValue(self.text[start:end])

    def _parse_composite(self) -> Tuple[int, int]:
        """Consume a nested object or array; returns its [start, end) span."""
        opener = self._next()
        closer = TokenKind.RBRACE if opener.kind == TokenKind.LBRACE else TokenKind.RBRACKET
        while True:
            token = self._peek()
            if token is None:
                raise self._malformed(opener, "unterminated value")
            if token.kind == closer:
                self.pos += 1
                return opener.start, token.end
            if token.kind in _OPENERS:
                self._parse_composite()
            else:
                self.pos += 1

    def _recover(self) -> None:
        """Skip to the next top-level comma or to the closing brace of the section."""
        depth = 0
        while True:
            token = self._peek()
            if token is None:
                return
            if depth == 0 and token.kind in (TokenKind.COMMA, TokenKind.RBRACE):
                return
            if token.kind in _OPENERS:
                depth += 1
            elif token.kind in _CLOSERS and depth > 0:
                depth -= 1
            self.pos += 1

    def _peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _next(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _malformed(self, token: Token, reason: str) -> MalformedLine:
        line_start = self.text.rfind("\n", 0, token.start) + 1
        line_end = self.text.find("\n", token.start)
        if line_end == -1:
            line_end = len(self.text)
        return MalformedLine(
            line=self.text.count("\n", 0, token.start) + 1,
            text=self.text[line_start:line_end].strip(),
            reason=reason,
        )


def parse_entries(raw_text: str) -> ParseResult:
    """Parse section text into a ParseResult."""
    return EntryParser(raw_text).parse()
