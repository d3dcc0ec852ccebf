"""
A minimal, string-literal aware tokenizer for JSON-like manifest text.

Only the structural characters of the document matter to the dependency
section engine. Quoted strings are scanned as a unit, honouring backslash
escapes, so that braces, colons and commas inside them never count as
structure. Anything else that is not whitespace becomes a LITERAL token.
"""

import dataclasses
import json
from enum import Enum
from typing import List

from upmpack.upmpack_exceptions import TokenizeError


class TokenKind(str, Enum):
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    STRING = "string"
    LITERAL = "literal"


_PUNCTUATION = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
}

_LITERAL_STOP = set(_PUNCTUATION) | {'"'}


@dataclasses.dataclass(frozen=True)
class Token:
    """
    A token and its [start, end) offsets in the source text.
    """

    kind: TokenKind
    text: str
    start: int
    end: int

    def string_value(self) -> str:
        """Decode a STRING token into its Python value."""
        try:
            # Hand-edited manifests may hold raw control characters such as tabs.
            return json.loads(self.text, strict=False)
        except ValueError:
            # Invalid escape sequences; fall back to the raw contents.
            return self.text[1:-1]


def tokenize(text: str) -> List[Token]:
    """
    Split text into structural tokens.

    Args:
        text: The document text

    Returns:
        Tokens in document order

    Raises:
        TokenizeError: If a quoted string is not terminated
    """
    tokens: List[Token] = []
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[ch], ch, i, i + 1))
            i += 1
        elif ch == '"':
            end = _scan_string(text, i)
            tokens.append(Token(TokenKind.STRING, text[i:end], i, end))
            i = end
        else:
            start = i
            while i < length and not text[i].isspace() and text[i] not in _LITERAL_STOP:
                i += 1
            tokens.append(Token(TokenKind.LITERAL, text[start:i], start, i))
    return tokens


def _scan_string(text: str, start: int) -> int:
    """Return the offset just past the closing quote of the string at start."""
    i = start + 1
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    raise TokenizeError("Unterminated string", start)
