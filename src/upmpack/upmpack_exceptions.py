"""
This module contains the exceptions raised by the upmpack framework.
"""

from typing import Optional


class UpmpackException(Exception):
    """
    Base exception for all upmpack errors.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TokenizeError(UpmpackException):
    """Raised when a manifest cannot be split into tokens (e.g. an unterminated string)."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class SectionNotFound(UpmpackException):
    """
    Raised when the dependency section cannot be located in a manifest.

    Either the section marker is absent, or its opening brace is never balanced
    by a closing brace before the end of the document.
    """

    def __init__(self, marker: str, reason: str = "marker not found"):
        super().__init__(f"Section '{marker}' not found: {reason}")
        self.marker = marker
        self.reason = reason


class MalformedLine(UpmpackException):
    """
    An individual entry of a section that could not be parsed.

    The entry parser raises this internally and recovers from it by skipping
    the entry; skipped entries are reported back to the caller.
    """

    def __init__(self, line: int, text: str, reason: str):
        super().__init__(f"Malformed entry on line {line} ({reason}): {text}")
        self.line = line
        self.text = text
        self.reason = reason


class WriteFailure(UpmpackException):
    """Raised when the updated manifest could not be written to disk."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to write {path}{detail}")
        self.path = path
        self.cause = cause


class ProcessFailure(UpmpackException):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: str, returncode: Optional[int], stderr: str):
        super().__init__(
            f"Command '{command}' failed with exit code {returncode}: {stderr.strip()}"
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class CatalogError(UpmpackException):
    """Raised when a package catalog is invalid."""

    pass
