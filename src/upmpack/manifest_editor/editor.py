"""
Manifest editor implementation.

Ties the dependency section engine to the file system: reads the manifest,
computes the updated document for a selection, and writes it back atomically.
"""

import dataclasses
import logging
import os
import pathlib
import shutil
import tempfile
from typing import Iterable, List, Optional, Union

from upmpack.catalog_models import Catalog
from upmpack.dependency_section import (
    DEFAULT_SECTION_MARKER,
    CatalogMerger,
    EntryMap,
    SectionSerializer,
    find_section,
    locate_section,
    parse_entries,
    splice,
)
from upmpack.upmpack_exceptions import (
    MalformedLine,
    SectionNotFound,
    UpmpackException,
    WriteFailure,
)
from upmpack.upmpack_logger import UpmpackLogger

DEFAULT_MANIFEST_TEMPLATE = '{\n  "dependencies": {\n  }\n}\n'

PathLike = Union[str, pathlib.Path]


@dataclasses.dataclass
class EditResult:
    """
    Outcome of computing an edit.

    Captures the new document along with the merged entries and any entries
    that were skipped while parsing the original section.
    """

    document: str
    entries: EntryMap
    skipped: List[MalformedLine]
    changed: bool

    def __repr__(self) -> str:
        return (
            f"EditResult(entries={len(self.entries)}, "
            f"skipped={len(self.skipped)}, changed={self.changed})"
        )


class ManifestEditor:
    """
    Edits the dependency section of a manifest.

    The computation is a pure function of the document, the catalog and the
    selection; the editor itself holds no state between calls.
    """

    def __init__(
        self,
        catalog: Catalog,
        logger: UpmpackLogger,
        section_marker: str = DEFAULT_SECTION_MARKER,
        indent: str = "  ",
        create_missing_manifest: bool = True,
    ):
        """
        Initialize the manifest editor.

        Args:
            catalog: Known packages the selection refers to
            logger: Logger for progress and error messages
            section_marker: Key introducing the dependency section
            indent: Indentation of entries relative to the section key
            create_missing_manifest: Whether apply_selection bootstraps a
                missing manifest from DEFAULT_MANIFEST_TEMPLATE
        """
        self.catalog = catalog
        self.logger = logger
        self.section_marker = section_marker
        self.create_missing_manifest = create_missing_manifest
        self.merger = CatalogMerger(catalog, logger)
        self.serializer = SectionSerializer(catalog, indent=indent)

    def compute(self, document: str, selection: Iterable[str]) -> EditResult:
        """
        Compute the updated document for a selection.

        Raises:
            SectionNotFound: If the dependency section cannot be located
        """
        section = locate_section(document, self.section_marker)
        parsed = parse_entries(section.raw_text)
        for skipped in parsed.skipped:
            self.logger.log(f"Skipping entry: {skipped.message}", logging.WARNING)

        merged = self.merger.merge(parsed.entries, selection)
        newline = "\r\n" if "\r\n" in document else "\n"
        new_section = self.serializer.serialize(
            merged, key_indent=section.key_indent, newline=newline
        )
        new_document = splice(document, section, new_section, self.section_marker)

        return EditResult(
            document=new_document,
            entries=merged,
            skipped=parsed.skipped,
            changed=new_document != document,
        )

    def selection_from_document(self, document: str) -> List[str]:
        """Catalog names present in the document's dependency section."""
        section = find_section(document, self.section_marker)
        if section is None:
            self.logger.log(
                f"No '{self.section_marker}' section found, starting with an empty selection",
                logging.INFO,
            )
            return []
        return self.merger.selected_names(parse_entries(section.raw_text).entries)

    def read_document(self, path: PathLike) -> Optional[str]:
        """
        Read the manifest text, or None if the file does not exist.

        Raises:
            UpmpackException: If the file is not valid UTF-8

        The text is read without newline translation so it can be written back
        byte for byte.
        """
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise UpmpackException(f"Manifest {path} is not valid UTF-8: {e}") from e

    def read_selection(self, path: PathLike) -> List[str]:
        """
        Read the catalog names currently present in the manifest at path.

        A missing manifest yields an empty selection.
        """
        document = self.read_document(path)
        if document is None:
            self.logger.log(
                f"Manifest {path} not found, starting with an empty selection",
                logging.INFO,
            )
            return []
        return self.selection_from_document(document)

    def apply_selection(self, path: PathLike, selection: Iterable[str]) -> EditResult:
        """
        Apply a selection to the manifest at path and write the result.

        The new document is fully built in memory before anything is written,
        and the write replaces the file atomically.

        Raises:
            SectionNotFound: If the manifest has no dependency section (the file
                is left untouched)
            WriteFailure: If the manifest could not be written
        """
        selection = list(selection)
        document = self.read_document(path)
        if document is None:
            if not self.create_missing_manifest:
                raise SectionNotFound(self.section_marker, f"manifest {path} does not exist")
            self.logger.log(f"Manifest {path} not found, creating it", logging.INFO)
            document = DEFAULT_MANIFEST_TEMPLATE.replace('"dependencies"', f'"{self.section_marker}"')

        result = self.compute(document, selection)
        if not result.changed and os.path.exists(path):
            self.logger.log(f"Manifest {path} is already up to date", logging.INFO)
            return result

        self.write_document(path, result.document)
        self.logger.log(
            f"Updated {path} with {len(self.merger.selected_names(result.entries))} catalog packages "
            f"and {len(result.entries)} dependencies in total",
            logging.INFO,
        )
        return result

    def write_document(self, path: PathLike, document: str) -> None:
        """
        Write document to path through a temporary file next to the real file.

        Symlinks are followed so the link itself stays in place, and the
        permission bits of an existing file are carried over.

        Raises:
            WriteFailure: If any step fails; the original file is unaffected
        """
        path = pathlib.Path(path)
        target = path.resolve()
        tmp_path = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(document)
                f.flush()
                os.fsync(f.fileno())
            if target.exists():
                shutil.copymode(target, tmp_path)
            else:
                os.chmod(tmp_path, 0o666 & ~_current_umask())
            os.replace(tmp_path, target)
            tmp_path = None
        except OSError as e:
            self.logger.log(
                f"Failed to write {path}: {e}",
                logging.ERROR,
                sanitized_error_message=f"Failed to write {path.name}",
            )
            raise WriteFailure(str(path), e) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask
