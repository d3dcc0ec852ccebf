"""
Configuration parameters for upmpack.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from upmpack.catalog_models import Catalog, load_default_catalog
from upmpack.dependency_section.locator import DEFAULT_SECTION_MARKER
from upmpack.upmpack_exceptions import UpmpackException

CONFIG_FILE_NAME = "upmpack.toml"

UPMPACK_TOML_SCHEMA = """
# upmpack configuration

[upmpack]
# Manifest to edit, relative to the workspace root
manifest_path = "Packages/manifest.json"

# Key that introduces the dependency object in the manifest
section_marker = "dependencies"

# Optional JSON catalog replacing the bundled one
# catalog_path = "tools/catalog.json"

# Optional path to the git executable (defaults to git on PATH)
# git_executable = "/usr/bin/git"

# Create the manifest from a template when it does not exist
create_missing_manifest = true

# Indentation of entries relative to the section key
indent = "  "

# Inline catalog entries replace the bundled catalog as well
# [[upmpack.catalog]]
# name = "com.example.package"
# value = "https://example.com/package.git"
# description = "Example package"
"""

_STRING_KEYS = ("manifest_path", "section_marker", "catalog_path", "git_executable", "indent")


@dataclass
class UpmpackConfig:
    """
    Configuration parameters
    """

    manifest_path: str = os.path.join("Packages", "manifest.json")
    section_marker: str = DEFAULT_SECTION_MARKER
    catalog_path: Optional[str] = None
    git_executable: Optional[str] = None
    create_missing_manifest: bool = True
    indent: str = "  "
    catalog_entries: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "UpmpackConfig":
        """
        Create an UpmpackConfig from the contents of the [upmpack] table.

        Raises:
            UpmpackException: If the configuration is invalid
        """
        unknown = set(d) - {f for f in cls.__dataclass_fields__ if f != "catalog_entries"} - {"catalog"}
        if unknown:
            raise UpmpackException(f"Unknown configuration keys: {sorted(unknown)}")

        for key in _STRING_KEYS:
            if key in d and not isinstance(d[key], str):
                raise UpmpackException(f"'{key}' must be a string")
        if "create_missing_manifest" in d and not isinstance(d["create_missing_manifest"], bool):
            raise UpmpackException("'create_missing_manifest' must be a boolean")

        catalog_entries = d.get("catalog", [])
        if not isinstance(catalog_entries, list) or not all(
            isinstance(entry, dict) for entry in catalog_entries
        ):
            raise UpmpackException("'catalog' must be an array of tables")

        if not d.get("section_marker", DEFAULT_SECTION_MARKER):
            raise UpmpackException("'section_marker' must not be empty")

        values = {k: v for k, v in d.items() if k != "catalog"}
        return cls(catalog_entries=list(catalog_entries), **values)

    @classmethod
    def from_toml_file(cls, path: str) -> "UpmpackConfig":
        """
        Load configuration from a TOML file holding an [upmpack] table.

        Raises:
            UpmpackException: If the file cannot be parsed or is invalid
        """
        try:
            with open(path, "rb") as f:
                toml_dict = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise UpmpackException(f"Failed to load {path}: {e}") from e

        section = toml_dict.get("upmpack", {})
        if not isinstance(section, dict):
            raise UpmpackException("'upmpack' must be a table")
        return cls.from_dict(section)

    @classmethod
    def from_workspace(cls, workspace_root: str) -> "UpmpackConfig":
        """Load upmpack.toml from the workspace root, or use defaults when absent."""
        config_path = os.path.join(workspace_root, CONFIG_FILE_NAME)
        if not os.path.exists(config_path):
            return cls()
        return cls.from_toml_file(config_path)

    def load_catalog(self, base_dir: str = ".") -> Catalog:
        """
        Build the catalog this configuration describes.

        Inline entries win over catalog_path, which wins over the bundled catalog.
        """
        if self.catalog_entries:
            return Catalog.from_entries(self.catalog_entries)
        if self.catalog_path:
            return Catalog.from_json_file(os.path.join(base_dir, self.catalog_path))
        return load_default_catalog()

    def resolve_manifest_path(self, base_dir: str) -> str:
        return os.path.join(base_dir, self.manifest_path)
