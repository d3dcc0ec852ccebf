"""
Pydantic data models for package catalogs.

A catalog is an ordered list of known packages. Each entry names a package,
the value written into the manifest when the package is selected (usually a
git URL), and a human readable description. The catalog order is significant:
the serializer emits catalog entries in exactly this order.

Structure of a catalog JSON file:
{
  "_description": "...",
  "packages": [
    {"name": "com.example.pkg", "gitUrl": "https://...", "description": "..."},
    ...
  ]
}
"""

import json
import pathlib
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from upmpack.upmpack_exceptions import CatalogError

DEFAULT_CATALOG_PATH = pathlib.Path(__file__).parent / "default_catalog.json"


class CatalogEntry(BaseModel):
    """
    A single known package.

    The manifest value is stored under ``value`` and may be populated through
    its ``gitUrl`` alias when loaded from JSON.
    """

    name: str = Field(..., min_length=1, description="Package name used as the manifest key")
    value: str = Field(..., min_length=1, alias="gitUrl", description="Value written to the manifest")
    description: str = Field("", description="Human readable description")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Catalog(BaseModel):
    """
    An ordered, immutable collection of CatalogEntry records keyed by name.
    """

    description: Optional[str] = Field(None, alias="_description")
    entries: List[CatalogEntry] = Field(default_factory=list, alias="packages")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "Catalog":
        seen = set()
        for entry in self.entries:
            if entry.name in seen:
                raise ValueError(f"Duplicate catalog entry: {entry.name}")
            seen.add(entry.name)
        return self

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self.entries)

    def names(self) -> List[str]:
        """Catalog names in declared order."""
        return [entry.name for entry in self.entries]

    def get(self, name: str) -> Optional[CatalogEntry]:
        """
        Get a catalog entry by name.

        Args:
            name: The package name

        Returns:
            CatalogEntry or None if the name is not part of the catalog
        """
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Catalog":
        """
        Create a Catalog from a dictionary (loaded from JSON or TOML).

        Raises:
            CatalogError: If the data does not describe a valid catalog
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog: {e}") from e

    @classmethod
    def from_entries(cls, entries: List[Dict[str, Any]]) -> "Catalog":
        """Create a Catalog from a bare list of entry dictionaries."""
        return cls.from_dict({"packages": entries})

    @classmethod
    def from_json_file(cls, path: Union[str, pathlib.Path]) -> "Catalog":
        """
        Load a catalog from a JSON file.

        Raises:
            CatalogError: If the file cannot be read or is not a valid catalog
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Failed to load catalog from {path}: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the JSON file structure, using aliases."""
        return self.model_dump(by_alias=True, exclude_none=True)


def load_default_catalog() -> Catalog:
    """Load the catalog bundled with upmpack."""
    return Catalog.from_json_file(DEFAULT_CATALOG_PATH)
