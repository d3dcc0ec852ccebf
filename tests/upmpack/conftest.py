"""
Shared fixtures for upmpack tests.
"""

import pytest

from upmpack.catalog_models import Catalog
from upmpack.manifest_editor import ManifestEditor
from upmpack.upmpack_logger import UpmpackLogger

UNITY_MANIFEST = """{
  "dependencies": {
    "com.unity.ugui": "1.0.0",
    "a.pkg": "1.0"
  },
  "scopedRegistries": [
    {
      "name": "package.openupm.com",
      "url": "https://package.openupm.com",
      "scopes": ["com.example"]
    }
  ],
  "testables": ["com.unity.ugui"]
}
"""


@pytest.fixture
def small_catalog():
    """Catalog with two packages, a.pkg declared before b.pkg."""
    return Catalog.from_entries(
        [
            {"name": "a.pkg", "value": "2.0", "description": "Package A"},
            {"name": "b.pkg", "value": "3.0", "description": "Package B"},
        ]
    )


@pytest.fixture
def logger():
    return UpmpackLogger()


@pytest.fixture
def editor(small_catalog, logger):
    return ManifestEditor(small_catalog, logger)


@pytest.fixture
def unity_manifest():
    return UNITY_MANIFEST


@pytest.fixture
def manifest_file(tmp_path, unity_manifest):
    """A manifest.json on disk holding UNITY_MANIFEST."""
    path = tmp_path / "Packages" / "manifest.json"
    path.parent.mkdir()
    path.write_text(unity_manifest, encoding="utf-8")
    return path
