"""
Tests for UpmpackConfig.
"""

import json
import os

import pytest

from upmpack.upmpack_config import CONFIG_FILE_NAME, UpmpackConfig
from upmpack.upmpack_exceptions import UpmpackException


class TestUpmpackConfig:
    """Tests for loading configuration."""

    def test_defaults(self):
        config = UpmpackConfig()
        assert config.manifest_path == os.path.join("Packages", "manifest.json")
        assert config.section_marker == "dependencies"
        assert config.create_missing_manifest is True
        assert len(config.load_catalog().entries) == 11

    def test_from_dict(self):
        config = UpmpackConfig.from_dict(
            {"manifest_path": "manifest.json", "section_marker": "deps", "indent": "\t"}
        )
        assert config.manifest_path == "manifest.json"
        assert config.section_marker == "deps"
        assert config.indent == "\t"

    @pytest.mark.parametrize(
        "data",
        [
            {"unknown_key": 1},
            {"manifest_path": 3},
            {"create_missing_manifest": "yes"},
            {"catalog": "not a list"},
            {"section_marker": ""},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(UpmpackException):
            UpmpackConfig.from_dict(data)

    def test_from_toml_file_with_inline_catalog(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text(
            '[upmpack]\n'
            'manifest_path = "manifest.json"\n'
            'create_missing_manifest = false\n'
            '\n'
            '[[upmpack.catalog]]\n'
            'name = "a.pkg"\n'
            'value = "2.0"\n'
            'description = "Package A"\n',
            encoding="utf-8",
        )
        config = UpmpackConfig.from_toml_file(str(path))
        assert config.create_missing_manifest is False
        catalog = config.load_catalog(str(tmp_path))
        assert catalog.names() == ["a.pkg"]
        assert catalog.get("a.pkg").description == "Package A"

    def test_catalog_path_is_relative_to_base_dir(self, tmp_path):
        (tmp_path / "catalog.json").write_text(
            json.dumps({"packages": [{"name": "x.pkg", "gitUrl": "1"}]}), encoding="utf-8"
        )
        config = UpmpackConfig.from_dict({"catalog_path": "catalog.json"})
        assert config.load_catalog(str(tmp_path)).names() == ["x.pkg"]

    def test_from_workspace_without_file(self, tmp_path):
        assert UpmpackConfig.from_workspace(str(tmp_path)) == UpmpackConfig()

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text("[upmpack\n", encoding="utf-8")
        with pytest.raises(UpmpackException):
            UpmpackConfig.from_toml_file(str(path))

    def test_resolve_manifest_path(self, tmp_path):
        config = UpmpackConfig.from_dict({"manifest_path": "manifest.json"})
        assert config.resolve_manifest_path(str(tmp_path)) == os.path.join(
            str(tmp_path), "manifest.json"
        )
