"""
Tests for the MCP runner tool logic.
"""

import pytest
from fastmcp import FastMCP

from upmpack.mcp.mcp_runner import MCPRunner, MCPToolError
from upmpack.upmpack_config import CONFIG_FILE_NAME

CONFIG = """
[upmpack]
manifest_path = "manifest.json"

[[upmpack.catalog]]
name = "a.pkg"
value = "2.0"
description = "Package A"

[[upmpack.catalog]]
name = "b.pkg"
value = "3.0"
description = "Package B"
"""


class TestMCPRunner:
    """Tests for MCPRunner."""

    @pytest.fixture
    def workspace(self, tmp_path, unity_manifest):
        (tmp_path / CONFIG_FILE_NAME).write_text(CONFIG, encoding="utf-8")
        (tmp_path / "manifest.json").write_text(unity_manifest, encoding="utf-8")
        return tmp_path

    @pytest.fixture
    def runner(self, workspace):
        return MCPRunner(str(workspace))

    def test_loads_configuration(self, runner):
        assert runner.config_loaded
        assert runner.catalog.names() == ["a.pkg", "b.pkg"]

    def test_list_catalog(self, runner):
        result = runner.list_catalog()
        assert result["status"] == "success"
        assert [(p["name"], p["selected"]) for p in result["packages"]] == [
            ("a.pkg", True),
            ("b.pkg", False),
        ]

    def test_apply_and_get_selection(self, runner, workspace):
        result = runner.apply_selection(["b.pkg"])
        assert result["changed"]
        assert result["dependencies"] == {"b.pkg": "3.0", "com.unity.ugui": "1.0.0"}
        assert runner.get_selection()["selected"] == ["b.pkg"]
        assert '"b.pkg": "3.0"' in (workspace / "manifest.json").read_text(encoding="utf-8")

    def test_preview_does_not_write(self, runner, workspace, unity_manifest):
        result = runner.preview_selection([])
        assert result["dependencies"] == {"com.unity.ugui": "1.0.0"}
        assert (workspace / "manifest.json").read_text(encoding="utf-8") == unity_manifest

    def test_preview_without_manifest(self, runner, workspace):
        (workspace / "manifest.json").unlink()
        with pytest.raises(MCPToolError):
            runner.preview_selection(["a.pkg"])

    def test_apply_without_section(self, runner, workspace):
        (workspace / "manifest.json").write_text('{"name": "demo"}', encoding="utf-8")
        with pytest.raises(MCPToolError):
            runner.apply_selection(["a.pkg"])

    def test_invalid_configuration_keeps_defaults(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("[upmpack]\nbogus = 1\n", encoding="utf-8")
        runner = MCPRunner(str(tmp_path))
        assert not runner.config_loaded
        assert len(runner.catalog.entries) == 11

    def test_configuration_created_later(self, tmp_path, unity_manifest):
        runner = MCPRunner(str(tmp_path))
        assert not runner.config_loaded
        (tmp_path / CONFIG_FILE_NAME).write_text(CONFIG, encoding="utf-8")
        (tmp_path / "manifest.json").write_text(unity_manifest, encoding="utf-8")
        assert runner.get_selection()["selected"] == ["a.pkg"]
        assert runner.config_loaded

    def test_create_mcp_server(self, runner):
        assert isinstance(runner.create_mcp_server(), FastMCP)

    def test_configuration_help(self, runner):
        assert "[upmpack]" in runner.get_configuration_help()

    def test_undecodable_manifest_is_a_tool_error(self, runner, workspace):
        (workspace / "manifest.json").write_bytes(b'{"dependencies": {"x": "\xff"}}')
        with pytest.raises(MCPToolError):
            runner.apply_selection(["a.pkg"])
        with pytest.raises(MCPToolError):
            runner.preview_selection(["a.pkg"])
        with pytest.raises(MCPToolError):
            runner.get_selection()
        with pytest.raises(MCPToolError):
            runner.list_catalog()
