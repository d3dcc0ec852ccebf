"""
MCP (Model Context Protocol) runner for upmpack.

This module exposes manifest editing and git operations as MCP tools using the
fastmcp framework. It uses an optional `upmpack.toml` file in the workspace root
to decide which manifest to edit and which catalog to offer.

Key points:
1. Configuration is loaded once at startup and reloaded if it appears later
2. Every tool returns a JSON document with a "status" field
3. Tool logic lives in plain methods so it can be used without a server
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from fastmcp import FastMCP

from upmpack.catalog_models import Catalog
from upmpack.git_commands import GitCommandRunner
from upmpack.manifest_editor import ManifestEditor
from upmpack.upmpack_config import CONFIG_FILE_NAME, UPMPACK_TOML_SCHEMA, UpmpackConfig
from upmpack.upmpack_exceptions import UpmpackException
from upmpack.upmpack_logger import UpmpackLogger


class MCPToolError(Exception):
    """Base exception for MCP tool errors."""

    pass


class MCPRunner:
    """
    MCP runner that exposes the manifest editor as MCP tools using fastmcp.

    Example usage:
    ```python
    runner = MCPRunner("/path/to/unity/project")
    server = runner.create_mcp_server()
    server.run()
    ```
    """

    def __init__(self, workspace_root: Optional[str] = None):
        """
        Initialize the MCP runner.

        Args:
            workspace_root: Root directory of the project. If None, uses current directory.
        """
        self.workspace_root = workspace_root or os.getcwd()
        self.logger = UpmpackLogger()
        self.config = UpmpackConfig()
        self.config_loaded = False
        self.catalog: Catalog = self.config.load_catalog(self.workspace_root)
        self.editor = self._create_editor()
        self.git = GitCommandRunner(self.logger, self.config.git_executable)

        self._try_load_config()

    def _try_load_config(self) -> bool:
        """
        Attempt to load upmpack.toml, keeping the defaults if it is missing or invalid.

        Returns:
            True if a configuration file was loaded
        """
        config_path = os.path.join(self.workspace_root, CONFIG_FILE_NAME)
        if self.config_loaded or not os.path.exists(config_path):
            return self.config_loaded

        try:
            config = UpmpackConfig.from_toml_file(config_path)
            catalog = config.load_catalog(self.workspace_root)
        except UpmpackException as e:
            self.logger.log(f"Failed to load {config_path}: {e}", logging.ERROR)
            return False

        self.config = config
        self.catalog = catalog
        self.editor = self._create_editor()
        self.git = GitCommandRunner(self.logger, config.git_executable)
        self.config_loaded = True
        self.logger.log(
            f"Loaded configuration with {len(catalog.entries)} catalog packages",
            logging.INFO,
        )
        return True

    def _create_editor(self) -> ManifestEditor:
        return ManifestEditor(
            self.catalog,
            self.logger,
            section_marker=self.config.section_marker,
            indent=self.config.indent,
            create_missing_manifest=self.config.create_missing_manifest,
        )

    @property
    def manifest_path(self) -> str:
        return self.config.resolve_manifest_path(self.workspace_root)

    def get_configuration_help(self) -> str:
        return (
            "upmpack can be configured with an 'upmpack.toml' file in the workspace root "
            f"using the following schema:\n\n{UPMPACK_TOML_SCHEMA}"
        )

    def _resolve_dir(self, working_dir: Optional[str]) -> str:
        if not working_dir:
            return self.workspace_root
        return os.path.join(self.workspace_root, working_dir)

    def list_catalog(self) -> Dict[str, Any]:
        self._try_load_config()
        try:
            selected = set(self.editor.read_selection(self.manifest_path))
        except UpmpackException as e:
            raise MCPToolError(f"Failed to read manifest: {e}") from e
        return {
            "status": "success",
            "packages": [
                {
                    "name": entry.name,
                    "value": entry.value,
                    "description": entry.description,
                    "selected": entry.name in selected,
                }
                for entry in self.catalog.entries
            ],
        }

    def get_selection(self) -> Dict[str, Any]:
        self._try_load_config()
        try:
            selected = self.editor.read_selection(self.manifest_path)
        except UpmpackException as e:
            raise MCPToolError(f"Failed to read manifest: {e}") from e
        return {
            "status": "success",
            "manifest": self.manifest_path,
            "selected": selected,
        }

    def preview_selection(self, selected: List[str]) -> Dict[str, Any]:
        self._try_load_config()
        try:
            document = self.editor.read_document(self.manifest_path)
            if document is None:
                raise MCPToolError(f"Manifest not found: {self.manifest_path}")
            result = self.editor.compute(document, selected)
        except UpmpackException as e:
            raise MCPToolError(f"Failed to preview selection: {e}") from e
        return {
            "status": "success",
            "changed": result.changed,
            "dependencies": result.entries,
            "skipped": [skipped.message for skipped in result.skipped],
            "document": result.document,
        }

    def apply_selection(self, selected: List[str]) -> Dict[str, Any]:
        self._try_load_config()
        try:
            result = self.editor.apply_selection(self.manifest_path, selected)
        except UpmpackException as e:
            raise MCPToolError(f"Failed to apply selection: {e}") from e
        return {
            "status": "success",
            "changed": result.changed,
            "dependencies": result.entries,
            "skipped": [skipped.message for skipped in result.skipped],
        }

    def git_version(self) -> Dict[str, Any]:
        self._try_load_config()
        try:
            return {"status": "success", "version": self.git.version(self.workspace_root)}
        except UpmpackException as e:
            raise MCPToolError(f"Failed to get git version: {e}") from e

    def git_pull(self, working_dir: Optional[str] = None) -> Dict[str, Any]:
        self._try_load_config()
        try:
            result = self.git.pull(self._resolve_dir(working_dir))
        except UpmpackException as e:
            raise MCPToolError(f"Failed to pull: {e}") from e
        return {"status": "success", "output": result.stdout}

    def git_clone(self, url: str, working_dir: Optional[str] = None) -> Dict[str, Any]:
        self._try_load_config()
        try:
            result = self.git.clone(url, self._resolve_dir(working_dir))
        except UpmpackException as e:
            raise MCPToolError(f"Failed to clone {url}: {e}") from e
        return {"status": "success", "output": result.stdout}

    def create_mcp_server(self) -> FastMCP:
        """
        Create and configure a fastmcp server instance with the upmpack tools.

        Returns:
            Configured FastMCP server ready to serve MCP tools
        """
        server = FastMCP("upmpack-mcp")
        self._register_tools(server)
        return server

    def _register_tools(self, server: FastMCP) -> None:
        """
        Register all upmpack tools with the fastmcp server.

        Args:
            server: The FastMCP server instance
        """

        @server.tool()
        def catalog_list() -> str:
            """List the catalog packages and whether each is present in the manifest."""
            return json.dumps(self.list_catalog())

        @server.tool()
        def manifest_get_selection() -> str:
            """Get the catalog packages currently present in the manifest."""
            return json.dumps(self.get_selection())

        @server.tool()
        def manifest_preview(selected: List[str]) -> str:
            """Show the manifest that applying a selection would produce, without writing it.

            Args:
                selected: Catalog package names that should be present
            """
            return json.dumps(self.preview_selection(selected))

        @server.tool()
        def manifest_apply_selection(selected: List[str]) -> str:
            """Write a selection of catalog packages into the manifest.

            Catalog packages not in the selection are removed; other dependencies are kept.

            Args:
                selected: Catalog package names that should be present
            """
            return json.dumps(self.apply_selection(selected))

        @server.tool()
        def git_version() -> str:
            """Get the installed git version."""
            return json.dumps(self.git_version())

        @server.tool()
        def git_pull(working_dir: Optional[str] = None) -> str:
            """Run git pull.

            Args:
                working_dir: Optional directory relative to the workspace root
            """
            return json.dumps(self.git_pull(working_dir))

        @server.tool()
        def git_clone(url: str, working_dir: Optional[str] = None) -> str:
            """Clone a repository.

            Args:
                url: Repository URL
                working_dir: Optional directory relative to the workspace root
            """
            return json.dumps(self.git_clone(url, working_dir))


def main() -> None:
    runner = MCPRunner(os.environ.get("UPMPACK_WORKSPACE"))
    runner.create_mcp_server().run()


__all__ = [
    "MCPRunner",
    "MCPToolError",
    "main",
]
