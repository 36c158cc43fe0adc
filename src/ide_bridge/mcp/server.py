"""FastMCP server exposing the IDE bridge as parameterless tools."""

from __future__ import annotations

from fastmcp import FastMCP

from ide_bridge.client.formatting import (
    format_context,
    format_diagnostics,
    format_failure,
    format_git_status,
    format_open_files,
    format_recent_files,
    format_selection,
    format_symbol,
)
from ide_bridge.client.query import BridgeClient, QueryFailure


def create_mcp_server(client: BridgeClient) -> FastMCP:
    """Create a FastMCP server whose tools each run one bridge query."""

    mcp = FastMCP("ide-bridge", instructions="Read live editor context (selection, errors, git, symbols) from the IDE.")

    @mcp.tool()
    async def get_ide_selection() -> str:
        """Get the currently selected text from the IDE, including file path, line numbers, and language."""
        result = await client.selection()
        if isinstance(result, QueryFailure):
            return format_failure("IDE selection", result)
        return format_selection(result)

    @mcp.tool()
    async def get_ide_context() -> str:
        """Get the current cursor position and file context from the IDE, even without a selection."""
        result = await client.selection()
        if isinstance(result, QueryFailure):
            return format_failure("IDE context", result)
        return format_context(result)

    @mcp.tool()
    async def get_ide_errors() -> str:
        """Get errors and warnings from the IDE for the current file."""
        result = await client.errors()
        if isinstance(result, QueryFailure):
            return format_failure("IDE errors", result)
        return format_diagnostics(result)

    @mcp.tool()
    async def get_open_files() -> str:
        """List the files currently open in IDE tabs."""
        result = await client.open_files()
        if isinstance(result, QueryFailure):
            return format_failure("open files", result)
        return format_open_files(result)

    @mcp.tool()
    async def get_git_status() -> str:
        """Get the current branch and changed files from the IDE's git integration."""
        result = await client.git_status()
        if isinstance(result, QueryFailure):
            return format_failure("git status", result)
        return format_git_status(result)

    @mcp.tool()
    async def get_recent_files() -> str:
        """List recently opened files in the IDE, most recent first."""
        result = await client.recent_files()
        if isinstance(result, QueryFailure):
            return format_failure("recent files", result)
        return format_recent_files(result)

    @mcp.tool()
    async def get_symbol_at_cursor() -> str:
        """Describe the symbol (function, class, variable, ...) at the IDE cursor."""
        result = await client.symbol()
        if isinstance(result, QueryFailure):
            return format_failure("symbol", result)
        return format_symbol(result)

    return mcp
