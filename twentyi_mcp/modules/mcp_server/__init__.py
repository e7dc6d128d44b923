"""
MCP Server Module - Black Box Interface

Purpose: Serve discovery and invocation to MCP clients over stdio
Interface: create_mcp_server(), run_stdio()
Hidden: Tool rendering, error result encoding
"""

from .server import SERVER_NAME, call_tool, create_mcp_server, list_tools, run_stdio

__all__ = ["SERVER_NAME", "call_tool", "create_mcp_server", "list_tools", "run_stdio"]
