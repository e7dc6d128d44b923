"""
MCP stdio binding for the protocol dispatcher.

Tools are the registry's capabilities, listed in registration order.
A failed invocation is raised as InvocationError; the SDK turns it into
an isError tool result whose text is the JSON error body.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from twentyi_mcp import __version__
from twentyi_mcp.modules.dispatcher import ProtocolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "twentyi-mcp"


def _result_text(data: Any) -> List[TextContent]:
    """Format a result as TextContent for MCP tool response."""
    return [TextContent(type="text", text=json.dumps(data, indent=2, default=str))]


async def list_tools(dispatcher: ProtocolDispatcher) -> List[Tool]:
    return [
        Tool(
            name=descriptor.name,
            description=descriptor.description,
            inputSchema=descriptor.to_json_schema(),
        )
        for descriptor in dispatcher.list_capabilities()
    ]


async def call_tool(
    dispatcher: ProtocolDispatcher, name: str, arguments: Optional[Dict[str, Any]]
) -> List[TextContent]:
    """
    Invoke a capability for an MCP client.

    Raises:
        InvocationError: On any failure, carrying kind, message and details
    """
    result = await dispatcher.invoke(name, arguments or {})
    if not result.ok:
        raise result.error
    return _result_text(result.data)


def create_mcp_server(dispatcher: ProtocolDispatcher) -> Server:
    """
    Build a low-level MCP server bound to the dispatcher.

    Args:
        dispatcher: Dispatcher over the frozen capability registry

    Returns:
        Server with list_tools and call_tool handlers registered
    """
    app = Server(SERVER_NAME, version=__version__)

    @app.list_tools()
    async def handle_list_tools() -> List[Tool]:
        return await list_tools(dispatcher)

    # Argument checks belong to the handlers so failures surface as InvalidArgument
    @app.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict) -> List[TextContent]:
        return await call_tool(dispatcher, name, arguments)

    return app


async def run_stdio(dispatcher: ProtocolDispatcher) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    app = create_mcp_server(dispatcher)
    logger.info(
        f"[START] {SERVER_NAME} v{__version__} serving "
        f"{len(dispatcher.list_capabilities())} tools over stdio"
    )
    async with stdio_server() as (read_stream, write_stream):
        await app.run(read_stream, write_stream, app.create_initialization_options())
