"""MCP protocol server (stdio transport).

Exposes every visible command as an MCP tool using the official MCP Python
SDK.

IMPORTANT: All logging MUST go to stderr, not stdout!
The MCP protocol uses stdout for JSON-RPC communication.
"""

from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool, ToolAnnotations

from .commands.base import BaseCommand
from .commands.factory import CommandFactory
from .logging_config import get_logger

logger = get_logger(__name__)

SERVER_NAME = "azure-mcp-server"


def build_input_schema(command: BaseCommand) -> Dict[str, Any]:
    """JSON schema of a command's parameters object."""
    options = command.get_command().options
    schema: Dict[str, Any] = {
        "type": "object",
        "properties": {option.name: option.to_json_schema() for option in options},
    }
    required = [option.name for option in options if option.required]
    if required:
        schema["required"] = required
    return schema


def build_tool(tokenized_name: str, command: BaseCommand) -> Tool:
    metadata = command.metadata
    return Tool(
        name=tokenized_name,
        title=command.title or None,
        description=command.get_command().description,
        inputSchema=build_input_schema(command),
        annotations=ToolAnnotations(
            title=command.title or None,
            readOnlyHint=metadata.read_only,
            destructiveHint=metadata.destructive,
            idempotentHint=metadata.idempotent,
            openWorldHint=metadata.open_world,
        ),
    )


def create_mcp_server(factory: CommandFactory) -> Server:
    """Create the low-level MCP server bound to ``factory``."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [build_tool(name, command) for name, command in factory.visible_commands().items()]

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        """Execute a command and return its envelope as JSON text."""
        logger.info("Calling tool", extra={"tool": name})
        response = await factory.dispatch(name, arguments or {})
        return [TextContent(type="text", text=response.to_json(indent=2))]

    return server


async def run_stdio(factory: CommandFactory) -> None:
    """Run the MCP server using stdio transport."""
    server = create_mcp_server(factory)
    logger.info(
        "Starting Azure MCP Server (stdio transport)",
        extra={"tool_count": len(factory.visible_commands()), "read_only": factory.read_only},
    )
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await factory.aclose()
