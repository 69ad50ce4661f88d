"""MCP stdio server wiring and process entry point."""

import sys
from typing import Any, Dict, List

import anyio
import structlog
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from nounproject_mcp import __version__
from nounproject_mcp.client import NounProjectClient
from nounproject_mcp.config import Settings
from nounproject_mcp.dispatcher import Dispatcher, build_handlers
from nounproject_mcp.errors import ConfigurationError
from nounproject_mcp.logging_config import configure_logging
from nounproject_mcp.registry import OperationDescriptor

SERVER_NAME = "noun-project-mcp"

log = structlog.get_logger(__name__)


def descriptor_to_tool(descriptor: OperationDescriptor) -> types.Tool:
    return types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema(),
        annotations=types.ToolAnnotations(**descriptor.annotations()),
    )


def create_server(dispatcher: Dispatcher) -> Server:
    """Build the MCP server exposing the dispatcher's tools.

    Input validation by the MCP layer is off: argument errors are reported by
    the dispatcher in the same envelope as every other failure.
    """
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [descriptor_to_tool(d) for d in dispatcher.list_operations()]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        envelope = await dispatcher.call(name, arguments)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=envelope.text)],
            isError=envelope.is_error,
        )

    return server


def build_dispatcher(settings: Settings) -> Dispatcher:
    client = NounProjectClient(
        settings.credentials,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )
    return Dispatcher(build_handlers(client))


async def serve(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        log.info("Noun Project MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(level=settings.log_level, log_json=settings.log_json)
    server = create_server(build_dispatcher(settings))
    try:
        anyio.run(serve, server)
    except KeyboardInterrupt:
        pass
    except Exception:
        log.exception("Fatal error in main()")
        sys.exit(1)
