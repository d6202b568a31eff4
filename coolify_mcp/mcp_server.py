"""MCP server exposing Coolify operations over stdio.

Tools are listed from the mode-filtered registry and every call is forwarded to
the shared :class:`~coolify_mcp.tools.dispatcher.Dispatcher`, so behaviour stays
consistent with the HTTP bridge in :mod:`coolify_mcp.main`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from coolify_mcp import __version__
from coolify_mcp.client import CoolifyAPIError
from coolify_mcp.config import MissingConfigurationError
from coolify_mcp.resources import read_resource, resource_definitions
from coolify_mcp.runtime import build_dispatcher
from coolify_mcp.tools.dispatcher import Dispatcher
from coolify_mcp.tools.errors import DispatchError

_LOGGER = logging.getLogger("coolify_mcp.mcp_server")

SERVER_NAME = "coolify-mcp-server"

SERVER_INSTRUCTIONS = (
    "Manage a Coolify instance: servers, projects, environments, applications, "
    "services, databases, deployments, private keys and GitHub Apps. Destructive "
    "operations may answer with confirmation_required; repeat the call with "
    "confirm: true once the user agrees."
)


def _to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, default=str)


def list_tool_definitions(dispatcher: Dispatcher) -> List[types.Tool]:
    return [
        types.Tool(name=definition.name, description=definition.description, inputSchema=dict(definition.input_schema))
        for definition in dispatcher.visible_operations()
    ]


async def call_operation(
    dispatcher: Dispatcher, name: str, arguments: Optional[Dict[str, Any]]
) -> List[types.TextContent]:
    """Run ``name`` in a worker thread and wrap the result as text content."""

    loop = asyncio.get_running_loop()
    try:
        result = await loop.run_in_executor(None, dispatcher.dispatch, name, arguments or {})
    except DispatchError as exc:
        raise McpError(types.ErrorData(code=exc.code, message=str(exc))) from exc
    except CoolifyAPIError as exc:
        raise McpError(types.ErrorData(code=types.INTERNAL_ERROR, message=f"Tool execution failed: {exc}")) from exc

    return [types.TextContent(type="text", text=_to_json(result))]


def list_resource_definitions() -> List[types.Resource]:
    return [
        types.Resource(
            uri=item["uri"],
            name=item["name"],
            description=item["description"],
            mimeType=item["mimeType"],
        )
        for item in resource_definitions()
    ]


async def read_resource_contents(dispatcher: Dispatcher, uri: str) -> List[ReadResourceContents]:
    loop = asyncio.get_running_loop()
    try:
        data = await loop.run_in_executor(None, read_resource, dispatcher.client, uri)
    except (ValueError, CoolifyAPIError) as exc:
        raise McpError(
            types.ErrorData(code=types.INTERNAL_ERROR, message=f"Failed to read resource: {exc}")
        ) from exc
    return [ReadResourceContents(content=_to_json(data), mime_type="application/json")]


def create_server(dispatcher: Dispatcher) -> Server:
    """Register tool and resource handlers bound to ``dispatcher``."""

    server: Server = Server(SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS)

    @server.list_tools()
    async def _list_tools() -> List[types.Tool]:
        return list_tool_definitions(dispatcher)

    # Registered directly so McpError reaches the host as a JSON-RPC error.
    async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
        content = await call_operation(dispatcher, request.params.name, request.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = _call_tool

    @server.list_resources()
    async def _list_resources() -> List[types.Resource]:
        return list_resource_definitions()

    @server.read_resource()
    async def _read_resource(uri: Any) -> List[ReadResourceContents]:
        return await read_resource_contents(dispatcher, str(uri))

    return server


async def _serve(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    """Entry-point for launching the MCP server."""

    try:
        dispatcher = build_dispatcher()
    except MissingConfigurationError as exc:
        _LOGGER.error("%s", exc)
        sys.exit(1)

    server = create_server(dispatcher)
    _LOGGER.info("Coolify MCP server running on stdio (%d tools)", len(dispatcher.visible_operations()))
    try:
        asyncio.run(_serve(server))
    finally:
        dispatcher.client.close()


if __name__ == "__main__":
    main()
