"""Stdio tool server built on the MCP low-level ``Server``."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from latitude_mcp.config import get_settings
from latitude_mcp.core.sync import get_sync_operations
from latitude_mcp.tools.handlers import PromptTools
from latitude_mcp.utils.logging import setup_logging

logger = structlog.get_logger()


class ToolCallError(Exception):
    """Raised inside ``call_tool`` so the SDK marks the result with ``isError``."""


def create_server(tools: PromptTools) -> Server:
    server = Server("latitude-mcp")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [
            Tool(
                name=d.name,
                title=d.title,
                description=d.description,
                inputSchema=d.input_schema,
            )
            for d in await tools.definitions()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        result = await tools.call(name, arguments)
        if result.is_error:
            raise ToolCallError(result.text)
        return [TextContent(type="text", text=result.text)]

    return server


async def run_server() -> None:
    """Run the tool server over stdio."""
    settings = get_settings()
    setup_logging(settings.log_level)
    tools = PromptTools(get_sync_operations())
    await tools.startup()

    server = create_server(tools)
    logger.info("server.starting", transport="stdio", project_id=tools.ops.client.project_id)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await tools.ops.client.close()
        logger.info("server.shutdown")


def main() -> None:
    """Entry point"""
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
