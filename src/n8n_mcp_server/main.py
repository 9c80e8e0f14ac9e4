"""Main entry point for the n8n MCP Server."""

import asyncio
import logging
import sys
from typing import Any, Dict, Optional

import click
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from .client import N8nClient
from .config import Config, ConfigError
from .dispatcher import Operation, OperationDispatcher
from .examples import ExamplesManager
from .operations import build_registry
from .response_formatter import ResponseFormatter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class OperationTool(Tool):
    """FastMCP tool backed by a registered operation.

    Arguments are forwarded untouched; validation happens in the dispatcher so
    that failures come back as readable tool errors.
    """

    _dispatcher: OperationDispatcher = PrivateAttr()

    @classmethod
    def from_operation(
        cls, operation: Operation, dispatcher: OperationDispatcher
    ) -> "OperationTool":
        tool = cls(
            name=operation.name,
            description=operation.full_description,
            parameters=operation.input_schema,
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        response = await self._dispatcher.invoke(self.name, arguments)
        if not response.success:
            raise ToolError(response.text)
        return ToolResult(content=[TextContent(type="text", text=response.text)])


class N8nMCPServer:
    """Main n8n MCP Server class."""

    def __init__(self, config: Config):
        self.config = config
        self.client = N8nClient(config)
        self.formatter = ResponseFormatter()
        self.examples = ExamplesManager(config)
        self.registry = build_registry(self.client, self.examples, self.formatter)
        self.dispatcher = OperationDispatcher(self.registry)
        self.mcp: Optional[FastMCP] = None

    def initialize(self) -> FastMCP:
        """Create the FastMCP server and register one tool per operation."""
        self.mcp = FastMCP(name="n8n-mcp-server")
        for operation in self.registry:
            self.mcp.add_tool(OperationTool.from_operation(operation, self.dispatcher))
        logger.info(
            f"Registered {len(self.registry)} tools for {self.config.base_url}"
        )
        return self.mcp

    async def run(self) -> None:
        """Serve MCP over stdio until the client disconnects."""
        mcp = self.mcp or self.initialize()
        try:
            await mcp.run_stdio_async(show_banner=False)
        finally:
            await self.client.close()


def setup_logging(level: str) -> None:
    # stdout carries the MCP protocol, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@click.command()
@click.option(
    "--config",
    "-c",
    default=None,
    help="Path to an optional YAML configuration file",
)
@click.option(
    "--list-tools",
    is_flag=True,
    help="Print the available tools and exit without connecting to n8n",
)
def main(config: Optional[str], list_tools: bool) -> None:
    """Start the n8n MCP Server."""
    try:
        server_config = Config.load(config)
    except (FileNotFoundError, ConfigError) as e:
        raise click.ClickException(str(e))

    setup_logging(server_config.log_level)

    if list_tools:
        server = N8nMCPServer(server_config)
        for operation in server.registry:
            click.echo(f"{operation.name}: {operation.full_description}")
        asyncio.run(server.client.close())
        return

    try:
        server_config.require_credentials()
    except ConfigError as e:
        raise click.ClickException(str(e))

    server = N8nMCPServer(server_config)
    logger.info(f"Starting n8n MCP Server against {server_config.api_url}")
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
