"""Tests for the FastMCP server wiring and the CLI."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from click.testing import CliRunner
from fastmcp.exceptions import ToolError

from n8n_mcp_server.main import N8nMCPServer, OperationTool, main

NO_CREDENTIALS = {"N8N_BASE_URL": None, "N8N_API_KEY": None}


class TestN8nMCPServer:
    """Test the main server class."""

    def test_server_initialization(self, config):
        server = N8nMCPServer(config)

        assert server.config is config
        assert server.client.base_url == "https://n8n.example.com/api/v1"
        assert len(server.registry) == 42
        assert server.mcp is None

    @pytest.mark.asyncio
    async def test_tools_registered_with_schemas(self, config):
        server = N8nMCPServer(config)
        mcp = server.initialize()

        tools = await mcp.get_tools()

        assert set(tools) == set(server.registry.names())
        limit = tools["workflow_list"].parameters["properties"]["limit"]
        assert limit["maximum"] == 250
        assert tools["user_list"].description.endswith("(Enterprise feature)")
        await server.client.close()


class TestOperationTool:
    """Tools delegate to the dispatcher."""

    @pytest.mark.asyncio
    async def test_success_result(self, dispatcher):
        tool = OperationTool.from_operation(
            dispatcher.registry.get("node_categories"), dispatcher
        )

        result = await tool.run({})

        assert result.content[0].text.startswith("✅ Node categories")

    @pytest.mark.asyncio
    async def test_failure_raises_tool_error(self, dispatcher, transport):
        transport.responses.append(httpx.Response(401))
        tool = OperationTool.from_operation(
            dispatcher.registry.get("workflow_list"), dispatcher
        )

        with pytest.raises(ToolError) as exc_info:
            await tool.run({})

        assert "Authentication failed. Check your API key." in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_validation_failure_raises_tool_error(self, dispatcher):
        tool = OperationTool.from_operation(dispatcher.registry.get("tag_get"), dispatcher)

        with pytest.raises(ToolError, match="Validation failed for 'tag_get'"):
            await tool.run({})


class TestCli:
    def test_list_tools_without_credentials(self):
        runner = CliRunner()

        result = runner.invoke(main, ["--list-tools"], env=NO_CREDENTIALS)

        assert result.exit_code == 0
        assert "workflow_list: List all workflows" in result.output
        assert "user_role_change: Change a user's global role (Enterprise feature)" in result.output

    def test_missing_credentials_exit(self):
        runner = CliRunner()

        result = runner.invoke(main, [], env=NO_CREDENTIALS)

        assert result.exit_code != 0
        assert "N8N_BASE_URL" in result.output
        assert "N8N_API_KEY" in result.output

    def test_missing_config_file(self):
        runner = CliRunner()

        result = runner.invoke(main, ["--config", "config/missing.yaml"])

        assert result.exit_code != 0
        assert "Configuration file not found" in result.output

    def test_starts_server(self):
        runner = CliRunner()
        env = {"N8N_BASE_URL": "http://localhost:5678", "N8N_API_KEY": "key"}

        with patch(
            "n8n_mcp_server.main.N8nMCPServer.run", new_callable=AsyncMock
        ) as mock_run:
            result = runner.invoke(main, ["-c", "config/n8n.yaml"], env=env)

        assert result.exit_code == 0
        mock_run.assert_awaited_once()
