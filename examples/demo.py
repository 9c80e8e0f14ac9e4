#!/usr/bin/env python3
"""
Example script demonstrating n8n MCP Server functionality.

This script shows how to:
1. Load configuration
2. Build the operation registry
3. Browse the built-in node catalog
4. Search the example workflows folder
5. See how invalid arguments are reported
"""

import asyncio
import os

from n8n_mcp_server.client import N8nClient
from n8n_mcp_server.config import ENV_VARS, Config
from n8n_mcp_server.dispatcher import OperationDispatcher
from n8n_mcp_server.examples import ExamplesManager
from n8n_mcp_server.operations import build_registry


async def main():
    """Run the example."""
    print("🚀 n8n MCP Server Example")
    print("=" * 40)

    # Load configuration
    print("\n📋 Loading configuration...")
    config = Config.load("config/n8n.yaml")
    print(f"✅ n8n API URL: {config.api_url}")
    print(f"   Examples folder: {config.examples_dir}")

    async with N8nClient(config) as client:
        registry = build_registry(client, ExamplesManager(config))
        dispatcher = OperationDispatcher(registry)

        # Registered tools
        print(f"\n🔧 {len(registry)} tools registered:")
        for operation in registry:
            marker = "remote" if operation.remote else "local"
            print(f"   - {operation.name} ({marker})")

        # Local operations never touch the network
        print("\n📚 Node Catalog:")
        response = await dispatcher.invoke("node_categories", {})
        print(response.text)

        response = await dispatcher.invoke(
            "node_type_info", {"nodeType": "n8n-nodes-base.webhook"}
        )
        print(response.text[:400])

        print("\n🔍 Example Workflow Search:")
        response = await dispatcher.invoke(
            "workflow_examples_search",
            {"nodeTypes": ["n8n-nodes-base.slack"], "maxExamples": 1},
        )
        print(response.text[:400])

        # Validation failures come back as error results
        print("\n🚫 Invalid Arguments:")
        response = await dispatcher.invoke("workflow_list", {"limit": 0})
        print(response.text)

    # Environment variable checks
    print("\n🌍 Environment Variables:")
    for var in ENV_VARS:
        status = "✅ Set" if os.getenv(var) else "❌ Not set"
        print(f"   {status} {var}")

    print("\n🎉 Example completed!")
    print("\nTo try the real functionality:")
    print("1. Set N8N_BASE_URL and N8N_API_KEY")
    print("2. Run: n8n-mcp-server --list-tools")
    print("3. Run: n8n-mcp-server")


if __name__ == "__main__":
    asyncio.run(main())
