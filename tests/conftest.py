"""Test fixtures and configuration."""

import json
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

import httpx
import pytest
import pytest_asyncio

from n8n_mcp_server.client import N8nClient
from n8n_mcp_server.config import Config
from n8n_mcp_server.dispatcher import OperationDispatcher
from n8n_mcp_server.examples import ExamplesManager
from n8n_mcp_server.operations import build_registry

FIXTURES_DIR = Path(__file__).parent / "fixtures"

MockResult = Union[httpx.Response, Exception]


@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment."""
    # Ensure we're in the right directory
    original_cwd = os.getcwd()
    repo_root = Path(__file__).parent.parent
    os.chdir(repo_root)

    yield

    # Cleanup
    os.chdir(original_cwd)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Each request pops the next entry. Exception entries are raised instead of
    answered, which simulates a request that never got a response. When the
    list is exhausted a 500 is returned.
    """

    def __init__(self, responses: Optional[List[MockResult]] = None) -> None:
        self.responses = list(responses or [])
        self.requests: List[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            response.stream = httpx.ByteStream(response.content)
            return response
        return httpx.Response(500, json={"message": "No more mock responses"})

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last_request.content)


def load_fixture(name: str):
    with open(FIXTURES_DIR / name, "r") as f:
        return json.load(f)


@pytest.fixture
def config():
    """Config pointing at a fake n8n instance, with instant retries."""
    return Config(
        base_url="https://n8n.example.com",
        api_key="test-api-key",
        retry_backoff=0,
        examples_dir=str(FIXTURES_DIR / "workflows"),
    )


@pytest.fixture
def transport():
    return MockTransport()


@pytest_asyncio.fixture
async def client(config, transport):
    async with N8nClient(config, transport=transport) as n8n_client:
        yield n8n_client


@pytest.fixture
def dispatcher(config, client):
    registry = build_registry(client, ExamplesManager(config))
    return OperationDispatcher(registry)
