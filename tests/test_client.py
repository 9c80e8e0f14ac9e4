"""Tests for the n8n REST API client."""

import httpx
import pytest

from conftest import MockTransport
from n8n_mcp_server.client import ErrorKind, N8nApiError, N8nClient


class TestRequests:
    """Request construction."""

    @pytest.mark.asyncio
    async def test_api_key_header_and_base_path(self, client, transport):
        transport.responses.append(httpx.Response(200, json={"data": [], "nextCursor": None}))

        await client.get_workflows({"limit": 100})

        request = transport.last_request
        assert request.headers["X-N8N-API-KEY"] == "test-api-key"
        assert request.url.path == "/api/v1/workflows"
        assert request.url.params["limit"] == "100"

    @pytest.mark.asyncio
    async def test_query_drops_unset_and_joins_lists(self, client, transport):
        transport.responses.append(httpx.Response(200, json={"data": []}))

        await client.get_workflows(
            {"limit": 10, "tags": ["prod", "billing"], "active": True, "name": None}
        )

        params = transport.last_request.url.params
        assert params["tags"] == "prod,billing"
        assert params["active"] == "true"
        assert "name" not in params

    @pytest.mark.asyncio
    async def test_path_segments_are_escaped(self, client, transport):
        transport.responses.append(httpx.Response(200, json={"id": "a/b"}))

        await client.get_workflow("a/b")

        assert transport.last_request.url.raw_path.startswith(b"/api/v1/workflows/a%2Fb")

    @pytest.mark.asyncio
    async def test_update_workflow_tags_body(self, client, transport):
        transport.responses.append(httpx.Response(200, json=[]))

        await client.update_workflow_tags("wf-1", ["t1", "t2"])

        assert transport.last_request.method == "PUT"
        assert transport.last_json() == [{"id": "t1"}, {"id": "t2"}]

    @pytest.mark.asyncio
    async def test_change_user_role(self, client, transport):
        transport.responses.append(httpx.Response(200, content=b""))

        result = await client.change_user_role("user@example.com", "global:admin")

        assert result is None
        assert transport.last_request.method == "PATCH"
        assert transport.last_request.url.path == "/api/v1/users/user@example.com/role"
        assert transport.last_json() == {"newRoleName": "global:admin"}

    @pytest.mark.asyncio
    async def test_generate_audit_sends_empty_object(self, client, transport):
        transport.responses.append(httpx.Response(200, json={}))

        await client.generate_audit()

        assert transport.last_request.url.path == "/api/v1/audit"
        assert transport.last_json() == {}

    @pytest.mark.asyncio
    async def test_non_json_body_returned_as_text(self, client, transport):
        transport.responses.append(httpx.Response(200, text="OK"))

        assert await client.delete_tag("t1") == "OK"


class TestErrors:
    """HTTP and network failures are normalized into N8nApiError."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,kind,fragment",
        [
            (401, ErrorKind.AUTHENTICATION, "Check your API key"),
            (403, ErrorKind.PERMISSION, "Insufficient permissions"),
            (404, ErrorKind.NOT_FOUND, "Resource not found."),
            (429, ErrorKind.RATE_LIMITED, "retry later"),
        ],
    )
    async def test_status_mapping(self, client, transport, status, kind, fragment):
        transport.responses.append(httpx.Response(status, json={"message": "nope"}))

        with pytest.raises(N8nApiError) as exc_info:
            await client.get_workflow("wf-1")

        assert exc_info.value.kind == kind
        assert exc_info.value.status == status
        assert fragment in exc_info.value.message

    @pytest.mark.asyncio
    async def test_generic_error_uses_body_message(self, client, transport):
        transport.responses.append(
            httpx.Response(400, json={"message": "request/body must have required property 'name'"})
        )

        with pytest.raises(N8nApiError) as exc_info:
            await client.create_workflow({})

        assert exc_info.value.kind == ErrorKind.API
        assert exc_info.value.message == (
            "API Error (400): request/body must have required property 'name'"
        )

    @pytest.mark.asyncio
    async def test_generic_error_falls_back_to_text(self, client, transport):
        transport.responses.append(httpx.Response(502, text="Bad Gateway from proxy"))

        with pytest.raises(N8nApiError) as exc_info:
            await client.get_tags()

        assert exc_info.value.message == "API Error (502): Bad Gateway from proxy"

    @pytest.mark.asyncio
    async def test_rate_limit_is_not_retried(self, client, transport):
        transport.responses.extend(
            [httpx.Response(429), httpx.Response(200, json={"data": []})]
        )

        with pytest.raises(N8nApiError):
            await client.get_tags()

        assert len(transport.requests) == 1


class TestRetries:
    """Requests that got no response are retried when they are idempotent."""

    @pytest.mark.asyncio
    async def test_get_retried_after_connect_error(self, client, transport):
        transport.responses.extend(
            [
                httpx.ConnectError("connection refused"),
                httpx.ReadTimeout("timed out"),
                httpx.Response(200, json={"id": "wf-1"}),
            ]
        )

        result = await client.get_workflow("wf-1")

        assert result == {"id": "wf-1"}
        assert len(transport.requests) == 3

    @pytest.mark.asyncio
    async def test_network_error_after_retries_exhausted(self, config):
        config.max_retries = 2
        transport = MockTransport(
            [httpx.ConnectError("connection refused") for _ in range(5)]
        )

        async with N8nClient(config, transport=transport) as client:
            with pytest.raises(N8nApiError) as exc_info:
                await client.get_executions()

        assert exc_info.value.kind == ErrorKind.NETWORK
        assert exc_info.value.status is None
        assert exc_info.value.message == "Network Error: connection refused"
        assert len(transport.requests) == 3

    @pytest.mark.asyncio
    async def test_post_is_not_retried(self, client, transport):
        transport.responses.extend(
            [
                httpx.ConnectError("connection refused"),
                httpx.Response(200, json={"id": "t1", "name": "ops"}),
            ]
        )

        with pytest.raises(N8nApiError) as exc_info:
            await client.create_tag("ops")

        assert exc_info.value.kind == ErrorKind.NETWORK
        assert len(transport.requests) == 1
