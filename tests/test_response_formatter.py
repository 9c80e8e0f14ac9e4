"""Tests for response formatting."""

from types import SimpleNamespace

import pytest

from conftest import load_fixture
from n8n_mcp_server.response_formatter import ResponseFormatter, ToolResponse, dump


@pytest.fixture
def formatter():
    return ResponseFormatter()


class TestToolResponse:
    def test_success_text(self):
        response = ToolResponse.ok("Found 2 tags", "• a\n• b")
        assert response.text == "✅ Found 2 tags\n\n• a\n• b"

    def test_error_text(self):
        response = ToolResponse.error("Operation 'x' failed: boom", "HTTP status: 500")
        assert response.text == "❌ Error: Operation 'x' failed: boom\n\nDetails: HTTP status: 500"

    def test_mcp_shape(self):
        result = ToolResponse.error("nope").to_mcp()
        assert result == {
            "content": [{"type": "text", "text": "❌ Error: nope"}],
            "isError": True,
        }


class TestDefensiveRendering:
    """Missing or oddly shaped fields never raise."""

    @pytest.mark.parametrize(
        "method",
        [
            "workflow_list",
            "workflow_get",
            "workflow_created",
            "workflow_updated",
            "workflow_tags",
            "workflow_tags_updated",
            "execution_list",
            "execution_get",
            "tag_list",
            "tag_get",
            "variable_list",
            "project_list",
            "user_list",
            "user_get",
            "users_created",
            "credential_created",
            "credential_schema",
            "audit_report",
            "source_control_pull",
        ],
    )
    @pytest.mark.parametrize(
        "result",
        [
            None,
            {},
            [],
            "text",
            {"data": "oops"},
            {"status": {"code": "error"}, "nodes": 3},
            {"data": [{"status": ["error"], "nodes": 3, "tags": "ops"}]},
            {"data": {"resultData": {"runData": {"Fetch": [3, "x"], "Set": None}}}},
        ],
    )
    def test_odd_results(self, formatter, method, result):
        response = getattr(formatter, method)(SimpleNamespace(include_data=True), result)
        assert response.success

    def test_unhashable_status_renders_placeholder(self, formatter):
        response = formatter.execution_get(None, {"id": "1", "status": {"code": "error"}})

        assert "Status: ⏳ Unknown" in response.detail

        response = formatter.execution_list(None, {"data": [{"id": "2", "status": ["error"]}]})

        assert "Status: ⏳ Unknown" in response.detail

    def test_non_list_nodes_render_as_empty(self, formatter):
        response = formatter.workflow_get(None, {"id": "wf-1", "nodes": 3})

        assert "Nodes: 0" in response.detail
        assert "No nodes" in response.detail

    def test_malformed_runs_are_skipped(self, formatter):
        execution = {
            "id": "3",
            "data": {"resultData": {"runData": {"Fetch": [3, {"error": "boom"}]}}},
        }

        response = formatter.execution_get(SimpleNamespace(include_data=True), execution)

        assert "**Fetch**: 1 run(s)" in response.detail
        assert "Run 1: ❌ ERROR - boom" in response.detail

    def test_workflow_list_placeholders(self, formatter):
        result = {"data": [{"id": "1"}, "junk"], "nextCursor": None}

        response = formatter.workflow_list(None, result)

        assert response.message == "Found 1 workflows"
        assert "**Unknown** (ID: 1)" in response.detail
        assert "Tags: None" in response.detail
        assert "Created: Unknown" in response.detail
        assert "Next cursor" not in response.detail

    def test_items_envelope_also_accepted(self, formatter):
        response = formatter.tag_list(None, {"items": [{"id": "t1", "name": "ops"}]})
        assert response.message == "Found 1 tags"
        assert "**ops** (ID: t1)" in response.detail


class TestRendering:
    def test_workflow_get(self, formatter):
        workflow = {
            "id": "wf-1",
            "name": "Order Sync",
            "active": True,
            "nodes": [{"name": "Start", "type": "n8n-nodes-base.manualTrigger", "position": [0, 0]}],
            "connections": {"Start": {}},
            "tags": [{"id": "t1", "name": "ops"}],
            "settings": {"executionTimeout": 60},
        }

        response = formatter.workflow_get(None, workflow)

        assert "**Workflow: Order Sync**" in response.detail
        assert "Status: 🟢 Active" in response.detail
        assert "Position: [0, 0]" in response.detail
        assert "Tags: ops" in response.detail
        assert "Execution timeout: 60" in response.detail
        assert "Timezone: Default" in response.detail

    def test_execution_list_duration(self, formatter):
        result = {
            "data": [
                {
                    "id": "7",
                    "status": "success",
                    "workflowId": "wf-1",
                    "startedAt": "2024-05-01T10:00:00.000Z",
                    "stoppedAt": "2024-05-01T10:00:42.000Z",
                },
                {"id": "8", "status": "running", "startedAt": "2024-05-01T11:00:00.000Z"},
            ],
            "nextCursor": "abc",
        }

        response = formatter.execution_list(None, result)

        assert "Duration: 42s" in response.detail
        assert "Still running" in response.detail
        assert "Duration: N/A" in response.detail
        assert response.detail.endswith("📄 Next cursor: abc")

    def test_execution_get_without_data_flag(self, formatter):
        execution = load_fixture("execution_failed.json")

        response = formatter.execution_get(SimpleNamespace(include_data=None), execution)

        assert "Workflow: Order Sync" in response.detail
        assert "Nodes executed: 2" in response.detail
        assert "**❌ Error Details:**" in response.detail
        assert "getaddrinfo ENOTFOUND shop.example.com" in response.detail
        assert "Node Execution Summary" not in response.detail

    def test_variable_values_truncated(self, formatter):
        result = {"data": [{"id": "v1", "key": "LONG", "value": "x" * 80}]}

        response = formatter.variable_list(None, result)

        assert f"Value: {'x' * 50}..." in response.detail

    def test_audit_report(self, formatter):
        report = {
            "Credentials Risk Report": {
                "risk": "credentials",
                "sections": [
                    {
                        "title": "Credentials not used in any workflow",
                        "description": "These credentials are not used.",
                        "recommendation": "Delete them.",
                        "location": [{"kind": "credential", "id": "c1", "name": "Old Key"}],
                    }
                ],
            },
            "Nodes Risk Report": {
                "risk": "nodes",
                "sections": [
                    {
                        "title": "Community nodes",
                        "description": "Unvetted nodes.",
                        "location": [
                            {
                                "kind": "node",
                                "workflowId": "wf-1",
                                "workflowName": "Order Sync",
                                "nodeName": "Fetch",
                                "nodeType": "n8n-nodes-community.fetch",
                            }
                        ],
                    }
                ],
            },
        }

        response = formatter.audit_report(None, report)

        assert "**Credentials Risk Report**" in response.detail
        assert "Risk Level: credentials" in response.detail
        assert "    - credential: Old Key" in response.detail
        assert "💡 Recommendation: None" in response.detail
        assert "    - Workflow: Order Sync (wf-1)" in response.detail
        assert "      Node: Fetch (n8n-nodes-community.fetch)" in response.detail

    def test_users_created_reports_errors(self, formatter):
        result = [
            {"user": {"id": "u1", "email": "a@example.com", "emailSent": True}},
            {"user": {"email": "b@example.com"}, "error": "Email already in use"},
        ]

        response = formatter.users_created(None, result)

        assert response.message == "Processed 2 user invitation(s)"
        assert "**a@example.com** (ID: u1)" in response.detail
        assert "Email sent: Yes" in response.detail
        assert "b@example.com: ❌ Email already in use" in response.detail

    def test_credential_schema_is_yaml(self, formatter):
        schema = {"type": "object", "properties": {"user": {"type": "string"}}}

        response = formatter.credential_schema(
            SimpleNamespace(credential_type_name="httpBasicAuth"), schema
        )

        assert response.message == 'Schema for credential type "httpBasicAuth"'
        assert response.detail.startswith("```yaml\ntype: object\n")

    def test_confirm_fills_unknown_fields(self):
        render = ResponseFormatter.confirm('Tag "{name}" (ID: {id}) deleted successfully')

        response = render(None, None)

        assert response.message == 'Tag "Unknown" (ID: Unknown) deleted successfully'

    def test_examples_search_without_directory(self, formatter):
        response = formatter.workflow_examples_search(None, None)

        assert response.success
        assert response.message == "No examples directory found"


def test_dump_keeps_key_order():
    assert dump({"b": 1, "a": [1, 2]}) == "b: 1\na:\n- 1\n- 2"
