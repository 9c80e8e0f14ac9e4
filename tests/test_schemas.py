"""Tests for argument schemas and validation."""

import pytest

from n8n_mcp_server import schemas
from n8n_mcp_server.schemas import ArgumentValidationError, validate_arguments

SETTINGS = {
    "saveExecutionProgress": True,
    "saveManualExecutions": True,
    "saveDataErrorExecution": "all",
    "saveDataSuccessExecution": "all",
}

NODE = {
    "name": "Start",
    "type": "n8n-nodes-base.manualTrigger",
    "parameters": {},
    "position": [0, 0],
}


def test_pagination_defaults():
    args = validate_arguments(schemas.PaginationArguments, {})
    assert args.limit == 100
    assert args.to_params() == {"limit": 100}


@pytest.mark.parametrize("limit", [0, 251])
def test_pagination_bounds(limit):
    with pytest.raises(ArgumentValidationError) as exc_info:
        validate_arguments(schemas.WorkflowListArguments, {"limit": limit})
    assert exc_info.value.errors[0].startswith("limit:")


def test_strict_types_reject_coercion():
    with pytest.raises(ArgumentValidationError) as exc_info:
        validate_arguments(
            schemas.WorkflowListArguments, {"limit": "10", "active": "true"}
        )
    message = str(exc_info.value)
    assert "limit:" in message
    assert "active:" in message


def test_camel_case_wire_names():
    args = validate_arguments(
        schemas.ExecutionListArguments,
        {"workflowId": "wf-1", "includeData": True, "status": "error"},
    )
    assert args.workflow_id == "wf-1"
    assert args.to_params() == {
        "limit": 100,
        "workflowId": "wf-1",
        "includeData": True,
        "status": "error",
    }


def test_missing_required_field_is_named():
    with pytest.raises(ArgumentValidationError) as exc_info:
        validate_arguments(schemas.TagCreateArguments, {})
    assert exc_info.value.errors == ["name: Field required"]


def test_none_arguments_treated_as_empty():
    args = validate_arguments(schemas.EmptyArguments, None)
    assert args.to_params() == {}


def test_non_object_arguments_rejected():
    with pytest.raises(ArgumentValidationError, match="expected an object"):
        validate_arguments(schemas.EmptyArguments, ["id"])


def test_workflow_create_requires_a_node():
    with pytest.raises(ArgumentValidationError) as exc_info:
        validate_arguments(
            schemas.WorkflowCreateArguments,
            {"name": "T", "nodes": [], "connections": {}, "settings": SETTINGS},
        )
    assert len(exc_info.value.errors) == 1
    assert exc_info.value.errors[0].startswith("nodes:")


def test_workflow_create_nested_error_path():
    node = dict(NODE, position=[0])
    with pytest.raises(ArgumentValidationError) as exc_info:
        validate_arguments(
            schemas.WorkflowCreateArguments,
            {"name": "T", "nodes": [node], "connections": {}, "settings": SETTINGS},
        )
    assert exc_info.value.errors[0].startswith("nodes.0.position:")


def test_workflow_create_keeps_extra_node_fields():
    node = dict(NODE, typeVersion=2, id="abc")
    args = validate_arguments(
        schemas.WorkflowCreateArguments,
        {"name": "T", "nodes": [node], "connections": {}, "settings": SETTINGS},
    )
    body = args.to_params()
    assert body["nodes"][0]["typeVersion"] == 2
    assert body["nodes"][0]["id"] == "abc"
    assert body["settings"]["saveDataErrorExecution"] == "all"
    assert "tags" not in body


@pytest.mark.parametrize(
    "node_type,valid",
    [
        ("n8n-nodes-base.slack", True),
        ("@n8n/n8n-nodes-langchain.agent", True),
        ("slack", False),
        ("custom.node", False),
    ],
)
def test_node_type_pattern(node_type, valid):
    node = dict(NODE, type=node_type)
    arguments = {"name": "T", "nodes": [node], "connections": {}, "settings": SETTINGS}
    if valid:
        validate_arguments(schemas.WorkflowCreateArguments, arguments)
    else:
        with pytest.raises(ArgumentValidationError, match="nodes.0.type"):
            validate_arguments(schemas.WorkflowCreateArguments, arguments)


def test_execution_timeout_limit():
    settings = dict(SETTINGS, executionTimeout=7200)
    with pytest.raises(ArgumentValidationError, match="settings.executionTimeout"):
        validate_arguments(
            schemas.WorkflowCreateArguments,
            {"name": "T", "nodes": [NODE], "connections": {}, "settings": settings},
        )


@pytest.mark.parametrize("key,valid", [("API_TOKEN", True), ("_x1", True), ("1abc", False), ("has-dash", False)])
def test_variable_key_pattern(key, valid):
    arguments = {"key": key, "value": "v"}
    if valid:
        assert validate_arguments(schemas.VariableCreateArguments, arguments).key == key
    else:
        with pytest.raises(ArgumentValidationError, match="key:"):
            validate_arguments(schemas.VariableCreateArguments, arguments)


def test_user_create_validates_email_and_role():
    args = validate_arguments(
        schemas.UserCreateArguments, {"users": [{"email": "dev@example.com"}]}
    )
    assert args.to_params() == {
        "users": [{"email": "dev@example.com", "role": "global:member"}]
    }

    with pytest.raises(ArgumentValidationError) as exc_info:
        validate_arguments(
            schemas.UserCreateArguments,
            {"users": [{"email": "not-an-email", "role": "global:owner"}]},
        )
    paths = [error.split(":", 1)[0] for error in exc_info.value.errors]
    assert paths == ["users.0.email", "users.0.role"]


def test_examples_search_limits():
    args = validate_arguments(schemas.WorkflowExamplesSearchArguments, {})
    assert args.node_types == []
    assert args.keywords == []
    assert args.max_examples == 2
    assert args.include_full_workflow is False

    with pytest.raises(ArgumentValidationError, match="maxExamples"):
        validate_arguments(schemas.WorkflowExamplesSearchArguments, {"maxExamples": 6})


def test_credential_type_alias():
    args = validate_arguments(
        schemas.CredentialCreateArguments,
        {"name": "Basic", "type": "httpBasicAuth", "data": {"user": "u"}},
    )
    assert args.credential_type == "httpBasicAuth"


def test_input_schema_uses_wire_names():
    schema = schemas.input_schema(schemas.WorkflowGetArguments)

    assert "title" not in schema
    assert schema["type"] == "object"
    assert set(schema["properties"]) == {"id", "excludePinnedData"}
    assert schema["required"] == ["id"]


def test_list_schema_advertises_bounds():
    schema = schemas.input_schema(schemas.PaginationArguments)
    limit = schema["properties"]["limit"]
    assert limit["minimum"] == 1
    assert limit["maximum"] == 250
    assert limit["default"] == 100
