"""Argument schemas for every operation exposed by the server.

Each operation is described by a pydantic model. The same model produces the
JSON schema advertised to MCP clients and validates incoming arguments, so the
two can never disagree. Field names are camelCase on the wire and snake_case in
Python.

Leaf fields use pydantic's strict types: a string is never turned into a number
(or the other way round), and a number is never turned into a boolean.
"""

from typing import Any, Dict, List, Literal, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from .catalog import NODE_CATEGORIES, WORKFLOW_EXAMPLES

Number = Union[StrictInt, StrictFloat]

CategoryName = Literal[tuple(NODE_CATEGORIES)]  # type: ignore[valid-type]
UseCase = Literal[tuple(WORKFLOW_EXAMPLES)]  # type: ignore[valid-type]
ExecutionStatus = Literal["error", "success", "waiting"]
GlobalRole = Literal["global:admin", "global:member"]
SaveDataMode = Literal["all", "none"]
AuditCategory = Literal["credentials", "database", "nodes", "filesystem", "instance"]

NODE_TYPE_PATTERN = r"^(@[\w.-]+/)?n8n-nodes-"
VARIABLE_KEY_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 250

ArgumentsT = TypeVar("ArgumentsT", bound="OperationArguments")


class ArgumentValidationError(ValueError):
    """Raised when tool arguments do not match the operation's schema."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(", ".join(errors))


class OperationArguments(BaseModel):
    """Base class for operation arguments."""

    model_config = ConfigDict(alias_generator=to_camel)

    def to_params(self, exclude: Optional[set] = None) -> Dict[str, Any]:
        """Dump set fields using their wire (camelCase) names."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude)


def _id_field(description: str) -> Any:
    return Field(..., min_length=1, description=description)


class EmptyArguments(OperationArguments):
    pass


class PaginationArguments(OperationArguments):
    limit: StrictInt = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Maximum number of items to return",
    )
    cursor: Optional[StrictStr] = Field(
        default=None, description="Pagination cursor for next page"
    )


# Capability catalog


class NodeTypesListArguments(OperationArguments):
    category: Optional[CategoryName] = Field(
        default=None,
        description="Filter by category (Core, Communication, Productivity, Data & Storage, etc.)",
    )
    search: Optional[StrictStr] = Field(
        default=None, description="Search node names and descriptions"
    )


class NodeTypeInfoArguments(OperationArguments):
    node_type: StrictStr = Field(
        ...,
        min_length=1,
        description="Node type (e.g., 'n8n-nodes-base.manualTrigger', 'n8n-nodes-base.slack')",
    )


class WorkflowExamplesArguments(OperationArguments):
    use_case: Optional[UseCase] = Field(default=None, description="Use case type")


class WorkflowExamplesSearchArguments(OperationArguments):
    node_types: List[StrictStr] = Field(
        default_factory=list,
        description="Node types to search for (e.g., ['n8n-nodes-base.openai', 'n8n-nodes-base.slack'])",
    )
    keywords: List[StrictStr] = Field(
        default_factory=list,
        description="Keywords to search in workflow file names and workflow names",
    )
    max_examples: StrictInt = Field(
        default=2,
        ge=1,
        le=5,
        description="Maximum number of examples to return (to limit context size)",
    )
    include_full_workflow: StrictBool = Field(
        default=False,
        description="Include full workflow JSON (true) or just relevant node excerpts (false)",
    )


# Workflows


class WorkflowListArguments(PaginationArguments):
    active: Optional[StrictBool] = Field(
        default=None, description="Filter by active/inactive status"
    )
    tags: Optional[Union[StrictStr, List[StrictStr]]] = Field(
        default=None,
        description="Tag names to filter by (list or comma-separated string)",
    )
    name: Optional[StrictStr] = Field(
        default=None, description="Filter workflows by name (partial match)"
    )
    project_id: Optional[StrictStr] = Field(
        default=None, description="Filter by project ID (Enterprise)"
    )
    exclude_pinned_data: Optional[StrictBool] = Field(
        default=None, description="Exclude pinned data for faster loading"
    )


class WorkflowIdArguments(OperationArguments):
    id: StrictStr = _id_field("Workflow ID")


class WorkflowGetArguments(WorkflowIdArguments):
    exclude_pinned_data: Optional[StrictBool] = Field(
        default=None, description="Exclude pinned data for faster loading"
    )


class WorkflowNode(OperationArguments):
    """A node of a workflow. Unknown n8n node attributes are passed through."""

    model_config = ConfigDict(extra="allow")

    name: StrictStr = Field(
        ..., min_length=1, description="Node name (unique within workflow)"
    )
    type: StrictStr = Field(
        ...,
        pattern=NODE_TYPE_PATTERN,
        description="Node type (e.g., 'n8n-nodes-base.manualTrigger')",
    )
    parameters: Dict[str, Any] = Field(
        ..., description="Node parameters/configuration (use {} if empty)"
    )
    position: List[Number] = Field(
        ...,
        min_length=2,
        max_length=2,
        description="Node position [x, y] coordinates",
    )
    credentials: Optional[Dict[str, Any]] = Field(
        default=None, description="Node credentials configuration"
    )
    disabled: Optional[StrictBool] = Field(
        default=None, description="Whether node is disabled"
    )
    notes: Optional[StrictStr] = Field(
        default=None, description="Node notes/documentation"
    )


class WorkflowSettings(OperationArguments):
    model_config = ConfigDict(extra="allow")

    save_execution_progress: StrictBool
    save_manual_executions: StrictBool
    save_data_error_execution: SaveDataMode
    save_data_success_execution: SaveDataMode
    execution_timeout: Optional[StrictInt] = Field(
        default=None, le=3600, description="Timeout in seconds"
    )
    timezone: Optional[StrictStr] = Field(
        default=None, description="Workflow timezone"
    )


class WorkflowCreateArguments(OperationArguments):
    name: StrictStr = Field(..., min_length=1, description="Workflow name")
    nodes: List[WorkflowNode] = Field(
        ...,
        min_length=1,
        description="Workflow nodes (must have at least one node)",
    )
    connections: Dict[str, Any] = Field(
        ..., description="Node connections object (use {} for no connections)"
    )
    settings: WorkflowSettings = Field(..., description="Workflow settings")
    tags: Optional[List[StrictStr]] = Field(
        default=None, description="Workflow tags (tag names, not IDs)"
    )
    active: Optional[StrictBool] = Field(
        default=None, description="Whether to activate immediately"
    )


class WorkflowUpdateArguments(WorkflowIdArguments):
    name: Optional[StrictStr] = Field(default=None, description="New workflow name")
    nodes: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Updated nodes array (replaces all existing nodes)",
    )
    connections: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Updated connections object (replaces all existing connections)",
    )
    settings: Optional[Dict[str, Any]] = Field(
        default=None, description="Updated workflow settings"
    )
    active: Optional[StrictBool] = Field(default=None, description="Activation status")


class TransferArguments(OperationArguments):
    id: StrictStr = _id_field("ID of the resource to transfer")
    destination_project_id: StrictStr = _id_field("Target project ID")


class WorkflowTagsUpdateArguments(WorkflowIdArguments):
    tag_ids: List[StrictStr] = Field(
        ...,
        description="Tag IDs to assign (replaces all existing tags)",
    )


# Executions


class ExecutionListArguments(PaginationArguments):
    include_data: Optional[StrictBool] = Field(
        default=None,
        description="Include execution data in response (slower but more detailed)",
    )
    status: Optional[ExecutionStatus] = Field(
        default=None, description="Filter by execution status"
    )
    workflow_id: Optional[StrictStr] = Field(
        default=None, description="Filter by specific workflow ID"
    )
    project_id: Optional[StrictStr] = Field(
        default=None, description="Filter by project ID (Enterprise)"
    )


class ExecutionIdArguments(OperationArguments):
    id: StrictStr = _id_field("Execution ID (numeric string)")


class ExecutionGetArguments(ExecutionIdArguments):
    include_data: Optional[StrictBool] = Field(
        default=None, description="Include full execution data and node results"
    )


# Tags


class TagIdArguments(OperationArguments):
    id: StrictStr = _id_field("Tag ID")


class TagCreateArguments(OperationArguments):
    name: StrictStr = Field(
        ..., min_length=1, description="Tag name (must be unique)"
    )


class TagUpdateArguments(TagIdArguments):
    name: StrictStr = Field(
        ..., min_length=1, description="New tag name (must be unique)"
    )


# Variables


class VariableIdArguments(OperationArguments):
    id: StrictStr = _id_field("Variable ID")


class VariableCreateArguments(OperationArguments):
    key: StrictStr = Field(
        ...,
        pattern=VARIABLE_KEY_PATTERN,
        description="Variable key/name (must be unique, alphanumeric + underscore)",
    )
    value: StrictStr = Field(..., description="Variable value")


class VariableUpdateArguments(VariableIdArguments, VariableCreateArguments):
    pass


# Projects


class ProjectIdArguments(OperationArguments):
    id: StrictStr = _id_field("Project ID")


class ProjectCreateArguments(OperationArguments):
    name: StrictStr = Field(..., min_length=1, description="Project name")


class ProjectUpdateArguments(ProjectIdArguments):
    name: StrictStr = Field(..., min_length=1, description="New project name")


# Users


class UserListArguments(PaginationArguments):
    include_role: Optional[StrictBool] = Field(
        default=None, description="Include user roles in response"
    )
    project_id: Optional[StrictStr] = Field(
        default=None, description="Filter users by project"
    )


class UserIdentifierArguments(OperationArguments):
    identifier: StrictStr = _id_field("User ID or email address")


class UserGetArguments(UserIdentifierArguments):
    include_role: Optional[StrictBool] = Field(
        default=None, description="Include user role in response"
    )


class NewUser(OperationArguments):
    email: EmailStr = Field(..., description="User email address")
    role: GlobalRole = Field(default="global:member", description="User role")


class UserCreateArguments(OperationArguments):
    users: List[NewUser] = Field(
        ..., min_length=1, description="Users to create"
    )


class UserRoleChangeArguments(UserIdentifierArguments):
    new_role_name: GlobalRole = Field(..., description="New role for the user")


# Credentials


class CredentialIdArguments(OperationArguments):
    id: StrictStr = _id_field("Credential ID")


class CredentialCreateArguments(OperationArguments):
    name: StrictStr = Field(..., min_length=1, description="Credential name")
    credential_type: StrictStr = Field(
        ...,
        alias="type",
        min_length=1,
        description="Credential type (e.g., 'httpBasicAuth', 'oAuth2Api')",
    )
    data: Dict[str, Any] = Field(
        ..., description="Credential data object with authentication details"
    )


class CredentialSchemaGetArguments(OperationArguments):
    credential_type_name: StrictStr = Field(
        ...,
        min_length=1,
        description="Credential type name (e.g., 'httpBasicAuth')",
    )


# Audit and source control


class AuditOptions(OperationArguments):
    days_abandoned_workflow: Optional[StrictInt] = Field(
        default=None,
        ge=1,
        description="Days to consider a workflow abandoned if not executed",
    )
    categories: Optional[List[AuditCategory]] = Field(
        default=None, description="Audit categories to include"
    )


class AuditGenerateArguments(OperationArguments):
    additional_options: Optional[AuditOptions] = None


class SourceControlPullArguments(OperationArguments):
    force: Optional[StrictBool] = Field(
        default=None, description="Force pull even if there are conflicts"
    )
    variables: Optional[Dict[str, StrictStr]] = Field(
        default=None, description="Environment variables to set during pull"
    )


def format_validation_errors(error: ValidationError) -> List[str]:
    """Turn a pydantic error into ``path.to.field: message`` strings."""
    issues = []
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"])
        issues.append(f"{path}: {issue['msg']}" if path else issue["msg"])
    return issues


def validate_arguments(
    model: Type[ArgumentsT], arguments: Optional[Dict[str, Any]]
) -> ArgumentsT:
    """Validate raw tool arguments, reporting every violated constraint."""
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ArgumentValidationError(
            [f"arguments: expected an object, got {type(arguments).__name__}"]
        )

    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise ArgumentValidationError(format_validation_errors(e)) from e


def input_schema(model: Type[OperationArguments]) -> Dict[str, Any]:
    """JSON schema advertised for an operation's arguments."""
    schema = model.model_json_schema(by_alias=True)
    schema.pop("title", None)
    return schema
