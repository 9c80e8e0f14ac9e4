"""Definitions of every operation the server exposes.

``build_registry`` pairs each argument schema with a handler and a rendering
rule. Remote handlers make exactly one call through ``N8nClient``; catalog
handlers answer from in-process tables or the examples folder.
"""

from typing import Any, Optional

from . import catalog
from . import schemas as s
from .client import N8nClient
from .dispatcher import Operation, OperationRegistry
from .examples import ExamplesManager
from .response_formatter import ResponseFormatter


def build_registry(
    client: N8nClient,
    examples: ExamplesManager,
    formatter: Optional[ResponseFormatter] = None,
) -> OperationRegistry:
    """Create the registry holding all operations."""
    fmt = formatter or ResponseFormatter()
    confirm = ResponseFormatter.confirm
    registry = OperationRegistry()

    def add(
        name: str,
        description: str,
        arguments: Any,
        handler: Any,
        render: Any,
        enterprise: bool = False,
        remote: bool = True,
    ) -> None:
        registry.register(
            Operation(
                name=name,
                description=description,
                arguments=arguments,
                handler=handler,
                render=render,
                enterprise=enterprise,
                remote=remote,
            )
        )

    # Capability catalog (no remote calls)

    async def node_types_list(args: s.NodeTypesListArguments) -> Any:
        return catalog.list_node_types(args.category, args.search)

    async def node_type_info(args: s.NodeTypeInfoArguments) -> Any:
        return catalog.get_node_type(args.node_type)

    async def node_categories(args: s.EmptyArguments) -> Any:
        return catalog.list_categories()

    async def workflow_examples(args: s.WorkflowExamplesArguments) -> Any:
        return catalog.get_workflow_examples(args.use_case)

    async def workflow_examples_search(args: s.WorkflowExamplesSearchArguments) -> Any:
        return await examples.search(
            node_types=args.node_types,
            keywords=args.keywords,
            max_examples=args.max_examples,
            include_full_workflow=args.include_full_workflow,
        )

    add(
        "node_types_list",
        "List all available built-in n8n node types with categories and descriptions",
        s.NodeTypesListArguments,
        node_types_list,
        fmt.node_types_list,
        remote=False,
    )
    add(
        "node_type_info",
        "Get detailed information about a specific node type including parameters and usage",
        s.NodeTypeInfoArguments,
        node_type_info,
        fmt.node_type_info,
        remote=False,
    )
    add(
        "node_categories",
        "List all node categories with descriptions",
        s.EmptyArguments,
        node_categories,
        fmt.node_categories,
        remote=False,
    )
    add(
        "workflow_examples",
        "Get example workflow structures for common use cases",
        s.WorkflowExamplesArguments,
        workflow_examples,
        fmt.workflow_examples,
        remote=False,
    )
    add(
        "workflow_examples_search",
        "Search real working workflow examples by node types or keywords. Returns "
        "workflow JSON from the examples folder containing the requested nodes. Use "
        "this to see how specific nodes are configured in working workflows.",
        s.WorkflowExamplesSearchArguments,
        workflow_examples_search,
        fmt.workflow_examples_search,
        remote=False,
    )

    # Workflows

    async def workflow_list(args: s.WorkflowListArguments) -> Any:
        return await client.get_workflows(args.to_params())

    async def workflow_get(args: s.WorkflowGetArguments) -> Any:
        return await client.get_workflow(args.id, args.exclude_pinned_data)

    async def workflow_create(args: s.WorkflowCreateArguments) -> Any:
        body = args.to_params()
        if args.tags is not None:
            body["tags"] = [{"name": tag} for tag in args.tags]
        return await client.create_workflow(body)

    async def workflow_update(args: s.WorkflowUpdateArguments) -> Any:
        return await client.update_workflow(args.id, args.to_params(exclude={"id"}))

    async def workflow_delete(args: s.WorkflowIdArguments) -> Any:
        return await client.delete_workflow(args.id)

    async def workflow_activate(args: s.WorkflowIdArguments) -> Any:
        return await client.activate_workflow(args.id)

    async def workflow_deactivate(args: s.WorkflowIdArguments) -> Any:
        return await client.deactivate_workflow(args.id)

    async def workflow_transfer(args: s.TransferArguments) -> Any:
        return await client.transfer_workflow(args.id, args.destination_project_id)

    async def workflow_tags_get(args: s.WorkflowIdArguments) -> Any:
        return await client.get_workflow_tags(args.id)

    async def workflow_tags_update(args: s.WorkflowTagsUpdateArguments) -> Any:
        return await client.update_workflow_tags(args.id, args.tag_ids)

    add(
        "workflow_list",
        "List all workflows in the n8n instance",
        s.WorkflowListArguments,
        workflow_list,
        fmt.workflow_list,
    )
    add(
        "workflow_get",
        "Get detailed information about a specific workflow",
        s.WorkflowGetArguments,
        workflow_get,
        fmt.workflow_get,
    )
    add(
        "workflow_create",
        "Create a new workflow with nodes, connections, and settings",
        s.WorkflowCreateArguments,
        workflow_create,
        fmt.workflow_created,
    )
    add(
        "workflow_update",
        "Update an existing workflow's properties",
        s.WorkflowUpdateArguments,
        workflow_update,
        fmt.workflow_updated,
    )
    add(
        "workflow_delete",
        "Delete a workflow permanently",
        s.WorkflowIdArguments,
        workflow_delete,
        confirm('Workflow "{name}" (ID: {id}) deleted successfully'),
    )
    add(
        "workflow_activate",
        "Activate a workflow to enable automatic execution",
        s.WorkflowIdArguments,
        workflow_activate,
        confirm('Workflow "{name}" (ID: {id}) activated successfully'),
    )
    add(
        "workflow_deactivate",
        "Deactivate a workflow to stop automatic execution",
        s.WorkflowIdArguments,
        workflow_deactivate,
        confirm('Workflow "{name}" (ID: {id}) deactivated successfully'),
    )
    add(
        "workflow_transfer",
        "Transfer a workflow to another project",
        s.TransferArguments,
        workflow_transfer,
        confirm(
            "Workflow {id} transferred to project {destination_project_id} successfully"
        ),
        enterprise=True,
    )
    add(
        "workflow_tags_get",
        "Get all tags assigned to a specific workflow",
        s.WorkflowIdArguments,
        workflow_tags_get,
        fmt.workflow_tags,
    )
    add(
        "workflow_tags_update",
        "Update the tags assigned to a workflow",
        s.WorkflowTagsUpdateArguments,
        workflow_tags_update,
        fmt.workflow_tags_updated,
    )

    # Executions

    async def execution_list(args: s.ExecutionListArguments) -> Any:
        return await client.get_executions(args.to_params())

    async def execution_get(args: s.ExecutionGetArguments) -> Any:
        return await client.get_execution(args.id, args.include_data)

    async def execution_delete(args: s.ExecutionIdArguments) -> Any:
        return await client.delete_execution(args.id)

    add(
        "execution_list",
        "List workflow executions with filtering and analysis",
        s.ExecutionListArguments,
        execution_list,
        fmt.execution_list,
    )
    add(
        "execution_get",
        "Get detailed execution information for debugging and analysis",
        s.ExecutionGetArguments,
        execution_get,
        fmt.execution_get,
    )
    add(
        "execution_delete",
        "Delete an execution record",
        s.ExecutionIdArguments,
        execution_delete,
        confirm("Execution {id} deleted successfully"),
    )

    # Tags

    async def tag_list(args: s.PaginationArguments) -> Any:
        return await client.get_tags(args.to_params())

    async def tag_get(args: s.TagIdArguments) -> Any:
        return await client.get_tag(args.id)

    async def tag_create(args: s.TagCreateArguments) -> Any:
        return await client.create_tag(args.name)

    async def tag_update(args: s.TagUpdateArguments) -> Any:
        return await client.update_tag(args.id, args.name)

    async def tag_delete(args: s.TagIdArguments) -> Any:
        return await client.delete_tag(args.id)

    add(
        "tag_list",
        "List all available tags for workflow organization",
        s.PaginationArguments,
        tag_list,
        fmt.tag_list,
    )
    add(
        "tag_get",
        "Get detailed information about a specific tag",
        s.TagIdArguments,
        tag_get,
        fmt.tag_get,
    )
    add(
        "tag_create",
        "Create a new tag for organizing workflows",
        s.TagCreateArguments,
        tag_create,
        confirm('Tag "{name}" created successfully (ID: {id})'),
    )
    add(
        "tag_update",
        "Update an existing tag's name",
        s.TagUpdateArguments,
        tag_update,
        confirm('Tag updated to "{name}" successfully'),
    )
    add(
        "tag_delete",
        "Delete a tag permanently",
        s.TagIdArguments,
        tag_delete,
        confirm('Tag "{name}" (ID: {id}) deleted successfully'),
    )

    # Variables

    async def variable_list(args: s.PaginationArguments) -> Any:
        return await client.get_variables(args.to_params())

    async def variable_create(args: s.VariableCreateArguments) -> Any:
        return await client.create_variable(args.key, args.value)

    async def variable_update(args: s.VariableUpdateArguments) -> Any:
        return await client.update_variable(args.id, args.key, args.value)

    async def variable_delete(args: s.VariableIdArguments) -> Any:
        return await client.delete_variable(args.id)

    add(
        "variable_list",
        "List all environment variables",
        s.PaginationArguments,
        variable_list,
        fmt.variable_list,
    )
    add(
        "variable_create",
        "Create a new environment variable",
        s.VariableCreateArguments,
        variable_create,
        confirm('Variable "{key}" created successfully'),
    )
    add(
        "variable_update",
        "Update an existing environment variable",
        s.VariableUpdateArguments,
        variable_update,
        confirm('Variable "{key}" updated successfully'),
    )
    add(
        "variable_delete",
        "Delete an environment variable",
        s.VariableIdArguments,
        variable_delete,
        confirm("Variable {id} deleted successfully"),
    )

    # Projects

    async def project_list(args: s.PaginationArguments) -> Any:
        return await client.get_projects(args.to_params())

    async def project_create(args: s.ProjectCreateArguments) -> Any:
        return await client.create_project(args.name)

    async def project_update(args: s.ProjectUpdateArguments) -> Any:
        return await client.update_project(args.id, args.name)

    async def project_delete(args: s.ProjectIdArguments) -> Any:
        return await client.delete_project(args.id)

    add(
        "project_list",
        "List all projects",
        s.PaginationArguments,
        project_list,
        fmt.project_list,
        enterprise=True,
    )
    add(
        "project_create",
        "Create a new project",
        s.ProjectCreateArguments,
        project_create,
        confirm('Project "{name}" created successfully'),
        enterprise=True,
    )
    add(
        "project_update",
        "Update a project's properties",
        s.ProjectUpdateArguments,
        project_update,
        confirm('Project {id} updated to "{name}" successfully'),
        enterprise=True,
    )
    add(
        "project_delete",
        "Delete a project",
        s.ProjectIdArguments,
        project_delete,
        confirm("Project {id} deleted successfully"),
        enterprise=True,
    )

    # Credentials

    async def credential_create(args: s.CredentialCreateArguments) -> Any:
        return await client.create_credential(args.name, args.credential_type, args.data)

    async def credential_delete(args: s.CredentialIdArguments) -> Any:
        return await client.delete_credential(args.id)

    async def credential_schema_get(args: s.CredentialSchemaGetArguments) -> Any:
        return await client.get_credential_schema(args.credential_type_name)

    async def credential_transfer(args: s.TransferArguments) -> Any:
        return await client.transfer_credential(args.id, args.destination_project_id)

    add(
        "credential_create",
        "Create a new credential for workflow authentication",
        s.CredentialCreateArguments,
        credential_create,
        fmt.credential_created,
    )
    add(
        "credential_delete",
        "Delete a credential permanently",
        s.CredentialIdArguments,
        credential_delete,
        confirm('Credential "{name}" (ID: {id}) deleted successfully'),
    )
    add(
        "credential_schema_get",
        "Get the schema for a specific credential type",
        s.CredentialSchemaGetArguments,
        credential_schema_get,
        fmt.credential_schema,
    )
    add(
        "credential_transfer",
        "Transfer a credential to another project",
        s.TransferArguments,
        credential_transfer,
        confirm(
            "Credential {id} transferred to project {destination_project_id} successfully"
        ),
        enterprise=True,
    )

    # Audit

    async def audit_generate(args: s.AuditGenerateArguments) -> Any:
        return await client.generate_audit(args.to_params())

    add(
        "audit_generate",
        "Generate a comprehensive security audit report",
        s.AuditGenerateArguments,
        audit_generate,
        fmt.audit_report,
    )

    # Users

    async def user_list(args: s.UserListArguments) -> Any:
        return await client.get_users(args.to_params())

    async def user_get(args: s.UserGetArguments) -> Any:
        return await client.get_user(args.identifier, args.include_role)

    async def user_create(args: s.UserCreateArguments) -> Any:
        return await client.create_users(args.to_params()["users"])

    async def user_delete(args: s.UserIdentifierArguments) -> Any:
        return await client.delete_user(args.identifier)

    async def user_role_change(args: s.UserRoleChangeArguments) -> Any:
        return await client.change_user_role(args.identifier, args.new_role_name)

    add(
        "user_list",
        "List all users in the n8n instance",
        s.UserListArguments,
        user_list,
        fmt.user_list,
        enterprise=True,
    )
    add(
        "user_get",
        "Get detailed information about a specific user",
        s.UserGetArguments,
        user_get,
        fmt.user_get,
        enterprise=True,
    )
    add(
        "user_create",
        "Create new users in the n8n instance",
        s.UserCreateArguments,
        user_create,
        fmt.users_created,
        enterprise=True,
    )
    add(
        "user_delete",
        "Delete a user from the n8n instance",
        s.UserIdentifierArguments,
        user_delete,
        confirm("User {identifier} deleted successfully"),
        enterprise=True,
    )
    add(
        "user_role_change",
        "Change a user's global role",
        s.UserRoleChangeArguments,
        user_role_change,
        confirm("User {identifier} role changed to {new_role_name} successfully"),
        enterprise=True,
    )

    # Source control

    async def source_control_pull(args: s.SourceControlPullArguments) -> Any:
        return await client.pull_from_source_control(args.to_params())

    add(
        "source_control_pull",
        "Pull changes from the connected source control repository",
        s.SourceControlPullArguments,
        source_control_pull,
        fmt.source_control_pull,
    )

    return registry
