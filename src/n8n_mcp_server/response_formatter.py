"""Response formatting: turns raw n8n API results into readable text.

Every operation ends in a ``ToolResponse``. The renderers here are defensive:
missing or oddly shaped fields show up as placeholders instead of raising.
"""

import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import yaml
from pydantic import BaseModel

from .catalog import CORE_NODES

logger = logging.getLogger(__name__)

Renderer = Callable[[Any, Any], "ToolResponse"]

UNKNOWN = "Unknown"
NONE = "None"
NOT_AVAILABLE = "N/A"

STATUS_ICONS = {"success": "✅", "error": "❌", "crashed": "❌"}


class ToolResponse(BaseModel):
    """Uniform success/failure result of an operation."""

    success: bool
    message: str
    detail: Optional[str] = None

    @classmethod
    def ok(cls, message: str, detail: Optional[str] = None) -> "ToolResponse":
        return cls(success=True, message=message, detail=detail)

    @classmethod
    def error(cls, message: str, detail: Optional[str] = None) -> "ToolResponse":
        return cls(success=False, message=message, detail=detail)

    @property
    def text(self) -> str:
        head = f"✅ {self.message}" if self.success else f"❌ Error: {self.message}"
        if self.detail:
            label = "" if self.success else "Details: "
            return f"{head}\n\n{label}{self.detail}"
        return head

    def to_mcp(self) -> Dict[str, Any]:
        """MCP ``tools/call`` result shape."""
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": not self.success,
        }


class _Placeholders(dict):
    """Mapping for str.format_map that fills unknown keys with a placeholder."""

    def __missing__(self, key: str) -> str:
        return UNKNOWN


def _get(data: Any, *keys: Any, default: Any = None) -> Any:
    """Nested lookup that tolerates missing keys and non-dict values."""
    current = data
    for key in keys:
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, list) and isinstance(key, int):
            current = current[key] if -len(current) <= key < len(current) else None
        else:
            return default
        if current is None:
            return default
    return current


def _items(result: Any) -> List[Dict[str, Any]]:
    """Items of a paginated envelope (``data`` or ``items``) or of a bare list."""
    if isinstance(result, dict):
        items = result.get("data")
        if items is None:
            items = result.get("items")
    else:
        items = result
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _cursor_note(result: Any) -> str:
    cursor = _get(result, "nextCursor")
    return f"\n\n📄 Next cursor: {cursor}" if cursor else ""


def _parse_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _timestamp(value: Any) -> str:
    parsed = _parse_time(value)
    if parsed is None:
        return str(value) if value else UNKNOWN
    return parsed.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _duration(started: Any, stopped: Any) -> Optional[int]:
    start, stop = _parse_time(started), _parse_time(stopped)
    if start is None or stop is None:
        return None
    try:
        return round((stop - start).total_seconds())
    except TypeError:
        # naive vs aware timestamps
        return None


def _tag_names(tags: Any) -> str:
    if not isinstance(tags, list):
        return NONE
    names = [str(tag.get("name")) for tag in tags if isinstance(tag, dict) and tag.get("name")]
    return ", ".join(names) or NONE


def _count(value: Any) -> int:
    return len(value) if isinstance(value, (list, dict)) else 0


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def _status_line(status: Any) -> str:
    if not isinstance(status, str) or not status:
        return f"⏳ {UNKNOWN}"
    return f"{STATUS_ICONS.get(status, '⏳')} {status}"


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def dump(data: Any) -> str:
    """Serialize structured data as YAML for LLM readability, JSON as fallback."""
    try:
        return yaml.safe_dump(
            data, sort_keys=False, default_flow_style=False, allow_unicode=True
        ).rstrip()
    except yaml.YAMLError as e:
        logger.error(f"YAML serialization failed, falling back to JSON: {e}")
        return to_json(data)


class ResponseFormatter:
    """Per-resource rendering rules for operation results."""

    @staticmethod
    def confirm(template: str) -> Renderer:
        """Fixed confirmation message filled from the arguments and the result.

        Template fields use the snake_case argument names and the keys of the
        returned entity (when the API returns one).
        """

        def render(args: Any, result: Any) -> ToolResponse:
            values = _Placeholders()
            if isinstance(args, BaseModel):
                values.update(
                    {k: v for k, v in args.model_dump().items() if v is not None}
                )
            if isinstance(result, dict):
                values.update({k: v for k, v in result.items() if v is not None})
            return ToolResponse.ok(template.format_map(values))

        return render

    # Workflows

    def workflow_list(self, args: Any, result: Any) -> ToolResponse:
        workflows = _items(result)
        blocks = [
            f"• **{w.get('name') or UNKNOWN}** (ID: {w.get('id') or UNKNOWN})\n"
            f"  Status: {'🟢 Active' if w.get('active') else '🔴 Inactive'}\n"
            f"  Nodes: {_count(w.get('nodes'))}\n"
            f"  Tags: {_tag_names(w.get('tags'))}\n"
            f"  Created: {_timestamp(w.get('createdAt'))}"
            for w in workflows
        ]
        return ToolResponse.ok(
            f"Found {len(workflows)} workflows",
            "\n\n".join(blocks) + _cursor_note(result),
        )

    def workflow_get(self, args: Any, result: Any) -> ToolResponse:
        workflow = result if isinstance(result, dict) else {}
        nodes = workflow.get("nodes")
        nodes = [n for n in nodes if isinstance(n, dict)] if isinstance(nodes, list) else []
        settings = workflow.get("settings") if isinstance(workflow.get("settings"), dict) else {}

        node_lines = []
        for node in nodes:
            position = node.get("position")
            position_text = (
                ", ".join(str(p) for p in position)
                if isinstance(position, list) and position
                else "Not set"
            )
            node_lines.append(
                f"  • **{node.get('name') or UNKNOWN}** ({node.get('type') or UNKNOWN})\n"
                f"    Position: [{position_text}]\n"
                f"    Disabled: {_yes_no(node.get('disabled'))}"
            )

        info = (
            f"**Workflow: {workflow.get('name') or UNKNOWN}**\n"
            f"ID: {workflow.get('id') or UNKNOWN}\n"
            f"Status: {'🟢 Active' if workflow.get('active') else '🔴 Inactive'}\n"
            f"Nodes: {len(nodes)}\n"
            f"Connections: {_count(workflow.get('connections'))}\n"
            f"Tags: {_tag_names(workflow.get('tags'))}\n"
            f"Created: {_timestamp(workflow.get('createdAt'))}\n"
            f"Updated: {_timestamp(workflow.get('updatedAt'))}\n\n"
            f"**Nodes:**\n{chr(10).join(node_lines) or 'No nodes'}\n\n"
            f"**Settings:**\n"
            f"  • Save execution progress: {_yes_no(settings.get('saveExecutionProgress'))}\n"
            f"  • Save manual executions: {_yes_no(settings.get('saveManualExecutions'))}\n"
            f"  • Execution timeout: {settings.get('executionTimeout') or 'Default'}\n"
            f"  • Timezone: {settings.get('timezone') or 'Default'}"
        )
        return ToolResponse.ok("Workflow details retrieved", info)

    def workflow_created(self, args: Any, result: Any) -> ToolResponse:
        workflow = result if isinstance(result, dict) else {}
        name = workflow.get("name") or getattr(args, "name", UNKNOWN)
        return ToolResponse.ok(
            f'Workflow "{name}" created successfully',
            f"ID: {workflow.get('id') or UNKNOWN}\n"
            f"Status: {'Active' if workflow.get('active') else 'Inactive'}\n"
            f"Nodes: {_count(workflow.get('nodes'))}",
        )

    def workflow_updated(self, args: Any, result: Any) -> ToolResponse:
        workflow = result if isinstance(result, dict) else {}
        name = workflow.get("name") or getattr(args, "name", None) or UNKNOWN
        return ToolResponse.ok(
            f'Workflow "{name}" updated successfully',
            f"ID: {workflow.get('id') or getattr(args, 'id', UNKNOWN)}\n"
            f"Status: {'Active' if workflow.get('active') else 'Inactive'}",
        )

    def workflow_tags(self, args: Any, result: Any) -> ToolResponse:
        tags = _items(result)
        lines = [f"• {t.get('name') or UNKNOWN} (ID: {t.get('id') or UNKNOWN})" for t in tags]
        return ToolResponse.ok(
            "Workflow tags retrieved", "\n".join(lines) or "No tags assigned"
        )

    def workflow_tags_updated(self, args: Any, result: Any) -> ToolResponse:
        tags = _items(result)
        names = ", ".join(str(t.get("name")) for t in tags if t.get("name"))
        return ToolResponse.ok(
            "Workflow tags updated successfully", f"Tags: {names or 'No tags'}"
        )

    # Executions

    def execution_list(self, args: Any, result: Any) -> ToolResponse:
        executions = _items(result)
        blocks = []
        for execution in executions:
            duration = _duration(execution.get("startedAt"), execution.get("stoppedAt"))
            finished = (
                f"Finished: {_timestamp(execution.get('stoppedAt'))}"
                if execution.get("stoppedAt")
                else "Still running"
            )
            blocks.append(
                f"• **Execution {execution.get('id') or UNKNOWN}**\n"
                f"  Workflow: {_get(execution, 'workflowData', 'name') or execution.get('workflowId') or UNKNOWN}\n"
                f"  Status: {_status_line(execution.get('status'))}\n"
                f"  Started: {_timestamp(execution.get('startedAt'))}\n"
                f"  {finished}\n"
                f"  Duration: {f'{duration}s' if duration is not None else NOT_AVAILABLE}"
            )
        return ToolResponse.ok(
            f"Found {len(executions)} executions",
            "\n\n".join(blocks) + _cursor_note(result),
        )

    def execution_get(self, args: Any, result: Any) -> ToolResponse:
        execution = result if isinstance(result, dict) else {}
        run_data = _get(execution, "data", "resultData", "runData", default={})
        if not isinstance(run_data, dict):
            run_data = {}

        lines = [
            f"**Execution {execution.get('id') or UNKNOWN}**",
            f"Workflow: {_get(execution, 'workflowData', 'name') or execution.get('workflowId') or UNKNOWN}",
            f"Status: {_status_line(execution.get('status'))}",
            f"Mode: {execution.get('mode') or UNKNOWN}",
            f"Started: {_timestamp(execution.get('startedAt'))}",
        ]
        if execution.get("stoppedAt"):
            lines.append(f"Finished: {_timestamp(execution.get('stoppedAt'))}")
            duration = _duration(execution.get("startedAt"), execution.get("stoppedAt"))
            lines.append(
                f"Duration: {f'{duration}s' if duration is not None else NOT_AVAILABLE}"
            )
        lines.append(f"Nodes executed: {len(run_data)}")

        error = _get(execution, "data", "resultData", "error")
        if error:
            lines.extend(["", "**❌ Error Details:**", "```", dump(error), "```"])

        if run_data and getattr(args, "include_data", False):
            lines.extend(["", "**Node Execution Summary:**"])
            for node_name, node_runs in run_data.items():
                runs = node_runs if isinstance(node_runs, list) else [node_runs]
                runs = [run for run in runs if isinstance(run, dict)]
                lines.append(f"  • **{node_name}**: {len(runs)} run(s)")
                for index, run in enumerate(runs, start=1):
                    run_error = _get(run, "error")
                    if run_error:
                        message = _get(run_error, "message") or str(run_error)
                        lines.append(f"    Run {index}: ❌ ERROR - {message}")
                    else:
                        items = _get(run, "data", "main", 0, default=[])
                        lines.append(
                            f"    Run {index}: ✅ SUCCESS - {_count(items)} items"
                        )

        return ToolResponse.ok("Execution details retrieved", "\n".join(lines))

    # Tags

    def tag_list(self, args: Any, result: Any) -> ToolResponse:
        tags = _items(result)
        blocks = [
            f"• **{t.get('name') or UNKNOWN}** (ID: {t.get('id') or UNKNOWN})\n"
            f"  Created: {_timestamp(t.get('createdAt'))}"
            for t in tags
        ]
        return ToolResponse.ok(
            f"Found {len(tags)} tags", "\n".join(blocks) + _cursor_note(result)
        )

    def tag_get(self, args: Any, result: Any) -> ToolResponse:
        tag = result if isinstance(result, dict) else {}
        return ToolResponse.ok(
            "Tag details retrieved",
            f"**Tag: {tag.get('name') or UNKNOWN}**\n"
            f"ID: {tag.get('id') or UNKNOWN}\n"
            f"Created: {_timestamp(tag.get('createdAt'))}\n"
            f"Updated: {_timestamp(tag.get('updatedAt'))}",
        )

    # Variables

    def variable_list(self, args: Any, result: Any) -> ToolResponse:
        variables = _items(result)
        blocks = []
        for variable in variables:
            value = str(variable.get("value") or "")
            if len(value) > 50:
                value = value[:50] + "..."
            blocks.append(
                f"• **{variable.get('key') or UNKNOWN}** (ID: {variable.get('id') or UNKNOWN})\n"
                f"  Value: {value}"
            )
        return ToolResponse.ok(
            f"Found {len(variables)} variables",
            "\n".join(blocks) + _cursor_note(result),
        )

    # Projects

    def project_list(self, args: Any, result: Any) -> ToolResponse:
        projects = _items(result)
        blocks = [
            f"• **{p.get('name') or UNKNOWN}** (ID: {p.get('id') or UNKNOWN})\n"
            f"  Type: {p.get('type') or 'Standard'}"
            for p in projects
        ]
        return ToolResponse.ok(
            f"Found {len(projects)} projects",
            "\n".join(blocks) + _cursor_note(result),
        )

    # Users

    def _user_block(self, user: Dict[str, Any]) -> str:
        full_name = " ".join(
            str(part) for part in (user.get("firstName"), user.get("lastName")) if part
        )
        return (
            f"• **{user.get('email') or UNKNOWN}** (ID: {user.get('id') or UNKNOWN})\n"
            f"  Name: {full_name or NOT_AVAILABLE}\n"
            f"  Role: {user.get('role') or NOT_AVAILABLE}\n"
            f"  Pending: {_yes_no(user.get('isPending'))}\n"
            f"  Created: {_timestamp(user.get('createdAt'))}"
        )

    def user_list(self, args: Any, result: Any) -> ToolResponse:
        users = _items(result)
        return ToolResponse.ok(
            f"Found {len(users)} users",
            "\n\n".join(self._user_block(u) for u in users) + _cursor_note(result),
        )

    def user_get(self, args: Any, result: Any) -> ToolResponse:
        user = result if isinstance(result, dict) else {}
        return ToolResponse.ok("User details retrieved", self._user_block(user))

    def users_created(self, args: Any, result: Any) -> ToolResponse:
        entries = result if isinstance(result, list) else []
        lines = []
        for entry in entries:
            user = _get(entry, "user", default={})
            if _get(entry, "error"):
                lines.append(f"• {_get(user, 'email') or UNKNOWN}: ❌ {entry['error']}")
                continue
            lines.append(
                f"• **{_get(user, 'email') or UNKNOWN}** (ID: {_get(user, 'id') or UNKNOWN})\n"
                f"  Invite URL: {_get(user, 'inviteAcceptUrl') or NOT_AVAILABLE}\n"
                f"  Email sent: {_yes_no(_get(user, 'emailSent'))}"
            )
        return ToolResponse.ok(
            f"Processed {len(entries)} user invitation(s)", "\n".join(lines) or None
        )

    # Credentials

    def credential_created(self, args: Any, result: Any) -> ToolResponse:
        credential = result if isinstance(result, dict) else {}
        name = credential.get("name") or getattr(args, "name", UNKNOWN)
        return ToolResponse.ok(
            f'Credential "{name}" created successfully',
            f"ID: {credential.get('id') or UNKNOWN}\n"
            f"Type: {credential.get('type') or getattr(args, 'credential_type', UNKNOWN)}",
        )

    def credential_schema(self, args: Any, result: Any) -> ToolResponse:
        type_name = getattr(args, "credential_type_name", UNKNOWN)
        return ToolResponse.ok(
            f'Schema for credential type "{type_name}"',
            f"```yaml\n{dump(result)}\n```",
        )

    # Audit and source control

    def audit_report(self, args: Any, result: Any) -> ToolResponse:
        reports = result if isinstance(result, dict) else {}
        lines = ["**🔍 Security Audit Report**", ""]
        if not reports:
            lines.append("No risks reported")

        for report_name, report in reports.items():
            lines.append(f"**{report_name}**")
            lines.append(f"Risk Level: {_get(report, 'risk') or UNKNOWN}")
            lines.append("")
            sections = _get(report, "sections", default=[])
            for section in sections if isinstance(sections, list) else []:
                lines.append(f"• **{_get(section, 'title') or UNKNOWN}**")
                lines.append(f"  {_get(section, 'description') or NOT_AVAILABLE}")
                lines.append(
                    f"  💡 Recommendation: {_get(section, 'recommendation') or NONE}"
                )
                locations = _get(section, "location", default=[])
                if isinstance(locations, list) and locations:
                    lines.append("  📍 Locations:")
                    for loc in locations:
                        if _get(loc, "workflowName"):
                            lines.append(
                                f"    - Workflow: {loc['workflowName']} ({_get(loc, 'workflowId') or UNKNOWN})"
                            )
                            if _get(loc, "nodeName"):
                                lines.append(
                                    f"      Node: {loc['nodeName']} ({_get(loc, 'nodeType') or UNKNOWN})"
                                )
                        elif _get(loc, "name"):
                            lines.append(
                                f"    - {_get(loc, 'kind') or UNKNOWN}: {loc['name']}"
                            )
                lines.append("")
            lines.append("")

        return ToolResponse.ok("Security audit completed", "\n".join(lines).rstrip())

    def source_control_pull(self, args: Any, result: Any) -> ToolResponse:
        imported = result if isinstance(result, dict) else {}
        added = _get(imported, "variables", "added", default=[])
        changed = _get(imported, "variables", "changed", default=[])
        credentials = _get(imported, "credentials", default=[])
        workflows = _get(imported, "workflows", default=[])
        tags = _get(imported, "tags", "tags", default=[])

        def names(entries: Any) -> str:
            if not isinstance(entries, list):
                return NONE
            labels = [
                str(e.get("name") or e.get("id")) if isinstance(e, dict) else str(e)
                for e in entries
            ]
            return ", ".join(labels) or NONE

        return ToolResponse.ok(
            "Pulled changes from source control",
            f"Workflows ({_count(workflows)}): {names(workflows)}\n"
            f"Credentials ({_count(credentials)}): {names(credentials)}\n"
            f"Tags ({_count(tags)}): {names(tags)}\n"
            f"Variables added: {names(added)}\n"
            f"Variables changed: {names(changed)}",
        )

    # Capability catalog

    def node_types_list(self, args: Any, result: Any) -> ToolResponse:
        return ToolResponse.ok(
            f"Found {_get(result, 'totalNodes', default=0)} node types", to_json(result)
        )

    def node_type_info(self, args: Any, result: Any) -> ToolResponse:
        node_type = getattr(args, "node_type", UNKNOWN)
        if result is None:
            available = "\n".join(f"- {name}" for name in CORE_NODES)
            return ToolResponse.error(
                f'Node type "{node_type}" not found in built-in nodes',
                f"Available node types:\n{available}\n\n"
                "You can also use node_types_list to browse nodes by category.",
            )
        return ToolResponse.ok(f'Node type "{node_type}"', to_json(result))

    def node_categories(self, args: Any, result: Any) -> ToolResponse:
        return ToolResponse.ok("Node categories", to_json(result))

    def workflow_examples(self, args: Any, result: Any) -> ToolResponse:
        use_case = getattr(args, "use_case", None)
        message = f'Example workflow "{use_case}"' if use_case else "Example workflows"
        return ToolResponse.ok(message, to_json(result))

    def workflow_examples_search(self, args: Any, result: Any) -> ToolResponse:
        if result is None:
            return ToolResponse.ok(
                "No examples directory found",
                "Create the configured examples folder (examples/workflows by default) "
                "with workflow JSON files.",
            )
        return ToolResponse.ok(
            f"Found {result['totalMatches']} matching example workflows, "
            f"returning {result['returnedExamples']}",
            to_json(result),
        )
