"""Search over a local folder of example workflow JSON files."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
import aiofiles.os

from .config import Config

logger = logging.getLogger(__name__)

# Upper bound on files read per search
MAX_EXAMPLE_FILES = 20


def _node_type_matches(criterion: str, node_type: str) -> bool:
    return bool(node_type) and (criterion in node_type or node_type in criterion)


class ExamplesManager:
    """Finds example workflows by the node types they use or by keyword."""

    def __init__(self, config: Config):
        self.config = config

    @property
    def examples_dir(self) -> Path:
        return Path(self.config.examples_dir)

    async def _example_files(self) -> List[Path]:
        names = await aiofiles.os.listdir(self.examples_dir)
        files = []
        for name in sorted(names):
            path = self.examples_dir / name
            if path.suffix.lower() == ".json" and await aiofiles.os.path.isfile(path):
                files.append(path)
        return files[:MAX_EXAMPLE_FILES]

    async def _load_workflow(self, path: Path) -> Optional[Dict[str, Any]]:
        """Read one example file; unreadable or invalid files yield None."""
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read example {path.name}: {e}")
            return None

        if not content.strip():
            return None

        try:
            workflow = json.loads(content)
        except ValueError as e:
            logger.warning(f"Skipping invalid example {path.name}: {e}")
            return None

        if not isinstance(workflow, dict):
            logger.warning(f"Skipping example {path.name}: not a workflow object")
            return None
        return workflow

    async def search(
        self,
        node_types: List[str],
        keywords: List[str],
        max_examples: int = 2,
        include_full_workflow: bool = False,
    ) -> Optional[Dict[str, Any]]:
        """Search example workflows.

        Workflows are ranked by how many criteria (node types, keywords) they
        satisfy. With no criteria every valid example matches. Returns None when
        the examples directory does not exist.
        """
        if not await aiofiles.os.path.isdir(self.examples_dir):
            logger.info(f"Examples directory not found: {self.examples_dir}")
            return None

        matches: List[Dict[str, Any]] = []

        for path in await self._example_files():
            workflow = await self._load_workflow(path)
            if workflow is None:
                continue

            nodes = workflow.get("nodes")
            if not isinstance(nodes, list):
                nodes = []
            nodes = [node for node in nodes if isinstance(node, dict)]
            workflow_node_types = [str(node.get("type") or "") for node in nodes]

            match_reasons: List[str] = []

            if node_types:
                found = [
                    criterion
                    for criterion in node_types
                    if any(_node_type_matches(criterion, t) for t in workflow_node_types)
                ]
                if found:
                    match_reasons.append(f"Contains nodes: {', '.join(found)}")

            if keywords:
                search_text = f"{path.name} {workflow.get('name') or ''}".lower()
                found = [kw for kw in keywords if kw.lower() in search_text]
                if found:
                    match_reasons.append(f"Matches keywords: {', '.join(found)}")

            if not node_types and not keywords:
                match_reasons.append("General workflow example")

            if not match_reasons:
                continue

            info: Dict[str, Any] = {
                "filename": path.name,
                "name": workflow.get("name") or "Unnamed Workflow",
                "matchReasons": match_reasons,
                "nodeCount": len(nodes),
                "nodeTypes": list(dict.fromkeys(t for t in workflow_node_types if t)),
            }

            if include_full_workflow:
                info["fullWorkflow"] = workflow
            elif node_types:
                relevant_nodes = [
                    node
                    for node in nodes
                    if any(
                        _node_type_matches(criterion, str(node.get("type") or ""))
                        for criterion in node_types
                    )
                ]
                info["relevantNodes"] = relevant_nodes

                connections = workflow.get("connections")
                if isinstance(connections, dict):
                    info["relevantConnections"] = {
                        node["name"]: connections[node["name"]]
                        for node in relevant_nodes
                        if isinstance(node.get("name"), str)
                        and node["name"] in connections
                    }

            matches.append(info)

        # sorted() is stable, so ties keep file order
        matches = sorted(matches, key=lambda m: len(m["matchReasons"]), reverse=True)
        returned = matches[:max_examples]

        return {
            "searchCriteria": {
                "nodeTypes": node_types,
                "keywords": keywords,
                "maxExamples": max_examples,
                "includeFullWorkflow": include_full_workflow,
            },
            "totalMatches": len(matches),
            "returnedExamples": len(returned),
            "examples": returned,
        }
