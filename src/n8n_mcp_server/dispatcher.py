"""Operation registry and the dispatch pipeline.

``OperationDispatcher.invoke`` runs validate -> handler -> format for a named
operation and always resolves to a ``ToolResponse``; no exception escapes to
the transport.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Type

from .client import N8nApiError
from .response_formatter import Renderer, ToolResponse
from .schemas import (
    ArgumentValidationError,
    OperationArguments,
    input_schema,
    validate_arguments,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class Operation:
    """A named unit of work: argument schema, handler and rendering rule."""

    name: str
    description: str
    arguments: Type[OperationArguments]
    handler: Handler
    render: Renderer
    enterprise: bool = False
    remote: bool = True

    @property
    def full_description(self) -> str:
        if self.enterprise:
            return f"{self.description} (Enterprise feature)"
        return self.description

    @property
    def input_schema(self) -> Dict[str, Any]:
        return input_schema(self.arguments)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.full_description,
            "inputSchema": self.input_schema,
        }


class OperationRegistry:
    """Name -> Operation map, filled once at startup."""

    def __init__(self) -> None:
        self._operations: Dict[str, Operation] = {}

    def register(self, operation: Operation) -> None:
        if operation.name in self._operations:
            raise ValueError(f"Operation already registered: {operation.name}")
        self._operations[operation.name] = operation

    def get(self, name: str) -> Optional[Operation]:
        return self._operations.get(name)

    def names(self) -> List[str]:
        return list(self._operations)

    def list_operations(self) -> List[Dict[str, Any]]:
        """Name, description and input schema of every operation."""
        return [operation.describe() for operation in self._operations.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)


class OperationDispatcher:
    """Resolves, validates and runs operations."""

    def __init__(self, registry: OperationRegistry):
        self.registry = registry

    def list_operations(self) -> List[Dict[str, Any]]:
        return self.registry.list_operations()

    async def invoke(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> ToolResponse:
        operation = self.registry.get(name)
        if operation is None:
            logger.warning(f"Unknown operation requested: {name}")
            return ToolResponse.error(f"Unknown operation: {name}")

        try:
            args = validate_arguments(operation.arguments, arguments)
        except ArgumentValidationError as e:
            logger.info(f"Rejected arguments for {name}: {e}")
            return ToolResponse.error(f"Validation failed for '{name}': {e}")

        logger.debug(f"Invoking operation {name}")

        try:
            result = await operation.handler(args)
            return operation.render(args, result)
        except N8nApiError as e:
            logger.error(f"Operation {name} failed ({e.kind.value}): {e.message}")
            detail = f"HTTP status: {e.status}" if e.status is not None else None
            return ToolResponse.error(f"Operation '{name}' failed: {e.message}", detail)
        except Exception as e:
            logger.exception(f"Unexpected error in operation {name}")
            return ToolResponse.error(f"Operation '{name}' failed: {e}")

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Invoke an operation and return the MCP ``tools/call`` result."""
        response = await self.invoke(name, arguments)
        return response.to_mcp()
