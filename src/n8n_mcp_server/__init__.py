"""Package initialization for n8n_mcp_server."""

__version__ = "0.1.0"
__description__ = "MCP server exposing the n8n public REST API as tools"

from .client import N8nApiError, N8nClient
from .config import Config
from .dispatcher import OperationDispatcher

__all__ = [
    "Config",
    "N8nClient",
    "N8nApiError",
    "OperationDispatcher",
]
