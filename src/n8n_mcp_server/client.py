"""HTTP client for the n8n public REST API.

Every request goes through ``N8nClient._request``, which is the only place
where transport failures and HTTP error statuses are turned into
``N8nApiError``.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import Config

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-N8N-API-KEY"

# Methods that are safe to send again when no response came back
IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE"})


class ErrorKind(str, Enum):
    """Normalized categories of remote API failures."""

    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    API = "api"
    NETWORK = "network"


class N8nApiError(Exception):
    """A failed call to the n8n API, tagged with its normalized kind."""

    def __init__(self, kind: ErrorKind, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status

    @classmethod
    def from_response(cls, response: httpx.Response) -> "N8nApiError":
        status = response.status_code
        if status == 401:
            return cls(
                ErrorKind.AUTHENTICATION,
                "Authentication failed. Check your API key.",
                status,
            )
        if status == 403:
            return cls(
                ErrorKind.PERMISSION,
                "Insufficient permissions for this operation.",
                status,
            )
        if status == 404:
            return cls(ErrorKind.NOT_FOUND, "Resource not found.", status)
        if status == 429:
            return cls(
                ErrorKind.RATE_LIMITED,
                "Rate limit exceeded. Please retry later.",
                status,
            )
        return cls(
            ErrorKind.API, f"API Error ({status}): {_error_message(response)}", status
        )

    @classmethod
    def from_transport_error(cls, error: Exception) -> "N8nApiError":
        cause = str(error) or type(error).__name__
        return cls(ErrorKind.NETWORK, f"Network Error: {cause}")


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the error message from an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    if response.text:
        return response.text
    return response.reason_phrase or "Unknown error"


def _segment(value: Any) -> str:
    return quote(str(value), safe="@")


class N8nClient:
    """Thin async binding over the n8n REST API (``/api/v1``)."""

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.base_url = config.api_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=config.timeout_seconds,
            headers={
                API_KEY_HEADER: config.api_key or "",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": "n8n-MCP-Server/0.1.0",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "N8nClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _build_query(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Drop unset parameters and comma-join list values."""
        query: Dict[str, Any] = {}
        for key, value in (params or {}).items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                value = ",".join(str(item) for item in value)
            query[key] = value
        return query

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"No response from n8n (attempt {retry_state.attempt_number}), retrying: {exc}"
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying idempotent calls that got no response."""
        attempts = 1
        if method in IDEMPOTENT_METHODS:
            attempts += self.config.max_retries

        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=self.config.retry_backoff, max=30),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._client.request(method, path, **kwargs)
        return response

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Make a request and return the parsed JSON body."""
        kwargs: Dict[str, Any] = {}
        query = self._build_query(params)
        if query:
            kwargs["params"] = query
        if json is not None:
            kwargs["json"] = json

        logger.info(f"API Request: {method} {path}")

        try:
            response = await self._send(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"API Error: {method} {path} got no response: {e!r}")
            raise N8nApiError.from_transport_error(e) from e

        logger.debug(f"Response status: {response.status_code}")

        if response.status_code >= 400:
            logger.error(
                f"API Error ({response.status_code}) for {method} {path}: {response.text}"
            )
            raise N8nApiError.from_response(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # Workflows

    async def get_workflows(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", "/workflows", params=params)

    async def get_workflow(
        self, workflow_id: str, exclude_pinned_data: Optional[bool] = None
    ) -> Any:
        return await self._request(
            "GET",
            f"/workflows/{_segment(workflow_id)}",
            params={"excludePinnedData": exclude_pinned_data},
        )

    async def create_workflow(self, workflow: Dict[str, Any]) -> Any:
        return await self._request("POST", "/workflows", json=workflow)

    async def update_workflow(self, workflow_id: str, workflow: Dict[str, Any]) -> Any:
        return await self._request(
            "PUT", f"/workflows/{_segment(workflow_id)}", json=workflow
        )

    async def delete_workflow(self, workflow_id: str) -> Any:
        return await self._request("DELETE", f"/workflows/{_segment(workflow_id)}")

    async def activate_workflow(self, workflow_id: str) -> Any:
        return await self._request(
            "POST", f"/workflows/{_segment(workflow_id)}/activate"
        )

    async def deactivate_workflow(self, workflow_id: str) -> Any:
        return await self._request(
            "POST", f"/workflows/{_segment(workflow_id)}/deactivate"
        )

    async def transfer_workflow(
        self, workflow_id: str, destination_project_id: str
    ) -> Any:
        return await self._request(
            "PUT",
            f"/workflows/{_segment(workflow_id)}/transfer",
            json={"destinationProjectId": destination_project_id},
        )

    async def get_workflow_tags(self, workflow_id: str) -> Any:
        return await self._request("GET", f"/workflows/{_segment(workflow_id)}/tags")

    async def update_workflow_tags(self, workflow_id: str, tag_ids: List[str]) -> Any:
        return await self._request(
            "PUT",
            f"/workflows/{_segment(workflow_id)}/tags",
            json=[{"id": tag_id} for tag_id in tag_ids],
        )

    # Executions

    async def get_executions(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", "/executions", params=params)

    async def get_execution(
        self, execution_id: str, include_data: Optional[bool] = None
    ) -> Any:
        return await self._request(
            "GET",
            f"/executions/{_segment(execution_id)}",
            params={"includeData": include_data},
        )

    async def delete_execution(self, execution_id: str) -> Any:
        return await self._request("DELETE", f"/executions/{_segment(execution_id)}")

    # Tags

    async def get_tags(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", "/tags", params=params)

    async def get_tag(self, tag_id: str) -> Any:
        return await self._request("GET", f"/tags/{_segment(tag_id)}")

    async def create_tag(self, name: str) -> Any:
        return await self._request("POST", "/tags", json={"name": name})

    async def update_tag(self, tag_id: str, name: str) -> Any:
        return await self._request(
            "PUT", f"/tags/{_segment(tag_id)}", json={"name": name}
        )

    async def delete_tag(self, tag_id: str) -> Any:
        return await self._request("DELETE", f"/tags/{_segment(tag_id)}")

    # Variables

    async def get_variables(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", "/variables", params=params)

    async def create_variable(self, key: str, value: str) -> Any:
        return await self._request(
            "POST", "/variables", json={"key": key, "value": value}
        )

    async def update_variable(self, variable_id: str, key: str, value: str) -> Any:
        return await self._request(
            "PUT",
            f"/variables/{_segment(variable_id)}",
            json={"key": key, "value": value},
        )

    async def delete_variable(self, variable_id: str) -> Any:
        return await self._request("DELETE", f"/variables/{_segment(variable_id)}")

    # Projects (Enterprise)

    async def get_projects(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", "/projects", params=params)

    async def create_project(self, name: str) -> Any:
        return await self._request("POST", "/projects", json={"name": name})

    async def update_project(self, project_id: str, name: str) -> Any:
        return await self._request(
            "PUT", f"/projects/{_segment(project_id)}", json={"name": name}
        )

    async def delete_project(self, project_id: str) -> Any:
        return await self._request("DELETE", f"/projects/{_segment(project_id)}")

    # Users (Enterprise)

    async def get_users(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", "/users", params=params)

    async def get_user(self, identifier: str, include_role: Optional[bool] = None) -> Any:
        return await self._request(
            "GET",
            f"/users/{_segment(identifier)}",
            params={"includeRole": include_role},
        )

    async def create_users(self, users: List[Dict[str, Any]]) -> Any:
        return await self._request("POST", "/users", json=users)

    async def delete_user(self, identifier: str) -> Any:
        return await self._request("DELETE", f"/users/{_segment(identifier)}")

    async def change_user_role(self, identifier: str, new_role_name: str) -> Any:
        return await self._request(
            "PATCH",
            f"/users/{_segment(identifier)}/role",
            json={"newRoleName": new_role_name},
        )

    # Credentials

    async def create_credential(
        self, name: str, credential_type: str, data: Dict[str, Any]
    ) -> Any:
        return await self._request(
            "POST",
            "/credentials",
            json={"name": name, "type": credential_type, "data": data},
        )

    async def delete_credential(self, credential_id: str) -> Any:
        return await self._request("DELETE", f"/credentials/{_segment(credential_id)}")

    async def get_credential_schema(self, credential_type_name: str) -> Any:
        return await self._request(
            "GET", f"/credentials/schema/{_segment(credential_type_name)}"
        )

    async def transfer_credential(
        self, credential_id: str, destination_project_id: str
    ) -> Any:
        return await self._request(
            "PUT",
            f"/credentials/{_segment(credential_id)}/transfer",
            json={"destinationProjectId": destination_project_id},
        )

    # Audit and source control

    async def generate_audit(self, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("POST", "/audit", json=options or {})

    async def pull_from_source_control(self, pull_request: Dict[str, Any]) -> Any:
        return await self._request("POST", "/source-control/pull", json=pull_request)
