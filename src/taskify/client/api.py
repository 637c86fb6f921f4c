"""
HTTP transport for the Taskify client.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..models import Task

log = logging.getLogger(__name__)

_TASK = TypeAdapter(Task)
_TASK_LIST = TypeAdapter(list[Task])


class TransportError(Exception):
    """
    Raised when a call to the task service does not produce a usable answer.

    Covers network failures, timeouts, non-2xx responses and payloads that do
    not match the expected shape. ``status_code`` is set when the server did
    answer.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)


class TaskApiClient:
    """Async client for the task REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, for example ``http://localhost:5000/api``.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._client.base_url

    async def list_tasks(self) -> list[Task]:
        data = await self._request("GET", "tasks")
        return self._parse(_TASK_LIST, data)

    async def create_task(self, title: str) -> Task:
        data = await self._request("POST", "tasks", json={"title": title})
        return self._parse(_TASK, data)

    async def update_task(
        self,
        task_id: int,
        *,
        title: Optional[str] = None,
        finished: Optional[bool] = None,
    ) -> Task:
        """Send only the fields that are supplied."""
        payload: dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if finished is not None:
            payload["finished"] = finished
        data = await self._request("PUT", f"tasks/{task_id}", json=payload)
        return self._parse(_TASK, data)

    async def delete_task(self, task_id: int) -> str:
        data = await self._request("DELETE", f"tasks/{task_id}")
        if not isinstance(data, dict):
            raise TransportError("Malformed response from task service")
        return str(data.get("message", ""))

    async def health(self) -> dict[str, Any]:
        """Call the server's ``/health`` endpoint, which lives outside the API root."""
        url = self._client.base_url.join("/health")
        data = await self._request("GET", str(url))
        if not isinstance(data, dict):
            raise TransportError("Malformed response from task service")
        return data

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"Could not reach task service: {e}", cause=e) from e

        if response.is_error:
            message = self._error_message(response)
            log.warning(
                "%s %s returned %d: %s", method, url, response.status_code, message
            )
            raise TransportError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "Malformed response from task service",
                status_code=response.status_code,
                cause=e,
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            if body.get("details"):
                return f"{body['error']}: {body['details']}"
            return str(body["error"])
        return f"HTTP {response.status_code}"

    @staticmethod
    def _parse(adapter: TypeAdapter, data: Any):
        try:
            return adapter.validate_python(data)
        except PydanticValidationError as e:
            raise TransportError(
                "Malformed response from task service", cause=e
            ) from e
