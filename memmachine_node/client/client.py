"""MemMachine API client.

Async httpx client for the MemMachine v2 memory and project endpoints.

Usage:
    async with MemMachineClient(base_url="http://localhost:8080/api/v2") as client:
        await client.add_memories(store_request)
        results = await client.search_memories(search_request)
"""

import time
from typing import Any

import httpx
from opentelemetry.trace import SpanKind

from memmachine_node.client.models import (
    ProjectCreateRequest,
    ProjectRef,
    SearchRequest,
    StoreRequest,
)
from memmachine_node.config.models.api import MemMachineAPIConfig
from memmachine_node.observability.logging import get_logger
from memmachine_node.observability.metrics import (
    API_REQUEST_COUNT,
    API_REQUEST_LATENCY,
    PROJECT_AUTO_CREATED,
)
from memmachine_node.observability.tracing import (
    create_span,
    record_exception,
    set_span_attributes,
)

logger = get_logger(__name__)


class MemMachineClientError(Exception):
    """Base exception for client errors."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class ProjectCreationError(MemMachineClientError):
    """Raised when a missing project could not be auto-created."""


def _is_missing_project(response: httpx.Response) -> bool:
    return response.status_code == 404 and "project" in response.text.lower()


class MemMachineClient:
    """Async client for the MemMachine API.

    Attributes:
        base_url: Base URL of the MemMachine API
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080/api/v2",
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: MemMachineAPIConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "MemMachineClient":
        return cls(
            base_url=config.base_url,
            api_key=config.api_key.get_secret_value() if config.api_key else None,
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "MemMachineClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def _send(self, path: str, body: dict[str, Any]) -> httpx.Response:
        """POST a body and return the raw response, recording span and metrics."""
        start = time.perf_counter()
        with create_span(
            f"memmachine.{path.strip('/').replace('/', '.')}",
            kind=SpanKind.CLIENT,
            attributes={"http.method": "POST", "http.url": f"{self.base_url}{path}"},
        ) as span:
            try:
                response = await self._client.post(path, headers=self._headers(), json=body)
            except httpx.HTTPError as e:
                record_exception(span, e)
                API_REQUEST_COUNT.labels(endpoint=path, status="error").inc()
                raise MemMachineClientError(f"Request to {path} failed: {e}") from e
            finally:
                API_REQUEST_LATENCY.labels(endpoint=path).observe(time.perf_counter() - start)

            set_span_attributes(
                span,
                **{
                    "http.status_code": response.status_code,
                    "http.response_content_length": len(response.content),
                },
            )

        API_REQUEST_COUNT.labels(endpoint=path, status=str(response.status_code)).inc()
        logger.debug(
            "memmachine_request_completed",
            path=path,
            status_code=response.status_code,
            elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        if response.status_code == 204 or not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {"data": data}

    @staticmethod
    def _raise_for_status(response: httpx.Response, operation: str) -> None:
        if response.status_code < 400:
            return
        try:
            details = response.json()
        except ValueError:
            details = None
        raise MemMachineClientError(
            message=(
                f"MemMachine {operation} error: {response.status_code} "
                f"{response.reason_phrase} - {response.text}"
            ),
            status_code=response.status_code,
            details=details,
        )

    # Memories
    async def add_memories(self, request: StoreRequest) -> dict[str, Any]:
        """Store messages, creating the project once if it does not exist.

        A 404 whose body mentions the project triggers one ``POST /projects``
        followed by exactly one retry of the store. Every other failure is
        raised immediately.

        Raises:
            ProjectCreationError: If the project auto-create call fails
            MemMachineClientError: For any other API failure
        """
        body = request.model_dump(mode="json")
        response = await self._send("/memories", body)

        if _is_missing_project(response):
            logger.info(
                "memmachine_project_missing",
                org_id=request.org_id,
                project_id=request.project_id,
            )
            created = await self._send(
                "/projects",
                ProjectCreateRequest(
                    org_id=request.org_id,
                    project_id=request.project_id,
                ).model_dump(mode="json"),
            )
            # 409: created concurrently by another writer
            if created.status_code >= 400 and created.status_code != 409:
                raise ProjectCreationError(
                    f"Failed to auto-create project: {created.status_code} {created.text}",
                    status_code=created.status_code,
                )
            PROJECT_AUTO_CREATED.inc()
            response = await self._send("/memories", body)

        self._raise_for_status(response, "store")
        return self._decode(response)

    async def search_memories(self, request: SearchRequest) -> dict[str, Any]:
        """Search memories and return the decoded response body."""
        response = await self._send("/memories/search", request.model_dump(mode="json"))
        self._raise_for_status(response, "search")
        return self._decode(response)

    # Projects
    async def get_project(self, org_id: str, project_id: str) -> dict[str, Any]:
        """Get a project."""
        ref = ProjectRef(org_id=org_id, project_id=project_id)
        response = await self._send("/projects/get", ref.model_dump(mode="json"))
        self._raise_for_status(response, "project retrieval")
        return self._decode(response)

    async def create_project(self, request: ProjectCreateRequest) -> dict[str, Any]:
        """Create a project."""
        response = await self._send("/projects", request.model_dump(mode="json"))
        self._raise_for_status(response, "project creation")
        return self._decode(response)

    async def ensure_project(
        self,
        org_id: str,
        project_id: str,
        description: str = "Auto-created by n8n workflow",
    ) -> dict[str, Any]:
        """Get a project, creating it when the API reports it missing."""
        try:
            return await self.get_project(org_id, project_id)
        except MemMachineClientError as e:
            if e.status_code != 404:
                raise
        logger.info("memmachine_project_auto_create", org_id=org_id, project_id=project_id)
        created = await self.create_project(
            ProjectCreateRequest(org_id=org_id, project_id=project_id, description=description)
        )
        PROJECT_AUTO_CREATED.inc()
        return created

    async def delete_project(self, org_id: str, project_id: str) -> dict[str, Any]:
        """Delete a project."""
        ref = ProjectRef(org_id=org_id, project_id=project_id)
        response = await self._send("/projects/delete", ref.model_dump(mode="json"))
        self._raise_for_status(response, "project deletion")
        return self._decode(response)
