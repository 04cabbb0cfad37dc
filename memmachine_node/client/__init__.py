"""MemMachine API client.

Usage:
    from memmachine_node.client import MemMachineClient, StoreMessage, StoreRequest

    async with MemMachineClient(base_url="http://localhost:8080/api/v2") as client:
        await client.add_memories(
            StoreRequest(
                org_id="acme",
                project_id="support",
                messages=[StoreMessage(content="Hi", producer="user-1", produced_for="agent-1")],
            )
        )
"""

from memmachine_node.client.client import (
    MemMachineClient,
    MemMachineClientError,
    ProjectCreationError,
)
from memmachine_node.client.models import (
    ProjectConfig,
    ProjectCreateRequest,
    SearchRequest,
    StoreMessage,
    StoreRequest,
    build_filter_expression,
)

__all__ = [
    "MemMachineClient",
    "MemMachineClientError",
    "ProjectConfig",
    "ProjectCreateRequest",
    "ProjectCreationError",
    "SearchRequest",
    "StoreMessage",
    "StoreRequest",
    "build_filter_expression",
]
