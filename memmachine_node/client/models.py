"""Request models for the MemMachine v2 API."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from memmachine_node.memory.enums import ProducerRole


class _ScopedRequest(BaseModel):
    org_id: str = Field(..., description="Organization identifier")
    project_id: str = Field(..., description="Project identifier")

    @field_validator("org_id", "project_id")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class StoreMessage(BaseModel):
    """One message in a store request."""

    content: str
    producer: str
    produced_for: str
    role: ProducerRole = ProducerRole.USER
    metadata: dict[str, Any] = Field(default_factory=dict)


class StoreRequest(_ScopedRequest):
    """Body of ``POST /memories``."""

    messages: list[StoreMessage] = Field(..., min_length=1)


class SearchRequest(_ScopedRequest):
    """Body of ``POST /memories/search``."""

    query: str = ""
    top_k: int = Field(default=10, gt=0)
    types: list[str] = Field(default_factory=list, description="Empty means all types")
    filter: str = Field(default="", description="k=v AND k=v expression")


class ProjectConfig(BaseModel):
    reranker: str = "default"
    embedder: str = "default"


class ProjectCreateRequest(_ScopedRequest):
    """Body of ``POST /projects``."""

    description: str = "Auto-created by n8n workflow"
    config: ProjectConfig = Field(default_factory=ProjectConfig)


class ProjectRef(_ScopedRequest):
    """Body of ``/projects/get`` and ``/projects/delete``."""


def build_filter_expression(filters: Mapping[str, Any]) -> str:
    """Render a filter mapping as ``key=value AND key=value``."""
    return " AND ".join(f"{key}={value}" for key, value in filters.items())
