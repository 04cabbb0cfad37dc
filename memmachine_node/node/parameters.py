"""Node parameter models.

Parameters arrive as the flat mapping the workflow host passes for each
item. Comma-separated id lists are split, JSON text fields are parsed,
and any validation failure surfaces as a NodeOperationError tied to the
item being processed.
"""

import json
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

from memmachine_node.config.models.observability import TraceFormat, TraceVerbosity
from memmachine_node.memory.categorizer import DEFAULT_HISTORY_COUNT, DEFAULT_SHORT_TERM_COUNT
from memmachine_node.memory.enums import EpisodeType
from memmachine_node.memory.rendering import DEFAULT_CONTEXT_TEMPLATE
from memmachine_node.node.errors import NodeOperationError

Operation = Literal["store", "enrich", "getProject", "deleteProject"]


def _split_ids(value: Any) -> Any:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def _parse_json_object(label: str):
    def parse(value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, str):
            return value
        if value.strip() in ("", "{}"):
            return {}
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid {label} JSON: {e.msg}") from e
        if not isinstance(parsed, dict):
            raise ValueError(f"Invalid {label} JSON: expected an object")
        return parsed

    return parse


IdList = Annotated[list[str], BeforeValidator(_split_ids)]


class TraceOptions(BaseModel):
    """Tracing switches, read once per execution."""

    model_config = ConfigDict(extra="ignore")

    tracing_enabled: bool = False
    trace_format: TraceFormat = "json"
    trace_verbosity: TraceVerbosity = "normal"
    export_to_jaeger: bool = False
    jaeger_endpoint: str = "http://jaeger:4318/v1/traces"


class NodeParameters(TraceOptions):
    """Parameters for one node operation on one item."""

    operation: Operation = "enrich"

    # Scope
    org_id: str
    project_id: str
    group_id: str = ""
    session_id: str = ""
    agent_ids: IdList = Field(default_factory=list)
    user_ids: IdList = Field(default_factory=list)

    # Store
    producer: str = ""
    produced_for: str = ""
    episode_content: str = ""
    episode_type: EpisodeType = EpisodeType.DIALOG
    metadata: Annotated[dict[str, Any], BeforeValidator(_parse_json_object("metadata"))] = Field(
        default_factory=dict
    )

    # Enrich
    query: str = ""
    limit: int = Field(default=10, gt=0)
    filter_by_session: bool = True
    filter: Annotated[dict[str, Any], BeforeValidator(_parse_json_object("filter"))] = Field(
        default_factory=dict
    )
    enable_template: bool = True
    context_template: str = DEFAULT_CONTEXT_TEMPLATE
    history_count: int = Field(default=DEFAULT_HISTORY_COUNT, ge=0)
    short_term_count: int = Field(default=DEFAULT_SHORT_TERM_COUNT, ge=0)

    @field_validator("org_id", "project_id")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("is required")
        return value

    @classmethod
    def parse(cls, raw: Mapping[str, Any], item_index: int = 0) -> "NodeParameters":
        """Validate raw parameters, raising NodeOperationError on failure."""
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as e:
            raise NodeOperationError(_describe(e), item_index=item_index) from e

    def search_filter(self) -> dict[str, Any]:
        """Session filter merged with the custom filter."""
        base: dict[str, Any] = {}
        if self.filter_by_session and self.session_id:
            base["session_id"] = self.session_id
        return {**base, **self.filter}

    def scope_metadata(self) -> dict[str, Any]:
        """Identifiers stamped onto every stored message."""
        scope: dict[str, Any] = {}
        if self.session_id:
            scope["session_id"] = self.session_id
        if self.group_id:
            scope["group_id"] = self.group_id
        if self.agent_ids:
            scope["agent_id"] = ",".join(self.agent_ids)
        if self.user_ids:
            scope["user_id"] = ",".join(self.user_ids)
        return scope


def _describe(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        field = ".".join(str(loc) for loc in detail["loc"])
        message = detail["msg"].removeprefix("Value error, ")
        parts.append(f"{field}: {message}" if field else message)
    return "; ".join(parts)
