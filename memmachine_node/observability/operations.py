"""Operation tracing for node executions.

Collects a lightweight trace entry per MemMachine operation (store,
search, project management) so the node can return traces alongside its
output, and optionally replays them as OpenTelemetry spans. The tracer
never raises: when disabled every call is a no-op, and internal failures
are logged and swallowed so tracing can't break a workflow.
"""

import time
from datetime import UTC, datetime
from typing import Any, Literal
from uuid import uuid4

from opentelemetry import trace
from pydantic import BaseModel, Field

from memmachine_node.config.models.observability import TraceFormat, TraceVerbosity
from memmachine_node.observability.logging import SENSITIVE_KEYS, get_logger
from memmachine_node.observability.tracing import create_exporting_provider

logger = get_logger(__name__)

ResourceType = Literal["memory", "project"]
TraceStatus = Literal["started", "success", "failure"]

MAX_ENTRY_SIZE = 10240

_ENDPOINTS = {
    "store": "",
    "create": "",
    "retrieve": "/get",
    "search": "/search",
    "enrich": "/search",
    "delete": "/delete",
}


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class TraceEntry(BaseModel):
    """One traced operation."""

    trace_id: str = Field(default_factory=lambda: str(uuid4()))
    parent_trace_id: str | None = None
    timestamp: datetime = Field(default_factory=utc_now)
    resource_type: ResourceType = "memory"
    operation_type: str
    status: TraceStatus = "started"
    duration_ms: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class OperationTracer:
    """Collects operation traces for a single node execution."""

    def __init__(
        self,
        enabled: bool = False,
        format: TraceFormat = "json",
        verbosity: TraceVerbosity = "normal",
        max_entry_size: int = MAX_ENTRY_SIZE,
    ) -> None:
        self.enabled = enabled
        self.format = format
        self.verbosity = verbosity
        self.max_entry_size = max_entry_size
        self._entries: dict[str, TraceEntry] = {}
        self._started: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[TraceEntry]:
        return list(self._entries.values())

    def start_operation(
        self,
        resource: ResourceType,
        operation_type: str,
        metadata: dict[str, Any] | None = None,
        parent_trace_id: str | None = None,
    ) -> str:
        """Record the start of an operation.

        Returns:
            The new trace ID, or an empty string when tracing is disabled
        """
        if not self.enabled:
            return ""

        try:
            base = "/projects" if resource == "project" else "/memories"
            entry = TraceEntry(
                parent_trace_id=parent_trace_id or None,
                resource_type=resource,
                operation_type=operation_type,
                metadata={
                    "api_endpoint": base + _ENDPOINTS.get(operation_type, ""),
                    **self._sanitize(metadata or {}),
                },
            )
        except Exception as e:
            logger.warning("operation_trace_start_failed", error=str(e))
            return ""

        self._entries[entry.trace_id] = entry
        self._started[entry.trace_id] = time.perf_counter()
        return entry.trace_id

    def complete_operation(
        self,
        trace_id: str,
        success: bool,
        error: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Mark an operation as finished."""
        if not self.enabled or not trace_id:
            return

        entry = self._entries.get(trace_id)
        if entry is None:
            logger.warning("operation_trace_unknown", trace_id=trace_id)
            return

        elapsed = time.perf_counter() - self._started.pop(trace_id, time.perf_counter())
        entry.status = "success" if success else "failure"
        # Jaeger drops zero-length spans
        entry.duration_ms = max(elapsed * 1000.0, 1.0)
        entry.error = error
        entry.metadata = {**entry.metadata, **self._sanitize(metadata or {})}

    def get_trace_output(self) -> list[dict[str, Any]]:
        """Return collected traces shaped for node output."""
        if not self.enabled:
            return []

        if self.format == "human":
            return [{"trace": self._format_human(entry)} for entry in self._entries.values()]
        return [self._project(entry) for entry in self._entries.values()]

    def export_traces(self, endpoint: str) -> int:
        """Replay collected traces as OpenTelemetry spans.

        Operations still marked as started are skipped unless another
        entry names them as parent.

        Returns:
            Number of exported spans
        """
        if not self.enabled:
            return 0

        parents = {e.parent_trace_id for e in self._entries.values() if e.parent_trace_id}
        exportable = sorted(
            (e for e in self._entries.values() if e.status != "started" or e.trace_id in parents),
            key=lambda e: e.timestamp,
        )
        skipped = len(self._entries) - len(exportable)
        if skipped:
            logger.info("operation_traces_skipped", count=skipped)
        if not exportable:
            return 0

        try:
            provider = create_exporting_provider(endpoint)
            tracer = provider.get_tracer(__name__)
            spans: dict[str, trace.Span] = {}
            for entry in exportable:
                parent = spans.get(entry.parent_trace_id or "")
                context = trace.set_span_in_context(parent) if parent is not None else None
                start_ns = int(entry.timestamp.timestamp() * 1e9)
                span = tracer.start_span(
                    f"memmachine.{entry.resource_type}.{entry.operation_type}",
                    context=context,
                    start_time=start_ns,
                    attributes={
                        "memmachine.trace_id": entry.trace_id,
                        "memmachine.status": entry.status,
                        **{
                            f"memmachine.{key}": value
                            for key, value in entry.metadata.items()
                            if isinstance(value, str | bool | int | float)
                        },
                    },
                )
                if entry.status == "failure":
                    span.set_status(trace.Status(trace.StatusCode.ERROR, entry.error or ""))
                spans[entry.trace_id] = span

            for entry in exportable:
                start_ns = int(entry.timestamp.timestamp() * 1e9)
                spans[entry.trace_id].end(
                    end_time=start_ns + int((entry.duration_ms or 1.0) * 1e6)
                )

            provider.force_flush()
            provider.shutdown()
        except Exception as e:
            logger.warning("operation_trace_export_failed", endpoint=endpoint, error=str(e))
            return 0

        logger.info("operation_traces_exported", endpoint=endpoint, count=len(exportable))
        return len(exportable)

    def clear(self) -> None:
        self._entries.clear()
        self._started.clear()

    def _project(self, entry: TraceEntry) -> dict[str, Any]:
        data = entry.model_dump(mode="json")
        if self.verbosity == "minimal":
            return {key: data[key] for key in ("trace_id", "timestamp", "status")}
        if self.verbosity == "normal":
            data["metadata"] = {
                key: value
                for key, value in entry.metadata.items()
                if not key.startswith(("request.", "response."))
            }
        return data

    def _format_human(self, entry: TraceEntry) -> str:
        line = (
            f"[{entry.timestamp.isoformat()}] {entry.resource_type}.{entry.operation_type} "
            f"{entry.status.upper()}"
        )
        if entry.duration_ms is not None:
            line += f" ({entry.duration_ms:.1f}ms)"
        if entry.error:
            line += f" error={entry.error}"
        if self.verbosity != "minimal":
            details = self._project(entry).get("metadata", {})
            line += "".join(f"\n  {key}: {value}" for key, value in details.items())
        return line

    def _sanitize(self, metadata: dict[str, Any]) -> dict[str, Any]:
        clean: dict[str, Any] = {}
        for key, value in metadata.items():
            if key.lower().split(".")[-1] in SENSITIVE_KEYS:
                clean[key] = "[REDACTED]"
            elif isinstance(value, str) and len(value) > self.max_entry_size:
                clean[key] = value[: self.max_entry_size] + "...[truncated]"
            else:
                clean[key] = value
        return clean
