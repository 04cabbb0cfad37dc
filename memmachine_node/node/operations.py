"""Node operations: store, enrich and project management.

Each input item is processed independently. Failures are raised as
NodeOperationError carrying the item index, or turned into ``{"error": ...}``
output items when the caller asks to continue on failure.
"""

from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import ValidationError

from memmachine_node.client import (
    MemMachineClient,
    MemMachineClientError,
    SearchRequest,
    StoreMessage,
    StoreRequest,
    build_filter_expression,
)
from memmachine_node.config import Settings
from memmachine_node.memory.classification import (
    KeywordClassifier,
    ProducerClassifier,
    UserIdClassifier,
)
from memmachine_node.memory.pipeline import MemoryContextBuilder
from memmachine_node.node.errors import NodeOperationError
from memmachine_node.node.parameters import NodeParameters, TraceOptions
from memmachine_node.observability.logging import get_logger, setup_logging
from memmachine_node.observability.operations import OperationTracer
from memmachine_node.observability.tracing import setup_tracing

logger = get_logger(__name__)

ClassifierFactory = Callable[[NodeParameters], ProducerClassifier]


def default_classifier(params: NodeParameters) -> ProducerClassifier:
    """User-id matching when user ids are configured, keyword matching otherwise."""
    if params.user_ids:
        return UserIdClassifier(params.user_ids)
    return KeywordClassifier()


class MemMachineNode:
    """Workflow node running MemMachine operations over input items."""

    def __init__(
        self,
        client: MemMachineClient,
        classifier_factory: ClassifierFactory = default_classifier,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self._client = client
        self._classifier_factory = classifier_factory
        self._defaults = {k: v for k, v in (defaults or {}).items() if v is not None}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "MemMachineNode":
        """Build a node whose parameter defaults come from settings.

        Also configures logging, and OTLP tracing when export is enabled.
        """
        obs = settings.observability
        setup_logging(level=obs.log_level, format=obs.log_format, redact_pii=obs.redact_pii)
        if obs.export_to_jaeger:
            setup_tracing(settings.app_name, otlp_endpoint=obs.jaeger_endpoint)

        memory = settings.memory
        return cls(
            MemMachineClient.from_config(settings.api, transport=transport),
            defaults={
                "org_id": settings.api.org_id,
                "project_id": settings.api.project_id,
                "history_count": memory.history_count,
                "short_term_count": memory.short_term_count,
                "enable_template": memory.enable_template,
                "context_template": memory.context_template,
                "tracing_enabled": obs.tracing_enabled,
                "trace_format": obs.trace_format,
                "trace_verbosity": obs.trace_verbosity,
                "export_to_jaeger": obs.export_to_jaeger,
                "jaeger_endpoint": obs.jaeger_endpoint,
            },
        )

    async def execute(
        self,
        items: Sequence[Mapping[str, Any]],
        parameters: Mapping[str, Any],
        continue_on_fail: bool = False,
    ) -> list[dict[str, Any]]:
        """Run the configured operation for every item.

        Args:
            items: Input items (JSON objects)
            parameters: Raw node parameters, layered over the node defaults
            continue_on_fail: Emit error items instead of raising

        Returns:
            One output item per input item, followed by trace items when
            tracing is enabled

        Raises:
            NodeOperationError: On the first failing item unless
                continue_on_fail is set
        """
        parameters = {**self._defaults, **parameters}
        try:
            options = TraceOptions.model_validate(parameters)
        except ValidationError as e:
            raise NodeOperationError(f"Invalid tracing options: {e}", item_index=0) from e
        tracer = OperationTracer(
            enabled=options.tracing_enabled,
            format=options.trace_format,
            verbosity=options.trace_verbosity,
        )

        output: list[dict[str, Any]] = []
        for index, item in enumerate(items):
            trace_id = ""
            try:
                params = NodeParameters.parse(parameters, item_index=index)
                resource = "project" if params.operation.endswith("Project") else "memory"
                trace_id = tracer.start_operation(
                    resource,
                    _trace_operation(params.operation),
                    metadata={
                        "session_id": params.session_id,
                        "group_id": params.group_id,
                        "org_id": params.org_id,
                        "project_id": params.project_id,
                    },
                )
                result, trace_metadata = await self._run(params)
                tracer.complete_operation(trace_id, success=True, metadata=trace_metadata)
                output.append({**item, **result})
            except (NodeOperationError, MemMachineClientError) as e:
                tracer.complete_operation(trace_id, success=False, error=e.message)
                logger.warning(
                    "node_operation_failed",
                    item_index=index,
                    error=e.message,
                    status_code=getattr(e, "status_code", None),
                )
                if continue_on_fail:
                    output.append({"error": e.message})
                    continue
                if isinstance(e, NodeOperationError):
                    raise
                raise NodeOperationError(e.message, item_index=index) from e

        if tracer.enabled:
            output.extend(tracer.get_trace_output())
            if options.export_to_jaeger:
                tracer.export_traces(options.jaeger_endpoint)

        return output

    async def _run(self, params: NodeParameters) -> tuple[dict[str, Any], dict[str, Any]]:
        if params.operation == "store":
            return await self._store(params)
        if params.operation == "enrich":
            return await self._enrich(params)
        if params.operation == "getProject":
            project = await self._client.ensure_project(params.org_id, params.project_id)
            return project, {}
        project = await self._client.delete_project(params.org_id, params.project_id)
        return project or {"success": True, "deleted": True}, {}

    async def _store(self, params: NodeParameters) -> tuple[dict[str, Any], dict[str, Any]]:
        classifier = self._classifier_factory(params)
        request = StoreRequest(
            org_id=params.org_id,
            project_id=params.project_id,
            messages=[
                StoreMessage(
                    content=params.episode_content,
                    producer=params.producer,
                    produced_for=params.produced_for,
                    role=classifier.classify(params.producer),
                    metadata={
                        **params.scope_metadata(),
                        "category": "history",
                        "episode_type": params.episode_type.value,
                        "timestamp": datetime.now(UTC).isoformat(),
                        **params.metadata,
                    },
                )
            ],
        )
        response = await self._client.add_memories(request)
        logger.info(
            "memory_stored",
            org_id=params.org_id,
            project_id=params.project_id,
            session_id=params.session_id,
        )
        return response or {"success": True, "stored": True}, {
            "content_length": len(params.episode_content),
        }

    async def _enrich(self, params: NodeParameters) -> tuple[dict[str, Any], dict[str, Any]]:
        request = SearchRequest(
            org_id=params.org_id,
            project_id=params.project_id,
            query=params.query,
            top_k=params.limit,
            filter=build_filter_expression(params.search_filter()),
        )
        response = await self._client.search_memories(request)

        builder = MemoryContextBuilder(
            history_count=params.history_count,
            short_term_count=params.short_term_count,
            context_template=params.context_template,
            enable_template=params.enable_template,
        )
        memory = builder.build(
            response,
            session_id=params.session_id or None,
            group_id=params.group_id or None,
        )
        categorized = memory.categorized

        logger.info(
            "memory_search_completed",
            org_id=params.org_id,
            project_id=params.project_id,
            results=len(memory.episodic_memory),
        )
        result = {
            "episodic_memory": _dump(memory.episodic_memory),
            "history": _dump(categorized.history),
            "shortTermMemory": _dump(categorized.short_term_memory),
            "longTermMemory": _dump(categorized.long_term_memory),
            "semantic_memory": memory.semantic_features,
            "profileMemory": {"facts": _dump(memory.profile_facts), "entities": {}},
            "context": memory.context,
            "totalResults": len(memory.episodic_memory),
            "apiResponse": response,
        }
        return result, {
            "memory_count": len(memory.episodic_memory),
            "history_count": len(categorized.history),
            "short_term_count": len(categorized.short_term_memory),
            "long_term_count": len(categorized.long_term_memory),
            "profile_count": len(memory.profile_facts),
            "template_enabled": builder.renders,
            "context_length": len(memory.context),
            "request.query": params.query,
            "request.limit": params.limit,
        }


def _trace_operation(operation: str) -> str:
    return {
        "store": "store",
        "enrich": "enrich",
        "getProject": "retrieve",
        "deleteProject": "delete",
    }[operation]


def _dump(models: Sequence[Any]) -> list[dict[str, Any]]:
    return [model.model_dump(mode="json") for model in models]
