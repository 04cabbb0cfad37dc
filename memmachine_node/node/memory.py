"""Conversation memory provider for AI agents.

MemMachineMemory loads prior conversation turns from MemMachine before an
agent runs and stores the new turn afterwards. Storage and retrieval
failures never interrupt the conversation: they are logged and the agent
continues with an empty history.
"""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

import httpx

from memmachine_node.client import (
    MemMachineClient,
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
from memmachine_node.memory.enums import ProducerRole
from memmachine_node.memory.models import ChatMessage
from memmachine_node.memory.pipeline import MemoryContextBuilder
from memmachine_node.observability.logging import get_logger
from memmachine_node.observability.operations import OperationTracer

logger = get_logger(__name__)

MEMORY_KEY = "chat_history"
DEFAULT_CONTEXT_WINDOW_LENGTH = 10

_BUFFER_PREFIXES = {"human": "Human", "ai": "AI", "system": "System"}


class MemMachineMemory:
    """Agent memory backed by a MemMachine project.

    Attributes:
        session_id: Conversation session the memory is scoped to
        context_window_length: Maximum raw messages returned per load
        return_messages: Return message objects instead of a single string
    """

    def __init__(
        self,
        client: MemMachineClient,
        org_id: str,
        project_id: str,
        session_id: str,
        agent_ids: Iterable[str] = (),
        user_ids: Iterable[str] = (),
        group_id: str = "",
        context_window_length: int = DEFAULT_CONTEXT_WINDOW_LENGTH,
        builder: MemoryContextBuilder | None = None,
        classifier: ProducerClassifier | None = None,
        return_messages: bool = True,
        input_key: str = "input",
        output_key: str = "output",
        tracer: OperationTracer | None = None,
        parent_trace_id: str | None = None,
    ) -> None:
        missing = [
            name
            for name, value in (
                ("org_id", org_id),
                ("project_id", project_id),
                ("session_id", session_id),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise ValueError(f"MemMachineMemory requires {', '.join(missing)}")
        if context_window_length <= 0:
            raise ValueError("context_window_length must be positive")

        self._client = client
        self.org_id = org_id.strip()
        self.project_id = project_id.strip()
        self.session_id = session_id.strip()
        self.agent_ids = [a for a in agent_ids if a]
        self.user_ids = [u for u in user_ids if u]
        self.group_id = group_id
        self.context_window_length = context_window_length
        self.builder = builder or MemoryContextBuilder(enable_template=False)
        self.classifier = classifier or (
            UserIdClassifier(self.user_ids) if self.user_ids else KeywordClassifier()
        )
        self.return_messages = return_messages
        self.input_key = input_key
        self.output_key = output_key
        self._tracer = tracer
        self._parent_trace_id = parent_trace_id

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_id: str,
        agent_ids: Iterable[str] = (),
        user_ids: Iterable[str] = (),
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> "MemMachineMemory":
        """Build a memory provider from loaded settings."""
        memory = settings.memory
        builder = MemoryContextBuilder(
            history_count=memory.history_count,
            short_term_count=memory.short_term_count,
            context_template=memory.context_template,
            enable_template=memory.enable_template,
        )
        return cls(
            client=MemMachineClient.from_config(settings.api, transport=transport),
            org_id=kwargs.pop("org_id", settings.api.org_id),
            project_id=kwargs.pop("project_id", settings.api.project_id),
            session_id=session_id,
            agent_ids=agent_ids,
            user_ids=user_ids,
            context_window_length=kwargs.pop(
                "context_window_length", memory.context_window_length
            ),
            builder=builder,
            **kwargs,
        )

    @property
    def memory_keys(self) -> list[str]:
        return [MEMORY_KEY]

    @property
    def agent_id(self) -> str:
        return self.agent_ids[0] if self.agent_ids else "agent"

    @property
    def user_id(self) -> str:
        return self.user_ids[0] if self.user_ids else "user"

    async def load_memory_variables(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Load conversation history for the current session.

        With templating enabled the whole memory context is returned as a
        single system message. Otherwise the most recent episodic records
        are returned as human/ai messages, oldest first, capped at
        ``context_window_length``.
        """
        trace_id = self._start_trace("retrieve", {"operation": "load_memory_variables"})
        try:
            request = SearchRequest(
                org_id=self.org_id,
                project_id=self.project_id,
                query=str(values.get(self.input_key) or ""),
                top_k=self.context_window_length,
                filter=build_filter_expression(
                    {"session_id": self.session_id, "category": "history"}
                ),
            )
            response = await self._client.search_memories(request)
            memory = self.builder.build(
                response,
                session_id=self.session_id,
                group_id=self.group_id or None,
            )

            if self.builder.renders:
                messages = [ChatMessage(type="system", content=memory.context)]
            else:
                messages = [
                    self.classifier.to_message(record) for record in memory.episodic_memory
                ][-self.context_window_length :]
        except Exception as e:
            logger.error(
                "memory_load_failed",
                session_id=self.session_id,
                error=str(e),
            )
            self._complete_trace(trace_id, success=False, error=str(e))
            return {MEMORY_KEY: [] if self.return_messages else ""}

        self._complete_trace(trace_id, success=True, metadata={"message_count": len(messages)})
        logger.debug(
            "memory_loaded",
            session_id=self.session_id,
            message_count=len(messages),
            templated=self.builder.renders,
        )
        if self.return_messages:
            return {MEMORY_KEY: messages}
        return {MEMORY_KEY: _to_buffer_string(messages)}

    async def save_context(
        self,
        inputs: Mapping[str, Any],
        outputs: Mapping[str, Any],
    ) -> None:
        """Store the user message, then the agent response."""
        user_message = inputs.get(self.input_key)
        agent_response = outputs.get(self.output_key)
        trace_id = self._start_trace("store", {"operation": "save_context"})
        try:
            if user_message:
                await self._store(str(user_message), self.user_id, self.agent_id, ProducerRole.USER)
            if agent_response:
                await self._store(
                    str(agent_response), self.agent_id, self.user_id, ProducerRole.ASSISTANT
                )
        except Exception as e:
            logger.error(
                "memory_save_failed",
                session_id=self.session_id,
                error=str(e),
            )
            self._complete_trace(trace_id, success=False, error=str(e))
            return

        self._complete_trace(trace_id, success=True)
        logger.debug("memory_saved", session_id=self.session_id)

    async def clear(self) -> None:
        """Session history lives in MemMachine; nothing is cached locally."""

    async def _store(
        self,
        content: str,
        producer: str,
        produced_for: str,
        role: ProducerRole,
    ) -> None:
        await self._client.add_memories(
            StoreRequest(
                org_id=self.org_id,
                project_id=self.project_id,
                messages=[
                    StoreMessage(
                        content=content,
                        producer=producer,
                        produced_for=produced_for,
                        role=role,
                        metadata={
                            "session_id": self.session_id,
                            "category": "history",
                            "timestamp": datetime.now(UTC).isoformat(),
                        },
                    )
                ],
            )
        )

    def _start_trace(self, operation_type: str, metadata: dict[str, Any]) -> str:
        if self._tracer is None or not self._parent_trace_id:
            return ""
        return self._tracer.start_operation(
            "memory",
            operation_type,
            metadata={"session_id": self.session_id, **metadata},
            parent_trace_id=self._parent_trace_id,
        )

    def _complete_trace(self, trace_id: str, **kwargs: Any) -> None:
        if self._tracer is not None and trace_id:
            self._tracer.complete_operation(trace_id, **kwargs)


def _to_buffer_string(messages: list[ChatMessage]) -> str:
    return "\n".join(f"{_BUFFER_PREFIXES[m.type]}: {m.content}" for m in messages)
