"""Memory domain models."""

from memmachine_node.memory.models.categorized import (
    CategorizedMemories,
    MemoryContext,
    RenderContext,
)
from memmachine_node.memory.models.episode import EpisodicRecord
from memmachine_node.memory.models.fact import SemanticFact
from memmachine_node.memory.models.message import ChatMessage, MessageType

__all__ = [
    "CategorizedMemories",
    "ChatMessage",
    "EpisodicRecord",
    "MemoryContext",
    "MessageType",
    "RenderContext",
    "SemanticFact",
]
