"""Decoders for the two MemMachine search response shapes.

The API answers searches either with a flat, type-tagged list::

    {"memories": [{"type": "episodic", ...}, {"type": "profile", ...}]}

or with nested content grouped by memory kind::

    {"content": {"episodic_memory": {"short_term_memory": {...},
                                     "long_term_memory": {...}},
                 "semantic_memory": [...]}}

Each shape is a pydantic model; parse_search_response tries them in order
and falls back to EmptySearchResponse, so malformed payloads decode to an
empty result instead of raising.
"""

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError


def _list_or_empty(value: Any) -> Any:
    return value if isinstance(value, list) else []


def _mapping_or_empty(value: Any) -> Any:
    return value if isinstance(value, dict) else {}


LenientList = Annotated[list[Any], BeforeValidator(_list_or_empty)]


class _ResponsePart(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ShortTermMemoryBlock(_ResponsePart):
    episodes: LenientList = Field(default_factory=list)
    episode_summary: LenientList = Field(default_factory=list)


class LongTermMemoryBlock(_ResponsePart):
    episodes: LenientList = Field(default_factory=list)


class EpisodicMemoryBlock(_ResponsePart):
    short_term_memory: Annotated[
        ShortTermMemoryBlock, BeforeValidator(_mapping_or_empty)
    ] = Field(default_factory=ShortTermMemoryBlock)
    long_term_memory: Annotated[
        LongTermMemoryBlock, BeforeValidator(_mapping_or_empty)
    ] = Field(default_factory=LongTermMemoryBlock)


class SearchContent(_ResponsePart):
    episodic_memory: Annotated[
        EpisodicMemoryBlock, BeforeValidator(_mapping_or_empty)
    ] = Field(default_factory=EpisodicMemoryBlock)
    semantic_memory: LenientList = Field(default_factory=list)


class FlatSearchResponse(_ResponsePart):
    """Flat response: one list of memories tagged by ``type``."""

    shape: ClassVar[str] = "flat"
    memories: list[Any]

    def of_type(self, memory_type: str) -> list[Any]:
        return [m for m in self.memories if isinstance(m, dict) and m.get("type") == memory_type]


class NestedSearchResponse(_ResponsePart):
    """Nested response: episodes pre-bucketed into short and long term."""

    shape: ClassVar[str] = "nested"
    content: SearchContent


class EmptySearchResponse(_ResponsePart):
    """Anything that matches neither known shape."""

    shape: ClassVar[str] = "empty"


SearchResponse = FlatSearchResponse | NestedSearchResponse | EmptySearchResponse


def parse_search_response(raw: Any) -> SearchResponse:
    """Decode a raw search response, never raising."""
    if not isinstance(raw, dict):
        return EmptySearchResponse()

    for shape in (FlatSearchResponse, NestedSearchResponse):
        try:
            return shape.model_validate(raw)
        except ValidationError:
            continue
    return EmptySearchResponse()
