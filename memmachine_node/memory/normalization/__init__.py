"""Normalization of MemMachine search responses."""

from memmachine_node.memory.normalization.extraction import (
    extract_episodic_record,
    extract_semantic_fact,
)
from memmachine_node.memory.normalization.normalizer import (
    NormalizedMemories,
    normalize_search_response,
)
from memmachine_node.memory.normalization.responses import (
    EmptySearchResponse,
    FlatSearchResponse,
    NestedSearchResponse,
    SearchResponse,
    parse_search_response,
)

__all__ = [
    "EmptySearchResponse",
    "FlatSearchResponse",
    "NestedSearchResponse",
    "NormalizedMemories",
    "SearchResponse",
    "extract_episodic_record",
    "extract_semantic_fact",
    "normalize_search_response",
    "parse_search_response",
]
