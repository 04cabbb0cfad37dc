"""Normalize search responses into raw episodic and semantic collections."""

from typing import Any

from pydantic import BaseModel, Field

from memmachine_node.memory.normalization.responses import (
    FlatSearchResponse,
    NestedSearchResponse,
    parse_search_response,
)


class NormalizedMemories(BaseModel):
    """Raw memory collections extracted from one search response."""

    episodic_raw: list[Any] = Field(default_factory=list)
    semantic_raw: list[Any] = Field(default_factory=list)
    episode_summaries: list[str] = Field(default_factory=list)
    short_term_raw: list[Any] = Field(default_factory=list)
    long_term_raw: list[Any] = Field(default_factory=list)

    @property
    def pre_bucketed(self) -> bool:
        """Whether the API already split episodes into short and long term."""
        return bool(self.short_term_raw or self.long_term_raw)


def normalize_search_response(raw: Any) -> NormalizedMemories:
    """Split a search response into episodic, semantic and summary collections.

    The flat shape wins when ``memories`` is a list; otherwise the nested
    ``content`` shape is used. Missing or malformed fields yield empty
    collections.
    """
    response = parse_search_response(raw)

    if isinstance(response, FlatSearchResponse):
        return NormalizedMemories(
            episodic_raw=response.of_type("episodic"),
            semantic_raw=response.of_type("profile"),
        )

    if isinstance(response, NestedSearchResponse):
        episodic = response.content.episodic_memory
        short_term = episodic.short_term_memory
        long_term = episodic.long_term_memory
        return NormalizedMemories(
            episodic_raw=[*short_term.episodes, *long_term.episodes],
            semantic_raw=list(response.content.semantic_memory),
            episode_summaries=[
                s for s in short_term.episode_summary if isinstance(s, str) and s.strip()
            ],
            short_term_raw=list(short_term.episodes),
            long_term_raw=list(long_term.episodes),
        )

    return NormalizedMemories()
