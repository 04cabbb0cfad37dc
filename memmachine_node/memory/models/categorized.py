"""Categorized memory and render context models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from memmachine_node.memory.models.episode import EpisodicRecord
from memmachine_node.memory.models.fact import SemanticFact


class CategorizedMemories(BaseModel):
    """Partition of an ordered episodic sequence into recency buckets."""

    model_config = ConfigDict(frozen=True)

    history: list[EpisodicRecord] = Field(default_factory=list)
    short_term_memory: list[EpisodicRecord] = Field(default_factory=list)
    long_term_memory: list[EpisodicRecord] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.history) + len(self.short_term_memory) + len(self.long_term_memory)


class RenderContext(BaseModel):
    """Everything the template renderer needs for one render call."""

    model_config = ConfigDict(frozen=True)

    categorized: CategorizedMemories = Field(default_factory=CategorizedMemories)
    profile_facts: list[SemanticFact] = Field(default_factory=list)
    semantic_features: list[dict[str, Any]] = Field(default_factory=list)
    episode_summaries: list[str] = Field(default_factory=list)


class MemoryContext(BaseModel):
    """Result of running a search response through the memory pipeline."""

    episodic_memory: list[EpisodicRecord] = Field(default_factory=list)
    categorized: CategorizedMemories = Field(default_factory=CategorizedMemories)
    profile_facts: list[SemanticFact] = Field(default_factory=list)
    semantic_features: list[dict[str, Any]] = Field(default_factory=list)
    episode_summaries: list[str] = Field(default_factory=list)
    context: str = Field(default="", description="Rendered template, empty if disabled")

    def to_render_context(self) -> RenderContext:
        return RenderContext(
            categorized=self.categorized,
            profile_facts=self.profile_facts,
            semantic_features=self.semantic_features,
            episode_summaries=self.episode_summaries,
        )
