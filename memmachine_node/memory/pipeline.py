"""End-to-end memory pipeline: raw search response to rendered context."""

from datetime import UTC, datetime
from typing import Any

from memmachine_node.memory.categorizer import (
    DEFAULT_HISTORY_COUNT,
    DEFAULT_SHORT_TERM_COUNT,
    categorize_normalized,
)
from memmachine_node.memory.dedup import dedupe_episodes, dedupe_semantic_features
from memmachine_node.memory.models import EpisodicRecord, MemoryContext
from memmachine_node.memory.normalization import (
    extract_episodic_record,
    normalize_search_response,
)
from memmachine_node.memory.rendering import TemplateRenderer
from memmachine_node.observability.logging import get_logger
from memmachine_node.observability.metrics import MEMORY_RECORDS, TEMPLATE_RENDERS

logger = get_logger(__name__)


class MemoryContextBuilder:
    """Normalize, deduplicate, categorize and render one search response."""

    def __init__(
        self,
        history_count: int = DEFAULT_HISTORY_COUNT,
        short_term_count: int = DEFAULT_SHORT_TERM_COUNT,
        context_template: str | None = None,
        enable_template: bool = True,
    ) -> None:
        if history_count < 0 or short_term_count < 0:
            raise ValueError("history_count and short_term_count must be >= 0")
        self.history_count = history_count
        self.short_term_count = short_term_count
        self.enable_template = enable_template
        self._renderer = TemplateRenderer(context_template) if context_template else None

    @property
    def renders(self) -> bool:
        return self.enable_template and self._renderer is not None

    def extract_episodes(
        self,
        raw_items: list[Any],
        session_id: str | None = None,
        group_id: str | None = None,
    ) -> list[EpisodicRecord]:
        """Extract and deduplicate episodic records from raw items."""
        now = datetime.now(UTC)
        records = []
        for item in raw_items:
            record = extract_episodic_record(item, now=now)
            if record is None:
                continue
            if (record.session_id is None and session_id) or (record.group_id is None and group_id):
                record = record.model_copy(
                    update={
                        "session_id": record.session_id or session_id,
                        "group_id": record.group_id or group_id,
                    }
                )
            records.append(record)
        return dedupe_episodes(records)

    def build(
        self,
        raw_response: Any,
        session_id: str | None = None,
        group_id: str | None = None,
    ) -> MemoryContext:
        """Run a raw search response through the pipeline.

        Args:
            raw_response: Decoded JSON body of a search call
            session_id: Stamped onto records that carry none
            group_id: Stamped onto records that carry none

        Returns:
            The memory context; ``context`` is empty when templating is off
        """
        normalized = normalize_search_response(raw_response)
        episodes = self.extract_episodes(normalized.episodic_raw, session_id, group_id)
        facts, features = dedupe_semantic_features(normalized.semantic_raw)
        categorized = categorize_normalized(
            episodes, normalized, self.history_count, self.short_term_count
        )

        memory = MemoryContext(
            episodic_memory=episodes,
            categorized=categorized,
            profile_facts=facts,
            semantic_features=features,
            episode_summaries=normalized.episode_summaries,
        )

        if self.renders:
            memory.context = self._renderer.render(memory.to_render_context())
            TEMPLATE_RENDERS.inc()

        MEMORY_RECORDS.labels(kind="episodic").observe(len(episodes))
        MEMORY_RECORDS.labels(kind="semantic").observe(len(facts))
        logger.debug(
            "memory_context_built",
            episodic_raw=len(normalized.episodic_raw),
            episodic=len(episodes),
            semantic_raw=len(normalized.semantic_raw),
            semantic=len(facts),
            summaries=len(normalized.episode_summaries),
            pre_bucketed=normalized.pre_bucketed,
            history=len(categorized.history),
            short_term=len(categorized.short_term_memory),
            long_term=len(categorized.long_term_memory),
            context_length=len(memory.context),
        )
        return memory
