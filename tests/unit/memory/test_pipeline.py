"""Unit tests for MemoryContextBuilder."""

from typing import Any

import pytest

from memmachine_node.memory.pipeline import MemoryContextBuilder


class TestMemoryContextBuilder:
    """Tests for the end-to-end pipeline."""

    def test_flat_response(self, flat_response: dict[str, Any]) -> None:
        """Flat responses are deduplicated and sliced by position."""
        builder = MemoryContextBuilder(
            history_count=1,
            short_term_count=5,
            context_template="{{history}}\n{{profileMemory}}",
        )

        memory = builder.build(flat_response, session_id="s1")

        assert [r.content for r in memory.episodic_memory] == ["m1", "m2"]
        assert [r.content for r in memory.categorized.history] == ["m1"]
        assert [r.content for r in memory.categorized.short_term_memory] == ["m2"]
        assert len(memory.profile_facts) == 1
        assert memory.context == "- **user-1** → agent-1: m1\n### Prefs\n- **color**: blue"

    def test_session_and_group_stamped(self, flat_response: dict[str, Any]) -> None:
        memory = MemoryContextBuilder().build(flat_response, session_id="s1", group_id="g1")

        assert all(r.session_id == "s1" for r in memory.episodic_memory)
        assert all(r.group_id == "g1" for r in memory.episodic_memory)

    def test_nested_response_uses_buckets(self, nested_response: dict[str, Any]) -> None:
        """Pre-bucketed responses keep the API's split and leave history empty."""
        memory = MemoryContextBuilder(context_template="{{episodeSummary}}").build(nested_response)

        assert memory.categorized.history == []
        assert [r.uuid for r in memory.categorized.short_term_memory] == ["e1", "e2"]
        assert [r.uuid for r in memory.categorized.long_term_memory] == ["e3"]
        assert memory.episode_summaries == ["User asked about billing"]
        assert memory.context == "> User asked about billing"

    def test_zero_uid_kept_in_its_bucket(self) -> None:
        raw = {
            "content": {
                "episodic_memory": {
                    "short_term_memory": {"episodes": [{"uid": 0, "content": "first"}]},
                },
            }
        }

        memory = MemoryContextBuilder().build(raw)

        assert [r.content for r in memory.categorized.short_term_memory] == ["first"]

    def test_template_disabled(self, flat_response: dict[str, Any]) -> None:
        builder = MemoryContextBuilder(context_template="{{history}}", enable_template=False)

        memory = builder.build(flat_response)

        assert builder.renders is False
        assert memory.context == ""

    def test_garbage_response_is_empty(self) -> None:
        memory = MemoryContextBuilder(context_template="{{history}}").build(["not", "a", "dict"])

        assert memory.episodic_memory == []
        assert memory.profile_facts == []
        assert memory.context == "*No memories in this category*"

    def test_negative_counts_rejected(self) -> None:
        with pytest.raises(ValueError):
            MemoryContextBuilder(history_count=-1)
