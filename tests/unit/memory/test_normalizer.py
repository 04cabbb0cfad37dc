"""Unit tests for search response normalization."""

from typing import Any

import pytest

from memmachine_node.memory.normalization import (
    EmptySearchResponse,
    FlatSearchResponse,
    NestedSearchResponse,
    normalize_search_response,
    parse_search_response,
)


class TestParseSearchResponse:
    """Tests for shape detection."""

    def test_flat_shape(self, flat_response: dict[str, Any]) -> None:
        assert isinstance(parse_search_response(flat_response), FlatSearchResponse)

    def test_nested_shape(self, nested_response: dict[str, Any]) -> None:
        assert isinstance(parse_search_response(nested_response), NestedSearchResponse)

    @pytest.mark.parametrize("raw", [None, [], "text", 42, {}, {"memories": "nope"}])
    def test_unknown_shapes_are_empty(self, raw: Any) -> None:
        """Anything unrecognized decodes to the empty shape."""
        assert isinstance(parse_search_response(raw), EmptySearchResponse)

    def test_flat_wins_over_nested(self) -> None:
        """A list-valued memories field selects the flat shape."""
        raw = {"memories": [], "content": {"semantic_memory": [{"value": "x"}]}}
        assert isinstance(parse_search_response(raw), FlatSearchResponse)

    def test_flat_with_extra_top_level_keys(self) -> None:
        """Unrelated top-level keys, including shape, do not hide the memories list."""
        raw = {
            "shape": "v2",
            "status": "ok",
            "memories": [{"type": "episodic", "content": "hi", "producer_id": "u1"}],
        }

        assert isinstance(parse_search_response(raw), FlatSearchResponse)
        assert normalize_search_response(raw).episodic_raw == raw["memories"]


class TestNormalizeSearchResponse:
    """Tests for normalize_search_response."""

    def test_flat_partition_by_type(self) -> None:
        """Flat items are split on the type discriminator."""
        raw = {
            "memories": [
                {"type": "episodic", "content": "hi", "producer_id": "u1"},
                {"type": "profile", "tag": "t", "feature": "f", "value": "v"},
                {"type": "other", "content": "ignored"},
                "not-a-dict",
            ]
        }

        normalized = normalize_search_response(raw)

        assert normalized.episodic_raw == [raw["memories"][0]]
        assert normalized.semantic_raw == [raw["memories"][1]]
        assert normalized.episode_summaries == []
        assert normalized.pre_bucketed is False

    def test_nested_short_then_long(self, nested_response: dict[str, Any]) -> None:
        """Nested episodes are short-term first, then long-term."""
        normalized = normalize_search_response(nested_response)

        assert [e["uid"] for e in normalized.episodic_raw] == ["e1", "e2", "e3"]
        assert len(normalized.semantic_raw) == 1
        assert normalized.episode_summaries == ["User asked about billing"]
        assert normalized.pre_bucketed is True

    def test_nested_malformed_parts_tolerated(self) -> None:
        """Non-list and non-dict parts become empty collections."""
        raw = {
            "content": {
                "episodic_memory": {
                    "short_term_memory": "broken",
                    "long_term_memory": {"episodes": {"not": "a list"}},
                },
                "semantic_memory": None,
            }
        }

        normalized = normalize_search_response(raw)

        assert normalized.episodic_raw == []
        assert normalized.semantic_raw == []
        assert normalized.pre_bucketed is False

    def test_blank_summaries_dropped(self) -> None:
        raw = {
            "content": {
                "episodic_memory": {
                    "short_term_memory": {"episodes": [], "episode_summary": ["", "  ", "kept", 3]},
                },
            }
        }

        assert normalize_search_response(raw).episode_summaries == ["kept"]

    def test_empty_for_garbage(self) -> None:
        normalized = normalize_search_response("garbage")
        assert normalized.episodic_raw == []
        assert normalized.semantic_raw == []

    def test_nested_short_term_only(self) -> None:
        short_term = {"episodes": [{"content": "x"}]}
        raw = {"content": {"episodic_memory": {"short_term_memory": short_term}}}

        normalized = normalize_search_response(raw)

        assert len(normalized.episodic_raw) == 1
        assert normalized.semantic_raw == []
        assert normalized.episode_summaries == []
