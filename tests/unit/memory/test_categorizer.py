"""Unit tests for positional and pre-bucketed categorization."""

import pytest

from memmachine_node.memory.categorizer import (
    categorize,
    categorize_by_buckets,
    categorize_normalized,
)
from memmachine_node.memory.models import EpisodicRecord
from memmachine_node.memory.normalization import NormalizedMemories


def _records(count: int) -> list[EpisodicRecord]:
    return [EpisodicRecord(content=f"m{i}", uuid=f"e{i}") for i in range(count)]


class TestCategorize:
    """Tests for categorize."""

    def test_twenty_records_default_counts(self) -> None:
        records = _records(20)

        result = categorize(records)

        assert result.history == records[0:5]
        assert result.short_term_memory == records[5:15]
        assert result.long_term_memory == records[15:20]

    def test_fewer_records_than_history(self) -> None:
        records = _records(3)

        result = categorize(records)

        assert result.history == records
        assert result.short_term_memory == []
        assert result.long_term_memory == []

    @pytest.mark.parametrize("h,s", [(0, 0), (2, 3), (5, 10), (30, 0), (0, 30)])
    def test_concatenation_reproduces_input(self, h: int, s: int) -> None:
        records = _records(12)

        result = categorize(records, h, s)

        assert result.history + result.short_term_memory + result.long_term_memory == records
        assert result.total == 12

    def test_zero_counts_put_everything_long_term(self) -> None:
        records = _records(4)
        assert categorize(records, 0, 0).long_term_memory == records

    def test_negative_counts_rejected(self) -> None:
        with pytest.raises(ValueError):
            categorize(_records(2), -1, 10)

    def test_empty_input(self) -> None:
        assert categorize([]).total == 0


class TestCategorizeByBuckets:
    """Tests for the pre-bucketed path."""

    def test_buckets_by_uid(self) -> None:
        records = _records(3)

        result = categorize_by_buckets(records, [{"uid": "e0"}, {"id": "e1"}], [{"uid": "e2"}])

        assert result.history == []
        assert result.short_term_memory == records[0:2]
        assert result.long_term_memory == records[2:3]

    def test_records_without_uuid_left_out(self) -> None:
        records = [EpisodicRecord(content="x")]
        result = categorize_by_buckets(records, [{"uid": "e0"}], [])
        assert result.total == 0

    def test_normalized_selects_path(self) -> None:
        records = _records(3)

        bucketed = categorize_normalized(
            records, NormalizedMemories(short_term_raw=[{"uid": "e0"}]), 1, 1
        )
        positional = categorize_normalized(records, NormalizedMemories(), 1, 1)

        assert bucketed.history == []
        assert bucketed.short_term_memory == records[:1]
        assert positional.history == records[:1]
        assert positional.long_term_memory == records[2:]
