"""Partition episodic records into history, short-term and long-term buckets.

Input order is assumed to already encode relevance or recency, most
important first. Nothing here sorts or filters.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from memmachine_node.memory.models import CategorizedMemories, EpisodicRecord
from memmachine_node.memory.normalization.normalizer import NormalizedMemories

DEFAULT_HISTORY_COUNT = 5
DEFAULT_SHORT_TERM_COUNT = 10


def categorize(
    records: Sequence[EpisodicRecord],
    history_count: int = DEFAULT_HISTORY_COUNT,
    short_term_count: int = DEFAULT_SHORT_TERM_COUNT,
) -> CategorizedMemories:
    """Slice records by position.

    history = records[:h], short-term = records[h:h+s], long-term = the rest.
    Concatenating the three buckets gives back the input.

    Raises:
        ValueError: If either count is negative
    """
    if history_count < 0 or short_term_count < 0:
        raise ValueError("history_count and short_term_count must be >= 0")

    boundary = history_count + short_term_count
    return CategorizedMemories(
        history=list(records[:history_count]),
        short_term_memory=list(records[history_count:boundary]),
        long_term_memory=list(records[boundary:]),
    )


def _bucket_ids(raw_items: Iterable[Any]) -> set[str]:
    ids: set[str] = set()
    for raw in raw_items:
        if not isinstance(raw, dict):
            continue
        for field in ("uid", "id", "uuid"):
            if raw.get(field) not in (None, ""):
                ids.add(str(raw[field]))
    return ids


def categorize_by_buckets(
    records: Sequence[EpisodicRecord],
    short_term_raw: Iterable[Any],
    long_term_raw: Iterable[Any],
) -> CategorizedMemories:
    """Categorize using the buckets the API already assigned.

    A record belongs to a bucket when its uuid matches a raw item's
    ``uid``/``id``. History is always empty on this path.
    """
    short_ids = _bucket_ids(short_term_raw)
    long_ids = _bucket_ids(long_term_raw)
    return CategorizedMemories(
        history=[],
        short_term_memory=[r for r in records if r.uuid is not None and r.uuid in short_ids],
        long_term_memory=[r for r in records if r.uuid is not None and r.uuid in long_ids],
    )


def categorize_normalized(
    records: Sequence[EpisodicRecord],
    normalized: NormalizedMemories,
    history_count: int = DEFAULT_HISTORY_COUNT,
    short_term_count: int = DEFAULT_SHORT_TERM_COUNT,
) -> CategorizedMemories:
    """Pick the bucketed path when the response was pre-bucketed, else slice."""
    if normalized.pre_bucketed:
        return categorize_by_buckets(records, normalized.short_term_raw, normalized.long_term_raw)
    return categorize(records, history_count, short_term_count)
