"""Order-preserving deduplication of episodic records and semantic facts.

The first occurrence of each key wins; later duplicates are dropped, not
merged. Keys are exact, case-sensitive concatenations, so the same sentence
from two different producers is kept twice.
"""

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from memmachine_node.memory.models import EpisodicRecord, SemanticFact
from memmachine_node.memory.normalization.extraction import extract_semantic_fact

T = TypeVar("T")


def _first_by_key(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    unique: dict[str, T] = {}
    for item in items:
        unique.setdefault(key(item), item)
    return list(unique.values())


def dedupe_episodes(records: Iterable[EpisodicRecord]) -> list[EpisodicRecord]:
    """Drop records repeating content|producer|produced_for."""
    return _first_by_key(records, lambda record: record.dedupe_key)


def dedupe_facts(facts: Iterable[SemanticFact]) -> list[SemanticFact]:
    """Drop facts repeating subject|predicate|object, and facts with no object."""
    return _first_by_key(
        (fact for fact in facts if fact.object.strip()),
        lambda fact: fact.dedupe_key,
    )


def dedupe_semantic_features(
    raw_items: Iterable[Any],
) -> tuple[list[SemanticFact], list[dict[str, Any]]]:
    """Deduplicate raw semantic items alongside their extracted facts.

    Returns:
        (facts, features) where features[i] is the raw item behind facts[i]
    """
    pairs = (
        (fact, dict(item))
        for item in raw_items
        if (fact := extract_semantic_fact(item)) is not None
    )
    unique = _first_by_key(pairs, lambda pair: pair[0].dedupe_key)
    return [fact for fact, _ in unique], [feature for _, feature in unique]
