"""Field extraction from individual upstream memory items.

Episodic items come in two shapes: v2 items wrapping a ``messages`` list,
and legacy items carrying ``content``/``producer_id`` directly. Semantic
items use ``feature_name`` (``feature`` in the flat shape).
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from memmachine_node.memory.models import EpisodicRecord, SemanticFact


def _text(value: Any, default: str = "unknown") -> str:
    if value is None or value == "":
        return default
    return str(value)


def _optional_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _first_present(item: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None


def extract_episodic_record(
    item: Any,
    now: datetime | None = None,
) -> EpisodicRecord | None:
    """Build an EpisodicRecord from one raw episodic item.

    Args:
        item: Raw upstream item
        now: Fallback timestamp when the item carries none

    Returns:
        The record, or None when the item has no usable content
    """
    if not isinstance(item, Mapping):
        return None

    messages = item.get("messages")
    if isinstance(messages, list) and messages and isinstance(messages[0], Mapping):
        message = messages[0]
        content = message.get("content")
        producer = message.get("producer")
        produced_for = message.get("produced_for")
        metadata = message.get("metadata")
        role = message.get("role") or item.get("producer_role")
    else:
        content = item.get("content")
        producer = item.get("producer_id") or item.get("producer")
        produced_for = item.get("produced_for_id") or item.get("produced_for")
        metadata = item.get("metadata")
        role = item.get("producer_role")

    if not isinstance(content, str) or not content.strip():
        return None

    timestamp = item.get("created_at") or item.get("timestamp")
    if not timestamp:
        timestamp = (now or datetime.now(UTC)).isoformat()

    return EpisodicRecord(
        content=content,
        producer=_text(producer),
        produced_for=_text(produced_for),
        episode_type=item.get("episode_type") or "dialog",
        timestamp=str(timestamp),
        uuid=_optional_text(_first_present(item, "uuid", "uid", "id")),
        group_id=_optional_text(item.get("group_id")),
        session_id=_optional_text(item.get("session_id")),
        metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
        producer_role=_optional_text(role),
    )


def extract_semantic_fact(item: Any) -> SemanticFact | None:
    """Build a SemanticFact from one raw semantic/profile item.

    Returns:
        The fact, or None when the item has no value
    """
    if not isinstance(item, Mapping):
        return None

    value = item.get("value")
    if value is None or not str(value).strip():
        return None

    metadata = item.get("metadata")
    metadata = metadata if isinstance(metadata, Mapping) else {}

    score = metadata.get("similarity_score")
    confidence = None
    if isinstance(score, int | float) and not isinstance(score, bool):
        confidence = float(score)

    upstream_id = _optional_text(metadata.get("id"))

    return SemanticFact(
        subject=_text(item.get("tag"), "General"),
        predicate=_text(item.get("feature_name") or item.get("feature"), "property"),
        object=str(value),
        confidence=confidence,
        source=f"id_{upstream_id}" if upstream_id else "unknown",
    )
