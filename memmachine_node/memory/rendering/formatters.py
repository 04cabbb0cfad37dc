"""Markdown formatters for each template section.

Every formatter has an empty-state output, so rendering never leaves a
blank gap where a placeholder stood (episode summaries excepted, which
render as nothing).
"""

from collections.abc import Iterable, Sequence
from typing import Any

from memmachine_node.memory.models import EpisodicRecord, SemanticFact

NO_MEMORIES = "*No memories in this category*"
NO_PROFILE = "*No profile information available*"
NO_SEMANTIC_FEATURES = "*No semantic features available*"


def format_episode_list(records: Sequence[EpisodicRecord]) -> str:
    """Render records as ``- **producer** → recipient: content`` bullets."""
    if not records:
        return NO_MEMORIES

    return "\n".join(
        f"- **{r.producer or 'unknown'}** → {r.produced_for or 'unknown'}: {r.content}"
        for r in records
    )


def format_profile_facts(facts: Sequence[SemanticFact]) -> str:
    """Render facts as one ``### subject`` section per subject.

    Subjects appear in first-seen order.
    """
    if not facts:
        return NO_PROFILE

    by_subject: dict[str, list[SemanticFact]] = {}
    for fact in facts:
        by_subject.setdefault(fact.subject, []).append(fact)

    return "\n\n".join(
        f"### {subject}\n" + "\n".join(f"- **{f.predicate}**: {f.object}" for f in subject_facts)
        for subject, subject_facts in by_subject.items()
    )


def format_semantic_features(features: Iterable[dict[str, Any]]) -> str:
    """Render raw semantic features as ``- **tag** / feature: value`` bullets."""
    lines = []
    for feature in features:
        value = feature.get("value")
        if value is None or not str(value).strip():
            continue
        tag = feature.get("tag") or "General"
        name = feature.get("feature_name") or feature.get("feature") or "property"
        lines.append(f"- **{tag}** / {name}: {value}")

    return "\n".join(lines) if lines else NO_SEMANTIC_FEATURES


def format_episode_summaries(summaries: Iterable[str]) -> str:
    """Render summaries as blockquotes separated by blank lines."""
    return "\n\n".join(
        f"> {summary}" for summary in summaries if isinstance(summary, str) and summary.strip()
    )
