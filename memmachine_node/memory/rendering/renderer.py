"""Placeholder substitution for context templates.

Templates are free-form text containing any subset of::

    {{history}} {{shortTermMemory}} {{longTermMemory}}
    {{profileMemory}} {{semanticMemory}} {{episodeSummary}}

Substitution is literal and happens in a single pass: text inserted for
one placeholder is never scanned for further placeholders, and unknown
``{{...}}`` tokens are left untouched.
"""

import re
from collections.abc import Callable, Sequence
from typing import Any

from memmachine_node.memory.models import CategorizedMemories, RenderContext, SemanticFact
from memmachine_node.memory.rendering.formatters import (
    format_episode_list,
    format_episode_summaries,
    format_profile_facts,
    format_semantic_features,
)

PLACEHOLDERS: dict[str, Callable[[RenderContext], str]] = {
    "history": lambda ctx: format_episode_list(ctx.categorized.history),
    "shortTermMemory": lambda ctx: format_episode_list(ctx.categorized.short_term_memory),
    "longTermMemory": lambda ctx: format_episode_list(ctx.categorized.long_term_memory),
    "profileMemory": lambda ctx: format_profile_facts(ctx.profile_facts),
    "semanticMemory": lambda ctx: format_semantic_features(ctx.semantic_features),
    "episodeSummary": lambda ctx: format_episode_summaries(ctx.episode_summaries),
}

_PLACEHOLDER_PATTERN = re.compile(
    r"\{\{(" + "|".join(re.escape(name) for name in PLACEHOLDERS) + r")\}\}"
)


class TemplateError(TypeError):
    """Raised when a template is not a string."""


class TemplateRenderer:
    """Render one template against many contexts."""

    def __init__(self, template: str) -> None:
        if not isinstance(template, str):
            raise TemplateError(f"template must be a string, got {type(template).__name__}")
        self.template = template

    @property
    def placeholders(self) -> set[str]:
        """Known placeholders present in the template."""
        return set(_PLACEHOLDER_PATTERN.findall(self.template))

    def render(self, context: RenderContext) -> str:
        sections = {name: PLACEHOLDERS[name](context) for name in self.placeholders}
        return _PLACEHOLDER_PATTERN.sub(lambda match: sections[match.group(1)], self.template)


def render_template(
    template: str,
    categorized: CategorizedMemories,
    profile_facts: Sequence[SemanticFact],
    semantic_features: Sequence[dict[str, Any]] = (),
    episode_summaries: Sequence[str] = (),
) -> str:
    """Substitute memory placeholders in a template.

    Raises:
        TemplateError: If template is not a string
    """
    return TemplateRenderer(template).render(
        RenderContext(
            categorized=categorized,
            profile_facts=list(profile_facts),
            semantic_features=list(semantic_features),
            episode_summaries=list(episode_summaries),
        )
    )
