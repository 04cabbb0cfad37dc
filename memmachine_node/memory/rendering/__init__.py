"""Markdown rendering of categorized memory into context templates."""

from memmachine_node.memory.rendering.formatters import (
    format_episode_list,
    format_episode_summaries,
    format_profile_facts,
    format_semantic_features,
)
from memmachine_node.memory.rendering.renderer import (
    PLACEHOLDERS,
    TemplateError,
    TemplateRenderer,
    render_template,
)
from memmachine_node.memory.rendering.templates import DEFAULT_CONTEXT_TEMPLATE

__all__ = [
    "DEFAULT_CONTEXT_TEMPLATE",
    "PLACEHOLDERS",
    "TemplateError",
    "TemplateRenderer",
    "format_episode_list",
    "format_episode_summaries",
    "format_profile_facts",
    "format_semantic_features",
    "render_template",
]
