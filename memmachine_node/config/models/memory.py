"""Memory categorization and template configuration."""

from pydantic import BaseModel, Field

from memmachine_node.memory.rendering.templates import DEFAULT_CONTEXT_TEMPLATE


class MemoryConfig(BaseModel):
    """Defaults for memory retrieval and context rendering."""

    history_count: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Number of most recent items in the history bucket",
    )
    short_term_count: int = Field(
        default=10,
        ge=0,
        le=50,
        description="Number of items in the short-term bucket",
    )
    context_window_length: int = Field(
        default=10,
        gt=0,
        description="Maximum raw chat messages returned to the agent",
    )
    enable_template: bool = Field(
        default=True,
        description="Render the context template instead of returning raw messages",
    )
    context_template: str = Field(
        default=DEFAULT_CONTEXT_TEMPLATE,
        description="Markdown template with memory placeholders",
    )
