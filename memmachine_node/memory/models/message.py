"""Chat message returned to the agent host."""

from typing import Any, Literal

from pydantic import BaseModel, Field

MessageType = Literal["human", "ai", "system"]


class ChatMessage(BaseModel):
    """Message in the shape agent memory consumers expect."""

    type: MessageType
    content: str
    additional_kwargs: dict[str, Any] = Field(default_factory=dict)
