"""Episodic record model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from memmachine_node.memory.enums import EpisodeType


class EpisodicRecord(BaseModel):
    """One conversational turn retrieved from or stored to MemMachine."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Message text")
    producer: str = Field(default="unknown", description="Author: user or agent id")
    produced_for: str = Field(default="unknown", description="Intended recipient id")
    episode_type: EpisodeType = Field(default=EpisodeType.DIALOG, description="Episode kind")
    timestamp: str | None = Field(default=None, description="ISO-8601 creation time")
    uuid: str | None = Field(default=None, description="Upstream episode identifier")
    group_id: str | None = Field(default=None, description="Owning group")
    session_id: str | None = Field(default=None, description="Owning session")
    producer_role: str | None = Field(
        default=None, description="Upstream role hint: user or assistant"
    )
    metadata: dict[str, Any] = Field(default_factory=dict, description="Opaque upstream metadata")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value

    @field_validator("episode_type", mode="before")
    @classmethod
    def coerce_episode_type(cls, value: Any) -> Any:
        # Older API versions report "message"; anything unknown is a dialog turn
        if isinstance(value, EpisodeType):
            return value
        try:
            return EpisodeType(value)
        except ValueError:
            return EpisodeType.DIALOG

    @property
    def dedupe_key(self) -> str:
        return f"{self.content}|{self.producer}|{self.produced_for}"
