"""Semantic (profile) fact model."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SemanticFact(BaseModel):
    """A subject-predicate-object assertion about a user or entity."""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(default="General", description="Upstream tag")
    predicate: str = Field(default="property", description="Upstream feature name")
    object: str = Field(..., description="Fact value")
    confidence: float | None = Field(default=None, description="Similarity score")
    source: str = Field(default="unknown", description="id_<upstream id>")

    @field_validator("object")
    @classmethod
    def object_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("object must not be blank")
        return value

    @property
    def dedupe_key(self) -> str:
        return f"{self.subject}|{self.predicate}|{self.object}"
