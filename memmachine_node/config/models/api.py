"""MemMachine API connection configuration."""

from pydantic import BaseModel, Field, SecretStr


class MemMachineAPIConfig(BaseModel):
    """Connection settings for the MemMachine v2 API."""

    base_url: str = Field(
        default="http://localhost:8080/api/v2",
        description="Base URL of the MemMachine API",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Bearer token (optional for local deployments)",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )
    org_id: str | None = Field(default=None, description="Default organization ID")
    project_id: str | None = Field(default=None, description="Default project ID")
