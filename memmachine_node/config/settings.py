"""Root settings model for MemMachine node configuration."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from memmachine_node.config.models.api import MemMachineAPIConfig
from memmachine_node.config.models.memory import MemoryConfig
from memmachine_node.config.models.observability import ObservabilityConfig

DEFAULT_ENVIRONMENT = "development"


def resolve_config_dir() -> Path:
    """Locate the directory holding ``default.toml``.

    MEMMACHINE_CONFIG_DIR wins when set and must exist. Otherwise the
    nearest ``config/`` directory from the working directory upwards is
    used.
    """
    override = os.environ.get("MEMMACHINE_CONFIG_DIR")
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {override}")
        return path

    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        if (directory / "config").is_dir():
            return directory / "config"
    return cwd / "config"


def current_environment() -> str:
    return os.environ.get("MEMMACHINE_ENV") or DEFAULT_ENVIRONMENT


def config_files() -> tuple[Path, Path]:
    """Return the base and environment TOML files, lowest priority first."""
    config_dir = resolve_config_dir()
    return config_dir / "default.toml", config_dir / f"{current_environment()}.toml"


class Settings(BaseSettings):
    """Root configuration object containing all nested configuration sections.

    Values are layered, later entries overriding earlier ones:
    1. Pydantic model defaults (in code)
    2. config/default.toml
    3. config/{MEMMACHINE_ENV}.toml
    4. MEMMACHINE_* environment variables
    5. constructor arguments
    """

    model_config = SettingsConfigDict(
        env_prefix="MEMMACHINE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(
        default="memmachine-node", description="Application name for logging/tracing"
    )

    api: MemMachineAPIConfig = Field(
        default_factory=MemMachineAPIConfig,
        description="MemMachine API connection",
    )
    memory: MemoryConfig = Field(
        default_factory=MemoryConfig,
        description="Memory categorization and template defaults",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Logging and tracing configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Sources are deep-merged, so an environment file only needs the keys it changes
        base_file, env_file = config_files()
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=env_file),
            TomlConfigSettingsSource(settings_cls, toml_file=base_file),
        )
